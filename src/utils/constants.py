"""
Constantes globales pour PlexOrg.

Ce module contient les constantes utilisees dans l'application:
- Extensions par defaut (video, sous-titres, images, ignorees)
- Marqueurs de qualite/source/codec retires des titres
- Noms de fichiers fixes de la bibliotheque
"""

# Extensions video reconnues
VIDEO_EXTENSIONS = (".mp4", ".mkv", ".avi", ".mov", ".wmv", ".m4v")

# Extensions d'images locales (deplacees comme fichiers compagnons)
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png")

# Extensions de sous-titres
SUBTITLE_EXTENSIONS = (".srt", ".sub", ".idx", ".ass")

# Extensions ignorees silencieusement (fichiers annexes, telechargements partiels)
IGNORED_EXTENSIONS = (".nfo", ".txt", ".db", ".ini", ".log", ".part", ".!ut")

# Marqueurs de qualite, source et codec (alternance regex, insensible a la casse)
QUALITY_TOKENS = (
    "2160p",
    "1080p",
    "720p",
    "480p",
    "UHD",
    "HD",
    "BluRay",
    "BDRip",
    "BRRip",
    "WEB-DL",
    "WEBRip",
    "HDRip",
    "DVDRip",
    "HDTV",
    "x264",
    "x265",
    "H264",
    "H265",
    "H.264",
    "H.265",
    "HEVC",
    "XviD",
    "AAC",
    "DDP5.1",
    "DD5.1",
    "DTS",
    "AC3",
    "10bit",
    "HDR",
    "PROPER",
    "REPACK",
)

# Nom fixe de l'image de couverture dans un dossier film/serie
POSTER_FILENAME = "poster.jpg"

# Qualite JPEG des images re-encodees
JPEG_QUALITY = 85
