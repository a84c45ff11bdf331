"""
Calcul des chemins de destination de la bibliotheque.

Ce module fournit les fonctions pures de construction des chemins
(compatibles Plex) et de reperage des fichiers compagnons.

Structure films  : {films}/Titre (Annee)/Titre (Annee).ext
Structure series : {series}/Titre (Annee)/Season SS/Titre (Annee) - sSSeEE.ext
"""

import unicodedata
from collections.abc import Collection
from pathlib import Path
from typing import Optional

from pathvalidate import sanitize_filename

from src.utils.constants import POSTER_FILENAME

# Longueur maximale d'un composant (hors extension)
MAX_FILENAME_LENGTH = 200

# Caractères spéciaux remplacés explicitement par un tiret
# (pathvalidate les supprimerait sans remplacement)
SPECIAL_CHARS_TO_DASH = frozenset({":", "/", "\\", "*", '"', "<", ">", "|"})


def sanitize_for_filesystem(text: str) -> str:
    """
    Nettoie une chaîne pour l'utiliser comme nom de fichier ou de dossier.

    Normalisation NFKC, caractères interdits remplacés par un tiret, puis
    nettoyage multi-plateforme par pathvalidate et troncature.
    """
    if not text:
        return ""
    text = unicodedata.normalize("NFKC", text)
    for char in SPECIAL_CHARS_TO_DASH:
        text = text.replace(char, "-")
    text = sanitize_filename(text, platform="universal", replacement_text="")
    return text[:MAX_FILENAME_LENGTH].strip()


def media_label(title: str, year: Optional[int]) -> str:
    """Retourne "Titre (Annee)", ou "Titre" si l'annee est inconnue."""
    clean = sanitize_for_filesystem(title)
    return f"{clean} ({year})" if year else clean


def movie_destination(
    movies_root: Path, title: str, year: Optional[int], extension: str
) -> Path:
    """
    Chemin final d'un film.

    Example:
        movie_destination(Path("/films"), "Example", 2021, ".mkv")
        -> /films/Example (2021)/Example (2021).mkv
    """
    label = media_label(title, year)
    return movies_root / label / f"{label}{extension}"


def show_folder(tv_root: Path, title: str, year: Optional[int]) -> Path:
    """Dossier racine d'une serie (contient poster.jpg et les saisons)."""
    return tv_root / media_label(title, year)


def episode_destination(
    tv_root: Path,
    title: str,
    year: Optional[int],
    season: int,
    episode: int,
    extension: str,
) -> Path:
    """
    Chemin final d'un episode.

    Example:
        episode_destination(Path("/tv"), "Demo", 2019, 1, 3, ".mkv")
        -> /tv/Demo (2019)/Season 01/Demo (2019) - s01e03.mkv
    """
    label = media_label(title, year)
    return (
        show_folder(tv_root, title, year)
        / f"Season {season:02d}"
        / f"{label} - s{season:02d}e{episode:02d}{extension}"
    )


def poster_path(folder: Path) -> Path:
    return folder / POSTER_FILENAME


def is_companion(video: Path, candidate: Path, extensions: Collection[str]) -> bool:
    """
    Indique si `candidate` accompagne `video`.

    Le nom sans extension doit etre egal au nom de la video ou commencer
    par celui-ci (insensible a la casse), avec une extension autorisee.
    """
    if candidate == video or candidate.suffix.lower() not in extensions:
        return False
    video_stem = video.stem.lower()
    candidate_stem = candidate.stem.lower()
    return candidate_stem == video_stem or candidate_stem.startswith(video_stem)


def find_companions(video: Path, extensions: Collection[str]) -> list[Path]:
    """Liste les fichiers compagnons presents dans le dossier de la video."""
    try:
        entries = sorted(video.parent.iterdir())
    except OSError:
        return []
    return [
        entry
        for entry in entries
        if entry.is_file() and is_companion(video, entry, extensions)
    ]


def companion_destination(video_destination: Path, video: Path, companion: Path) -> Path:
    """
    Le compagnon prend le nom de base de la destination et garde sa fin de nom.

    Example:
        Movie.2021.mkv + Movie.2021.fr.srt -> Movie (2021).fr.srt
    """
    remainder = companion.name[len(video.stem):]
    return video_destination.with_name(f"{video_destination.stem}{remainder}")
