"""
PlexOrg - Organisation automatique des telechargements video.

Ce package surveille un repertoire de telechargements, identifie les films
et episodes d'apres leur nom de fichier, recupere leurs metadonnees (TMDB,
TVDB) et les range dans une bibliotheque au format Plex.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, objets valeur)
- services/ : Couche application (pipeline, resolution, planification)
- adapters/ : Couche infrastructure (CLI, clients API, fichiers, email)
- infrastructure/ : Persistance (SQLModel + SQLite)
"""
