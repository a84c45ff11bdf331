"""
Utilitaires et constantes pour PlexOrg.

Ce module contient les constantes partagees.
"""

from src.utils.constants import (
    IGNORED_EXTENSIONS,
    IMAGE_EXTENSIONS,
    POSTER_FILENAME,
    SUBTITLE_EXTENSIONS,
    VIDEO_EXTENSIONS,
)

__all__ = [
    "VIDEO_EXTENSIONS",
    "IMAGE_EXTENSIONS",
    "SUBTITLE_EXTENSIONS",
    "IGNORED_EXTENSIONS",
    "POSTER_FILENAME",
]
