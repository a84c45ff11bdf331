"""
Objets valeur immutables representant des concepts du domaine sans identite.

Les objets valeur sont definis par leurs attributs plutot que par une identite.
Ils sont immutables et peuvent etre librement partages et compares par valeur.

Exports :
- MediaKind : Nature du media (MOVIE, EPISODE, SHOW, UNKNOWN)
- ParsedName : Identite extraite d'un nom de fichier
- ContentFingerprint : Empreinte de contenu (hash + taille)
"""

from src.core.value_objects.fingerprint import ContentFingerprint
from src.core.value_objects.parsed_info import (
    MAX_YEAR,
    MIN_YEAR,
    MediaKind,
    ParsedName,
)

__all__ = [
    "ContentFingerprint",
    "MAX_YEAR",
    "MIN_YEAR",
    "MediaKind",
    "ParsedName",
]
