"""
Adaptateurs de parsing pour PlexOrg.

Ce package contient l'implementation concrete de IFilenameParser:
- RegexFilenameParser: Classe les noms de fichiers (film, episode, inconnu)
"""

from src.adapters.parsing.filename_parser import RegexFilenameParser

__all__ = ["RegexFilenameParser"]
