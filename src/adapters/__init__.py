"""
Couche adaptateurs (infrastructure).

Les adaptateurs implémentent les ports définis dans core/ports/ et fournissent
des implémentations concrètes pour les systèmes externes.

Sous-packages :
- api/ : Clients des fournisseurs de metadonnees (TMDB, TVDB) et cache
- cli/ : Interface ligne de commande (Typer + Rich)
- notifications/ : Notifications par email
- parsing/ : Classification des noms de fichiers

Modules :
- file_system : Copie atomique et parcours du systeme de fichiers
- imaging : Redimensionnement des images (Pillow)
- watcher : Surveillance du repertoire source (watchdog)

Chaque adaptateur dépend de core/ mais core/ ne dépend jamais des adaptateurs.
"""

from src.adapters.file_system import FileSystemAdapter
from src.adapters.imaging import PillowImageOptimizer
from src.adapters.parsing import RegexFilenameParser

__all__ = [
    "FileSystemAdapter",
    "PillowImageOptimizer",
    "RegexFilenameParser",
]
