"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Ports repository : Contrats de persistance des données
- IProcessingRepository : Historique de traitement et catalogue

Ports fournisseur de métadonnées : Contrats pour les catalogues distants
- IMetadataProvider : Recherche, détails et images
- SearchCandidate : Premier résultat d'une recherche

Autres collaborateurs :
- IFileSystem : Opérations fichiers
- IFilenameParser : Parsing de noms de fichiers
- INotifier : Notifications sortantes
- IImageOptimizer : Redimensionnement d'images
"""

from src.core.ports.api_clients import IMetadataProvider, SearchCandidate
from src.core.ports.file_system import IFileSystem
from src.core.ports.imaging import IImageOptimizer
from src.core.ports.notifications import INotifier
from src.core.ports.parser import IFilenameParser
from src.core.ports.repositories import IProcessingRepository

__all__ = [
    # Repositories
    "IProcessingRepository",
    # Fournisseurs de metadonnees
    "IMetadataProvider",
    "SearchCandidate",
    # Système de fichiers
    "IFileSystem",
    # Autres collaborateurs
    "IFilenameParser",
    "IImageOptimizer",
    "INotifier",
]
