"""
Interfaces ports pour le système de fichiers.

Interfaces abstraites (ports) définissant les opérations fichiers dont le
pipeline a besoin : copie atomique, écriture de petits fichiers, parcours
récursif et suppression.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from pathlib import Path


class IFileSystem(ABC):
    """
    Interface pour les opérations de base sur les fichiers.
    """

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Vérifie si un chemin existe."""
        ...

    @abstractmethod
    async def copy_file(self, source: Path, destination: Path) -> bool:
        """
        Copie un fichier vers la destination de façon atomique.

        Crée les répertoires parents. Si la destination existe déjà, la
        copie est considérée comme satisfaite.

        Args :
            source : Chemin du fichier source
            destination : Chemin du fichier cible

        Retourne :
            True si des octets ont été copiés, False si la destination existait

        Raises :
            OSError : Si la copie échoue (aucun fichier partiel n'est laissé)
        """
        ...

    @abstractmethod
    async def write_bytes(self, destination: Path, data: bytes) -> None:
        """Écrit des octets de façon atomique (répertoires parents créés)."""
        ...

    @abstractmethod
    async def read_bytes(self, path: Path) -> bytes:
        """Lit le contenu complet d'un petit fichier."""
        ...

    @abstractmethod
    def delete(self, path: Path) -> None:
        """Supprime un fichier. Lève OSError en cas d'échec."""
        ...

    @abstractmethod
    def list_directory(self, directory: Path) -> tuple[list[Path], list[Path]]:
        """Retourne (fichiers, sous-répertoires) d'un répertoire, triés par nom."""
        ...

    @abstractmethod
    def walk_files(self, root: Path) -> AsyncIterator[Path]:
        """Parcourt récursivement les fichiers sous `root` (profondeur d'abord)."""
        ...
