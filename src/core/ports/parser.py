"""
Interface port pour le parsing de noms de fichiers.
"""

from abc import ABC, abstractmethod

from src.core.value_objects import ParsedName


class IFilenameParser(ABC):
    """
    Interface pour le parsing de noms de fichiers video.

    Le parsing est déterministe et total : un nom non reconnu produit
    un ParsedName de type UNKNOWN, jamais une exception.
    """

    @abstractmethod
    def parse(self, filename: str) -> ParsedName:
        """
        Parse un nom de fichier (sans le chemin).

        Retourne:
            ParsedName avec le type détecté et le titre nettoyé.
        """
        ...
