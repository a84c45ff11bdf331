"""
Interface port pour l'optimisation d'images (posters, vignettes).
"""

from abc import ABC, abstractmethod
from typing import Optional


class IImageOptimizer(ABC):
    """Redimensionne et ré-encode une image."""

    @abstractmethod
    def optimize(
        self,
        data: bytes,
        max_width: int,
        max_height: int,
        image_format: Optional[str] = None,
    ) -> bytes:
        """
        Réduit l'image pour tenir dans les bornes puis la ré-encode.

        Args :
            data : Octets de l'image source
            max_width : Largeur maximale
            max_height : Hauteur maximale
            image_format : Format de sortie forcé ("JPEG", "PNG") ; par défaut
                le PNG reste PNG et tout autre format devient JPEG

        Ne lève jamais d'exception : en cas d'échec, retourne `data` inchangé.
        """
        ...
