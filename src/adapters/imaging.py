"""
Optimisation des images (posters et images compagnons) avec Pillow.

L'image est reduite pour tenir dans les bornes configurees (jamais agrandie)
puis re-encodee : JPEG qualite 85 par defaut, PNG optimise pour les sources
PNG. En cas d'echec, les octets d'origine sont retournes inchanges.
"""

import io
from typing import Optional

from loguru import logger
from PIL import Image, UnidentifiedImageError

from src.core.ports.imaging import IImageOptimizer
from src.utils.constants import JPEG_QUALITY


class PillowImageOptimizer(IImageOptimizer):
    """Implementation de IImageOptimizer basee sur Pillow."""

    def __init__(self, quality: int = JPEG_QUALITY) -> None:
        self._quality = quality

    def optimize(
        self,
        data: bytes,
        max_width: int,
        max_height: int,
        image_format: Optional[str] = None,
    ) -> bytes:
        try:
            with Image.open(io.BytesIO(data)) as img:
                target_format = image_format or ("PNG" if img.format == "PNG" else "JPEG")
                if img.width > max_width or img.height > max_height:
                    img.thumbnail((max_width, max_height), Image.Resampling.LANCZOS)

                output = io.BytesIO()
                if target_format == "PNG":
                    img.save(output, format="PNG", optimize=True)
                else:
                    img.convert("RGB").save(
                        output, format="JPEG", quality=self._quality, optimize=True
                    )
        except (UnidentifiedImageError, OSError, ValueError) as e:
            logger.warning("Optimisation d'image impossible, original conserve", error=str(e))
            return data
        return output.getvalue()
