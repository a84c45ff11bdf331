"""
Empreinte de contenu d'un fichier.

Une empreinte combine un digest 128 bits (xxHash XXH3-128, 32 caracteres
hexadecimaux) et la taille en octets. Deux fichiers de meme empreinte sont
consideres comme identiques octet pour octet, quel que soit leur nom.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ContentFingerprint:
    """
    Empreinte immutable d'un fichier source.

    Attributs:
        hash: Digest hexadecimal de 128 bits (32 caracteres)
        size_bytes: Taille du fichier en octets
    """

    hash: str
    size_bytes: int

    def __post_init__(self) -> None:
        if len(self.hash) != 32:
            raise ValueError(f"Digest 128 bits attendu, recu {len(self.hash) * 4} bits")
        if self.size_bytes < 0:
            raise ValueError("La taille ne peut pas etre negative")

    def __str__(self) -> str:
        return f"{self.hash}:{self.size_bytes}"
