"""
Service de calcul d'empreinte de contenu XXH3-128.

Ce service calcule l'empreinte complete d'un fichier (digest 128 bits +
taille) pour la detection de doublons octet pour octet.

Algorithme :
    1. Ouvre le fichier en lecture binaire (dans un thread)
    2. Lit des blocs de CHUNK_SIZE octets dans un thread (asyncio.to_thread)
    3. Alimente un hasher xxh3_128 bloc par bloc

La memoire consommee est constante (un bloc a la fois) et chaque lecture
est un point de suspension : une annulation interrompt le calcul entre
deux blocs.
"""

import asyncio
from pathlib import Path

import xxhash

from src.core.value_objects import ContentFingerprint

# Taille d'un bloc de lecture : 1 Mo
CHUNK_SIZE = 1024 * 1024  # 1 Mo


async def compute_fingerprint(
    file_path: Path, chunk_size: int = CHUNK_SIZE
) -> ContentFingerprint:
    """
    Calcule l'empreinte XXH3-128 complete d'un fichier.

    Args :
        file_path : Chemin vers le fichier a hasher
        chunk_size : Taille des blocs de lecture en octets (defaut 1 Mo)

    Retourne :
        ContentFingerprint (hash hexadecimal de 32 caracteres + taille)

    Raises :
        FileNotFoundError : Si le fichier n'existe pas
        PermissionError : Si le fichier n'est pas lisible
    """
    hasher = xxhash.xxh3_128()
    size = 0

    # Ouverture hors boucle : un montage reseau lent peut bloquer open()
    f = await asyncio.to_thread(open, file_path, "rb")
    with f:
        while True:
            chunk = await asyncio.to_thread(f.read, chunk_size)
            if not chunk:
                break
            hasher.update(chunk)
            size += len(chunk)

    return ContentFingerprint(hash=hasher.hexdigest(), size_bytes=size)
