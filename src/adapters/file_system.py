"""
Adaptateur pour les operations sur le systeme de fichiers.

Implementation concrete de IFileSystem. Les copies passent par un fichier
temporaire cache renomme a la fin (os.replace) : une copie interrompue ou
annulee ne laisse jamais de fichier partiel a l'emplacement final.
"""

import asyncio
import os
import shutil
import uuid
from collections.abc import AsyncIterator
from pathlib import Path
from typing import BinaryIO

from loguru import logger

from src.core.ports.file_system import IFileSystem

# Taille des blocs de copie (4 Mo)
COPY_CHUNK_SIZE: int = 4 * 1024 * 1024

# Prefixe des fichiers temporaires de copie
TEMP_PREFIX: str = ".tmp_"


def temp_sibling(destination: Path) -> Path:
    """Retourne un chemin temporaire unique et cache a cote de la destination."""
    return destination.with_name(f"{TEMP_PREFIX}{uuid.uuid4().hex}_{destination.name}")


def _open_pair(source: Path, temp: Path) -> tuple[BinaryIO, BinaryIO]:
    src = open(source, "rb")
    try:
        return src, open(temp, "wb")
    except BaseException:
        src.close()
        raise


def _discard_pair(task: "asyncio.Future[tuple[BinaryIO, BinaryIO]]") -> None:
    """Ferme et supprime ce qu'une ouverture abandonnee a fini par ouvrir."""
    if task.cancelled() or task.exception() is not None:
        return
    src, dst = task.result()
    src.close()
    dst.close()
    Path(dst.name).unlink(missing_ok=True)


class FileSystemAdapter(IFileSystem):
    """
    Implementation de IFileSystem pour le systeme de fichiers reel.

    Les ouvertures, lectures et ecritures de blocs sont deleguees a un
    thread (asyncio.to_thread) : chaque bloc est un point d'annulation.
    """

    def __init__(self, chunk_size: int = COPY_CHUNK_SIZE) -> None:
        self._chunk_size = chunk_size

    def exists(self, path: Path) -> bool:
        """Verifie si un chemin existe."""
        return path.exists()

    async def copy_file(self, source: Path, destination: Path) -> bool:
        """
        Copie un fichier vers la destination (idempotent et atomique).

        Retourne False sans rien copier si la destination existe deja.
        """
        if destination.exists():
            logger.debug("Destination deja presente, copie ignoree", destination=str(destination))
            return False

        destination.parent.mkdir(parents=True, exist_ok=True)
        temp = temp_sibling(destination)
        try:
            src, dst = await self._open_for_copy(source, temp)
            with src, dst:
                while True:
                    chunk = await asyncio.to_thread(src.read, self._chunk_size)
                    if not chunk:
                        break
                    await asyncio.to_thread(dst.write, chunk)
            shutil.copystat(source, temp)
            os.replace(temp, destination)
        except BaseException:
            # Annulation comprise : aucun fichier partiel ne doit subsister
            temp.unlink(missing_ok=True)
            raise
        return True

    async def _open_for_copy(
        self, source: Path, temp: Path
    ) -> tuple[BinaryIO, BinaryIO]:
        """
        Ouvre source et fichier temporaire dans un thread.

        Une ouverture bloquee (montage reseau lent) ne fige pas la boucle.
        Si l'appelant est annule pendant l'ouverture, les fichiers ouverts
        apres coup sont fermes et le temporaire supprime.
        """
        opening = asyncio.ensure_future(asyncio.to_thread(_open_pair, source, temp))
        try:
            return await asyncio.shield(opening)
        except asyncio.CancelledError:
            opening.add_done_callback(_discard_pair)
            raise

    async def write_bytes(self, destination: Path, data: bytes) -> None:
        """Ecrit des octets via un fichier temporaire renomme."""
        destination.parent.mkdir(parents=True, exist_ok=True)
        temp = temp_sibling(destination)
        try:
            await asyncio.to_thread(temp.write_bytes, data)
            os.replace(temp, destination)
        except BaseException:
            temp.unlink(missing_ok=True)
            raise

    async def read_bytes(self, path: Path) -> bytes:
        """Lit un petit fichier (image compagnon) en entier."""
        return await asyncio.to_thread(path.read_bytes)

    def delete(self, path: Path) -> None:
        """Supprime un fichier (OSError propagee)."""
        path.unlink()

    def list_directory(self, directory: Path) -> tuple[list[Path], list[Path]]:
        """
        Liste le contenu direct d'un repertoire.

        Les fichiers temporaires de copie sont exclus.

        Returns:
            (fichiers, sous-repertoires), chacun trie par nom
        """
        files: list[Path] = []
        subdirs: list[Path] = []
        for entry in sorted(directory.iterdir(), key=lambda p: p.name.lower()):
            if entry.name.startswith(TEMP_PREFIX):
                continue
            if entry.is_dir():
                subdirs.append(entry)
            elif entry.is_file():
                files.append(entry)
        return files, subdirs

    async def walk_files(self, root: Path) -> AsyncIterator[Path]:
        """
        Parcourt recursivement les fichiers (fichiers d'abord, puis sous-repertoires).

        Cede la main a la boucle entre chaque entree : une annulation
        interrompt le parcours rapidement.
        """
        try:
            files, subdirs = self.list_directory(root)
        except OSError as e:
            logger.warning("Repertoire illisible", directory=str(root), error=str(e))
            return
        for file_path in files:
            await asyncio.sleep(0)
            yield file_path
        for subdir in subdirs:
            await asyncio.sleep(0)
            async for file_path in self.walk_files(subdir):
                yield file_path
