"""
Porte de deduplication.

Decide, pour un fichier source, s'il est nouveau, deja traite, ou une
copie octet pour octet d'un contenu deja organise.

Ordre de decision :
    1. Le chemin source a deja une trace terminee -> ALREADY_PROCESSED
       (retraiter un chemin stable est sans effet)
    2. Une trace SUCCESS porte la meme empreinte -> DUPLICATE
       (le fichier est enregistre comme pointant vers la destination existante)
    3. Sinon -> NEW

Le calcul d'empreinte est une optimisation : en cas d'erreur d'E/S, le
fichier est traite comme NEW, sans empreinte.
"""

from collections.abc import Awaitable, Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from loguru import logger

from src.core.entities import ProcessedFileRecord
from src.core.ports.repositories import IProcessingRepository
from src.core.value_objects import ContentFingerprint
from src.infrastructure.persistence.hash_service import compute_fingerprint

RepositoryFactory = Callable[[], AbstractContextManager[IProcessingRepository]]
FingerprintFn = Callable[[Path], Awaitable[ContentFingerprint]]


class DedupKind(Enum):
    NEW = "new"
    ALREADY_PROCESSED = "already_processed"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class DedupDecision:
    """
    Decision de la porte pour un fichier.

    Attributs:
        kind: NEW, ALREADY_PROCESSED ou DUPLICATE
        fingerprint: Empreinte calculee (None si non calculee ou en echec)
        existing: Trace existante (DUPLICATE uniquement)
    """

    kind: DedupKind
    fingerprint: Optional[ContentFingerprint] = None
    existing: Optional[ProcessedFileRecord] = None


class DeduplicationGate:
    """
    Consulte l'historique par chemin puis par empreinte.

    Chaque acces au repository ouvre une portee courte (une session par
    operation, relachee avant le prochain point de suspension).
    """

    def __init__(
        self,
        repositories: RepositoryFactory,
        fingerprint_fn: FingerprintFn = compute_fingerprint,
    ) -> None:
        self._repositories = repositories
        self._fingerprint_fn = fingerprint_fn

    def already_processed(self, path: Path) -> bool:
        with self._repositories() as repo:
            return repo.has_been_processed(path)

    def decide(
        self, path: Path, fingerprint: Optional[ContentFingerprint]
    ) -> DedupDecision:
        """Decide a partir d'une empreinte deja calculee (ou absente)."""
        if self.already_processed(path):
            return DedupDecision(DedupKind.ALREADY_PROCESSED, fingerprint)
        return self._match_content(path, fingerprint)

    def _match_content(
        self, path: Path, fingerprint: Optional[ContentFingerprint]
    ) -> DedupDecision:
        if fingerprint is not None:
            with self._repositories() as repo:
                existing = repo.find_by_hash(fingerprint)
            if existing is not None and existing.source_path != str(path):
                return DedupDecision(DedupKind.DUPLICATE, fingerprint, existing)

        return DedupDecision(DedupKind.NEW, fingerprint)

    async def fingerprint(self, path: Path) -> Optional[ContentFingerprint]:
        """Calcule l'empreinte, ou None si le fichier est illisible."""
        try:
            return await self._fingerprint_fn(path)
        except OSError as e:
            logger.warning(
                "Empreinte impossible, poursuite sans deduplication",
                file=str(path),
                error=str(e),
            )
            return None

    async def check(self, path: Path) -> DedupDecision:
        """
        Decision complete pour un fichier.

        Le test par chemin est fait une seule fois, avant le hachage : un
        fichier deja traite n'est pas relu.
        """
        if self.already_processed(path):
            return DedupDecision(DedupKind.ALREADY_PROCESSED)
        return self._match_content(path, await self.fingerprint(path))
