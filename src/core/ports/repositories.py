"""
Interfaces ports pour les repositories.

Interfaces abstraites (ports) définissant les contrats pour la persistance
des fichiers traités, des fichiers en attente de revue et des entrées
du catalogue. Chaque appel est une
opération atomique sur une seule entité : le domaine n'a pas besoin de
transaction couvrant plusieurs enregistrements.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from src.core.entities import MediaItem, PendingFile, ProcessedFileRecord
from src.core.value_objects import ContentFingerprint, MediaKind


class IProcessingRepository(ABC):
    """
    Interface de stockage de l'historique de traitement et du catalogue.
    """

    @abstractmethod
    def has_been_processed(self, path: Path) -> bool:
        """Vérifie si un chemin source a déjà un enregistrement terminé."""
        ...

    @abstractmethod
    def find_by_hash(
        self, fingerprint: ContentFingerprint
    ) -> Optional[ProcessedFileRecord]:
        """
        Recherche un enregistrement réussi de même empreinte.

        Retourne :
            Le plus ancien enregistrement SUCCESS de même hash et taille, ou None
        """
        ...

    @abstractmethod
    def find_media_item(
        self, title: str, year: Optional[int], kind: MediaKind
    ) -> Optional[MediaItem]:
        """Recherche un item du catalogue par (titre, année, type)."""
        ...

    @abstractmethod
    def find_episode(
        self, title: str, year: Optional[int], season: int, episode: int
    ) -> Optional[MediaItem]:
        """Recherche un épisode par (titre de la série, année, saison, épisode)."""
        ...

    @abstractmethod
    def add_media_item(self, item: MediaItem) -> MediaItem:
        """Ajoute un item au catalogue. Retourne l'item avec son ID."""
        ...

    @abstractmethod
    def add_processing_record(
        self, record: ProcessedFileRecord
    ) -> ProcessedFileRecord:
        """Enregistre une trace de traitement. Retourne la trace avec son ID."""
        ...

    @abstractmethod
    def list_recent(self, limit: int = 50) -> list[ProcessedFileRecord]:
        """Liste les traces de traitement les plus récentes."""
        ...

    @abstractmethod
    def queue_pending(self, pending: PendingFile) -> PendingFile:
        """
        Place un fichier dans la file de revue manuelle.

        Un fichier déjà en attente est mis à jour plutôt que dupliqué.
        """
        ...

    @abstractmethod
    def mark_pending_matched(self, path: Path) -> bool:
        """Marque un fichier en attente comme identifié. False s'il n'était pas en attente."""
        ...

    @abstractmethod
    def list_pending(self, limit: int = 50) -> list[PendingFile]:
        """Liste les fichiers en attente, les plus anciens d'abord."""
        ...
