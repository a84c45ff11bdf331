"""
Implementation SQLModel du repository de traitement.

Implemente l'interface IProcessingRepository pour la persistance de
l'historique de traitement et du catalogue dans la base SQLite via SQLModel.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from sqlalchemy import Engine
from sqlmodel import Session, col, select

from src.core.entities import (
    COMPLETED_STATUSES,
    MediaItem,
    PendingFile,
    PendingStatus,
    ProcessedFileRecord,
    ProcessingStatus,
)
from src.core.ports.repositories import IProcessingRepository
from src.core.value_objects import ContentFingerprint, MediaKind
from src.infrastructure.persistence.models import (
    MediaItemModel,
    PendingFileModel,
    ProcessedFileModel,
)


class SQLModelProcessingRepository(IProcessingRepository):
    """
    Repository SQLModel pour l'historique de traitement et le catalogue.

    Chaque ecriture est committee immediatement : les operations sont
    atomiques a l'echelle d'une entite.
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _item_to_entity(self, model: MediaItemModel) -> MediaItem:
        return MediaItem(
            id=model.id,
            title=model.title,
            kind=MediaKind(model.kind),
            year=model.year,
            tmdb_id=model.tmdb_id,
            tvdb_id=model.tvdb_id,
            imdb_id=model.imdb_id,
            season=model.season,
            episode=model.episode,
            created_at=model.created_at,
        )

    def _record_to_entity(self, model: ProcessedFileModel) -> ProcessedFileRecord:
        return ProcessedFileRecord(
            id=model.id,
            source_path=model.source_path,
            destination_path=model.destination_path,
            status=ProcessingStatus(model.status),
            file_hash=model.file_hash,
            file_size=model.file_size,
            error_message=model.error_message,
            media_item_id=model.media_item_id,
            processed_at=model.processed_at,
        )

    def _pending_to_entity(self, model: PendingFileModel) -> PendingFile:
        return PendingFile(
            id=model.id,
            file_path=model.file_path,
            file_size=model.file_size,
            reason=model.reason,
            suggested_title=model.suggested_title,
            suggested_year=model.suggested_year,
            status=PendingStatus(model.status),
            detected_at=model.detected_at,
        )

    def _find_pending(self, path: str) -> Optional[PendingFileModel]:
        statement = select(PendingFileModel).where(
            PendingFileModel.file_path == path,
            PendingFileModel.status == PendingStatus.PENDING.value,
        )
        return self._session.exec(statement).first()

    def has_been_processed(self, path: Path) -> bool:
        """Verifie si un chemin source a deja une trace SUCCESS ou SKIPPED_DUPLICATE."""
        statement = select(ProcessedFileModel.id).where(
            ProcessedFileModel.source_path == str(path),
            col(ProcessedFileModel.status).in_([s.value for s in COMPLETED_STATUSES]),
        )
        return self._session.exec(statement).first() is not None

    def find_by_hash(
        self, fingerprint: ContentFingerprint
    ) -> Optional[ProcessedFileRecord]:
        """Retourne la plus ancienne trace SUCCESS de meme empreinte."""
        statement = (
            select(ProcessedFileModel)
            .where(
                ProcessedFileModel.file_hash == fingerprint.hash,
                ProcessedFileModel.file_size == fingerprint.size_bytes,
                ProcessedFileModel.status == ProcessingStatus.SUCCESS.value,
                ProcessedFileModel.destination_path != "",
            )
            .order_by(col(ProcessedFileModel.id))
        )
        model = self._session.exec(statement).first()
        if model:
            return self._record_to_entity(model)
        return None

    def find_media_item(
        self, title: str, year: Optional[int], kind: MediaKind
    ) -> Optional[MediaItem]:
        """Recherche un item par (titre, annee, type)."""
        statement = select(MediaItemModel).where(
            MediaItemModel.title == title,
            MediaItemModel.kind == kind.value,
        )
        if year is None:
            statement = statement.where(col(MediaItemModel.year).is_(None))
        else:
            statement = statement.where(MediaItemModel.year == year)
        model = self._session.exec(statement).first()
        if model:
            return self._item_to_entity(model)
        return None

    def find_episode(
        self, title: str, year: Optional[int], season: int, episode: int
    ) -> Optional[MediaItem]:
        """Recherche un episode par (titre de serie, annee, saison, episode)."""
        statement = select(MediaItemModel).where(
            MediaItemModel.title == title,
            MediaItemModel.kind == MediaKind.EPISODE.value,
            MediaItemModel.season == season,
            MediaItemModel.episode == episode,
        )
        if year is None:
            statement = statement.where(col(MediaItemModel.year).is_(None))
        else:
            statement = statement.where(MediaItemModel.year == year)
        model = self._session.exec(statement).first()
        if model:
            return self._item_to_entity(model)
        return None

    def add_media_item(self, item: MediaItem) -> MediaItem:
        """Ajoute un item au catalogue et retourne l'item avec son ID."""
        model = MediaItemModel(
            title=item.title,
            year=item.year,
            kind=item.kind.value,
            tmdb_id=item.tmdb_id,
            tvdb_id=item.tvdb_id,
            imdb_id=item.imdb_id,
            season=item.season,
            episode=item.episode,
        )
        self._session.add(model)
        self._session.commit()
        self._session.refresh(model)
        return self._item_to_entity(model)

    def add_processing_record(
        self, record: ProcessedFileRecord
    ) -> ProcessedFileRecord:
        """Enregistre une trace de traitement."""
        model = ProcessedFileModel(
            source_path=record.source_path,
            destination_path=record.destination_path,
            file_hash=record.file_hash,
            file_size=record.file_size,
            status=record.status.value,
            error_message=record.error_message,
            media_item_id=record.media_item_id,
            processed_at=record.processed_at,
        )
        self._session.add(model)
        self._session.commit()
        self._session.refresh(model)
        return self._record_to_entity(model)

    def list_recent(self, limit: int = 50) -> list[ProcessedFileRecord]:
        """Liste les traces les plus recentes (plus recente d'abord)."""
        statement = (
            select(ProcessedFileModel)
            .order_by(col(ProcessedFileModel.processed_at).desc())
            .limit(limit)
        )
        return [self._record_to_entity(m) for m in self._session.exec(statement).all()]

    def queue_pending(self, pending: PendingFile) -> PendingFile:
        """Ajoute ou rafraichit l'entree en attente du chemin."""
        model = self._find_pending(pending.file_path)
        if model is None:
            model = PendingFileModel(file_path=pending.file_path)
        model.file_size = pending.file_size
        model.reason = pending.reason
        model.suggested_title = pending.suggested_title
        model.suggested_year = pending.suggested_year
        model.detected_at = pending.detected_at
        self._session.add(model)
        self._session.commit()
        self._session.refresh(model)
        return self._pending_to_entity(model)

    def mark_pending_matched(self, path: Path) -> bool:
        """Passe l'entree en attente du chemin au statut matched."""
        model = self._find_pending(str(path))
        if model is None:
            return False
        model.status = PendingStatus.MATCHED.value
        self._session.add(model)
        self._session.commit()
        return True

    def list_pending(self, limit: int = 50) -> list[PendingFile]:
        """Liste les entrees en attente (plus ancienne detection d'abord)."""
        statement = (
            select(PendingFileModel)
            .where(PendingFileModel.status == PendingStatus.PENDING.value)
            .order_by(col(PendingFileModel.detected_at), col(PendingFileModel.id))
            .limit(limit)
        )
        return [self._pending_to_entity(m) for m in self._session.exec(statement).all()]


class RepositoryScope:
    """
    Fabrique de repositories a duree de vie courte.

    Chaque appel ouvre une session, fournit un repository, puis ferme la
    session a la sortie du bloc `with` : aucune session n'est conservee
    d'une etape du pipeline a l'autre.

    Utilisation :
        scope = RepositoryScope(engine)
        with scope() as repo:
            repo.has_been_processed(path)
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @contextmanager
    def __call__(self) -> Iterator[IProcessingRepository]:
        with Session(self._engine) as session:
            yield SQLModelProcessingRepository(session)
