"""
Pipeline d'organisation des fichiers telecharges.

Orchestre, pour chaque fichier candidat :
    filtrage -> parsing du nom -> empreinte -> deduplication
    -> resolution des metadonnees -> placement (video, compagnons, poster)
    -> historique, journal d'etat et notifications

Etats terminaux d'un fichier : SUCCESS, ERROR (metadonnees introuvables ou
copie impossible), SKIPPED_DUPLICATE, SKIPPED_ALREADY_PROCESSED. Les
fichiers filtres ou au nom non reconnu ne produisent aucun resultat.

Les videos au nom non reconnu ou aux metadonnees introuvables sont
inscrites dans la file de revue (pending) ; un placement reussi les en
retire.

Deux points d'entree :
- process_file / process_directory : chemin automatique, pilote par le nom
  de fichier, qui ne supprime jamais la source
- approve_movie / approve_episode : identite fournie par un humain, sans
  porte de deduplication, qui supprime la source apres succes

Les echecs d'un fichier restent confines a ce fichier. L'annulation
(asyncio.CancelledError) n'est jamais traitee comme un echec : elle se
propage apres nettoyage des fichiers temporaires.
"""

import asyncio
from collections import defaultdict
from collections.abc import Coroutine
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from src.config import Settings
from src.core.entities import (
    MediaItem,
    MediaMetadata,
    PendingFile,
    ProcessedFileRecord,
    ProcessingOutcome,
    ProcessingStatus,
    StatusEntry,
)
from src.core.exceptions import MetadataNotFoundError
from src.core.ports import IFileSystem, IFilenameParser, IImageOptimizer, INotifier
from src.core.value_objects import ContentFingerprint, MediaKind, ParsedName
from src.services.deduplication import DeduplicationGate, DedupKind, RepositoryFactory
from src.services.metadata_resolver import MetadataResolver
from src.services.organizer import (
    companion_destination,
    episode_destination,
    find_companions,
    movie_destination,
    poster_path,
    show_folder,
)
from src.services.status_tracker import ProcessingStatusTracker


class FileCategory(Enum):
    """Classification d'un chemin avant toute lecture du fichier."""

    VIDEO = "video"
    SUBTITLE = "subtitle"
    IMAGE = "image"
    IGNORED = "ignored"
    INCOMPLETE = "incomplete"
    UNSUPPORTED = "unsupported"


@dataclass
class BatchSummary:
    """Compteurs d'un scan de repertoire."""

    total: int = 0
    success: int = 0
    error: int = 0
    skipped: int = 0
    outcomes: list[ProcessingOutcome] = field(default_factory=list)

    def add(self, outcome: ProcessingOutcome) -> None:
        self.total += 1
        self.outcomes.append(outcome)
        if outcome.status == ProcessingStatus.SUCCESS:
            self.success += 1
        elif outcome.status == ProcessingStatus.ERROR:
            self.error += 1
        else:
            self.skipped += 1


@dataclass(frozen=True)
class DuplicateGroup:
    """Fichiers d'une bibliotheque partageant la meme empreinte."""

    fingerprint: ContentFingerprint
    paths: tuple[Path, ...]


@dataclass(frozen=True)
class _Placement:
    """Destination calculee pour une identite resolue."""

    destination: Path
    media_folder: Path
    year: Optional[int]


class OrganizerPipeline:
    """
    Service d'organisation d'un fichier ou d'un repertoire.

    Utilisation:
        pipeline = container.pipeline()
        outcome = await pipeline.process_file(Path("/downloads/Movie.2021.mkv"))
        summary = await pipeline.process_directory(Path("/downloads"))
        await pipeline.wait_for_notifications()
    """

    def __init__(
        self,
        settings: Settings,
        parser: IFilenameParser,
        gate: DeduplicationGate,
        resolver: MetadataResolver,
        file_system: IFileSystem,
        repositories: RepositoryFactory,
        notifier: INotifier,
        image_optimizer: IImageOptimizer,
        status_tracker: ProcessingStatusTracker,
    ) -> None:
        self._settings = settings
        self._parser = parser
        self._gate = gate
        self._resolver = resolver
        self._fs = file_system
        self._repositories = repositories
        self._notifier = notifier
        self._optimizer = image_optimizer
        self._status = status_tracker
        self._notifications: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Filtrage
    # ------------------------------------------------------------------

    def _is_incomplete(self, path: Path) -> bool:
        incomplete = tuple(part.lower() for part in self._settings.incomplete_dir.parts)
        parts = tuple(part.lower() for part in path.parts)
        return parts[: len(incomplete)] == incomplete

    def classify(self, path: Path) -> FileCategory:
        """Classe un chemin selon son emplacement et son extension."""
        if self._is_incomplete(path):
            return FileCategory.INCOMPLETE
        ext = path.suffix.lower()
        if ext in self._settings.ignored_extensions:
            return FileCategory.IGNORED
        if ext in self._settings.video_extensions:
            return FileCategory.VIDEO
        if ext in self._settings.subtitle_extensions:
            return FileCategory.SUBTITLE
        if ext in self._settings.image_extensions:
            return FileCategory.IMAGE
        return FileCategory.UNSUPPORTED

    # ------------------------------------------------------------------
    # Chemin automatique
    # ------------------------------------------------------------------

    async def process_file(self, path: Path) -> Optional[ProcessingOutcome]:
        """
        Traite un fichier du repertoire source.

        Returns:
            Le resultat du traitement, ou None si le fichier est filtre
            (incomplet, ignore, compagnon, non supporte) ou non reconnu.
        """
        category = self.classify(path)
        if category != FileCategory.VIDEO:
            if category == FileCategory.UNSUPPORTED:
                logger.info("Type de fichier non supporte", file=str(path))
            else:
                logger.debug("Fichier filtre", file=str(path), category=category.value)
            return None

        parsed = self._parser.parse(path.name)
        if parsed.is_unknown:
            logger.debug("Nom de fichier non reconnu, mis en attente", file=str(path))
            self._queue_for_review(path, parsed, "Nom de fichier non reconnu")
            return None

        decision = await self._gate.check(path)
        fingerprint = decision.fingerprint

        if decision.kind == DedupKind.ALREADY_PROCESSED:
            return self._skip_already_processed(path, parsed)

        if decision.kind == DedupKind.DUPLICATE and decision.existing is not None:
            existing = decision.existing
            logger.info(
                "Doublon detecte, copie ignoree",
                file=str(path),
                existing=existing.destination_path,
            )
            outcome = ProcessingOutcome(
                source_path=path,
                status=ProcessingStatus.SKIPPED_DUPLICATE,
                destination_path=Path(existing.destination_path),
                media_ref=existing.media_item_id,
                fingerprint=fingerprint,
            )
            self._record(outcome)
            self._track(outcome, parsed)
            return outcome

        return await self._organize(path, parsed, fingerprint, approved=False)

    def _skip_already_processed(self, path: Path, parsed: ParsedName) -> ProcessingOutcome:
        logger.debug("Fichier deja traite", file=str(path))
        outcome = ProcessingOutcome(
            source_path=path, status=ProcessingStatus.SKIPPED_ALREADY_PROCESSED
        )
        self._track(outcome, parsed)
        return outcome

    async def process_directory(self, directory: Path) -> BatchSummary:
        """
        Traite recursivement un repertoire (fichiers d'abord, puis sous-repertoires).

        Le repertoire des telechargements incomplets est ignore. Un echec sur
        un fichier n'interrompt pas le parcours ; une annulation l'interrompt
        entre deux entrees.
        """
        logger.info("Scan du repertoire", directory=str(directory))
        summary = BatchSummary()
        await self._scan(directory, summary)

        logger.info(
            "Scan termine",
            directory=str(directory),
            total=summary.total,
            success=summary.success,
            error=summary.error,
            skipped=summary.skipped,
        )
        if summary.total:
            self._notify(
                self._notifier.notify_batch_completion(
                    summary.total, summary.success, summary.error
                )
            )
        return summary

    async def _scan(self, directory: Path, summary: BatchSummary) -> None:
        if self._is_incomplete(directory):
            logger.debug("Repertoire incomplet ignore", directory=str(directory))
            return
        try:
            files, subdirs = self._fs.list_directory(directory)
        except OSError as e:
            logger.warning("Repertoire illisible", directory=str(directory), error=str(e))
            return

        for file_path in files:
            await asyncio.sleep(0)
            try:
                outcome = await self.process_file(file_path)
            except Exception:
                logger.exception("Echec inattendu du traitement", file=str(file_path))
                summary.total += 1
                summary.error += 1
                continue
            if outcome is not None:
                summary.add(outcome)

        for subdir in subdirs:
            await asyncio.sleep(0)
            await self._scan(subdir, summary)

    # ------------------------------------------------------------------
    # Chemin d'approbation manuelle
    # ------------------------------------------------------------------

    async def approve_movie(
        self, path: Path, title: str, year: Optional[int] = None
    ) -> ProcessingOutcome:
        """
        Organise un fichier comme le film indique par l'utilisateur.

        Supprime la source en cas de succes.

        Raises:
            FileNotFoundError: Si le fichier source n'existe pas
            MetadataNotFoundError: Si aucun fournisseur ne connait ce film
        """
        identity = ParsedName(kind=MediaKind.MOVIE, title=title, year=year)
        return await self._approve(path, identity)

    async def approve_episode(
        self,
        path: Path,
        title: str,
        year: Optional[int],
        season: int,
        episode: int,
    ) -> ProcessingOutcome:
        """
        Organise un fichier comme l'episode indique par l'utilisateur.

        Supprime la source en cas de succes.

        Raises:
            FileNotFoundError: Si le fichier source n'existe pas
            MetadataNotFoundError: Si aucun fournisseur ne connait cette serie
        """
        identity = ParsedName(
            kind=MediaKind.EPISODE, title=title, year=year, season=season, episode=episode
        )
        return await self._approve(path, identity)

    async def _approve(self, path: Path, identity: ParsedName) -> ProcessingOutcome:
        if not path.is_file():
            raise FileNotFoundError(f"Fichier introuvable: {path}")
        logger.info("Approbation manuelle", file=str(path), title=identity.title)
        fingerprint = await self._gate.fingerprint(path)
        return await self._organize(path, identity, fingerprint, approved=True)

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    async def _organize(
        self,
        path: Path,
        identity: ParsedName,
        fingerprint: Optional[ContentFingerprint],
        approved: bool,
    ) -> ProcessingOutcome:
        if identity.is_movie:
            metadata = await self._resolver.resolve_movie(identity.title, identity.year)
        else:
            metadata = await self._resolver.resolve_tv(identity.title, identity.year)

        if metadata is None:
            error = MetadataNotFoundError(identity.title, identity.year)
            outcome = self._fail(path, identity, fingerprint, str(error))
            if approved:
                raise error
            self._queue_for_review(path, identity, str(error))
            return outcome

        placement = self._placement(path, identity, metadata)
        try:
            copied = await self._fs.copy_file(path, placement.destination)
        except OSError as e:
            message = f"Copie impossible vers {placement.destination}: {e}"
            return self._fail(path, identity, fingerprint, message, title=metadata.title)

        if copied:
            logger.info("Fichier place", source=str(path), destination=str(placement.destination))
        else:
            logger.info("Destination deja presente", destination=str(placement.destination))

        await self._place_companions(path, placement.destination)
        await self._place_poster(metadata, placement.media_folder, overwrite=identity.is_movie)

        media_item = self._register_media(metadata, identity, placement.year)
        outcome = ProcessingOutcome(
            source_path=path,
            status=ProcessingStatus.SUCCESS,
            destination_path=placement.destination,
            media_ref=media_item.id,
            fingerprint=fingerprint,
        )
        self._record(outcome)
        self._track(outcome, identity, title=metadata.title, year=placement.year)
        self._clear_pending(path)
        self._notify(
            self._notifier.notify_success(
                metadata.title, str(path), str(placement.destination)
            )
        )

        if approved:
            try:
                self._fs.delete(path)
                logger.info("Source supprimee apres approbation", file=str(path))
            except OSError as e:
                logger.warning("Suppression de la source impossible", file=str(path), error=str(e))

        return outcome

    def _placement(
        self, path: Path, identity: ParsedName, metadata: MediaMetadata
    ) -> _Placement:
        year = metadata.year or identity.year
        ext = path.suffix.lower()
        if identity.is_movie:
            destination = movie_destination(
                self._settings.movies_dir, metadata.title, year, ext
            )
            return _Placement(destination, destination.parent, year)

        destination = episode_destination(
            self._settings.tv_dir,
            metadata.title,
            year,
            identity.season or 1,
            identity.episode or 1,
            ext,
        )
        return _Placement(
            destination, show_folder(self._settings.tv_dir, metadata.title, year), year
        )

    async def _place_companions(self, video: Path, destination: Path) -> None:
        """Copie sous-titres et images du meme nom de base a cote de la video."""
        settings = self._settings
        allowed = set(settings.subtitle_extensions) | set(settings.image_extensions)
        for companion in find_companions(video, allowed):
            target = companion_destination(destination, video, companion)
            try:
                if companion.suffix.lower() in settings.image_extensions:
                    if self._fs.exists(target):
                        continue
                    data = await self._fs.read_bytes(companion)
                    optimized = await asyncio.to_thread(
                        self._optimizer.optimize,
                        data,
                        settings.image_max_width,
                        settings.image_max_height,
                    )
                    await self._fs.write_bytes(target, optimized)
                else:
                    await self._fs.copy_file(companion, target)
                logger.debug("Compagnon place", source=str(companion), destination=str(target))
            except OSError as e:
                logger.warning("Compagnon non copie", file=str(companion), error=str(e))

    async def _place_poster(
        self, metadata: MediaMetadata, folder: Path, overwrite: bool
    ) -> None:
        """
        Telecharge, optimise et ecrit poster.jpg.

        Pour une serie, le poster n'est ecrit que s'il est absent : tous les
        episodes partagent le meme dossier.
        """
        if not metadata.poster_url:
            return
        target = poster_path(folder)
        if not overwrite and self._fs.exists(target):
            return

        data = await self._resolver.download_image(metadata.poster_url)
        if not data:
            logger.warning("Poster indisponible", url=metadata.poster_url)
            return

        optimized = await asyncio.to_thread(
            self._optimizer.optimize,
            data,
            self._settings.image_max_width,
            self._settings.image_max_height,
            "JPEG",
        )
        try:
            await self._fs.write_bytes(target, optimized)
        except OSError as e:
            logger.warning("Ecriture du poster impossible", path=str(target), error=str(e))

    # ------------------------------------------------------------------
    # Historique et catalogue
    # ------------------------------------------------------------------

    def _register_media(
        self, metadata: MediaMetadata, identity: ParsedName, year: Optional[int]
    ) -> MediaItem:
        """
        Retrouve ou cree l'item catalogue.

        Film : cle (titre, annee, MOVIE).
        Episode : la serie (titre, annee, SHOW) puis l'episode
        (titre, annee, saison, episode).
        """
        with self._repositories() as repo:
            if identity.is_movie:
                item = repo.find_media_item(metadata.title, year, MediaKind.MOVIE)
                if item is None:
                    item = repo.add_media_item(
                        MediaItem.from_metadata(metadata, MediaKind.MOVIE)
                    )
                return item

            show = repo.find_media_item(metadata.title, year, MediaKind.SHOW)
            if show is None:
                repo.add_media_item(MediaItem.from_metadata(metadata, MediaKind.SHOW))

            season = identity.season or 1
            episode = identity.episode or 1
            item = repo.find_episode(metadata.title, year, season, episode)
            if item is None:
                item = repo.add_media_item(
                    MediaItem.from_metadata(
                        metadata, MediaKind.EPISODE, season=season, episode=episode
                    )
                )
            return item

    def _record(self, outcome: ProcessingOutcome) -> None:
        fingerprint = outcome.fingerprint
        with self._repositories() as repo:
            repo.add_processing_record(
                ProcessedFileRecord(
                    source_path=str(outcome.source_path),
                    destination_path=str(outcome.destination_path or ""),
                    status=outcome.status,
                    file_hash=fingerprint.hash if fingerprint else None,
                    file_size=fingerprint.size_bytes if fingerprint else 0,
                    error_message=outcome.error_message,
                    media_item_id=outcome.media_ref,
                )
            )

    def _queue_for_review(self, path: Path, parsed: ParsedName, reason: str) -> None:
        """Inscrit le fichier dans la file de revue manuelle (approve)."""
        try:
            size = path.stat().st_size
        except OSError:
            size = 0
        known = not parsed.is_unknown
        with self._repositories() as repo:
            repo.queue_pending(
                PendingFile(
                    file_path=str(path),
                    file_size=size,
                    reason=reason,
                    suggested_title=parsed.title if known else None,
                    suggested_year=parsed.year if known else None,
                )
            )

    def _clear_pending(self, path: Path) -> None:
        with self._repositories() as repo:
            if repo.mark_pending_matched(path):
                logger.debug("Fichier en attente identifie", file=str(path))

    def _fail(
        self,
        path: Path,
        identity: ParsedName,
        fingerprint: Optional[ContentFingerprint],
        message: str,
        title: Optional[str] = None,
    ) -> ProcessingOutcome:
        """Enregistre, journalise et notifie un echec (destination vide)."""
        logger.error("Echec du traitement", file=str(path), error=message)
        outcome = ProcessingOutcome(
            source_path=path,
            status=ProcessingStatus.ERROR,
            error_message=message,
            fingerprint=fingerprint,
        )
        self._record(outcome)
        self._track(outcome, identity, title=title)
        self._notify(self._notifier.notify_error(title or identity.title, str(path), message))
        return outcome

    def _track(
        self,
        outcome: ProcessingOutcome,
        identity: ParsedName,
        title: Optional[str] = None,
        year: Optional[int] = None,
    ) -> None:
        self._status.add(
            StatusEntry(
                file_path=str(outcome.source_path),
                status=outcome.status,
                kind=identity.kind,
                title=title or identity.title,
                year=year if year is not None else identity.year,
                destination_path=str(outcome.destination_path) if outcome.destination_path else None,
                error_message=outcome.error_message,
            )
        )

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _notify(self, coro: Coroutine[Any, Any, None]) -> None:
        """Planifie une notification sans l'attendre."""
        task = asyncio.create_task(coro)
        self._notifications.add(task)
        task.add_done_callback(self._on_notification_done)

    def _on_notification_done(self, task: "asyncio.Task[None]") -> None:
        self._notifications.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.opt(exception=task.exception()).error("Echec de la notification")

    async def wait_for_notifications(self) -> None:
        """Attend la fin des notifications en cours."""
        while self._notifications:
            await asyncio.gather(*list(self._notifications), return_exceptions=True)

    # ------------------------------------------------------------------
    # Doublons dans la bibliotheque
    # ------------------------------------------------------------------

    async def scan_for_duplicates(self, root: Path) -> list[DuplicateGroup]:
        """
        Recherche les videos identiques sous une racine de bibliotheque.

        Les fichiers sont d'abord regroupes par taille ; seuls les groupes
        de meme taille sont haches.
        """
        if not root.is_dir():
            return []

        by_size: dict[int, list[Path]] = defaultdict(list)
        async for file_path in self._fs.walk_files(root):
            if file_path.suffix.lower() not in self._settings.video_extensions:
                continue
            try:
                by_size[file_path.stat().st_size].append(file_path)
            except OSError:
                continue

        by_fingerprint: dict[ContentFingerprint, list[Path]] = defaultdict(list)
        for paths in by_size.values():
            if len(paths) < 2:
                continue
            for file_path in paths:
                fingerprint = await self._gate.fingerprint(file_path)
                if fingerprint is not None:
                    by_fingerprint[fingerprint].append(file_path)

        groups = [
            DuplicateGroup(fingerprint, tuple(paths))
            for fingerprint, paths in by_fingerprint.items()
            if len(paths) > 1
        ]
        for group in groups:
            logger.warning(
                "Doublons dans la bibliotheque",
                fingerprint=str(group.fingerprint),
                files=[str(p) for p in group.paths],
            )
        return groups
