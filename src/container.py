"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour la CLI et le daemon.
"""

from dependency_injector import containers, providers

from .adapters.api.cache import APICache
from .adapters.api.tmdb_client import TMDBClient
from .adapters.api.tvdb_client import TVDBClient
from .adapters.file_system import FileSystemAdapter
from .adapters.imaging import PillowImageOptimizer
from .adapters.notifications import EmailNotifier
from .adapters.parsing import RegexFilenameParser
from .adapters.watcher import DownloadWatcher
from .config import Settings
from .infrastructure.persistence.database import create_db_engine, init_db
from .infrastructure.persistence.repositories import RepositoryScope
from .infrastructure.persistence.hash_service import compute_fingerprint
from .services.deduplication import DeduplicationGate
from .services.metadata_resolver import MetadataResolver
from .services.pipeline import OrganizerPipeline
from .services.scheduler import JobScheduler
from .services.status_tracker import ProcessingStatusTracker
from .services.worker import OrganizerWorker


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Initialise la DB une fois
        pipeline = container.pipeline()
        summary = await pipeline.process_directory(container.config().source_dir)
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Database - engine partage, tables creees une seule fois
    db_engine = providers.Singleton(
        create_db_engine,
        database_url=config.provided.database_url,
    )
    database = providers.Resource(init_db, engine=db_engine)

    # Portee de repository - une session par operation
    repository_scope = providers.Singleton(RepositoryScope, engine=db_engine)

    # Adapters - implementations concretes des ports
    file_system = providers.Singleton(FileSystemAdapter)
    filename_parser = providers.Singleton(RegexFilenameParser)
    image_optimizer = providers.Singleton(PillowImageOptimizer)
    notifier = providers.Singleton(EmailNotifier, settings=config)

    # Cache API - Singleton pour partage entre clients
    api_cache = providers.Singleton(
        APICache,
        cache_dir=config.provided.api_cache_dir,
    )

    # Clients API - un client sans cle reste cree mais desactive
    tmdb_client = providers.Singleton(
        TMDBClient,
        api_key=config.provided.tmdb_api_key,
        cache=api_cache,
    )
    tvdb_client = providers.Singleton(
        TVDBClient,
        api_key=config.provided.tvdb_api_key,
        cache=api_cache,
    )

    resolver = providers.Singleton(
        MetadataResolver,
        providers=providers.List(tmdb_client, tvdb_client),
    )

    # Etat partage du processus
    status_tracker = providers.Singleton(
        ProcessingStatusTracker,
        max_items=config.provided.status_log_max_items,
    )

    dedup_gate = providers.Singleton(
        DeduplicationGate,
        repositories=repository_scope,
        fingerprint_fn=compute_fingerprint,
    )

    pipeline = providers.Singleton(
        OrganizerPipeline,
        settings=config,
        parser=filename_parser,
        gate=dedup_gate,
        resolver=resolver,
        file_system=file_system,
        repositories=repository_scope,
        notifier=notifier,
        image_optimizer=image_optimizer,
        status_tracker=status_tracker,
    )

    # Daemon - planificateur, surveillance et worker
    scheduler = providers.Singleton(JobScheduler)
    watcher = providers.Singleton(
        DownloadWatcher,
        root=config.provided.source_dir,
    )
    worker = providers.Singleton(
        OrganizerWorker,
        settings=config,
        pipeline=pipeline,
        scheduler=scheduler,
        watcher=watcher,
        resolver=resolver,
        api_cache=api_cache,
        status_tracker=status_tracker,
    )
