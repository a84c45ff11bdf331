"""
Fixtures pytest partagees pour les tests PlexOrg.

Ce module contient les fixtures communes utilisees dans les tests:
- Settings de test avec chemins temporaires
- Base SQLite temporaire et portee de repositories
- Notificateur et optimiseur d'images factices
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.config import Settings
from src.core.ports import IImageOptimizer, INotifier
from src.infrastructure.persistence.database import create_db_engine, init_db
from src.infrastructure.persistence.repositories import RepositoryScope


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Utilise tmp_path de pytest pour creer une structure de repertoires
    isolee pour chaque test.
    """
    source_dir = tmp_path / "downloads"
    incomplete_dir = source_dir / "incomplete"
    movies_dir = tmp_path / "library" / "Movies"
    tv_dir = tmp_path / "library" / "TV Shows"

    for directory in (source_dir, incomplete_dir, movies_dir, tv_dir):
        directory.mkdir(parents=True)

    return Settings(
        source_dir=source_dir,
        incomplete_dir=incomplete_dir,
        movies_dir=movies_dir,
        tv_dir=tv_dir,
        database_url=f"sqlite:///{tmp_path}/test.db",
        api_cache_dir=tmp_path / "cache",
        tmdb_api_key=None,
        tvdb_api_key=None,
        email_enabled=False,
        log_file=tmp_path / "test.log",
    )


@pytest.fixture
def repository_scope(tmp_path: Path) -> RepositoryScope:
    """Portee de repositories sur une base SQLite temporaire initialisee."""
    engine = create_db_engine(f"sqlite:///{tmp_path}/repo.db")
    init_db(engine)
    yield RepositoryScope(engine)
    engine.dispose()


@pytest.fixture
def mock_notifier() -> MagicMock:
    """Notificateur factice (toutes les methodes sont des AsyncMock)."""
    notifier = MagicMock(spec=INotifier)
    notifier.notify_success = AsyncMock()
    notifier.notify_error = AsyncMock()
    notifier.notify_batch_completion = AsyncMock()
    return notifier


@pytest.fixture
def passthrough_optimizer() -> MagicMock:
    """Optimiseur d'images qui retourne les octets inchanges."""
    optimizer = MagicMock(spec=IImageOptimizer)
    optimizer.optimize.side_effect = lambda data, *args, **kwargs: data
    return optimizer
