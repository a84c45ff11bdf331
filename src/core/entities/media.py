"""
Media metadata entities.

Entities representing catalog metadata returned by the remote providers
(TMDB, TVDB) and the media items recorded in the local catalog.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from src.core.value_objects import MediaKind


@dataclass(frozen=True)
class MediaMetadata:
    """
    Metadata returned by a single provider call.

    Accepted or rejected whole by the resolver: fields are never merged
    across providers.

    Attributes:
        title: Catalog title
        kind: MediaKind.MOVIE or MediaKind.SHOW
        source: Provider identifier ("tmdb" or "tvdb") owning external_id
        year: Release year (first air date year for shows)
        overview: Plot summary
        poster_url: Absolute URL of the poster image
        backdrop_url: Absolute URL of the background image
        imdb_id: IMDb identifier (tt...)
        external_id: Identifier in the `source` catalog
        genres: Ordered genre names
        season_count: Number of seasons (shows only)
        episode_count: Number of episodes (shows only)
    """

    title: str
    kind: MediaKind
    source: str
    year: Optional[int] = None
    overview: Optional[str] = None
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None
    imdb_id: Optional[str] = None
    external_id: Optional[str] = None
    genres: tuple[str, ...] = ()
    season_count: Optional[int] = None
    episode_count: Optional[int] = None

    @property
    def tmdb_id(self) -> Optional[str]:
        return self.external_id if self.source == "tmdb" else None

    @property
    def tvdb_id(self) -> Optional[str]:
        return self.external_id if self.source == "tvdb" else None


@dataclass
class MediaItem:
    """
    Catalog entry for a movie, a show or a single episode.

    Movie and TV catalog identifiers are kept in distinct fields.

    Attributes:
        id: Internal database ID
        title: Title (show title for episodes)
        kind: MOVIE, SHOW or EPISODE
        year: Release year
        tmdb_id: The Movie Database ID
        tvdb_id: TheTVDB ID
        imdb_id: IMDb ID
        season: Season number (episodes only)
        episode: Episode number (episodes only)
    """

    title: str
    kind: MediaKind
    id: Optional[int] = None
    year: Optional[int] = None
    tmdb_id: Optional[str] = None
    tvdb_id: Optional[str] = None
    imdb_id: Optional[str] = None
    season: Optional[int] = None
    episode: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_metadata(
        cls,
        metadata: MediaMetadata,
        kind: MediaKind,
        season: Optional[int] = None,
        episode: Optional[int] = None,
    ) -> "MediaItem":
        """Construit un item catalogue a partir des metadonnees resolues."""
        return cls(
            title=metadata.title,
            kind=kind,
            year=metadata.year,
            tmdb_id=metadata.tmdb_id,
            tvdb_id=metadata.tvdb_id,
            imdb_id=metadata.imdb_id,
            season=season,
            episode=episode,
        )
