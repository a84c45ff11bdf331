"""
Modeles SQLModel pour la base de donnees PlexOrg.

Ces modeles representent les tables de la base de donnees SQLite.
Ils sont distincts des entites de domaine (dataclass dans core/entities/)
selon l'architecture hexagonale.

Tables:
- media_items: Films, series et episodes du catalogue
- processed_files: Historique de traitement des fichiers sources
- pending_files: Fichiers en attente d'une identite manuelle
"""

from __future__ import annotations

from datetime import datetime

from sqlmodel import Field, Index, SQLModel


class MediaItemModel(SQLModel, table=True):
    """
    Modele representant un item du catalogue (film, serie ou episode).

    Les identifiants TMDB et TVDB sont stockes dans des colonnes distinctes.
    Pour un episode, title/year sont ceux de la serie.
    """

    __tablename__ = "media_items"
    __table_args__ = (
        Index("ix_media_items_lookup", "title", "year", "kind"),
    )

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(index=True)
    year: int | None = None
    kind: str = Field(index=True)  # "movie", "show", "episode"
    tmdb_id: str | None = Field(default=None, index=True)
    tvdb_id: str | None = Field(default=None, index=True)
    imdb_id: str | None = None
    season: int | None = None
    episode: int | None = None
    created_at: datetime | None = Field(default_factory=datetime.now)
    updated_at: datetime | None = Field(default_factory=datetime.now)


class ProcessedFileModel(SQLModel, table=True):
    """
    Modele representant une trace de traitement d'un fichier source.

    destination_path est vide pour les traces en erreur.
    """

    __tablename__ = "processed_files"
    __table_args__ = (
        Index("ix_processed_files_fingerprint", "file_hash", "file_size"),
    )

    id: int | None = Field(default=None, primary_key=True)
    source_path: str = Field(index=True)
    destination_path: str = ""
    file_hash: str | None = None
    file_size: int = 0
    status: str = Field(index=True)
    error_message: str | None = None
    media_item_id: int | None = Field(default=None, foreign_key="media_items.id")
    processed_at: datetime = Field(default_factory=datetime.now, index=True)


class PendingFileModel(SQLModel, table=True):
    """
    Modele representant un fichier en attente de revue manuelle.

    Une seule ligne "pending" par chemin : une nouvelle detection met
    a jour la ligne existante.
    """

    __tablename__ = "pending_files"

    id: int | None = Field(default=None, primary_key=True)
    file_path: str = Field(index=True)
    file_size: int = 0
    reason: str = ""
    suggested_title: str | None = None
    suggested_year: int | None = None
    status: str = Field(default="pending", index=True)  # "pending", "matched"
    detected_at: datetime = Field(default_factory=datetime.now)
