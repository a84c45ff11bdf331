"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe PLEXORG_,
et peut optionnellement être fournie via un fichier .env.

Les clés API (TMDB, TVDB) sont optionnelles - un fournisseur sans clé est ignoré
par la chaîne de résolution des métadonnées.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.utils.constants import (
    IGNORED_EXTENSIONS,
    IMAGE_EXTENSIONS,
    SUBTITLE_EXTENSIONS,
    VIDEO_EXTENSIONS,
)

# Trouver le fichier .env à la racine du projet (parent de src/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe PLEXORG_.
    Exemple : PLEXORG_LOG_LEVEL=DEBUG

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    Les listes s'écrivent en JSON : PLEXORG_VIDEO_EXTENSIONS='[".mkv", ".mp4"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="PLEXORG_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Chemins (avec expansion ~)
    source_dir: Path = Field(default=Path("~/Downloads/complete"))
    incomplete_dir: Path = Field(default=Path("~/Downloads/incomplete"))
    movies_dir: Path = Field(default=Path("~/Media/Movies"))
    tv_dir: Path = Field(default=Path("~/Media/TV Shows"))

    # Base de données
    database_url: str = Field(default="sqlite:///plexorg.db")

    # Clés API (OPTIONNELLES - fournisseur ignoré si non défini)
    tmdb_api_key: Optional[str] = Field(default=None)
    tvdb_api_key: Optional[str] = Field(default=None)
    api_cache_dir: Path = Field(default=Path(".cache/api"))

    # Images
    image_max_width: int = Field(default=1000, ge=1)
    image_max_height: int = Field(default=1500, ge=1)

    # Extensions
    video_extensions: list[str] = Field(default_factory=lambda: list(VIDEO_EXTENSIONS))
    image_extensions: list[str] = Field(default_factory=lambda: list(IMAGE_EXTENSIONS))
    subtitle_extensions: list[str] = Field(
        default_factory=lambda: list(SUBTITLE_EXTENSIONS)
    )
    ignored_extensions: list[str] = Field(
        default_factory=lambda: list(IGNORED_EXTENSIONS)
    )

    # Planification
    scheduler_enabled: bool = Field(default=False)
    scan_cron: str = Field(default="0 0 * * *")
    duplicate_sweep_cron: str = Field(default="0 * * * *")
    max_concurrent_files: int = Field(default=2, ge=1)
    status_log_max_items: int = Field(default=1000, ge=1)

    # Notifications email (désactivées par défaut)
    email_enabled: bool = Field(default=False)
    smtp_server: Optional[str] = Field(default=None)
    smtp_port: int = Field(default=587)
    smtp_use_ssl: bool = Field(default=True)
    smtp_username: Optional[str] = Field(default=None)
    smtp_password: Optional[str] = Field(default=None)
    email_from: Optional[str] = Field(default=None)
    email_from_name: str = Field(default="PlexOrg")
    email_to: list[str] = Field(default_factory=list)
    notify_on_success: bool = Field(default=False)
    notify_on_error: bool = Field(default=True)
    notify_on_completion: bool = Field(default=True)
    max_emails_per_hour: int = Field(default=10, ge=0)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/plexorg.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator(
        "source_dir",
        "incomplete_dir",
        "movies_dir",
        "tv_dir",
        "api_cache_dir",
        "log_file",
        mode="before",
    )
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @field_validator(
        "video_extensions",
        "image_extensions",
        "subtitle_extensions",
        "ignored_extensions",
        mode="after",
    )
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Normalise les extensions en minuscules avec point initial."""
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in v]

    @property
    def tmdb_enabled(self) -> bool:
        """Vérifie si l'API TMDB est configurée."""
        return bool(self.tmdb_api_key)

    @property
    def tvdb_enabled(self) -> bool:
        """Vérifie si l'API TVDB est configurée."""
        return bool(self.tvdb_api_key)

    @property
    def email_configured(self) -> bool:
        """Vérifie que l'envoi d'emails est activé et complètement configuré."""
        return bool(
            self.email_enabled
            and self.smtp_server
            and self.email_from
            and self.email_to
        )
