"""
Point d'entrée CLI de PlexOrg.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

from typing import Annotated

import typer
from loguru import logger

from .adapters.cli.commands import (
    approve,
    duplicates,
    history,
    parse,
    pending,
    process,
    run,
)
from .config import Settings
from .container import Container
from .logging_config import configure_logging, level_for_verbosity

__version__ = "0.1.0"

app = typer.Typer(
    name="plexorg",
    help="Organisation automatique des telechargements video",
)
container = Container()


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Augmenter la verbosite (-v, -vv)"
        ),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Mode silencieux (erreurs uniquement)"),
    ] = False,
) -> None:
    """PlexOrg - Rangement des films et series pour Plex."""
    settings = get_config()
    configure_logging(
        log_level=level_for_verbosity(verbose, quiet, settings.log_level),
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )


# Monter les commandes depuis commands/
app.command()(process)
app.command()(approve)
app.command()(run)
app.command()(parse)
app.command()(duplicates)
app.command()(history)
app.command()(pending)


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    typer.echo(f"Téléchargements : {config.source_dir}")
    typer.echo(f"Incomplets : {config.incomplete_dir}")
    typer.echo(f"Films : {config.movies_dir}")
    typer.echo(f"Séries : {config.tv_dir}")
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"API TMDB : {'activée' if config.tmdb_enabled else 'désactivée'}")
    typer.echo(f"API TVDB : {'activée' if config.tvdb_enabled else 'désactivée'}")
    typer.echo(f"Email : {'activé' if config.email_configured else 'désactivé'}")
    typer.echo(
        f"Scan planifié : {config.scan_cron if config.scheduler_enabled else 'désactivé'}"
    )
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"PlexOrg v{__version__}")


def main() -> None:
    """Point d'entrée de l'application."""
    settings = container.config()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )

    # Initialise la base de données (crée les tables si nécessaire)
    container.database.init()

    logger.info("Démarrage de PlexOrg", version=__version__)

    app()


if __name__ == "__main__":
    main()
