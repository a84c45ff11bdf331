"""
Commandes CLI du workflow principal (process, approve, run).
"""

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from loguru import logger
from rich.table import Table

from src.adapters.cli.helpers import console, shutdown_pipeline, with_container
from src.core.entities import ProcessingOutcome, ProcessingStatus
from src.core.exceptions import MetadataNotFoundError

STATUS_STYLES = {
    ProcessingStatus.SUCCESS: "green",
    ProcessingStatus.ERROR: "red",
    ProcessingStatus.SKIPPED_DUPLICATE: "yellow",
    ProcessingStatus.SKIPPED_ALREADY_PROCESSED: "dim",
}


def process(
    path: Annotated[
        Optional[Path],
        typer.Argument(help="Fichier ou repertoire a traiter (defaut: repertoire source)"),
    ] = None,
) -> None:
    """Organise un fichier ou un repertoire de telechargements."""
    asyncio.run(_process_async(path))


@with_container()
async def _process_async(container, path: Optional[Path]) -> None:
    """Implementation async de la commande process."""
    pipeline = container.pipeline()
    target = path or container.config().source_dir

    try:
        if target.is_dir():
            summary = await pipeline.process_directory(target)
            _print_outcomes(summary.outcomes)
            console.print(
                f"\n[bold]Total: {summary.total}[/bold]  "
                f"[green]succes: {summary.success}[/green]  "
                f"[red]erreurs: {summary.error}[/red]  "
                f"[dim]ignores: {summary.skipped}[/dim]"
            )
        elif target.is_file():
            outcome = await pipeline.process_file(target)
            if outcome is None:
                console.print(f"[yellow]Fichier ignore:[/yellow] {target.name}")
            else:
                _print_outcomes([outcome])
        else:
            console.print(f"[red]Chemin introuvable:[/red] {target}")
            raise typer.Exit(1)
    finally:
        await shutdown_pipeline(container)


def approve(
    path: Annotated[Path, typer.Argument(help="Fichier video a organiser")],
    title: Annotated[str, typer.Option("--title", "-t", help="Titre du film ou de la serie")],
    year: Annotated[Optional[int], typer.Option("--year", "-y", help="Annee")] = None,
    season: Annotated[Optional[int], typer.Option("--season", "-s", help="Numero de saison")] = None,
    episode: Annotated[Optional[int], typer.Option("--episode", "-e", help="Numero d'episode")] = None,
) -> None:
    """Organise un fichier avec une identite fournie, puis supprime la source."""
    if (season is None) != (episode is None):
        console.print("[red]--season et --episode doivent etre fournis ensemble[/red]")
        raise typer.Exit(1)
    asyncio.run(_approve_async(path, title, year, season, episode))


@with_container()
async def _approve_async(
    container,
    path: Path,
    title: str,
    year: Optional[int],
    season: Optional[int],
    episode: Optional[int],
) -> None:
    """Implementation async de la commande approve."""
    pipeline = container.pipeline()
    try:
        if season is not None and episode is not None:
            outcome = await pipeline.approve_episode(path, title, year, season, episode)
        else:
            outcome = await pipeline.approve_movie(path, title, year)
    except FileNotFoundError:
        console.print(f"[red]Fichier introuvable:[/red] {path}")
        raise typer.Exit(1)
    except (MetadataNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    finally:
        await shutdown_pipeline(container)

    _print_outcomes([outcome])
    if outcome.failed:
        raise typer.Exit(1)


def run() -> None:
    """Lance le daemon: surveillance, scans planifies et traitement continu."""
    try:
        asyncio.run(_run_async())
    except KeyboardInterrupt:
        logger.info("Interruption clavier, arret")


@with_container()
async def _run_async(container) -> None:
    """Implementation async de la commande run."""
    await container.worker().run()


def _print_outcomes(outcomes: list[ProcessingOutcome]) -> None:
    if not outcomes:
        console.print("[yellow]Aucun fichier traite.[/yellow]")
        return

    table = Table(title="Resultats", show_header=True)
    table.add_column("Fichier", style="cyan")
    table.add_column("Statut")
    table.add_column("Destination / erreur", style="dim")

    for outcome in outcomes:
        style = STATUS_STYLES.get(outcome.status, "white")
        detail = outcome.error_message or (
            str(outcome.destination_path) if outcome.destination_path else ""
        )
        table.add_row(
            outcome.source_path.name,
            f"[{style}]{outcome.status.value}[/{style}]",
            detail,
        )
    console.print(table)
