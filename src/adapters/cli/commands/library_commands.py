"""
Commandes CLI de consultation (parse, duplicates, history, pending).
"""

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.table import Table

from src.adapters.cli.helpers import (
    console,
    format_file_size,
    suppress_loguru,
    with_container,
)
from src.adapters.parsing import RegexFilenameParser


def parse(
    name: Annotated[str, typer.Argument(help="Nom de fichier a analyser")],
) -> None:
    """Affiche la classification d'un nom de fichier."""
    parsed = RegexFilenameParser().parse(name)

    console.print(f"[bold]Type:[/bold] {parsed.kind.value}")
    console.print(f"[bold]Titre:[/bold] {parsed.title}")
    if parsed.year is not None:
        console.print(f"[bold]Annee:[/bold] {parsed.year}")
    if parsed.is_episode:
        console.print(f"[bold]Episode:[/bold] S{parsed.season:02d}E{parsed.episode:02d}")


def duplicates(
    root: Annotated[
        Optional[Path],
        typer.Argument(help="Repertoire a analyser (defaut: bibliotheques films et series)"),
    ] = None,
) -> None:
    """Recherche les fichiers video identiques dans la bibliotheque."""
    asyncio.run(_duplicates_async(root))


@with_container(requires_db=False)
async def _duplicates_async(container, root: Optional[Path]) -> None:
    """Implementation async de la commande duplicates."""
    config = container.config()
    pipeline = container.pipeline()
    roots = [root] if root else [config.movies_dir, config.tv_dir]

    found = 0
    with suppress_loguru():
        for directory in roots:
            if not directory.is_dir():
                console.print(f"[yellow]Repertoire absent:[/yellow] {directory}")
                continue
            for group in await pipeline.scan_for_duplicates(directory):
                found += 1
                console.print(
                    f"\n[bold]{group.fingerprint.hash}[/bold] "
                    f"[dim]({group.fingerprint.size_bytes} octets)[/dim]"
                )
                for path in group.paths:
                    console.print(f"  {path}")

    if not found:
        console.print("[green]Aucun doublon trouve.[/green]")
    else:
        console.print(f"\n[bold]{found} groupe(s) de doublons[/bold]")


def history(
    limit: Annotated[int, typer.Option("--limit", "-n", help="Nombre d'entrees")] = 20,
) -> None:
    """Affiche l'historique des fichiers traites."""
    asyncio.run(_history_async(limit))


@with_container()
async def _history_async(container, limit: int) -> None:
    """Implementation async de la commande history."""
    with container.repository_scope()() as repo:
        records = repo.list_recent(limit)

    if not records:
        console.print("[yellow]Aucun fichier traite.[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Historique", show_header=True)
    table.add_column("Date", style="dim")
    table.add_column("Source", style="cyan")
    table.add_column("Statut")
    table.add_column("Destination / erreur")

    for record in records:
        table.add_row(
            record.processed_at.strftime("%Y-%m-%d %H:%M"),
            Path(record.source_path).name,
            record.status.value,
            record.error_message or record.destination_path,
        )
    console.print(table)


def pending(
    limit: Annotated[int, typer.Option("--limit", "-n", help="Nombre d'entrees")] = 50,
) -> None:
    """Liste les fichiers en attente d'une identification manuelle (approve)."""
    asyncio.run(_pending_async(limit))


@with_container()
async def _pending_async(container, limit: int) -> None:
    """Implementation async de la commande pending."""
    with container.repository_scope()() as repo:
        entries = repo.list_pending(limit)

    if not entries:
        console.print("[green]Aucun fichier en attente.[/green]")
        raise typer.Exit(0)

    table = Table(title="Fichiers en attente", show_header=True)
    table.add_column("Detecte", style="dim")
    table.add_column("Fichier", style="cyan")
    table.add_column("Taille", justify="right")
    table.add_column("Suggestion")
    table.add_column("Motif")

    for entry in entries:
        suggestion = entry.suggested_title or ""
        if entry.suggested_year:
            suggestion += f" ({entry.suggested_year})"
        table.add_row(
            entry.detected_at.strftime("%Y-%m-%d %H:%M"),
            entry.file_path,
            format_file_size(entry.file_size),
            suggestion,
            entry.reason,
        )
    console.print(table)
    console.print(
        f"\n{len(entries)} fichier(s) a identifier avec "
        "[bold]plexorg approve <fichier> --title ...[/bold]"
    )
