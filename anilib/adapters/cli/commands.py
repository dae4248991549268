"""Commandes CLI de la bibliotheque : repertoires, mise a jour, nettoyage."""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from anilib.adapters.cli.helpers import (
    async_command,
    console,
    open_container,
    suppress_loguru,
)
from anilib.core.errors import ProviderUnavailableError, StoreError
from anilib.services.library import UpdateReport


@async_command
async def add_directory(
    path: Annotated[
        Path,
        typer.Argument(help="Repertoire contenant un dossier par anime"),
    ],
) -> None:
    """Ajoute un repertoire a surveiller."""
    if not path.expanduser().is_dir():
        console.print(f"[red]Erreur: Repertoire introuvable: {path}[/red]")
        raise typer.Exit(1)

    async with open_container() as container:
        directory = container.library_service().add_watch_directory(path)
    console.print(f"[green]Repertoire surveille:[/green] {directory.path}")


@async_command
async def update() -> None:
    """Met a jour la bibliotheque (nettoyage, animes, episodes)."""
    async with open_container() as container:
        library = container.library_service()
        if not library.list_watch_directories():
            console.print(
                "[yellow]Aucun repertoire surveille. "
                "Utilisez 'anilib add-directory <chemin>'.[/yellow]"
            )
            raise typer.Exit(1)

        try:
            with suppress_loguru(), console.status("Mise a jour de la bibliotheque..."):
                report = await library.update()
        except ProviderUnavailableError as e:
            console.print(f"[red]AniList indisponible: {e}[/red]")
            raise typer.Exit(1)
        except StoreError as e:
            console.print(f"[red]Erreur de base de donnees: {e}[/red]")
            raise typer.Exit(1)

    _display_update_report(report)
    if report.has_failures:
        raise typer.Exit(2)


@async_command
async def sweep() -> None:
    """Retire du catalogue les dossiers et fichiers disparus."""
    async with open_container() as container:
        report = await container.library_service().sweep()

    console.print(f"Animes retires: [cyan]{report.deleted_animes}[/cyan]")
    console.print(f"Episodes retires: [cyan]{report.deleted_episodes}[/cyan]")
    console.print(f"Originaux supprimes: [cyan]{report.deleted_originals}[/cyan]")


@async_command
async def animes() -> None:
    """Liste les animes du catalogue."""
    async with open_container() as container:
        library = container.library_service()
        rows = [
            (anime, len(library.list_episodes(anime.id)))
            for anime in library.list_animes()
        ]

    if not rows:
        console.print("[dim]Catalogue vide.[/dim]")
        return

    table = Table(title="Animes", show_header=True)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Titre", style="cyan")
    table.add_column("Format")
    table.add_column("Episodes", justify="right")
    table.add_column("Dossier", style="dim")
    for anime, episode_count in rows:
        expected = f"/{anime.episodes}" if anime.episodes else ""
        table.add_row(
            anime.id,
            anime.title.display,
            anime.format or "",
            f"{episode_count}{expected}",
            anime.folder_path.name,
        )
    console.print(table)


def _display_update_report(report: UpdateReport) -> None:
    """Affiche le bilan de mise a jour sous forme de tableaux Rich."""
    table = Table(title="Mise a jour de la bibliotheque", show_header=True)
    table.add_column("Categorie", style="cyan")
    table.add_column("Nombre", justify="right")
    table.add_column("Details", style="dim")

    table.add_row(
        "Animes ajoutes",
        str(len(report.animes)),
        ", ".join(anime.title.display for anime in report.animes[:3]),
    )
    table.add_row(
        "Episodes ajoutes",
        str(len(report.episodes)),
        f"{sum(1 for e in report.episodes if e.is_converted)} converti(s)"
        if report.episodes else "",
    )
    table.add_row("Animes retires", str(report.deleted_animes), "")
    table.add_row("Episodes retires", str(report.deleted_episodes), "")
    table.add_row("Originaux supprimes", str(report.deleted_originals), "")
    table.add_row("Echecs", str(len(report.failures)), "")
    console.print(table)

    if not report.failures:
        return

    failures = Table(title="Echecs", show_header=True)
    failures.add_column("Chemin", style="yellow")
    failures.add_column("Erreur", style="red")
    failures.add_column("Message")
    for failure in report.failures:
        failures.add_row(
            failure.path.name if failure.path else "",
            failure.kind,
            failure.message,
        )
    console.print(failures)
