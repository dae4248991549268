"""
Point d'entrée CLI d'AniLib.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

from typing import Annotated

import typer
from loguru import logger

from . import __version__
from .adapters.cli.commands import add_directory, animes, sweep, update
from .config import Settings
from .container import Container
from .logging_config import configure_logging

app = typer.Typer(
    name="anilib",
    help="Bibliothèque d'animes locale avec métadonnées AniList",
)
container = Container()

# Commandes de la bibliothèque
app.command(name="add-directory")(add_directory)
app.command()(update)
app.command()(sweep)
app.command()(animes)


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    logger.info("Configuration AniLib")
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"Couvertures : {config.covers_dir}")
    typer.echo(f"Cache API : {config.cache_dir}")
    typer.echo(f"AniList : {config.anilist_url}")
    typer.echo(f"Conversions simultanées : {config.max_concurrent_transcodes}")
    typer.echo(
        "Suppression des originaux : "
        f"{'activée' if config.delete_converted_originals else 'désactivée'}"
    )
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"AniLib v{__version__}")


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Adresse d'écoute")] = "0.0.0.0",
    port: Annotated[int, typer.Option(help="Port d'écoute")] = 8000,
    reload: Annotated[bool, typer.Option(help="Rechargement automatique")] = False,
) -> None:
    """Lance le serveur web AniLib."""
    import uvicorn

    typer.echo(f"Démarrage du serveur sur {host}:{port}")
    uvicorn.run("anilib.web.app:app", host=host, port=port, reload=reload)


def main() -> None:
    """Point d'entrée de l'application."""
    # Charge la configuration et configure le logging
    settings = container.config()
    configure_logging(settings)

    # Initialise la base de données (crée les tables si nécessaire)
    container.database.init()

    logger.info("Démarrage d'AniLib", version=__version__)

    # Lance la CLI
    app()


if __name__ == "__main__":
    main()
