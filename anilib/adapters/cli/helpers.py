"""
Utilitaires partages pour les commandes CLI d'AniLib.

Ce module fournit :
- console : instance Rich Console partagee
- suppress_loguru : context manager pour desactiver/reactiver les logs loguru
- open_container : container initialise pour la duree d'une commande
- async_command : decorateur transformant une fonction async en commande sync
"""

import asyncio
import inspect
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, contextmanager
from functools import wraps

from loguru import logger as loguru_logger
from rich.console import Console

from anilib.container import Container

console = Console()


@contextmanager
def suppress_loguru():
    """
    Context manager pour desactiver les logs loguru pendant l'affichage Rich.

    Usage:
        with suppress_loguru():
            console.print(...)
    """
    loguru_logger.disable("anilib")
    try:
        yield
    finally:
        loguru_logger.enable("anilib")


@asynccontextmanager
async def open_container(requires_db: bool = True) -> AsyncIterator[Container]:
    """
    Fournit un container initialise pour la duree d'une commande.

    Les ressources du container (client AniList, cache) sont liberees a la
    fin de la commande.

    Args:
        requires_db: Si True (defaut), initialise la base de donnees.

    Usage:
        async with open_container() as container:
            library = container.library_service()
    """
    container = Container()
    if requires_db:
        container.database.init()
    try:
        yield container
    finally:
        await container.anilist_client().close()
        container.api_cache().close()


def async_command(func):
    """
    Transforme une fonction async en commande sync via asyncio.run().

    Preserve les annotations Typer pour que les options/arguments soient
    correctement interpretes.

    Usage:
        @async_command
        async def my_command(...):
            ...
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        asyncio.run(func(*args, **kwargs))
    # Preserver les annotations Typer
    wrapper.__signature__ = inspect.signature(func)
    wrapper.__annotations__ = func.__annotations__
    return wrapper
