"""
Application FastAPI d'AniLib.

Initialise l'application web avec le Container DI, traduit les erreurs du
domaine en réponses HTTP et monte les routes.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from .. import __version__
from ..container import Container
from ..core.errors import NotFoundError, ProviderUnavailableError, UpdateInProgressError
from .routes.animes import router as animes_router
from .routes.config import router as config_router
from .routes.library import router as library_router


def create_app(container: Container | None = None) -> FastAPI:
    """
    Construit l'application.

    Args:
        container: Container à utiliser (les tests en fournissent un
            configuré sur une base en mémoire)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialise le Container DI au démarrage et le ferme à l'arrêt."""
        app_container = container or Container()
        app_container.database.init()
        app.state.container = app_container
        yield
        library = app_container.library_service()
        library.cancel_update()
        library.progress.close()
        await app_container.anilist_client().close()
        logger.info("Arrêt du serveur AniLib")

    app = FastAPI(title="AniLib", version=__version__, lifespan=lifespan)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(UpdateInProgressError)
    async def update_in_progress_handler(request: Request, exc: UpdateInProgressError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(ProviderUnavailableError)
    async def provider_unavailable_handler(request: Request, exc: ProviderUnavailableError):
        headers = {"Retry-After": str(exc.retry_after)} if exc.retry_after else None
        return JSONResponse(status_code=503, content={"detail": str(exc)}, headers=headers)

    # Routes
    app.include_router(animes_router)
    app.include_router(library_router)
    app.include_router(config_router)

    return app


app = create_app()
