"""
Routes de mise à jour de la bibliothèque.

Lance la mise à jour en tâche de fond et diffuse sa progression via SSE.
"""

import json

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from ..deps import get_library
from ..schemas import LibraryStatusOut
from ...services.library import LibraryService

router = APIRouter(prefix="/api/library")


@router.get("/status", response_model=LibraryStatusOut)
async def library_status(library: LibraryService = Depends(get_library)):
    """État courant et bilan de la dernière mise à jour."""
    return LibraryStatusOut.from_status(library.get_status())


@router.post("/update", status_code=202)
async def start_update(library: LibraryService = Depends(get_library)):
    """Lance une mise à jour en arrière-plan (409 si déjà en cours)."""
    library.start_update()
    return {"updating": True}


@router.delete("/update")
async def cancel_update(library: LibraryService = Depends(get_library)):
    """Annule la mise à jour en cours."""
    if not library.cancel_update():
        return JSONResponse(
            status_code=409,
            content={"detail": "Aucune mise à jour en cours"},
        )
    return {"cancelled": True}


@router.get("/updates")
async def update_events(library: LibraryService = Depends(get_library)):
    """SSE endpoint pour le suivi de progression."""

    async def event_stream():
        # Abonnement avant le test d'état : aucun événement n'est perdu
        with library.progress.subscribe() as subscription:
            if not library.is_updating:
                yield 'event: idle\ndata: {"message": "Aucune mise à jour en cours"}\n\n'
                return

            async for event in subscription:
                data = json.dumps(event.to_dict(), ensure_ascii=False)
                yield f"event: {event.kind.value}\ndata: {data}\n\n"
                if event.kind.is_terminal:
                    return

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )
