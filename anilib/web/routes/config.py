"""
Routes de configuration : répertoires surveillés et réglages.
"""

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_library
from ..schemas import SettingIn, SettingOut, WatchDirectoryIn, WatchDirectoryOut
from ...services.library import LibraryService

router = APIRouter(prefix="/api")


@router.get("/watch-directories", response_model=list[WatchDirectoryOut])
async def list_watch_directories(library: LibraryService = Depends(get_library)):
    """Liste les répertoires surveillés."""
    return [WatchDirectoryOut.from_entity(d) for d in library.list_watch_directories()]


@router.post("/watch-directories", response_model=WatchDirectoryOut, status_code=201)
async def add_watch_directory(
    body: WatchDirectoryIn,
    library: LibraryService = Depends(get_library),
):
    """Ajoute un répertoire à surveiller."""
    path = Path(body.path).expanduser()
    if not path.is_dir():
        raise HTTPException(status_code=400, detail=f"Répertoire introuvable: {body.path}")
    return WatchDirectoryOut.from_entity(library.add_watch_directory(path))


@router.get("/settings", response_model=list[SettingOut])
async def list_settings(library: LibraryService = Depends(get_library)):
    """Liste les réglages."""
    return [SettingOut.from_entity(setting) for setting in library.list_settings()]


@router.put("/settings/{name}", response_model=SettingOut)
async def set_setting(
    name: str,
    body: SettingIn,
    library: LibraryService = Depends(get_library),
):
    """Modifie un réglage existant."""
    return SettingOut.from_entity(library.set_setting(name, body.value))
