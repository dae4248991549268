"""
Routes de consultation du catalogue.

Animes, épisodes triés pour l'affichage, couvertures et sous-titres.
"""

from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from ..deps import get_library
from ..schemas import AnimeOut, EpisodeOut, SubtitleIn, SubtitleOut
from ...core.errors import NotFoundError
from ...services.library import LibraryService

router = APIRouter(prefix="/api")


@router.get("/animes", response_model=list[AnimeOut])
async def list_animes(library: LibraryService = Depends(get_library)):
    """Liste les animes du catalogue."""
    return [AnimeOut.from_entity(anime) for anime in library.list_animes()]


@router.get("/animes/{anime_id}", response_model=AnimeOut)
async def get_anime(anime_id: str, library: LibraryService = Depends(get_library)):
    """Détail d'un anime."""
    return AnimeOut.from_entity(library.get_anime(anime_id))


@router.get("/animes/{anime_id}/episodes", response_model=list[EpisodeOut])
async def list_episodes(anime_id: str, library: LibraryService = Depends(get_library)):
    """Épisodes d'un anime dans l'ordre d'affichage."""
    return [EpisodeOut.from_entity(episode) for episode in library.list_episodes(anime_id)]


@router.get("/episodes/{episode_id}", response_model=EpisodeOut)
async def get_episode(episode_id: str, library: LibraryService = Depends(get_library)):
    """Détail d'un épisode."""
    return EpisodeOut.from_entity(library.get_episode(episode_id))


@router.get("/episodes/{episode_id}/cover", response_class=FileResponse)
async def get_episode_cover(episode_id: str, library: LibraryService = Depends(get_library)):
    """Image de couverture d'un épisode (JPEG)."""
    cover = library.get_episode(episode_id).cover_image_path
    if cover is None or not cover.is_file():
        raise NotFoundError("Couverture", episode_id)
    return FileResponse(cover, media_type="image/jpeg")


@router.get("/episodes/{episode_id}/subtitles", response_model=list[SubtitleOut])
async def list_subtitles(episode_id: str, library: LibraryService = Depends(get_library)):
    """Sous-titres d'un épisode."""
    return [SubtitleOut.from_entity(sub) for sub in library.list_subtitles(episode_id)]


@router.post(
    "/episodes/{episode_id}/subtitles",
    response_model=SubtitleOut,
    status_code=201,
)
async def add_subtitle(
    episode_id: str,
    body: SubtitleIn,
    library: LibraryService = Depends(get_library),
):
    """Rattache un fichier de sous-titres à un épisode."""
    subtitle = library.add_subtitle(episode_id, Path(body.file_path), body.label)
    return SubtitleOut.from_entity(subtitle)
