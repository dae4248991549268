"""
Schemas pydantic de l'API web.

Les entites du domaine restent des dataclass : ces modeles ne servent qu'a
la validation des corps de requete et a la serialisation des reponses.
"""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel

from anilib.core.entities import Anime, Episode, Setting, Subtitle, WatchDirectory
from anilib.services.library import LibraryStatus


class AnimeOut(BaseModel):
    id: str
    anilist_id: Optional[int] = None
    title: str
    title_romaji: Optional[str] = None
    title_english: Optional[str] = None
    title_native: Optional[str] = None
    cover_url: Optional[str] = None
    description: Optional[str] = None
    episodes: Optional[int] = None
    release_date: Optional[date] = None
    status: Optional[str] = None
    genres: list[str] = []
    format: Optional[str] = None
    folder_path: str

    @classmethod
    def from_entity(cls, anime: Anime) -> "AnimeOut":
        return cls(
            id=anime.id,
            anilist_id=anime.anilist_id,
            title=anime.title.display,
            title_romaji=anime.title.romaji,
            title_english=anime.title.english,
            title_native=anime.title.native,
            cover_url=anime.cover_url,
            description=anime.description,
            episodes=anime.episodes,
            release_date=anime.release_date,
            status=anime.status,
            genres=list(anime.genres),
            format=anime.format,
            folder_path=str(anime.folder_path),
        )


class EpisodeOut(BaseModel):
    id: str
    anime_id: str
    title: str
    file_path: str
    original_file_path: Optional[str] = None
    cover_image_path: Optional[str] = None
    is_converted: bool = False

    @classmethod
    def from_entity(cls, episode: Episode) -> "EpisodeOut":
        return cls(
            id=episode.id,
            anime_id=episode.anime_id,
            title=episode.title,
            file_path=str(episode.file_path),
            original_file_path=(
                str(episode.original_file_path) if episode.original_file_path else None
            ),
            cover_image_path=(
                str(episode.cover_image_path) if episode.cover_image_path else None
            ),
            is_converted=episode.is_converted,
        )


class SubtitleIn(BaseModel):
    file_path: str
    label: str = ""


class SubtitleOut(BaseModel):
    id: str
    episode_id: str
    file_path: str
    label: str

    @classmethod
    def from_entity(cls, subtitle: Subtitle) -> "SubtitleOut":
        return cls(
            id=subtitle.id,
            episode_id=subtitle.episode_id,
            file_path=str(subtitle.file_path),
            label=subtitle.label,
        )


class WatchDirectoryIn(BaseModel):
    path: str


class WatchDirectoryOut(BaseModel):
    id: str
    path: str

    @classmethod
    def from_entity(cls, directory: WatchDirectory) -> "WatchDirectoryOut":
        return cls(id=directory.id, path=str(directory.path))


class SettingIn(BaseModel):
    value: bool


class SettingOut(BaseModel):
    name: str
    value: bool

    @classmethod
    def from_entity(cls, setting: Setting) -> "SettingOut":
        return cls(name=setting.name, value=setting.value)


class LibraryStatusOut(BaseModel):
    updating: bool
    anime_count: int
    episode_count: int
    last_report: Optional[dict[str, Any]] = None

    @classmethod
    def from_status(cls, status: LibraryStatus) -> "LibraryStatusOut":
        return cls(
            updating=status.updating,
            anime_count=status.anime_count,
            episode_count=status.episode_count,
            last_report=status.last_report.to_dict() if status.last_report else None,
        )
