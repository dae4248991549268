"""
Modeles SQLModel pour la base de donnees AniLib.

Ces modeles representent les tables de la base de donnees SQLite.
Ils sont distincts des entites de domaine (dataclass dans core/entities/)
selon l'architecture hexagonale.

Tables:
- animes: Series avec metadonnees AniList, une par dossier
- episodes: Fichiers video lisibles rattaches a un anime
- subtitles: Sous-titres externes d'un episode
- watch_directories: Repertoires racines surveilles
- settings: Reglages booleens modifiables a chaud

Les identifiants sont en AUTOINCREMENT : un ID supprime n'est jamais reattribue.
Aucune cle etrangere n'est en cascade, les suppressions passent par les sweeps.
"""

from __future__ import annotations

import json
from datetime import date, datetime, timezone

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AnimeModel(SQLModel, table=True):
    """
    Modele representant un anime dans la base de donnees.

    folder_path est unique : deux animes ne partagent jamais un dossier.
    """

    __tablename__ = "animes"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    anilist_id: int | None = Field(default=None, index=True)
    title_romaji: str | None = None
    title_english: str | None = None
    title_native: str | None = None
    cover_url: str | None = None
    description: str | None = None
    episodes: int | None = None
    release_date: date | None = None
    status: str | None = None
    genres_json: str | None = None  # JSON: ["Action", "Sci-Fi"]
    format: str | None = None
    folder_path: str = Field(unique=True, index=True)
    created_at: datetime | None = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True)
    )

    @property
    def genres(self) -> list[str]:
        """Retourne les genres deserialises."""
        if self.genres_json:
            return json.loads(self.genres_json)
        return []

    @genres.setter
    def genres(self, value: list[str]) -> None:
        """Serialise les genres en JSON."""
        self.genres_json = json.dumps(value)


class EpisodeModel(SQLModel, table=True):
    """
    Modele representant un episode.

    file_path est le fichier servi (unique), original_file_path le fichier
    source d'une conversion.
    """

    __tablename__ = "episodes"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    anime_id: int = Field(foreign_key="animes.id", index=True)
    title: str
    file_path: str = Field(unique=True, index=True)
    original_file_path: str | None = Field(default=None, unique=True, index=True)
    cover_image_path: str | None = None
    created_at: datetime | None = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True)
    )


class SubtitleModel(SQLModel, table=True):
    """Modele representant un fichier de sous-titres."""

    __tablename__ = "subtitles"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    episode_id: int = Field(foreign_key="episodes.id", index=True)
    file_path: str
    label: str = ""


class WatchDirectoryModel(SQLModel, table=True):
    """Modele d'un repertoire surveille (doublons acceptes)."""

    __tablename__ = "watch_directories"

    id: int | None = Field(default=None, primary_key=True)
    path: str
    created_at: datetime | None = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True)
    )


class SettingModel(SQLModel, table=True):
    """Modele d'un reglage booleen nomme."""

    __tablename__ = "settings"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True)
    value: bool = False
