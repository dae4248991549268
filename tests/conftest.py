"""
Fixtures pytest partagees pour les tests AniLib.

Ce module contient les fixtures communes utilisees dans les tests:
- Base SQLite en memoire et repositories SQLModel
- Mocks des ports (IFileSystem, IMediaProbe, ITranscoder, IMetadataProvider)
- Settings de test avec chemins temporaires
- MediaMatch et anime de reference
"""

import asyncio
from pathlib import Path
from typing import Iterator
from unittest.mock import MagicMock

import pytest
from sqlalchemy import Engine
from sqlmodel import Session

from anilib.config import Settings
from anilib.core.entities import Anime, AnimeTitle
from anilib.core.ports.api_clients import IMetadataProvider, MediaMatch
from anilib.core.ports.file_system import IFileSystem
from anilib.core.ports.media import IMediaProbe, ITranscoder
from anilib.infrastructure.persistence.database import create_db_engine, init_db
from anilib.infrastructure.persistence.repositories import (
    SQLModelAnimeRepository,
    SQLModelEpisodeRepository,
    SQLModelSettingRepository,
    SQLModelSubtitleRepository,
    SQLModelWatchDirectoryRepository,
)
from tests.fixtures.anilist_responses import make_match


# ═══════════════════════════════════════
# Base de donnees
# ═══════════════════════════════════════


@pytest.fixture
def engine() -> Engine:
    """Engine SQLite en memoire, tables creees et reglages initialises."""
    return init_db(create_db_engine("sqlite://"))


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def anime_repo(session: Session) -> SQLModelAnimeRepository:
    return SQLModelAnimeRepository(session)


@pytest.fixture
def episode_repo(session: Session) -> SQLModelEpisodeRepository:
    return SQLModelEpisodeRepository(session)


@pytest.fixture
def subtitle_repo(session: Session) -> SQLModelSubtitleRepository:
    return SQLModelSubtitleRepository(session)


@pytest.fixture
def watch_directory_repo(session: Session) -> SQLModelWatchDirectoryRepository:
    return SQLModelWatchDirectoryRepository(session)


@pytest.fixture
def setting_repo(session: Session) -> SQLModelSettingRepository:
    return SQLModelSettingRepository(session)


# ═══════════════════════════════════════
# Mocks des ports
# ═══════════════════════════════════════


@pytest.fixture
def mock_file_system() -> MagicMock:
    """
    Mock de IFileSystem pour les tests.

    Les valeurs de retour doivent etre configurees dans chaque test.
    """
    mock = MagicMock(spec=IFileSystem)
    mock.exists.return_value = True
    mock.list_subdirectories.return_value = []
    mock.walk_files.return_value = iter([])
    mock.delete.return_value = True
    return mock


@pytest.fixture
def mock_probe() -> MagicMock:
    """
    Mock de IMediaProbe : tout est lisible par defaut.

    Les sondes de codecs sont des AsyncMock (deduits du spec).
    """
    mock = MagicMock(spec=IMediaProbe)
    mock.is_video_codec_supported.return_value = True
    mock.is_audio_codec_supported.return_value = True
    mock.is_video_container_supported.side_effect = lambda path: path.suffix == ".mp4"
    return mock


@pytest.fixture
def mock_transcoder(tmp_path: Path) -> MagicMock:
    """
    Mock de ITranscoder qui cree reellement les fichiers produits.

    La conversion ecrit output_dir/output_name.mp4, l'extraction d'image
    ecrit une image dans tmp_path/covers.
    """
    covers_dir = tmp_path / "covers"
    covers_dir.mkdir(exist_ok=True)

    async def extract(path: Path, at_second: int, output_name: str, scale_width: int) -> Path:
        cover = covers_dir / f"{path.stem}_{output_name}.jpg"
        cover.write_bytes(b"jpeg")
        return cover

    async def transcode(
        path: Path, output_dir: Path, output_name: str, use_hardware_accel: bool
    ) -> Path:
        output = output_dir / f"{output_name}.mp4"
        output.write_bytes(b"mp4")
        return output

    mock = MagicMock(spec=ITranscoder)
    mock.extract_cover_image.side_effect = extract
    mock.transcode_to_mp4.side_effect = transcode
    return mock


@pytest.fixture
def mock_provider() -> MagicMock:
    """Mock de IMetadataProvider sans resultat par defaut."""
    mock = MagicMock(spec=IMetadataProvider)
    mock.search.return_value = []
    mock.source = "anilist"
    return mock


@pytest.fixture
def transcode_slots() -> asyncio.Semaphore:
    return asyncio.Semaphore(2)


# ═══════════════════════════════════════
# Donnees de test
# ═══════════════════════════════════════


@pytest.fixture
def cowboy_bebop_match() -> MediaMatch:
    return make_match(
        1,
        romaji="Cowboy Bebop",
        english="Cowboy Bebop",
        native="カウボーイビバップ",
        cover_url="https://s4.anilist.co/file/anilistcdn/media/anime/cover/large/bx1.jpg",
        description="Enter a world in the distant future...",
        episodes=26,
        start_year=1998,
        start_month=4,
        start_day=3,
        status="FINISHED",
        genres=("Action", "Adventure", "Drama", "Sci-Fi"),
        format="TV",
    )


@pytest.fixture
def saved_anime(anime_repo: SQLModelAnimeRepository, tmp_path: Path) -> Anime:
    """Anime persiste dont le dossier existe dans tmp_path."""
    folder = tmp_path / "library" / "Cowboy Bebop"
    folder.mkdir(parents=True)
    return anime_repo.save(
        Anime(folder_path=folder, title=AnimeTitle(romaji="Cowboy Bebop"), anilist_id=1)
    )


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Base en memoire, couvertures, cache et logs sous tmp_path.
    """
    return Settings(
        _env_file=None,  # Ignorer le fichier .env pour les tests
        database_url="sqlite://",
        covers_dir=tmp_path / "covers",
        cache_dir=tmp_path / "cache",
        log_file=tmp_path / "logs" / "anilib.log",
    )
