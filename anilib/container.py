"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour les interfaces CLI et Web.
Inclut les repositories SQLModel, les adaptateurs externes et les services
d'ingestion.
"""

import asyncio

from dependency_injector import containers, providers
from sqlmodel import Session

from .adapters.api.anilist_client import AniListClient
from .adapters.api.cache import APICache
from .adapters.file_system import FileSystemAdapter
from .adapters.media.ffmpeg_transcoder import FFmpegTranscoder
from .adapters.media.mediainfo_probe import MediaInfoProbe
from .config import Settings
from .infrastructure.persistence.database import create_db_engine, init_db
from .infrastructure.persistence.repositories import (
    SQLModelAnimeRepository,
    SQLModelEpisodeRepository,
    SQLModelSettingRepository,
    SQLModelSubtitleRepository,
    SQLModelWatchDirectoryRepository,
)
from .services.anime_ingestor import AnimeIngestor
from .services.episode_ingestor import EpisodeIngestor
from .services.library import LibraryService
from .services.path_catalog import PathCatalog
from .services.path_locks import PathLockRegistry
from .services.progress import ProgressBus
from .services.reconciliation import ReconciliationSweeper
from .services.similarity import SimilarityMatcher


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Fournit l'injection de dependances pour les interfaces CLI et Web.

    Utilisation :
        container = Container()
        container.database.init()  # Initialise la DB une fois
        library = container.library_service()
        report = await library.update()

    Les services d'ingestion sont des Singletons : le semaphore de conversion,
    les verrous par chemin et l'etat "mise a jour en cours" sont partages par
    toutes les requetes.
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Database - engine unique, Resource pour initialisation unique
    engine = providers.Singleton(
        create_db_engine,
        database_url=config.provided.database_url,
    )
    database = providers.Resource(init_db, engine=engine)

    # Session partagee : toutes les ecritures passent par la boucle asyncio
    session = providers.Singleton(Session, engine)

    # Adapters - implementations concretes des ports
    file_system = providers.Singleton(FileSystemAdapter)
    media_probe = providers.Singleton(MediaInfoProbe)
    transcoder = providers.Singleton(
        FFmpegTranscoder,
        covers_dir=config.provided.covers_dir,
        ffmpeg_bin=config.provided.ffmpeg_bin,
        timeout_seconds=config.provided.transcode_timeout_seconds,
    )

    # Cache API - Singleton pour partage entre clients
    api_cache = providers.Singleton(
        APICache,
        cache_dir=config.provided.cache_dir,
    )

    anilist_client = providers.Singleton(
        AniListClient,
        cache=api_cache,
        base_url=config.provided.anilist_url,
    )

    # Repositories
    anime_repository = providers.Singleton(SQLModelAnimeRepository, session=session)
    episode_repository = providers.Singleton(SQLModelEpisodeRepository, session=session)
    subtitle_repository = providers.Singleton(SQLModelSubtitleRepository, session=session)
    watch_directory_repository = providers.Singleton(
        SQLModelWatchDirectoryRepository,
        session=session,
    )
    setting_repository = providers.Singleton(SQLModelSettingRepository, session=session)

    # Primitives de coordination
    transcode_slots = providers.Singleton(
        asyncio.Semaphore,
        config.provided.max_concurrent_transcodes,
    )
    path_locks = providers.Singleton(PathLockRegistry)
    progress_bus = providers.Singleton(ProgressBus)

    # Services sans etat
    similarity_matcher = providers.Singleton(SimilarityMatcher)
    path_catalog = providers.Singleton(
        PathCatalog,
        anime_repo=anime_repository,
        episode_repo=episode_repository,
    )

    # Services d'ingestion
    anime_ingestor = providers.Singleton(
        AnimeIngestor,
        anime_repo=anime_repository,
        catalog=path_catalog,
        provider=anilist_client,
        matcher=similarity_matcher,
        file_system=file_system,
        path_locks=path_locks,
        progress=progress_bus,
        candidates=config.provided.metadata_candidates,
    )
    episode_ingestor = providers.Singleton(
        EpisodeIngestor,
        episode_repo=episode_repository,
        setting_repo=setting_repository,
        catalog=path_catalog,
        probe=media_probe,
        transcoder=transcoder,
        file_system=file_system,
        path_locks=path_locks,
        transcode_slots=transcode_slots,
        progress=progress_bus,
        cover_second=config.provided.episode_cover_second,
        cover_width=config.provided.episode_cover_width,
    )
    reconciliation_sweeper = providers.Singleton(
        ReconciliationSweeper,
        anime_repo=anime_repository,
        episode_repo=episode_repository,
        file_system=file_system,
        path_locks=path_locks,
    )

    # Service de bibliotheque - Singleton : une seule mise a jour a la fois
    library_service = providers.Singleton(
        LibraryService,
        anime_repo=anime_repository,
        episode_repo=episode_repository,
        subtitle_repo=subtitle_repository,
        watch_directory_repo=watch_directory_repository,
        setting_repo=setting_repository,
        anime_ingestor=anime_ingestor,
        episode_ingestor=episode_ingestor,
        sweeper=reconciliation_sweeper,
        progress=progress_bus,
        delete_converted_originals=config.provided.delete_converted_originals,
    )
