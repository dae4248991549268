"""
Service d'ingestion des episodes.

Pour chaque anime, parcourt recursivement son dossier a la recherche de
fichiers .mp4/.mkv et cree un Episode par fichier inconnu. Un fichier dont le
codec video, le codec audio ou le conteneur n'est pas lisible par un
navigateur est d'abord converti en MP4 a cote de l'original.

Les creations sont bornees par un semaphore partage : au plus
max_concurrent_transcodes fichiers sont sondes ou convertis en meme temps,
tous animes confondus.
"""

import asyncio
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from loguru import logger

from anilib.core.entities import Anime, Episode
from anilib.core.errors import DuplicatePathError, IngestionError, ProbeError
from anilib.core.ports.file_system import IFileSystem
from anilib.core.ports.media import IMediaProbe, ITranscoder
from anilib.core.ports.repositories import IEpisodeRepository, ISettingRepository
from anilib.services.batch import BatchResult, run_batch
from anilib.services.path_catalog import PathCatalog
from anilib.services.path_locks import PathLockRegistry
from anilib.services.progress import ProgressBus, ProgressEvent, ProgressKind
from anilib.utils.constants import (
    COMPATIBLE_FILE_SUFFIX,
    EPISODE_COVER_NAME,
    EPISODE_FILE_EXTENSIONS,
    USE_HARDWARE_ACCELERATION,
)
from anilib.utils.helpers import build_episode_title


class EpisodeIngestor:
    """
    Creation des episodes des animes du catalogue.

    La deduplication precede l'entree dans le semaphore : un fichier deja
    catalogue n'occupe jamais un emplacement de conversion.
    """

    def __init__(
        self,
        episode_repo: IEpisodeRepository,
        setting_repo: ISettingRepository,
        catalog: PathCatalog,
        probe: IMediaProbe,
        transcoder: ITranscoder,
        file_system: IFileSystem,
        path_locks: PathLockRegistry,
        transcode_slots: asyncio.Semaphore,
        progress: Optional[ProgressBus] = None,
        cover_second: int = 5,
        cover_width: int = 1920,
    ) -> None:
        self._episode_repo = episode_repo
        self._setting_repo = setting_repo
        self._catalog = catalog
        self._probe = probe
        self._transcoder = transcoder
        self._file_system = file_system
        self._path_locks = path_locks
        self._transcode_slots = transcode_slots
        self._progress = progress
        self._cover_second = cover_second
        self._cover_width = cover_width

    async def ingest_for_animes(self, animes: Iterable[Anime]) -> list[Episode]:
        """Cree les episodes des fichiers inconnus et retourne ceux crees."""
        batch = await self.scan(animes)
        return batch.results

    async def scan(self, animes: Iterable[Anime]) -> BatchResult[Episode]:
        """Comme ingest_for_animes(), en conservant les echecs par fichier."""
        per_anime = await run_batch(animes, self._scan_anime)

        merged: BatchResult[Episode] = BatchResult()
        for batch in per_anime.results:
            merged.extend(batch)
        merged.failures.extend(per_anime.failures)
        return merged

    async def needs_transcode(self, path: Path) -> bool:
        """
        Vrai si le codec video, le codec audio ou le conteneur n'est pas lisible.

        Une sonde en echec est traitee comme "a convertir".
        """
        if not self._probe.is_video_container_supported(path):
            return True
        try:
            if not await self._probe.is_video_codec_supported(path):
                return True
            return not await self._probe.is_audio_codec_supported(path)
        except ProbeError as e:
            logger.warning(f"Sonde en echec, conversion forcee: {path.name} ({e.message})")
            return True

    async def _scan_anime(self, anime: Anime) -> BatchResult[Episode]:
        files = await asyncio.to_thread(
            lambda: list(
                self._file_system.walk_files(anime.folder_path, EPISODE_FILE_EXTENSIONS)
            )
        )
        if not files:
            logger.debug(f"Aucun fichier video pour {anime.title.display}")
            return BatchResult()

        batch = await run_batch(
            self._without_converted_copies(files),
            lambda path: self._ingest_file(anime, path),
        )
        batch.results = [episode for episode in batch.results if episode is not None]
        return batch

    @staticmethod
    def _without_converted_copies(files: list[Path]) -> list[Path]:
        """
        Retire les fichiers convertis dont la source est presente.

        Ils sont rattaches a leur source dans _build_episode().
        """
        stems = {(path.parent, path.stem) for path in files}
        kept = []
        for path in files:
            if path.stem.endswith(COMPATIBLE_FILE_SUFFIX):
                source_stem = path.stem[: -len(COMPATIBLE_FILE_SUFFIX)]
                if (path.parent, source_stem) in stems:
                    continue
            kept.append(path)
        return kept

    async def _ingest_file(self, anime: Anime, path: Path) -> Optional[Episode]:
        """
        Cree l'episode d'un fichier.

        Returns:
            L'episode cree, None si le fichier est deja catalogue
        """
        async with self._path_locks.hold(path):
            if self._catalog.exists_episode_at_path(path):
                logger.debug(f"Fichier deja catalogue: {path.name}")
                return None

            try:
                async with self._transcode_slots:
                    episode = await self._build_episode(anime, path)
                saved = self._episode_repo.save(episode)
            except DuplicatePathError as e:
                if self._catalog.exists_episode_at_path(path):
                    logger.debug(f"Fichier cree entre-temps: {path.name}")
                else:
                    logger.warning(f"Episode non cree pour {path.name}: {e.message}")
                return None
            except IngestionError as e:
                logger.warning(f"Episode non cree pour {path.name}: {e.message}")
                self._publish(ProgressKind.EPISODE_FAILED, e.message, path)
                raise

        logger.info(f"Episode cree: {saved.title} ({anime.title.display})")
        self._publish(ProgressKind.EPISODE_CREATED, saved.title, saved.file_path, saved.id)
        return saved

    async def _build_episode(self, anime: Anime, path: Path) -> Episode:
        """
        Extrait l'image et convertit si necessaire.

        En cas de conversion, l'image est extraite du fichier original.

        Raises:
            TranscodeError: extraction ou conversion en echec
        """
        title = build_episode_title(path.stem)
        transcode = await self.needs_transcode(path)
        cover = await self._extract_cover(path)

        if not transcode:
            return Episode(
                anime_id=anime.id,
                title=title,
                file_path=path,
                cover_image_path=cover,
            )

        output_name = f"{path.stem}{COMPATIBLE_FILE_SUFFIX}"
        converted = path.parent / f"{output_name}.mp4"
        if self._file_system.exists(converted):
            # Conversion complete d'une execution interrompue avant l'enregistrement
            logger.info(f"Conversion existante reutilisee: {converted.name}")
        else:
            converted = await self._transcoder.transcode_to_mp4(
                path,
                output_dir=path.parent,
                output_name=output_name,
                use_hardware_accel=self._use_hardware_acceleration(),
            )
        return Episode(
            anime_id=anime.id,
            title=title,
            file_path=converted,
            original_file_path=path,
            cover_image_path=cover,
        )

    async def _extract_cover(self, path: Path) -> Path:
        return await self._transcoder.extract_cover_image(
            path,
            at_second=self._cover_second,
            output_name=EPISODE_COVER_NAME,
            scale_width=self._cover_width,
        )

    def _use_hardware_acceleration(self) -> bool:
        """Lit le reglage a chaque conversion, un reglage absent vaut False."""
        setting = self._setting_repo.get_by_name(USE_HARDWARE_ACCELERATION)
        return setting.value if setting else False

    def _publish(
        self,
        kind: ProgressKind,
        message: str,
        path: Path,
        entity_id: Optional[str] = None,
    ) -> None:
        if self._progress is not None:
            self._progress.publish(
                ProgressEvent(kind=kind, message=message, path=path, entity_id=entity_id)
            )
