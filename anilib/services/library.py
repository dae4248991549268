"""
Service de bibliotheque : mise a jour complete et consultation du catalogue.

Une mise a jour enchaine :
1. Suppression des animes dont le dossier a disparu
2. Suppression des episodes dont le fichier a disparu
3. Ingestion des animes des repertoires surveilles
4. Ingestion des episodes de tous les animes du catalogue
5. Suppression des originaux convertis (optionnelle)

Une seule mise a jour s'execute a la fois. La progression est publiee sur
le ProgressBus.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger

from anilib.core.entities import Anime, Episode, Setting, Subtitle, WatchDirectory
from anilib.core.errors import NotFoundError, UpdateInProgressError
from anilib.core.ports.repositories import (
    IAnimeRepository,
    IEpisodeRepository,
    ISettingRepository,
    ISubtitleRepository,
    IWatchDirectoryRepository,
)
from anilib.services.anime_ingestor import AnimeIngestor
from anilib.services.batch import ItemFailure
from anilib.services.episode_ingestor import EpisodeIngestor
from anilib.services.ordering import sort_by_numeric_sum
from anilib.services.progress import ProgressBus, ProgressEvent, ProgressKind
from anilib.services.reconciliation import ReconciliationSweeper


@dataclass
class UpdateReport:
    """
    Bilan d'une mise a jour.

    Attributes:
        animes: Animes crees
        episodes: Episodes crees
        failures: Echecs locaux (dossier ou fichier), dans l'ordre de traitement
        deleted_animes: Animes retires du catalogue
        deleted_episodes: Episodes retires du catalogue
        deleted_originals: Fichiers originaux supprimes du disque
    """

    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None
    animes: list[Anime] = field(default_factory=list)
    episodes: list[Episode] = field(default_factory=list)
    failures: list[ItemFailure] = field(default_factory=list)
    deleted_animes: int = 0
    deleted_episodes: int = 0
    deleted_originals: int = 0

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    def to_dict(self) -> dict:
        """Convertit en dictionnaire pour serialisation JSON."""
        return {
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "created_animes": len(self.animes),
            "created_episodes": len(self.episodes),
            "deleted_animes": self.deleted_animes,
            "deleted_episodes": self.deleted_episodes,
            "deleted_originals": self.deleted_originals,
            "failures": [
                {
                    "path": str(failure.path) if failure.path else None,
                    "kind": failure.kind,
                    "message": failure.message,
                }
                for failure in self.failures
            ],
        }


@dataclass
class LibraryStatus:
    """Etat courant de la bibliotheque."""

    updating: bool
    anime_count: int
    episode_count: int
    last_report: Optional[UpdateReport] = None


class LibraryService:
    """
    Orchestration des mises a jour et requetes sur le catalogue.

    Utilisation :
        service = container.library_service()
        report = await service.update()
    """

    def __init__(
        self,
        anime_repo: IAnimeRepository,
        episode_repo: IEpisodeRepository,
        subtitle_repo: ISubtitleRepository,
        watch_directory_repo: IWatchDirectoryRepository,
        setting_repo: ISettingRepository,
        anime_ingestor: AnimeIngestor,
        episode_ingestor: EpisodeIngestor,
        sweeper: ReconciliationSweeper,
        progress: ProgressBus,
        delete_converted_originals: bool = True,
    ) -> None:
        self._anime_repo = anime_repo
        self._episode_repo = episode_repo
        self._subtitle_repo = subtitle_repo
        self._watch_directory_repo = watch_directory_repo
        self._setting_repo = setting_repo
        self._anime_ingestor = anime_ingestor
        self._episode_ingestor = episode_ingestor
        self._sweeper = sweeper
        self._progress = progress
        self._delete_converted_originals = delete_converted_originals
        self._updating = False
        self._task: Optional[asyncio.Task] = None
        self._last_report: Optional[UpdateReport] = None

    # ═══════════════════════════════════════
    # Mise a jour
    # ═══════════════════════════════════════

    @property
    def progress(self) -> ProgressBus:
        return self._progress

    @property
    def is_updating(self) -> bool:
        return self._updating

    def get_status(self) -> LibraryStatus:
        """Retourne l'etat courant et le bilan de la derniere mise a jour."""
        return LibraryStatus(
            updating=self._updating,
            anime_count=len(self._anime_repo.list_all()),
            episode_count=len(self._episode_repo.list_all()),
            last_report=self._last_report,
        )

    async def update(self) -> UpdateReport:
        """
        Execute une mise a jour complete.

        Raises:
            UpdateInProgressError: une mise a jour est deja en cours
        """
        self._acquire()
        return await self._run_update()

    def start_update(self) -> asyncio.Task:
        """
        Lance la mise a jour en tache de fond.

        Raises:
            UpdateInProgressError: une mise a jour est deja en cours
        """
        self._acquire()
        self._task = asyncio.create_task(self._run_update())
        self._task.add_done_callback(self._on_task_done)
        return self._task

    def cancel_update(self) -> bool:
        """Annule la mise a jour de fond. Retourne True si une tache a ete annulee."""
        if self._task is None or self._task.done():
            return False
        logger.info("Annulation de la mise a jour demandee")
        return self._task.cancel()

    def _acquire(self) -> None:
        if self._updating:
            raise UpdateInProgressError()
        self._updating = True

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._updating = False
        if task.cancelled():
            logger.info("Mise a jour annulee")
        elif task.exception() is not None:
            logger.error(f"Mise a jour en echec: {task.exception()}")

    async def _run_update(self) -> UpdateReport:
        report = UpdateReport()
        self._publish(ProgressKind.SCAN_STARTED, "Mise a jour de la bibliotheque")
        logger.info("Debut de la mise a jour de la bibliotheque")

        try:
            await self._run_steps(report)
        except asyncio.CancelledError:
            self._publish(ProgressKind.SCAN_FAILED, "Mise a jour annulee")
            raise
        except Exception as e:
            self._publish(ProgressKind.SCAN_FAILED, str(e))
            raise
        finally:
            self._updating = False

        report.finished_at = datetime.now()
        self._last_report = report
        logger.info(
            f"Mise a jour terminee: {len(report.animes)} anime(s), "
            f"{len(report.episodes)} episode(s), {len(report.failures)} echec(s)"
        )
        self._publish(
            ProgressKind.SCAN_COMPLETED,
            f"{len(report.animes)} anime(s) et {len(report.episodes)} episode(s) ajoutes",
        )
        return report

    async def _run_steps(self, report: UpdateReport) -> None:
        report.deleted_animes = len(await self._sweeper.delete_invalid_animes())
        report.deleted_episodes = len(await self._sweeper.delete_invalid_episodes())
        self._publish(
            ProgressKind.SWEEP_COMPLETED,
            f"{report.deleted_animes} anime(s) et {report.deleted_episodes} "
            "episode(s) retires",
        )

        directories = list(
            dict.fromkeys(directory.path for directory in self._watch_directory_repo.list_all())
        )
        anime_batch = await self._anime_ingestor.scan(directories)
        report.animes = anime_batch.results
        report.failures.extend(anime_batch.failures)

        episode_batch = await self._episode_ingestor.scan(self._anime_repo.list_all())
        report.episodes = episode_batch.results
        report.failures.extend(episode_batch.failures)

        if self._delete_converted_originals:
            report.deleted_originals = len(await self._sweeper.delete_converted_originals())

    async def sweep(self) -> UpdateReport:
        """
        Execute uniquement les etapes de nettoyage.

        Raises:
            UpdateInProgressError: une mise a jour est deja en cours
        """
        self._acquire()
        report = UpdateReport()
        try:
            report.deleted_animes = len(await self._sweeper.delete_invalid_animes())
            report.deleted_episodes = len(await self._sweeper.delete_invalid_episodes())
            if self._delete_converted_originals:
                report.deleted_originals = len(
                    await self._sweeper.delete_converted_originals()
                )
        finally:
            self._updating = False
        report.finished_at = datetime.now()
        self._publish(ProgressKind.SWEEP_COMPLETED, "Nettoyage termine")
        return report

    def _publish(self, kind: ProgressKind, message: str) -> None:
        self._progress.publish(ProgressEvent(kind=kind, message=message))

    # ═══════════════════════════════════════
    # Catalogue
    # ═══════════════════════════════════════

    def list_animes(self) -> list[Anime]:
        """Liste les animes par ordre de creation."""
        return self._anime_repo.list_all()

    def get_anime(self, anime_id: str) -> Anime:
        """
        Raises:
            NotFoundError: ID inconnu
        """
        anime = self._anime_repo.get_by_id(anime_id)
        if anime is None:
            raise NotFoundError("Anime", anime_id)
        return anime

    def list_episodes(self, anime_id: str) -> list[Episode]:
        """Episodes d'un anime dans l'ordre d'affichage (somme des nombres du titre)."""
        anime = self.get_anime(anime_id)
        return sort_by_numeric_sum(self._episode_repo.list_by_anime(anime.id))

    def get_episode(self, episode_id: str) -> Episode:
        episode = self._episode_repo.get_by_id(episode_id)
        if episode is None:
            raise NotFoundError("Episode", episode_id)
        return episode

    def list_watch_directories(self) -> list[WatchDirectory]:
        return self._watch_directory_repo.list_all()

    def add_watch_directory(self, path: Path) -> WatchDirectory:
        """Enregistre un repertoire a surveiller (chemin absolu, ~ etendu)."""
        directory = self._watch_directory_repo.add(path.expanduser().absolute())
        logger.info(f"Repertoire surveille ajoute: {directory.path}")
        return directory

    def list_settings(self) -> list[Setting]:
        return self._setting_repo.list_all()

    def set_setting(self, name: str, value: bool) -> Setting:
        """
        Modifie un reglage existant.

        Raises:
            NotFoundError: reglage inconnu
        """
        if self._setting_repo.get_by_name(name) is None:
            raise NotFoundError("Setting", name)
        setting = self._setting_repo.set_value(name, value)
        logger.info(f"Reglage modifie: {name}={value}")
        return setting

    def list_subtitles(self, episode_id: str) -> list[Subtitle]:
        episode = self.get_episode(episode_id)
        return self._subtitle_repo.list_by_episode(episode.id)

    def add_subtitle(self, episode_id: str, path: Path, label: str = "") -> Subtitle:
        """
        Rattache un fichier de sous-titres a un episode.

        Raises:
            NotFoundError: episode inconnu
        """
        episode = self.get_episode(episode_id)
        return self._subtitle_repo.save(
            Subtitle(episode_id=episode.id, file_path=path, label=label or path.stem)
        )
