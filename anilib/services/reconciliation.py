"""
Reconciliation entre le catalogue et le systeme de fichiers.

ReconciliationSweeper retire du catalogue les entites dont le chemin n'existe
plus, et supprime du disque les fichiers originaux des episodes convertis.

Responsabilites:
- Supprimer les animes dont le dossier a disparu (sans cascade)
- Supprimer les episodes dont le fichier servi a disparu
- Supprimer les originaux convertis (le catalogue n'est pas modifie)
"""

from pathlib import Path

from loguru import logger

from anilib.core.entities import Anime, Episode
from anilib.core.ports.file_system import IFileSystem
from anilib.core.ports.repositories import IAnimeRepository, IEpisodeRepository
from anilib.services.path_locks import PathLockRegistry


class ReconciliationSweeper:
    """
    Nettoyage des entrees fantomes et des originaux convertis.

    Les suppressions ne cascadent jamais : un anime supprime laisse ses
    episodes en place, qui seront retires par leur propre sweep si leur
    fichier a aussi disparu.
    """

    def __init__(
        self,
        anime_repo: IAnimeRepository,
        episode_repo: IEpisodeRepository,
        file_system: IFileSystem,
        path_locks: PathLockRegistry,
    ) -> None:
        self._anime_repo = anime_repo
        self._episode_repo = episode_repo
        self._file_system = file_system
        self._path_locks = path_locks

    async def delete_invalid_animes(self) -> list[Anime]:
        """Supprime les animes dont le dossier n'existe plus."""
        deleted = []
        for anime in self._anime_repo.list_all():
            async with self._path_locks.hold(anime.folder_path):
                if self._file_system.exists(anime.folder_path):
                    continue
                if self._anime_repo.delete(anime.id):
                    deleted.append(anime)
                    logger.info(f"Anime retire (dossier absent): {anime.folder_path}")
        return deleted

    async def delete_invalid_episodes(self) -> list[Episode]:
        """Supprime les episodes dont le fichier servi n'existe plus."""
        deleted = []
        for episode in self._episode_repo.list_all():
            async with self._path_locks.hold(episode.file_path):
                if self._file_system.exists(episode.file_path):
                    continue
                if self._episode_repo.delete(episode.id):
                    deleted.append(episode)
                    logger.info(f"Episode retire (fichier absent): {episode.file_path}")
        return deleted

    async def delete_converted_originals(self) -> list[Path]:
        """
        Supprime du disque les originaux des episodes convertis.

        Un original n'est supprime que si le fichier converti existe : sans
        lui, l'original reste la seule copie de l'episode.
        """
        removed = []
        for episode in self._episode_repo.list_converted():
            original = episode.original_file_path
            async with self._path_locks.hold(original):
                if not self._file_system.exists(original):
                    continue
                if not self._file_system.exists(episode.file_path):
                    logger.warning(f"Original conserve, fichier converti absent: {original}")
                    continue
                if self._file_system.delete(original):
                    removed.append(original)
                    logger.info(f"Original supprime: {original}")
                else:
                    logger.warning(f"Suppression impossible: {original}")
        return removed
