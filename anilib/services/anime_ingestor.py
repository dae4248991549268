"""
Service d'ingestion des animes.

Parcourt les repertoires surveilles et cree un Anime pour chaque sous-dossier
inconnu du catalogue. Le nom du dossier, debarrasse de ses annotations entre
crochets, sert de texte de recherche AniList ; le meilleur candidat est choisi
par similarite de titre.

Un dossier en echec (recherche impossible, aucun resultat) ne produit aucun
anime mais n'interrompt pas le parcours des autres dossiers.
"""

import asyncio
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from loguru import logger

from anilib.core.entities import Anime
from anilib.core.errors import DuplicatePathError, ExternalLookupError, IngestionError
from anilib.core.ports.api_clients import IMetadataProvider, MediaMatch
from anilib.core.ports.file_system import IFileSystem
from anilib.core.ports.repositories import IAnimeRepository
from anilib.services.batch import BatchResult, run_batch
from anilib.services.path_catalog import PathCatalog
from anilib.services.path_locks import PathLockRegistry
from anilib.services.progress import ProgressBus, ProgressEvent, ProgressKind
from anilib.services.similarity import SimilarityMatcher
from anilib.utils.helpers import folder_search_text


class AnimeIngestor:
    """
    Creation des animes depuis les repertoires surveilles.

    Une tache par repertoire, puis une tache par sous-dossier. Le verrou du
    dossier couvre la verification du catalogue et la creation.
    """

    def __init__(
        self,
        anime_repo: IAnimeRepository,
        catalog: PathCatalog,
        provider: IMetadataProvider,
        matcher: SimilarityMatcher,
        file_system: IFileSystem,
        path_locks: PathLockRegistry,
        progress: Optional[ProgressBus] = None,
        candidates: int = 5,
    ) -> None:
        self._anime_repo = anime_repo
        self._catalog = catalog
        self._provider = provider
        self._matcher = matcher
        self._file_system = file_system
        self._path_locks = path_locks
        self._progress = progress
        self._candidates = candidates

    async def ingest(self, directories: Iterable[Path]) -> list[Anime]:
        """Cree les animes des dossiers inconnus et retourne ceux crees."""
        batch = await self.scan(directories)
        return batch.results

    async def scan(self, directories: Iterable[Path]) -> BatchResult[Anime]:
        """
        Comme ingest(), en conservant les echecs par dossier.

        Returns:
            BatchResult avec les animes crees et les echecs, repertoire par
            repertoire dans l'ordre recu
        """
        per_directory = await run_batch(directories, self._scan_directory)

        merged: BatchResult[Anime] = BatchResult()
        for batch in per_directory.results:
            merged.extend(batch)
        merged.failures.extend(per_directory.failures)
        return merged

    async def _scan_directory(self, directory: Path) -> BatchResult[Anime]:
        folders = await asyncio.to_thread(self._file_system.list_subdirectories, directory)
        if not folders:
            logger.debug(f"Aucun dossier dans {directory}")
            return BatchResult()

        batch = await run_batch(folders, self._ingest_folder)
        batch.results = [anime for anime in batch.results if anime is not None]
        return batch

    async def _ingest_folder(self, folder: Path) -> Optional[Anime]:
        """
        Cree l'anime d'un dossier.

        Returns:
            L'anime cree, None si le dossier est deja catalogue
        """
        async with self._path_locks.hold(folder):
            if self._catalog.exists_anime_at_path(folder):
                logger.debug(f"Dossier deja catalogue: {folder}")
                return None

            try:
                anime = await self._resolve(folder)
                saved = self._anime_repo.save(anime)
            except DuplicatePathError:
                logger.debug(f"Dossier cree entre-temps: {folder}")
                return None
            except IngestionError as e:
                logger.warning(f"Anime non cree pour {folder.name}: {e.message}")
                self._publish(ProgressKind.ANIME_FAILED, e.message, folder)
                raise

        logger.info(f"Anime cree: {saved.title.display} ({folder.name})")
        self._publish(ProgressKind.ANIME_CREATED, saved.title.display, folder, saved.id)
        return saved

    async def _resolve(self, folder: Path) -> Anime:
        """
        Recherche le dossier sur le fournisseur et construit l'anime.

        Raises:
            ExternalLookupError: recherche en echec ou sans resultat
        """
        query = folder_search_text(folder.name)
        try:
            candidates = await self._provider.search(query, limit=self._candidates)
        except ExternalLookupError as e:
            if e.path is None:
                raise ExternalLookupError(e.message, folder) from e
            raise

        candidates = [c for c in candidates if any(c.title.variants)]
        match = self._matcher.best_match(query, candidates)
        if match is None:
            raise ExternalLookupError(
                f"aucun resultat {self._provider.source} pour '{query}'", folder
            )
        return self._build_anime(match, folder)

    @staticmethod
    def _build_anime(match: MediaMatch, folder: Path) -> Anime:
        return Anime(
            folder_path=folder,
            anilist_id=match.id,
            title=match.title,
            cover_url=match.cover_url,
            description=match.description,
            episodes=match.episodes,
            release_date=match.release_date,
            status=match.status,
            genres=match.genres,
            format=match.format,
        )

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
