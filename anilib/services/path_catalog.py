"""
Recherche d'entites existantes par chemin.

Le catalogue est l'autorite de deduplication : il est consulte avant
chaque creation d'anime ou d'episode.
"""

from pathlib import Path

from anilib.core.ports.repositories import IAnimeRepository, IEpisodeRepository


class PathCatalog:
    """Verifie si un chemin est deja connu de la base (lecture seule)."""

    def __init__(
        self,
        anime_repo: IAnimeRepository,
        episode_repo: IEpisodeRepository,
    ) -> None:
        self._anime_repo = anime_repo
        self._episode_repo = episode_repo

    def exists_anime_at_path(self, path: Path) -> bool:
        """Vrai si un anime possede deja ce dossier."""
        return self._anime_repo.get_by_path(path) is not None

    def exists_episode_at_path(self, path: Path) -> bool:
        """
        Vrai si un episode utilise ce chemin, comme fichier servi ou comme
        fichier source d'une conversion.
        """
        return self._episode_repo.get_by_path(path) is not None
