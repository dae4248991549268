"""
Interfaces ports pour les repositories.

Interfaces abstraites (ports) définissant les contrats pour la persistance des données.
Les implémentations (adaptateurs) fourniront les mécanismes de stockage concrets
(SQLite via SQLModel, en mémoire pour les tests, etc.).

Chaque création attribue un identifiant unique et chaque appel est atomique.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from anilib.core.entities import Anime, Episode, Setting, Subtitle, WatchDirectory


class IAnimeRepository(ABC):
    """
    Interface de stockage des animes.

    Le chemin de dossier est unique : save() lève DuplicatePathError si un
    autre anime possède déjà ce dossier.
    """

    @abstractmethod
    def get_by_id(self, anime_id: str) -> Optional[Anime]:
        """Récupère un anime par son ID interne."""
        ...

    @abstractmethod
    def get_by_path(self, folder_path: Path) -> Optional[Anime]:
        """Récupère l'anime propriétaire d'un dossier."""
        ...

    @abstractmethod
    def list_all(self) -> list[Anime]:
        """Liste tous les animes du catalogue."""
        ...

    @abstractmethod
    def save(self, anime: Anime) -> Anime:
        """Crée un anime et retourne l'entité avec son ID."""
        ...

    @abstractmethod
    def delete(self, anime_id: str) -> bool:
        """Supprime un anime par ID (sans cascade). Retourne True si supprimé."""
        ...


class IEpisodeRepository(ABC):
    """
    Interface de stockage des épisodes.

    Le chemin courant est unique ; le chemin original n'est jamais modifié
    une fois renseigné.
    """

    @abstractmethod
    def get_by_id(self, episode_id: str) -> Optional[Episode]:
        """Récupère un épisode par son ID interne."""
        ...

    @abstractmethod
    def get_by_path(self, path: Path) -> Optional[Episode]:
        """
        Récupère l'épisode dont le chemin courant OU le chemin original
        correspond à path.
        """
        ...

    @abstractmethod
    def list_all(self) -> list[Episode]:
        """Liste tous les épisodes."""
        ...

    @abstractmethod
    def list_by_anime(self, anime_id: str) -> list[Episode]:
        """Liste les épisodes d'un anime dans l'ordre de stockage."""
        ...

    @abstractmethod
    def list_converted(self) -> list[Episode]:
        """Liste les épisodes ayant un chemin original (issus d'une conversion)."""
        ...

    @abstractmethod
    def save(self, episode: Episode) -> Episode:
        """Crée un épisode et retourne l'entité avec son ID."""
        ...

    @abstractmethod
    def delete(self, episode_id: str) -> bool:
        """Supprime un épisode par ID (sans cascade). Retourne True si supprimé."""
        ...


class ISubtitleRepository(ABC):
    """Interface de stockage des sous-titres."""

    @abstractmethod
    def list_by_episode(self, episode_id: str) -> list[Subtitle]:
        """Liste les sous-titres d'un épisode."""
        ...

    @abstractmethod
    def save(self, subtitle: Subtitle) -> Subtitle:
        """Crée un sous-titre."""
        ...


class IWatchDirectoryRepository(ABC):
    """Interface de stockage des répertoires surveillés."""

    @abstractmethod
    def list_all(self) -> list[WatchDirectory]:
        """Liste les répertoires dans l'ordre d'ajout."""
        ...

    @abstractmethod
    def add(self, path: Path) -> WatchDirectory:
        """Ajoute un répertoire (les doublons sont tolérés)."""
        ...


class ISettingRepository(ABC):
    """Interface de stockage des réglages nommés."""

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Setting]:
        """Récupère un réglage par son nom."""
        ...

    @abstractmethod
    def list_all(self) -> list[Setting]:
        """Liste tous les réglages."""
        ...

    @abstractmethod
    def set_value(self, name: str, value: bool) -> Setting:
        """Modifie (ou crée) un réglage et retourne sa nouvelle valeur."""
        ...
