"""
Implementations SQLModel des repositories.

Ce module contient les implementations concretes des interfaces repository
definies dans anilib/core/ports/repositories.py, utilisant SQLModel pour
la persistance SQLite.

Chaque repository :
- Herite de l'interface ABC correspondante du domaine
- Recoit une session SQLModel via injection de dependances
- Convertit entre entites de domaine (dataclass) et modeles DB (SQLModel)
- Traduit les erreurs SQLAlchemy en DuplicatePathError / StoreWriteError
"""

from anilib.infrastructure.persistence.repositories.anime_repository import (
    SQLModelAnimeRepository,
)
from anilib.infrastructure.persistence.repositories.episode_repository import (
    SQLModelEpisodeRepository,
)
from anilib.infrastructure.persistence.repositories.library_repositories import (
    SQLModelSettingRepository,
    SQLModelSubtitleRepository,
    SQLModelWatchDirectoryRepository,
)

__all__ = [
    "SQLModelAnimeRepository",
    "SQLModelEpisodeRepository",
    "SQLModelSettingRepository",
    "SQLModelSubtitleRepository",
    "SQLModelWatchDirectoryRepository",
]
