"""
Module de persistance SQLite pour AniLib.

Ce module fournit l'infrastructure de stockage utilisant SQLModel (SQLAlchemy).
Il contient :

- database.py : Creation de l'engine, session, initialisation, commit
- models.py : Modeles SQLModel representant les tables de la base de donnees
- repositories/ : Implementations des ports de stockage

Les modeles ici sont des adapters de persistance, distincts des entites de domaine
(dataclass dans core/entities/). La conversion entre les deux se fait dans les
repositories.

Usage:
    from anilib.infrastructure.persistence import create_db_engine, init_db

    engine = init_db(create_db_engine("sqlite:///anilib.db"))
"""

from anilib.infrastructure.persistence.database import (
    commit,
    create_db_engine,
    get_session,
    init_db,
)
from anilib.infrastructure.persistence.models import (
    AnimeModel,
    EpisodeModel,
    SettingModel,
    SubtitleModel,
    WatchDirectoryModel,
)

__all__ = [
    "commit",
    "create_db_engine",
    "get_session",
    "init_db",
    "AnimeModel",
    "EpisodeModel",
    "SettingModel",
    "SubtitleModel",
    "WatchDirectoryModel",
]
