"""
Configuration de la base de donnees SQLite pour AniLib.

Ce module fournit :
- Creation de l'engine SQLite (fichier ou memoire)
- Session factory
- Initialisation des tables et des reglages par defaut
- Commit avec traduction des erreurs SQLAlchemy en erreurs du domaine

La base de donnees est configuree via ANILIB_DATABASE_URL (defaut: sqlite:///anilib.db).
"""

from collections.abc import Generator
from pathlib import Path
from typing import Optional

from loguru import logger
from sqlalchemy import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from anilib.core.errors import DuplicatePathError, StoreWriteError
from anilib.utils.constants import DEFAULT_SETTINGS


def create_db_engine(database_url: str) -> Engine:
    """
    Cree l'engine SQLAlchemy.

    Pour un fichier SQLite, le repertoire parent est cree si necessaire.
    Une base en memoire partage une connexion unique (StaticPool), sans
    quoi chaque session verrait une base vide.
    """
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    if database_url.startswith("sqlite:///"):
        db_path = Path(database_url.replace("sqlite:///", ""))
        db_path.parent.mkdir(exist_ok=True, parents=True)

    return create_engine(
        database_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )


def get_session(engine: Engine) -> Generator[Session, None, None]:
    """
    Generateur de session SQLModel.

    Utilisation :
        session = next(get_session(engine))

    Yields:
        Session SQLModel connectee a l'engine
    """
    with Session(engine) as session:
        yield session


def init_db(engine: Engine) -> Engine:
    """
    Initialise la base de donnees : tables puis reglages par defaut.

    Les reglages deja presents ne sont pas modifies.
    """
    # Import des modeles pour enregistrer leurs metadonnees
    from anilib.infrastructure.persistence import models

    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        for name, value in DEFAULT_SETTINGS.items():
            existing = session.exec(
                select(models.SettingModel).where(models.SettingModel.name == name)
            ).first()
            if existing is None:
                session.add(models.SettingModel(name=name, value=value))
                logger.debug(f"Reglage initialise: {name}={value}")
        session.commit()

    return engine


def commit(session: Session, path: Optional[Path] = None) -> None:
    """
    Valide la transaction courante.

    Raises:
        DuplicatePathError: contrainte d'unicite violee (chemin deja catalogue)
        StoreWriteError: toute autre erreur d'ecriture
    """
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise DuplicatePathError("chemin deja present dans le catalogue", path) from e
    except SQLAlchemyError as e:
        session.rollback()
        raise StoreWriteError(f"ecriture en base impossible: {e}") from e


def parse_id(entity_id: str) -> Optional[int]:
    """Convertit un ID d'entite en cle primaire, None s'il n'est pas numerique."""
    try:
        return int(entity_id)
    except (TypeError, ValueError):
        return None
