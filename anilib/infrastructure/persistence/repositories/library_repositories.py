"""
Implementations SQLModel des repositories secondaires.

Sous-titres, repertoires surveilles et reglages : des tables simples
sans logique de deduplication.
"""

from pathlib import Path
from typing import Optional

from sqlmodel import Session, select

from anilib.core.entities import Setting, Subtitle, WatchDirectory
from anilib.core.errors import NotFoundError
from anilib.core.ports.repositories import (
    ISettingRepository,
    ISubtitleRepository,
    IWatchDirectoryRepository,
)
from anilib.infrastructure.persistence.database import commit, parse_id
from anilib.infrastructure.persistence.models import (
    EpisodeModel,
    SettingModel,
    SubtitleModel,
    WatchDirectoryModel,
)


class SQLModelSubtitleRepository(ISubtitleRepository):
    """Repository SQLModel pour les sous-titres."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, model: SubtitleModel) -> Subtitle:
        return Subtitle(
            id=str(model.id) if model.id else None,
            episode_id=str(model.episode_id),
            file_path=Path(model.file_path),
            label=model.label,
        )

    def list_by_episode(self, episode_id: str) -> list[Subtitle]:
        """Liste les sous-titres d'un episode."""
        pk = parse_id(episode_id)
        if pk is None:
            return []
        statement = (
            select(SubtitleModel)
            .where(SubtitleModel.episode_id == pk)
            .order_by(SubtitleModel.id)
        )
        return [self._to_entity(model) for model in self._session.exec(statement).all()]

    def save(self, subtitle: Subtitle) -> Subtitle:
        """
        Insere un sous-titre.

        Raises:
            NotFoundError: l'episode proprietaire n'existe pas
        """
        episode_pk = parse_id(subtitle.episode_id)
        if episode_pk is None or self._session.get(EpisodeModel, episode_pk) is None:
            raise NotFoundError("Episode", subtitle.episode_id)

        model = SubtitleModel(
            episode_id=episode_pk,
            file_path=str(subtitle.file_path),
            label=subtitle.label,
        )
        self._session.add(model)
        commit(self._session, subtitle.file_path)
        self._session.refresh(model)
        return self._to_entity(model)


class SQLModelWatchDirectoryRepository(IWatchDirectoryRepository):
    """Repository SQLModel pour les repertoires surveilles."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_all(self) -> list[WatchDirectory]:
        """Liste les repertoires dans l'ordre d'ajout."""
        statement = select(WatchDirectoryModel).order_by(WatchDirectoryModel.id)
        return [
            WatchDirectory(id=str(model.id), path=Path(model.path))
            for model in self._session.exec(statement).all()
        ]

    def add(self, path: Path) -> WatchDirectory:
        """Ajoute un repertoire, meme s'il est deja enregistre."""
        model = WatchDirectoryModel(path=str(path))
        self._session.add(model)
        commit(self._session, path)
        self._session.refresh(model)
        return WatchDirectory(id=str(model.id), path=Path(model.path))


class SQLModelSettingRepository(ISettingRepository):
    """Repository SQLModel pour les reglages nommes."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _find(self, name: str) -> Optional[SettingModel]:
        statement = select(SettingModel).where(SettingModel.name == name)
        return self._session.exec(statement).first()

    def get_by_name(self, name: str) -> Optional[Setting]:
        """Recupere un reglage par son nom."""
        model = self._find(name)
        if model:
            return Setting(id=str(model.id), name=model.name, value=model.value)
        return None

    def list_all(self) -> list[Setting]:
        """Liste les reglages par nom."""
        statement = select(SettingModel).order_by(SettingModel.name)
        return [
            Setting(id=str(model.id), name=model.name, value=model.value)
            for model in self._session.exec(statement).all()
        ]

    def set_value(self, name: str, value: bool) -> Setting:
        """Modifie un reglage, le cree s'il n'existe pas."""
        model = self._find(name)
        if model is None:
            model = SettingModel(name=name, value=value)
        else:
            model.value = value
        self._session.add(model)
        commit(self._session)
        self._session.refresh(model)
        return Setting(id=str(model.id), name=model.name, value=model.value)
