"""
Implementation SQLModel du repository Episode.

Implemente l'interface IEpisodeRepository pour la persistance des episodes
dans la base de donnees SQLite via SQLModel.
"""

from pathlib import Path
from typing import Optional

from sqlmodel import Session, or_, select

from anilib.core.entities import Episode
from anilib.core.errors import NotFoundError
from anilib.core.ports.repositories import IEpisodeRepository
from anilib.infrastructure.persistence.database import commit, parse_id
from anilib.infrastructure.persistence.models import AnimeModel, EpisodeModel


class SQLModelEpisodeRepository(IEpisodeRepository):
    """
    Repository SQLModel pour les episodes.

    Implemente IEpisodeRepository avec conversion bidirectionnelle
    entre l'entite Episode (domaine) et EpisodeModel (persistance).
    Les episodes sont uniquement crees ou supprimes, jamais modifies :
    le chemin original reste donc immuable.
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: EpisodeModel) -> Episode:
        """Convertit un modele DB en entite domaine."""
        return Episode(
            id=str(model.id) if model.id else None,
            anime_id=str(model.anime_id),
            title=model.title,
            file_path=Path(model.file_path),
            original_file_path=(
                Path(model.original_file_path) if model.original_file_path else None
            ),
            cover_image_path=(
                Path(model.cover_image_path) if model.cover_image_path else None
            ),
        )

    def _to_model(self, entity: Episode, anime_pk: int) -> EpisodeModel:
        """Convertit une entite domaine en modele DB."""
        return EpisodeModel(
            anime_id=anime_pk,
            title=entity.title,
            file_path=str(entity.file_path),
            original_file_path=(
                str(entity.original_file_path) if entity.original_file_path else None
            ),
            cover_image_path=(
                str(entity.cover_image_path) if entity.cover_image_path else None
            ),
        )

    def get_by_id(self, episode_id: str) -> Optional[Episode]:
        """Recupere un episode par son ID interne."""
        pk = parse_id(episode_id)
        if pk is None:
            return None
        model = self._session.get(EpisodeModel, pk)
        if model:
            return self._to_entity(model)
        return None

    def get_by_path(self, path: Path) -> Optional[Episode]:
        """Recupere l'episode dont le chemin courant ou original vaut path."""
        value = str(path)
        statement = select(EpisodeModel).where(
            or_(
                EpisodeModel.file_path == value,
                EpisodeModel.original_file_path == value,
            )
        )
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model)
        return None

    def list_all(self) -> list[Episode]:
        """Liste tous les episodes par ordre de creation."""
        statement = select(EpisodeModel).order_by(EpisodeModel.id)
        return [self._to_entity(model) for model in self._session.exec(statement).all()]

    def list_by_anime(self, anime_id: str) -> list[Episode]:
        """Liste les episodes d'un anime par ordre de creation."""
        pk = parse_id(anime_id)
        if pk is None:
            return []
        statement = (
            select(EpisodeModel)
            .where(EpisodeModel.anime_id == pk)
            .order_by(EpisodeModel.id)
        )
        return [self._to_entity(model) for model in self._session.exec(statement).all()]

    def list_converted(self) -> list[Episode]:
        """Liste les episodes issus d'une conversion."""
        statement = (
            select(EpisodeModel)
            .where(EpisodeModel.original_file_path.is_not(None))
            .order_by(EpisodeModel.id)
        )
        return [self._to_entity(model) for model in self._session.exec(statement).all()]

    def save(self, episode: Episode) -> Episode:
        """
        Insere un episode.

        SQLite n'applique pas les cles etrangeres par defaut : l'existence de
        l'anime proprietaire est verifiee ici.

        Raises:
            NotFoundError: l'anime proprietaire n'existe pas
            DuplicatePathError: un episode utilise deja ce chemin
            StoreWriteError: echec d'ecriture
        """
        anime_pk = parse_id(episode.anime_id)
        if anime_pk is None or self._session.get(AnimeModel, anime_pk) is None:
            raise NotFoundError("Anime", episode.anime_id)

        model = self._to_model(episode, anime_pk)
        self._session.add(model)
        commit(self._session, episode.original_file_path or episode.file_path)
        self._session.refresh(model)
        return self._to_entity(model)

    def delete(self, episode_id: str) -> bool:
        """Supprime un episode sans toucher a ses sous-titres."""
        pk = parse_id(episode_id)
        model = self._session.get(EpisodeModel, pk) if pk is not None else None
        if model is None:
            return False
        self._session.delete(model)
        commit(self._session)
        return True
