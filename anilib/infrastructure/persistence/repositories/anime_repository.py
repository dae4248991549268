"""
Implementation SQLModel du repository Anime.

Implemente l'interface IAnimeRepository pour la persistance des animes
dans la base de donnees SQLite via SQLModel.
"""

import json
from pathlib import Path
from typing import Optional

from sqlmodel import Session, select

from anilib.core.entities import Anime, AnimeTitle
from anilib.core.ports.repositories import IAnimeRepository
from anilib.infrastructure.persistence.database import commit, parse_id
from anilib.infrastructure.persistence.models import AnimeModel


class SQLModelAnimeRepository(IAnimeRepository):
    """
    Repository SQLModel pour les animes.

    Implemente IAnimeRepository avec conversion bidirectionnelle
    entre l'entite Anime (domaine) et AnimeModel (persistance).
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: AnimeModel) -> Anime:
        """
        Convertit un modele DB en entite domaine.

        Args :
            model : Le modele AnimeModel depuis la DB

        Retourne :
            L'entite Anime correspondante
        """
        genres_list = json.loads(model.genres_json) if model.genres_json else []
        return Anime(
            id=str(model.id) if model.id else None,
            anilist_id=model.anilist_id,
            title=AnimeTitle(
                romaji=model.title_romaji,
                english=model.title_english,
                native=model.title_native,
            ),
            cover_url=model.cover_url,
            description=model.description,
            episodes=model.episodes,
            release_date=model.release_date,
            status=model.status,
            genres=tuple(genres_list),
            format=model.format,
            folder_path=Path(model.folder_path),
        )

    def _to_model(self, entity: Anime) -> AnimeModel:
        """
        Convertit une entite domaine en modele DB.

        Args :
            entity : L'entite Anime du domaine

        Retourne :
            Le modele AnimeModel pour la persistance
        """
        return AnimeModel(
            anilist_id=entity.anilist_id,
            title_romaji=entity.title.romaji,
            title_english=entity.title.english,
            title_native=entity.title.native,
            cover_url=entity.cover_url,
            description=entity.description,
            episodes=entity.episodes,
            release_date=entity.release_date,
            status=entity.status,
            genres_json=json.dumps(list(entity.genres)) if entity.genres else None,
            format=entity.format,
            folder_path=str(entity.folder_path),
        )

    def get_by_id(self, anime_id: str) -> Optional[Anime]:
        """Recupere un anime par son ID interne."""
        pk = parse_id(anime_id)
        if pk is None:
            return None
        model = self._session.get(AnimeModel, pk)
        if model:
            return self._to_entity(model)
        return None

    def get_by_path(self, folder_path: Path) -> Optional[Anime]:
        """Recupere l'anime proprietaire d'un dossier."""
        statement = select(AnimeModel).where(AnimeModel.folder_path == str(folder_path))
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model)
        return None

    def list_all(self) -> list[Anime]:
        """Liste les animes par ordre de creation."""
        statement = select(AnimeModel).order_by(AnimeModel.id)
        return [self._to_entity(model) for model in self._session.exec(statement).all()]

    def save(self, anime: Anime) -> Anime:
        """
        Insere un anime.

        Raises:
            DuplicatePathError: un anime possede deja ce dossier
            StoreWriteError: echec d'ecriture
        """
        model = self._to_model(anime)
        self._session.add(model)
        commit(self._session, anime.folder_path)
        self._session.refresh(model)
        return self._to_entity(model)

    def delete(self, anime_id: str) -> bool:
        """Supprime un anime sans toucher a ses episodes."""
        pk = parse_id(anime_id)
        model = self._session.get(AnimeModel, pk) if pk is not None else None
        if model is None:
            return False
        self._session.delete(model)
        commit(self._session)
        return True
