"""
Interfaces ports pour le fournisseur de métadonnées.

Interface abstraite (port) définissant le contrat de recherche textuelle
d'animes. L'implémentation concrète interroge AniList (GraphQL).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional

from anilib.core.entities import AnimeTitle


@dataclass
class MediaMatch:
    """
    Résultat de recherche depuis le fournisseur de métadonnées.

    Attributs :
        id : ID spécifique au fournisseur (ID AniList)
        title : Variantes de titre, chacune pouvant être absente
        cover_url : URL de la couverture grande taille
        description : Synopsis
        episodes : Nombre total d'épisodes, None si inconnu
        start_year, start_month, start_day : Date de début, champs séparés
            et individuellement optionnels
        status : Statut de diffusion
        genres : Genres
        format : Format (TV, MOVIE, OVA, ...)
    """

    id: int
    title: AnimeTitle
    cover_url: Optional[str] = None
    description: Optional[str] = None
    episodes: Optional[int] = None
    start_year: Optional[int] = None
    start_month: Optional[int] = None
    start_day: Optional[int] = None
    status: Optional[str] = None
    genres: tuple[str, ...] = ()
    format: Optional[str] = None

    @property
    def release_date(self) -> Optional[date]:
        """
        Assemble la date de sortie depuis les champs séparés.

        Le mois et le jour manquants valent 1 ; sans année, ou pour une date
        invalide, retourne None.
        """
        if not self.start_year:
            return None
        try:
            return date(self.start_year, self.start_month or 1, self.start_day or 1)
        except ValueError:
            return None


class IMetadataProvider(ABC):
    """
    Interface du fournisseur de métadonnées d'animes.

    search() lève ExternalLookupError pour un échec propre à la requête et
    ProviderUnavailableError quand le fournisseur est injoignable.
    """

    @abstractmethod
    async def search(self, query: str, limit: int = 1) -> list[MediaMatch]:
        """
        Recherche des animes par texte libre.

        Args :
            query : Texte de recherche (nom de dossier nettoyé)
            limit : Nombre maximum de candidats, dans l'ordre de pertinence
                    du fournisseur

        Retourne :
            Liste des candidats (vide si aucun résultat)
        """
        ...

    @property
    @abstractmethod
    def source(self) -> str:
        """Retourne l'identifiant de la source (ex: 'anilist')."""
        ...
