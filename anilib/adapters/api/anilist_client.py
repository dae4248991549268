"""
Client AniList pour la recherche de metadonnees d'animes.

Implemente l'interface IMetadataProvider via l'API GraphQL d'AniList.
Utilise le cache persistant et le mecanisme de retry pour gerer
le rate limiting (90 requetes/minute cote AniList).

Usage:
    cache = APICache()
    client = AniListClient(cache=cache)
    matches = await client.search("Cowboy Bebop", limit=5)
    await client.close()
"""

from typing import Any, Optional

import httpx
from loguru import logger

from anilib.adapters.api.cache import APICache
from anilib.adapters.api.retry import RateLimitError, request_with_retry
from anilib.core.entities import AnimeTitle
from anilib.core.errors import ExternalLookupError, ProviderUnavailableError
from anilib.core.ports.api_clients import IMetadataProvider, MediaMatch

SEARCH_QUERY = """
query ($search: String, $perPage: Int) {
  Page(page: 1, perPage: $perPage) {
    media(search: $search, type: ANIME) {
      id
      title {
        romaji
        english
        native
      }
      coverImage {
        extraLarge
      }
      description
      episodes
      startDate {
        year
        month
        day
      }
      status
      genres
      format
    }
  }
}
"""


class AniListClient(IMetadataProvider):
    """
    Client API AniList.

    Implemente IMetadataProvider avec:
    - Recherche d'animes par texte libre (variables GraphQL, jamais
      d'interpolation du texte dans la requete)
    - Cache persistant (24h)
    - Retry automatique sur rate limiting (429) et erreurs de transport

    Classification des erreurs:
    - Serveur injoignable, 5xx ou 429 persistant : ProviderUnavailableError
    - Erreur GraphQL, 4xx ou reponse malformee : ExternalLookupError
    """

    ANILIST_URL = "https://graphql.anilist.co"

    def __init__(
        self,
        cache: Optional[APICache] = None,
        base_url: str = ANILIST_URL,
        max_attempts: int = 5,
    ) -> None:
        self._cache = cache
        self._base_url = base_url
        self._max_attempts = max_attempts
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, le cree si necessaire (lazy init)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                },
                timeout=30.0,
            )
        return self._client

    @property
    def source(self) -> str:
        """Retourne l'identifiant de la source API."""
        return "anilist"

    async def search(self, query: str, limit: int = 1) -> list[MediaMatch]:
        """
        Recherche des animes par titre.

        Utilise le pattern cache-first: verifie le cache AVANT de faire
        un appel API.

        Args:
            query: Texte de recherche
            limit: Nombre maximum de candidats

        Returns:
            Liste de MediaMatch dans l'ordre de pertinence AniList
        """
        cache_key = APICache.search_key(self.source, query, limit)
        if self._cache is not None:
            cached = await self._cache.get(cache_key)
            if cached is not None:
                return cached

        payload = {
            "query": SEARCH_QUERY,
            "variables": {"search": query, "perPage": limit},
        }

        try:
            response = await request_with_retry(
                self._get_client(),
                "POST",
                self._base_url,
                max_attempts=self._max_attempts,
                json=payload,
            )
        except RateLimitError as e:
            raise ProviderUnavailableError(
                "AniList limite toujours les requetes", retry_after=e.retry_after
            ) from e
        except httpx.TransportError as e:
            raise ProviderUnavailableError(f"AniList injoignable: {e}") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status >= 500:
                raise ProviderUnavailableError(f"AniList en erreur ({status})") from e
            raise ExternalLookupError(
                f"recherche AniList refusee ({status}) pour '{query}'"
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise ExternalLookupError(f"reponse AniList illisible pour '{query}'") from e

        matches = self._parse_matches(data, query)
        logger.debug(f"AniList: {len(matches)} resultat(s) pour '{query}'")

        if self._cache is not None:
            await self._cache.set_search(cache_key, matches)

        return matches

    def _parse_matches(self, data: Any, query: str) -> list[MediaMatch]:
        """Convertit la reponse GraphQL en MediaMatch."""
        if not isinstance(data, dict):
            raise ExternalLookupError(f"reponse AniList malformee pour '{query}'")

        errors = data.get("errors")
        if errors:
            message = "; ".join(
                str(err.get("message", err)) if isinstance(err, dict) else str(err)
                for err in errors
            )
            raise ExternalLookupError(f"erreur AniList pour '{query}': {message}")

        try:
            items = data["data"]["Page"]["media"] or []
            matches = [self._parse_media(item) for item in items]
        except (KeyError, TypeError, ValueError) as e:
            raise ExternalLookupError(
                f"reponse AniList malformee pour '{query}': {e!r}"
            ) from e

        # Un anime sans aucune variante de titre est inexploitable
        titled = [match for match in matches if any(match.title.variants)]
        if len(titled) < len(matches):
            logger.debug(
                f"AniList: {len(matches) - len(titled)} resultat(s) sans titre ignore(s)"
            )
        return titled

    @staticmethod
    def _parse_media(item: dict) -> MediaMatch:
        """Convertit un objet Media AniList (champs partiels toleres)."""
        title = item.get("title") or {}
        cover = item.get("coverImage") or {}
        start = item.get("startDate") or {}

        return MediaMatch(
            id=int(item["id"]),
            title=AnimeTitle(
                romaji=title.get("romaji") or None,
                english=title.get("english") or None,
                native=title.get("native") or None,
            ),
            cover_url=cover.get("extraLarge"),
            description=item.get("description"),
            episodes=item.get("episodes"),
            start_year=start.get("year"),
            start_month=start.get("month"),
            start_day=start.get("day"),
            status=item.get("status"),
            genres=tuple(item.get("genres") or ()),
            format=item.get("format"),
        )

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
