"""
Cache persistant des recherches AniList.

Le cache utilise diskcache pour la persistence sur disque : relancer une mise a
jour apres l'ajout d'un seul dossier ne renvoie pas toutes les recherches
deja faites vers AniList.

Les recherches sont conservees 24 heures (SEARCH_TTL).
"""

import asyncio
from functools import partial
from pathlib import Path
from typing import Any, Optional

from diskcache import Cache


class APICache:
    """
    Cache asynchrone avec TTL pour les appels API.

    Utilise diskcache pour la persistence et run_in_executor pour
    les operations asynchrones non-bloquantes.

    Example:
        cache = APICache(cache_dir=Path("~/.anilib/cache").expanduser())
        key = APICache.search_key("anilist", "Cowboy Bebop", 5)
        await cache.set_search(key, results)
        data = await cache.get(key)
    """

    SEARCH_TTL = 24 * 60 * 60  # 24 heures en secondes

    def __init__(self, cache_dir: Path | str = ".cache/api") -> None:
        self._cache = Cache(str(cache_dir))

    @staticmethod
    def search_key(source: str, query: str, limit: int) -> str:
        """Construit la cle d'une recherche (insensible a la casse)."""
        return f"{source}:search:{limit}:{query.strip().lower()}"

    async def get(self, key: str) -> Optional[Any]:
        """
        Recupere une valeur du cache.

        Returns:
            La valeur stockee ou None si absente ou expiree
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._cache.get, key)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Stocke une valeur dans le cache avec un TTL en secondes."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None, partial(self._cache.set, key, value, expire=ttl)
        )

    async def set_search(self, key: str, value: Any) -> None:
        """Stocke un resultat de recherche (TTL de 24h)."""
        await self.set(key, value, self.SEARCH_TTL)

    async def clear(self) -> None:
        """Supprime toutes les entrees du cache."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._cache.clear)

    def close(self) -> None:
        """Ferme la connexion au cache (a appeler a la fin)."""
        self._cache.close()
