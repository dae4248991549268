"""
Verrous asyncio indexes par chemin.

Serialise la sequence "verifier puis creer" pour un meme chemin : deux
mises a jour concurrentes ne peuvent pas creer deux entites pour le meme
dossier ou le meme fichier.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path


class PathLockRegistry:
    """
    Registre de verrous, un par chemin.

    Les verrous inutilises sont retires du registre a leur liberation.
    """

    def __init__(self) -> None:
        self._locks: dict[Path, asyncio.Lock] = {}
        self._waiters: dict[Path, int] = {}

    @asynccontextmanager
    async def hold(self, path: Path) -> AsyncIterator[None]:
        """Acquiert le verrou du chemin pour la duree du bloc."""
        lock = self._locks.setdefault(path, asyncio.Lock())
        self._waiters[path] = self._waiters.get(path, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[path] -= 1
            if self._waiters[path] == 0:
                del self._waiters[path]
                del self._locks[path]

    def __len__(self) -> int:
        return len(self._locks)
