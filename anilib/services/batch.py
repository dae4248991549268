"""
Execution concurrente d'un lot de taches avec collecte des echecs.

run_batch lance une tache par entree, attend qu'elles se terminent toutes et
separe les resultats des echecs locaux (IngestionError). Toute autre
exception est consideree comme une panne d'infrastructure partagee : les
taches restantes sont annulees et l'exception est propagee.
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generic, Optional, TypeVar

from anilib.core.errors import IngestionError

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class ItemFailure:
    """Echec local a une entree du lot."""

    path: Optional[Path]
    error: IngestionError

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def kind(self) -> str:
        """Nom de la classe d'erreur (ex: "TranscodeError")."""
        return type(self.error).__name__


@dataclass
class BatchResult(Generic[R]):
    """
    Resultat d'un lot.

    Attributs:
        results: Resultats des taches reussies, dans l'ordre des entrees
        failures: Echecs locaux, dans l'ordre des entrees
    """

    results: list[R] = field(default_factory=list)
    failures: list[ItemFailure] = field(default_factory=list)

    def extend(self, other: "BatchResult[R]") -> None:
        """Ajoute les resultats et echecs d'un autre lot."""
        self.results.extend(other.results)
        self.failures.extend(other.failures)


async def run_batch(
    items: Iterable[T],
    worker: Callable[[T], Awaitable[R]],
) -> BatchResult[R]:
    """
    Execute worker sur chaque entree en parallele.

    Des qu'une tache leve une erreur hors IngestionError, les taches encore
    en cours sont annulees et l'erreur est propagee.

    Args:
        items: Entrees du lot
        worker: Coroutine appliquee a chaque entree

    Returns:
        BatchResult avec resultats et echecs dans l'ordre des entrees
    """

    async def guarded(item: T) -> tuple[bool, object]:
        try:
            return True, await worker(item)
        except IngestionError as e:
            return False, ItemFailure(path=e.path, error=e)

    tasks = [asyncio.ensure_future(guarded(item)) for item in items]
    if not tasks:
        return BatchResult()

    try:
        _, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        await _cancel_all(tasks)
        raise

    if pending:
        await _cancel_all(pending)

    batch: BatchResult[R] = BatchResult()
    fatal: Optional[BaseException] = None
    for task in tasks:
        if task.cancelled():
            continue
        error = task.exception()
        if error is not None:
            fatal = fatal or error
            continue
        succeeded, value = task.result()
        if succeeded:
            batch.results.append(value)
        else:
            batch.failures.append(value)

    if fatal is not None:
        raise fatal
    return batch


async def _cancel_all(tasks: Iterable[asyncio.Future]) -> None:
    tasks = list(tasks)
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
