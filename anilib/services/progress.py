"""
Diffusion des evenements de progression d'une mise a jour.

ProgressBus distribue chaque evenement publie a tous les abonnes actifs,
chacun disposant de sa propre file asyncio. La route SSE de l'API web
s'abonne pour relayer la progression au client.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class ProgressKind(str, Enum):
    """Type d'evenement de progression."""

    SCAN_STARTED = "scan_started"
    ANIME_CREATED = "anime_created"
    ANIME_FAILED = "anime_failed"
    EPISODE_CREATED = "episode_created"
    EPISODE_FAILED = "episode_failed"
    SWEEP_COMPLETED = "sweep_completed"
    SCAN_COMPLETED = "scan_completed"
    SCAN_FAILED = "scan_failed"

    @property
    def is_terminal(self) -> bool:
        """Vrai pour les evenements de fin de mise a jour."""
        return self in (ProgressKind.SCAN_COMPLETED, ProgressKind.SCAN_FAILED)


@dataclass(frozen=True)
class ProgressEvent:
    """
    Evenement de progression.

    Attributs:
        kind: Type d'evenement
        message: Texte lisible (titre cree, erreur...)
        path: Dossier ou fichier concerne
        entity_id: ID de l'anime ou de l'episode cree
        timestamp: Date de publication
    """

    kind: ProgressKind
    message: str = ""
    path: Optional[Path] = None
    entity_id: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Representation JSON de l'evenement."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "path": str(self.path) if self.path else None,
            "entity_id": self.entity_id,
            "timestamp": self.timestamp.isoformat(),
        }


class Subscription:
    """
    Abonnement au bus, iterable de maniere asynchrone.

    L'iteration se termine a la fermeture de l'abonnement ou du bus.
    Utilisable comme gestionnaire de contexte pour se desabonner.
    """

    def __init__(self, bus: "ProgressBus") -> None:
        self._bus = bus
        self._queue: asyncio.Queue[Optional[ProgressEvent]] = asyncio.Queue()

    def _push(self, event: Optional[ProgressEvent]) -> None:
        self._queue.put_nowait(event)

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> ProgressEvent:
        event = await self._queue.get()
        if event is None:
            raise StopAsyncIteration
        return event

    def close(self) -> None:
        """Se desabonne et termine l'iteration en cours."""
        self._bus._unsubscribe(self)
        self._push(None)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ProgressBus:
    """Bus de progression a abonnes multiples."""

    def __init__(self) -> None:
        self._subscribers: list[Subscription] = []

    def subscribe(self) -> Subscription:
        """
        Cree un abonnement.

        L'abonnement est actif des le retour de la methode : aucun
        evenement publie ensuite n'est perdu.
        """
        subscription = Subscription(self)
        self._subscribers.append(subscription)
        return subscription

    def publish(self, event: ProgressEvent) -> None:
        """Distribue un evenement a tous les abonnes."""
        for subscription in list(self._subscribers):
            subscription._push(event)

    def close(self) -> None:
        """Termine tous les abonnements."""
        for subscription in list(self._subscribers):
            subscription.close()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self._subscribers:
            self._subscribers.remove(subscription)
