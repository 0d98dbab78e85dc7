from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Optional
from uuid import UUID

from .config import RelicsSettings
from .events import LifecycleBus, ListenerPhase, RelicEvent
from .exceptions import SessionClosedError
from .model.registry import RelicRegistry
from .model.relic import Relic
from .persistence.store import RegistryStore

logger = logging.getLogger(__name__)


class RelicSession:
    """One host session: a registry, the bus that mutates it and its backing store.

    The registry is loaded from the store on construction and its MODEL
    listeners are subscribed to the bus. Collaborators receive the session
    (or its ``bus`` and ``registry``) explicitly and add their own
    INTEGRATION and MESSAGING listeners before publishing.

    ``publish`` holds a lock for the whole delivery so that later phases never
    observe a registry mutated by an interleaved publish from another thread.
    """

    def __init__(
        self,
        settings: Optional[RelicsSettings] = None,
        store: Optional[RegistryStore] = None,
        registry: Optional[RelicRegistry] = None,
        bus: Optional[LifecycleBus] = None,
    ) -> None:
        self.settings = settings or RelicsSettings()
        self.store = store or RegistryStore(self.settings.registry_path, self.settings.claim_policy)
        self.registry = registry if registry is not None else self.store.load()
        self.registry.claim_policy = self.settings.claim_policy
        self.bus = bus or LifecycleBus()
        self._lock = RLock()
        self._closed = False
        for event in RelicEvent:
            self.bus.subscribe(event, ListenerPhase.MODEL, self.registry.listener_for(event))
        logger.info(
            "Relic session started with %d relics (claim policy: %s, autosave: %s)",
            len(self.registry),
            self.settings.claim_policy.value,
            self.settings.autosave,
        )

    def publish(
        self,
        event: RelicEvent,
        relic: Relic,
        actor: Optional[UUID] = None,
        payload: Optional[Any] = None,
    ) -> None:
        """Publish a lifecycle event; with autosave on, flush once it was fully delivered.

        Raises:
            SessionClosedError: the session was closed, so the change would never be flushed.
        """
        with self._lock:
            if self._closed:
                raise SessionClosedError(f"Cannot publish {event.name} for {relic.name!r}: session is closed")
            self.bus.publish(event, relic, actor, payload)
            if self.settings.autosave:
                self.store.save(self.registry)

    def register(self, relic: Relic, actor: Optional[UUID] = None, payload: Optional[Any] = None) -> None:
        self.publish(RelicEvent.REGISTER, relic, actor, payload)

    def claim(self, relic: Relic, owner: UUID, payload: Optional[Any] = None) -> None:
        self.publish(RelicEvent.CLAIM, relic, owner, payload)

    def destroy(self, relic: Relic, actor: Optional[UUID] = None, payload: Optional[Any] = None) -> None:
        self.publish(RelicEvent.DESTROY, relic, actor, payload)

    def save(self) -> None:
        with self._lock:
            self.store.save(self.registry)

    def close(self) -> None:
        """Flush the registry at session end. Further calls are no-ops."""
        with self._lock:
            if self._closed:
                return
            self.store.save(self.registry)
            self._closed = True
        logger.info("Relic session closed")

    def __enter__(self) -> "RelicSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
