from __future__ import annotations

import logging
from threading import RLock
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple
from uuid import UUID

from .types import ListenerPhase, RelicEvent, RelicLifecycleListener

if TYPE_CHECKING:
    from ..model.relic import Relic

logger = logging.getLogger(__name__)


def _listener_name(listener: RelicLifecycleListener) -> str:
    return getattr(listener, "__qualname__", None) or getattr(listener, "__name__", None) or repr(listener)


class LifecycleBus:
    """Synchronous, ordered publish/subscribe bus for relic lifecycle events.

    Every event kind has one listener list per phase. Publishing runs the
    MODEL listeners, then INTEGRATION, then MESSAGING; within a phase,
    listeners run in registration order.

    Delivery is fail-fast: the first listener that raises stops delivery and
    the exception propagates to the publisher unchanged. A failing MODEL
    listener therefore keeps the later phases from observing a change that
    never happened.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._listeners: Dict[Tuple[RelicEvent, ListenerPhase], List[RelicLifecycleListener]] = {
            (event, phase): [] for event in RelicEvent for phase in ListenerPhase
        }

    def subscribe(self, event: RelicEvent, phase: ListenerPhase, listener: RelicLifecycleListener) -> None:
        """Register ``listener`` for ``event`` in ``phase``.

        Subscribing the same listener object twice to the same event and phase
        is a no-op, so one registration never produces two effects.
        """
        if not callable(listener):
            raise TypeError("listener must be callable")
        with self._lock:
            bucket = self._listeners[(event, phase)]
            if listener in bucket:
                logger.debug("Listener %s already subscribed to %s/%s", _listener_name(listener), event.name, phase.name)
                return
            bucket.append(listener)
            logger.debug("Subscribed %s to %s/%s", _listener_name(listener), event.name, phase.name)

    def unsubscribe(self, event: RelicEvent, phase: ListenerPhase, listener: RelicLifecycleListener) -> None:
        """Remove a listener. Silently ignores listeners that are not subscribed."""
        with self._lock:
            bucket = self._listeners[(event, phase)]
            if listener in bucket:
                bucket.remove(listener)
                logger.debug("Unsubscribed %s from %s/%s", _listener_name(listener), event.name, phase.name)

    def listeners(self, event: RelicEvent, phase: ListenerPhase) -> Tuple[RelicLifecycleListener, ...]:
        with self._lock:
            return tuple(self._listeners[(event, phase)])

    def clear(self) -> None:
        """Remove every listener for every event and phase (useful in tests)."""
        with self._lock:
            for bucket in self._listeners.values():
                bucket.clear()

    def publish(
        self,
        event: RelicEvent,
        relic: "Relic",
        actor: Optional[UUID] = None,
        payload: Optional[Any] = None,
    ) -> None:
        """Deliver ``event`` for ``relic`` to every subscribed listener, phase by phase.

        Args:
            event: Lifecycle event kind.
            relic: Relic the event concerns.
            actor: Identity that caused the event, if any.
            payload: Auxiliary data for INTEGRATION and MESSAGING listeners.

        Raises:
            Whatever the first failing listener raises.
        """
        with self._lock:
            plan = [(phase, list(self._listeners[(event, phase)])) for phase in ListenerPhase]
        logger.debug("Publishing %s for relic %r (actor=%s)", event.name, relic.name, actor)
        for phase, listeners in plan:
            for listener in listeners:
                try:
                    listener(relic, actor, payload)
                except Exception:
                    logger.exception(
                        "Listener %s failed during %s/%s for relic %r; aborting delivery",
                        _listener_name(listener),
                        event.name,
                        phase.name,
                        relic.name,
                    )
                    raise
