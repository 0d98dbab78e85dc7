from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional
from uuid import UUID

if TYPE_CHECKING:
    from ..model.relic import Relic


class RelicEvent(Enum):
    """Significant events in the lifecycle of a relic."""

    REGISTER = "register"
    CLAIM = "claim"
    DESTROY = "destroy"


class ListenerPhase(Enum):
    """Kind of side effect a listener imposes, in firing order.

    - MODEL: mutates the canonical relic registry. Always fired first.
    - INTEGRATION: host-side side effects (items, other plugins).
    - MESSAGING: user-facing notifications. Always fired last.
    """

    MODEL = "model"
    INTEGRATION = "integration"
    MESSAGING = "messaging"


# Listener signature: (relic, acting identity if any, auxiliary payload if any).
RelicLifecycleListener = Callable[["Relic", Optional[UUID], Optional[Any]], None]
