from .bus import LifecycleBus
from .types import ListenerPhase, RelicEvent, RelicLifecycleListener

__all__ = ["LifecycleBus", "ListenerPhase", "RelicEvent", "RelicLifecycleListener"]
