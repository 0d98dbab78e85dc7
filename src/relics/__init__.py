"""Relic ownership tracking and ordered lifecycle event delivery."""

from .config import RelicsSettings
from .events import LifecycleBus, ListenerPhase, RelicEvent, RelicLifecycleListener
from .exceptions import (
    AlreadyClaimedError,
    AlreadyRegisteredError,
    InvalidNameError,
    MissingActorError,
    NotRegisteredError,
    RegistryDecodeError,
    RegistryStoreError,
    RelicsError,
    SessionClosedError,
    SettingsError,
)
from .model import ClaimPolicy, Rarity, Relic, RelicRegistry, points_of, sorted_by_rarity
from .persistence import RegistryStore
from .session import RelicSession

__version__ = "0.1.0"

__all__ = [
    "AlreadyClaimedError",
    "AlreadyRegisteredError",
    "ClaimPolicy",
    "InvalidNameError",
    "LifecycleBus",
    "ListenerPhase",
    "MissingActorError",
    "NotRegisteredError",
    "Rarity",
    "RegistryDecodeError",
    "RegistryStore",
    "RegistryStoreError",
    "Relic",
    "RelicEvent",
    "RelicLifecycleListener",
    "RelicRegistry",
    "RelicSession",
    "RelicsError",
    "RelicsSettings",
    "SessionClosedError",
    "SettingsError",
    "points_of",
    "sorted_by_rarity",
]
