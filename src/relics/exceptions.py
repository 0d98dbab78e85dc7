from __future__ import annotations

from typing import List, Optional


class RelicsError(Exception):
    """Base exception for the relics core."""


class InvalidNameError(RelicsError, ValueError):
    """Raised when a relic name does not match the allowed format."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Invalid relic name: {name!r}")
        self.name = name


class AlreadyRegisteredError(RelicsError):
    """Raised when registering a relic whose name is already taken."""


class NotRegisteredError(RelicsError, LookupError):
    """Raised when operating on a relic that is not in the registry."""


class AlreadyClaimedError(RelicsError):
    """Raised by the unclaimed-only claim policy when a relic already has an owner."""


class MissingActorError(RelicsError):
    """Raised when a claim is attempted without an owner identity."""


class RegistryDecodeError(RelicsError, ValueError):
    """Raised when a persisted registry document is malformed."""

    def __init__(self, message: str, errors: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    def to_human(self) -> str:
        parts = [str(self)]
        for e in self.errors:
            parts.append(f" - {e}")
        return "\n".join(parts)


class RegistryStoreError(RelicsError):
    """Raised when the registry file cannot be read or written."""


class SettingsError(RelicsError):
    """Raised for invalid configuration values."""


class SessionClosedError(RelicsError):
    """Raised when publishing through a session that has already been closed."""
