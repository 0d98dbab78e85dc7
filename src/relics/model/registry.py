from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple
from uuid import UUID

from ..events.types import RelicEvent, RelicLifecycleListener
from ..exceptions import (
    AlreadyClaimedError,
    AlreadyRegisteredError,
    MissingActorError,
    NotRegisteredError,
)
from .relic import Relic

logger = logging.getLogger(__name__)

Owner = UUID


class ClaimPolicy(Enum):
    """How claiming a relic that already has an owner is handled."""

    TRANSFER = "transfer"  # last claim wins
    UNCLAIMED_ONLY = "unclaimed_only"

    @classmethod
    def parse(cls, value: str) -> Optional["ClaimPolicy"]:
        for policy in cls:
            if policy.value == str(value).lower():
                return policy
        return None


def _check_owner(owner: object) -> None:
    if not isinstance(owner, UUID):
        raise TypeError(f"Relic owner must be a UUID, got {type(owner).__name__}")


def sorted_by_rarity(relics: Iterable[Relic]) -> List[Relic]:
    """Order relics by descending rarity, then by name."""
    return sorted(relics, key=lambda r: (-r.rarity.rank, r.name))


class RelicRegistry:
    """The collection of known relics and their owners.

    Relic names are unique within a registry. A relic must be registered
    before it can be claimed or destroyed, and destroying it drops its
    ownership entry with it.

    Mutators are not meant to be called directly by collaborators; they are
    reached through the lifecycle bus via :meth:`listener_for` so that later
    listener phases observe every change.
    """

    def __init__(
        self,
        owners: Optional[Mapping[Relic, Optional[Owner]]] = None,
        claim_policy: ClaimPolicy = ClaimPolicy.TRANSFER,
    ) -> None:
        self.claim_policy = claim_policy
        self._owners: Dict[Relic, Optional[Owner]] = {}
        self._by_name: Dict[str, Relic] = {}
        for relic, owner in (owners or {}).items():
            self.register(relic)
            if owner is not None:
                _check_owner(owner)
                self._owners[relic] = owner

    # Mutators

    def register(self, relic: Relic) -> None:
        """Add an unowned relic.

        Raises:
            AlreadyRegisteredError: a relic with the same name exists, whatever its rarity.
        """
        if relic.name in self._by_name:
            raise AlreadyRegisteredError(f"A relic named {relic.name!r} has already been registered")
        self._owners[relic] = None
        self._by_name[relic.name] = relic
        logger.debug("Registered relic %r (%s)", relic.name, relic.rarity.value)

    def claim(self, relic: Relic, owner: Optional[Owner]) -> None:
        """Assign ``owner`` to a registered relic.

        Under ClaimPolicy.TRANSFER this overwrites any previous owner.

        Raises:
            NotRegisteredError: the relic is not registered.
            MissingActorError: no owner was given.
            TypeError: the owner is not a UUID.
            AlreadyClaimedError: the policy is UNCLAIMED_ONLY and the relic has an owner.
        """
        self._require(relic)
        if owner is None:
            raise MissingActorError(f"Cannot claim {relic.name!r} without an owner")
        _check_owner(owner)
        previous = self._owners[relic]
        if previous is not None and self.claim_policy is ClaimPolicy.UNCLAIMED_ONLY:
            raise AlreadyClaimedError(f"Relic {relic.name!r} is already owned by {previous}")
        self._owners[relic] = owner
        logger.debug("Relic %r claimed by %s (previous owner: %s)", relic.name, owner, previous)

    def destroy(self, relic: Relic) -> None:
        """Remove a registered relic together with its ownership entry.

        Raises:
            NotRegisteredError: the relic is not registered.
        """
        self._require(relic)
        del self._owners[relic]
        del self._by_name[relic.name]
        logger.debug("Destroyed relic %r", relic.name)

    # Accessors

    def owner_of(self, relic: Relic) -> Optional[Owner]:
        """Return the relic's owner, or None if it is unclaimed.

        Raises:
            NotRegisteredError: the relic is not registered.
        """
        self._require(relic)
        return self._owners[relic]

    def contains(self, relic: Relic) -> bool:
        return relic in self._owners

    def by_name(self, name: str) -> Optional[Relic]:
        return self._by_name.get(name)

    def all(self) -> FrozenSet[Relic]:
        return frozenset(self._owners)

    def owned(self) -> FrozenSet[Relic]:
        return frozenset(r for r, o in self._owners.items() if o is not None)

    def owned_by(self, owner: Owner) -> FrozenSet[Relic]:
        return frozenset(r for r, o in self._owners.items() if o == owner)

    def points_by_owner(self) -> Dict[Owner, int]:
        """Total rarity points held by each owner. Owners with no relics are absent."""
        sums: Dict[Owner, int] = {}
        for relic, owner in self._owners.items():
            if owner is None:
                continue
            sums[owner] = sums.get(owner, 0) + relic.rarity.points
        return sums

    def leaderboard(self, limit: Optional[int] = None) -> List[Tuple[Owner, int]]:
        """Owners ordered by descending point total; ties ordered by owner id."""
        ranked = sorted(self.points_by_owner().items(), key=lambda kv: (-kv[1], str(kv[0])))
        return ranked if limit is None else ranked[: max(0, limit)]

    def items(self) -> List[Tuple[Relic, Optional[Owner]]]:
        return list(self._owners.items())

    # Listeners

    def listener_for(self, event: RelicEvent) -> RelicLifecycleListener:
        """Adapt the mutator for ``event`` to the lifecycle bus signature.

        The payload argument is accepted and ignored.
        """
        if event is RelicEvent.REGISTER:
            def on_register(relic, actor=None, payload=None):
                self.register(relic)

            return on_register
        if event is RelicEvent.CLAIM:
            def on_claim(relic, actor=None, payload=None):
                self.claim(relic, actor)

            return on_claim
        if event is RelicEvent.DESTROY:
            def on_destroy(relic, actor=None, payload=None):
                self.destroy(relic)

            return on_destroy
        raise ValueError(f"Unknown relic event: {event!r}")

    # Helpers

    def _require(self, relic: Relic) -> None:
        if relic not in self._owners:
            raise NotRegisteredError(f"Relic {relic.name!r} ({relic.rarity.value}) has not been registered")

    def __contains__(self, relic: object) -> bool:
        return relic in self._owners

    def __iter__(self) -> Iterator[Relic]:
        return iter(list(self._owners))

    def __len__(self) -> int:
        return len(self._owners)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RelicRegistry):
            return NotImplemented
        return self._owners == other._owners

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"RelicRegistry(relics={len(self._owners)}, owned={len(self.owned())}, policy={self.claim_policy.value})"
