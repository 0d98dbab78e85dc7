from __future__ import annotations

from enum import Enum
from typing import Optional


class Rarity(Enum):
    """Rarity tiers a relic can carry, lowest to highest.

    Points follow a Fibonacci-like curve so higher tiers are worth
    disproportionately more.
    """

    Common = "Common"
    Rare = "Rare"
    Epic = "Epic"
    Legendary = "Legendary"
    Unique = "Unique"

    @property
    def points(self) -> int:
        return _POINTS[self]

    @property
    def rank(self) -> int:
        """Ordinal position, 0 for Common up to 4 for Unique."""
        return _ORDER.index(self)

    @classmethod
    def parse(cls, name: str) -> Optional["Rarity"]:
        """Return the rarity whose name matches case-insensitively, or None."""
        return _BY_LOWER_NAME.get(name.lower())


_POINTS = {
    Rarity.Common: 1,
    Rarity.Rare: 2,
    Rarity.Epic: 3,
    Rarity.Legendary: 5,
    Rarity.Unique: 8,
}

_ORDER = list(Rarity)
_BY_LOWER_NAME = {r.value.lower(): r for r in Rarity}


def points_of(rarity: Rarity) -> int:
    return rarity.points
