from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict

from ..exceptions import InvalidNameError, RegistryDecodeError
from .rarity import Rarity

# First character may not be whitespace; spaces are allowed afterwards.
_NAME_PATTERN = re.compile(r"[A-Za-z0-9',-][A-Za-z0-9', -]*")


@dataclass(frozen=True)
class Relic:
    """A named, rarity-tagged item.

    Attributes:
        name: Display name. Must be unique within a registry.
        rarity: Rarity tier, which determines the relic's point value.
    """

    name: str
    rarity: Rarity

    def __post_init__(self) -> None:
        if not isinstance(self.rarity, Rarity):
            raise TypeError(f"Relic.rarity must be a Rarity, got {type(self.rarity).__name__}")
        if not Relic.valid_name(self.name):
            raise InvalidNameError(self.name)

    @staticmethod
    def valid_name(name: str) -> bool:
        """Whether ``name`` may be used as a relic name.

        A name starts with a letter, digit, apostrophe, hyphen or comma and may
        then contain any of those characters and spaces.
        """
        return isinstance(name, str) and _NAME_PATTERN.fullmatch(name) is not None

    @property
    def points(self) -> int:
        return self.rarity.points

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "rarity": self.rarity.value}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Relic":
        rarity = Rarity.parse(str(data.get("rarity", "")))
        if rarity is None:
            raise RegistryDecodeError(f"Unknown rarity {data.get('rarity')!r} for relic {data.get('name')!r}")
        try:
            return Relic(name=data["name"], rarity=rarity)
        except (KeyError, InvalidNameError) as e:
            raise RegistryDecodeError(f"Invalid relic entry {data!r}: {e}") from e
