from .rarity import Rarity, points_of
from .relic import Relic
from .registry import ClaimPolicy, Owner, RelicRegistry, sorted_by_rarity

__all__ = [
    "ClaimPolicy",
    "Owner",
    "Rarity",
    "Relic",
    "RelicRegistry",
    "points_of",
    "sorted_by_rarity",
]
