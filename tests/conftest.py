import sys
from pathlib import Path

import pytest

# Make 'src' importable without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from relics.model import Rarity, Relic  # noqa: E402


@pytest.fixture()
def mace() -> Relic:
    return Relic("Mace of Djibuttiron", Rarity.Unique)


@pytest.fixture()
def sword() -> Relic:
    return Relic("Sword of Rust", Rarity.Epic)
