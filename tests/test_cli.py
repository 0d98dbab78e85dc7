from __future__ import annotations

from pathlib import Path
from uuid import uuid4

import pytest

from relics.cli import main
from relics.model import Rarity, Relic, RelicRegistry
from relics.persistence import RegistryStore


@pytest.fixture()
def registry_file(tmp_path: Path) -> Path:
    path = tmp_path / "relics.json"
    registry = RelicRegistry()
    crown = Relic("Crown of Ash", Rarity.Unique)
    pebble = Relic("Pebble", Rarity.Common)
    registry.register(crown)
    registry.register(pebble)
    registry.claim(crown, uuid4())
    RegistryStore(path).save(registry)
    return path


def test_show_lists_by_rarity(registry_file: Path, capsys):
    assert main(["--file", str(registry_file), "show"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "All Relics:"
    assert out[1].startswith(" - Unique Crown of Ash (owned by ")
    assert out[2] == " - Common Pebble (unclaimed)"


def test_show_owned_only(registry_file: Path, capsys):
    assert main(["--file", str(registry_file), "show", "--owned"]) == 0
    out = capsys.readouterr().out
    assert "Crown of Ash" in out
    assert "Pebble" not in out


def test_top(registry_file: Path, capsys):
    assert main(["--file", str(registry_file), "top", "--limit", "5"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "Top Relic Holders:"
    assert out[1].endswith(": 8 points")
    assert len(out) == 2


def test_validate_ok_and_invalid(tmp_path: Path, registry_file: Path, capsys):
    assert main(["--file", str(registry_file), "validate"]) == 0
    assert "OK:" in capsys.readouterr().out

    bad = tmp_path / "bad.json"
    bad.write_text('{"version": 1, "relics": [{"name": "", "rarity": "Epic", "owner": null}]}', encoding="utf-8")
    assert main(["--file", str(bad), "validate"]) == 1
    assert "INVALID:" in capsys.readouterr().out


def test_registry_path_from_config(tmp_path: Path, registry_file: Path, capsys):
    config = tmp_path / "settings.yaml"
    config.write_text(f"registry_path: {registry_file.as_posix()}\n", encoding="utf-8")
    assert main(["--config", str(config), "show"]) == 0
    assert "Crown of Ash" in capsys.readouterr().out


def test_malformed_registry_exits_non_zero(tmp_path: Path):
    bad = tmp_path / "bad.json"
    bad.write_text("nope", encoding="utf-8")
    assert main(["--file", str(bad), "show"]) == 1
