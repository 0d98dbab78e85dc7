import json
from pathlib import Path
from uuid import uuid4

import pytest

from relics.exceptions import RegistryDecodeError, RegistryStoreError
from relics.model import ClaimPolicy, Rarity, Relic, RelicRegistry
from relics.persistence import RegistryStore, decode, dumps, encode, loads


def _mixed_registry() -> RelicRegistry:
    registry = RelicRegistry()
    mace = Relic("Mace of Djibuttiron", Rarity.Unique)
    sword = Relic("Sword of Rust", Rarity.Epic)
    bottle = Relic("T's bottle", Rarity.Common)
    for relic in (mace, sword, bottle):
        registry.register(relic)
    registry.claim(mace, uuid4())
    registry.claim(bottle, uuid4())
    return registry


def test_round_trip_with_mixed_owners():
    registry = _mixed_registry()
    assert decode(encode(registry)) == registry
    assert loads(dumps(registry)) == registry


def test_round_trip_empty_registry():
    assert decode(encode(RelicRegistry())) == RelicRegistry()


def test_encoded_document_uses_null_for_unowned(sword):
    registry = RelicRegistry()
    registry.register(sword)
    doc = encode(registry)
    assert doc == {"version": 1, "relics": [{"name": "Sword of Rust", "rarity": "Epic", "owner": None}]}


def test_entries_sorted_by_rarity():
    doc = encode(_mixed_registry())
    assert [e["rarity"] for e in doc["relics"]] == ["Unique", "Epic", "Common"]


def test_decode_accepts_legacy_none_sentinel():
    owner = uuid4()
    doc = {
        "version": 1,
        "relics": [
            {"name": "Sword of Rust", "rarity": "Epic", "owner": "none"},
            {"name": "Mace", "rarity": "Unique", "owner": str(owner)},
        ],
    }
    registry = decode(doc)
    assert registry.owner_of(Relic("Sword of Rust", Rarity.Epic)) is None
    assert registry.owner_of(Relic("Mace", Rarity.Unique)) == owner


def test_decode_legacy_flat_document():
    owner = uuid4()
    doc = {
        "relicsToOwner": [
            {"name": "Mace of Djibuttiron", "rarity": "Unique"},
            str(owner),
            {"name": "Sword of Rust", "rarity": "Epic"},
            "none",
        ]
    }
    registry = decode(doc)
    assert len(registry) == 2
    assert registry.owner_of(registry.by_name("Mace of Djibuttiron")) == owner
    assert registry.owner_of(registry.by_name("Sword of Rust")) is None
    assert decode({}) == RelicRegistry()


def test_decode_applies_claim_policy():
    registry = decode(encode(_mixed_registry()), ClaimPolicy.UNCLAIMED_ONLY)
    assert registry.claim_policy is ClaimPolicy.UNCLAIMED_ONLY


@pytest.mark.parametrize(
    "doc",
    [
        [],
        {"version": 2, "relics": []},
        {"version": 1},
        {"version": 1, "relics": [{"name": "Sword", "rarity": "Mythic", "owner": None}]},
        {"version": 1, "relics": [{"name": "Sword", "rarity": "Epic"}]},
        {"version": 1, "relics": [{"name": " Sword", "rarity": "Epic", "owner": None}]},
        {"version": 1, "relics": [{"name": "Sword", "rarity": "Epic", "owner": "not-a-uuid"}]},
        {
            "version": 1,
            "relics": [
                {"name": "Sword", "rarity": "Epic", "owner": None},
                {"name": "Sword", "rarity": "Rare", "owner": None},
            ],
        },
        {"relicsToOwner": [{"name": "Sword", "rarity": "Epic"}]},
    ],
)
def test_decode_rejects_malformed_documents(doc):
    with pytest.raises(RegistryDecodeError):
        decode(doc)


def test_loads_rejects_invalid_json():
    with pytest.raises(RegistryDecodeError):
        loads("not json")


def test_schema_errors_are_listed():
    with pytest.raises(RegistryDecodeError) as info:
        decode({"version": 1, "relics": "nope"})
    assert info.value.errors
    assert "schema" in info.value.to_human()


def test_store_missing_file_yields_empty_registry(tmp_path: Path):
    store = RegistryStore(tmp_path / "relics.json")
    assert not store.exists()
    assert store.load() == RelicRegistry()


def test_store_round_trip(tmp_path: Path):
    path = tmp_path / "nested" / "relics.json"
    store = RegistryStore(path)
    registry = _mixed_registry()
    store.save(registry)
    assert path.exists()
    assert not path.with_name("relics.json.tmp").exists()
    assert store.load() == registry
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["version"] == 1
    assert len(data["relics"]) == 3


def test_store_malformed_file_is_not_treated_as_empty(tmp_path: Path):
    path = tmp_path / "relics.json"
    path.write_text("{ broken", encoding="utf-8")
    with pytest.raises(RegistryDecodeError):
        RegistryStore(path).load()


def test_store_unreadable_path_raises_store_error(tmp_path: Path):
    path = tmp_path / "relics.json"
    path.mkdir()
    with pytest.raises(RegistryStoreError):
        RegistryStore(path).load()


def test_failed_save_keeps_previous_file_and_state(tmp_path: Path):
    path = tmp_path / "relics.json"
    store = RegistryStore(path)
    registry = _mixed_registry()
    store.save(registry)
    before = path.read_text(encoding="utf-8")

    # A directory squatting on the temp file name makes the write fail.
    path.with_name("relics.json.tmp").mkdir()
    registry.register(Relic("New Relic", Rarity.Rare))
    with pytest.raises(RegistryStoreError):
        store.save(registry)

    assert path.read_text(encoding="utf-8") == before
    assert registry.by_name("New Relic") is not None
    assert len(registry) == 4
