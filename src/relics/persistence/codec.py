"""Conversion between a RelicRegistry and its JSON document form.

Current documents look like::

    {"version": 1, "relics": [{"name": "...", "rarity": "Epic", "owner": null}]}

Documents written by older releases stored the registry as a flat
``relicsToOwner`` list alternating relic objects and owner strings, with the
literal string ``"none"`` standing in for "no owner". Those are still
accepted when reading; writing always produces the current shape.
"""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, List, Optional
from uuid import UUID

from jsonschema import Draft202012Validator

from ..exceptions import AlreadyRegisteredError, RegistryDecodeError
from ..model.registry import ClaimPolicy, Owner, RelicRegistry, sorted_by_rarity
from ..model.relic import Relic

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1
LEGACY_NO_OWNER = "none"


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    text = (
        resources.files("relics.persistence")
        .joinpath("schemas")
        .joinpath("registry.schema.json")
        .read_text(encoding="utf-8")
    )
    schema = json.loads(text)
    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


def validate_document(document: Any) -> None:
    """Check ``document`` against the registry schema.

    Raises:
        RegistryDecodeError: listing every schema violation found.
    """
    errors = sorted(_validator().iter_errors(document), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        messages = []
        for err in errors:
            where = "/".join(str(p) for p in err.absolute_path) or "<root>"
            messages.append(f"at {where}: {err.message}")
            logger.debug("Registry schema violation at %s: %s", where, err.message)
        raise RegistryDecodeError("Registry document does not match the schema", messages)


def encode(registry: RelicRegistry) -> Dict[str, Any]:
    owners = dict(registry.items())
    entries: List[Dict[str, Any]] = []
    for relic in sorted_by_rarity(owners):
        entry = relic.to_dict()
        owner = owners[relic]
        entry["owner"] = None if owner is None else str(owner)
        entries.append(entry)
    return {"version": FORMAT_VERSION, "relics": entries}


def dumps(registry: RelicRegistry) -> str:
    return json.dumps(encode(registry), ensure_ascii=False, indent=2)


def _parse_owner(raw: Optional[str]) -> Optional[Owner]:
    if raw is None or raw == LEGACY_NO_OWNER:
        return None
    try:
        return UUID(raw)
    except ValueError as e:
        raise RegistryDecodeError(f"Invalid owner id {raw!r}") from e


def _build(pairs: List[tuple], claim_policy: ClaimPolicy) -> RelicRegistry:
    registry = RelicRegistry(claim_policy=claim_policy)
    for relic, owner in pairs:
        try:
            registry.register(relic)
        except AlreadyRegisteredError as e:
            raise RegistryDecodeError(f"Duplicate relic name {relic.name!r} in registry document") from e
        if owner is not None:
            registry.claim(relic, owner)
    return registry


def decode(document: Any, claim_policy: ClaimPolicy = ClaimPolicy.TRANSFER) -> RelicRegistry:
    """Build a registry from a parsed JSON document.

    Raises:
        RegistryDecodeError: the document is malformed, names an unknown rarity,
            an invalid relic name, a bad owner id, or the same name twice.
    """
    validate_document(document)
    if "relics" in document:
        pairs = [(Relic.from_dict(e), _parse_owner(e["owner"])) for e in document["relics"]]
    else:
        flat = document.get("relicsToOwner", [])
        if len(flat) % 2:
            raise RegistryDecodeError("Legacy registry document has an unpaired relic entry")
        pairs = []
        for raw_relic, raw_owner in zip(flat[::2], flat[1::2]):
            if not isinstance(raw_relic, dict) or not isinstance(raw_owner, str):
                raise RegistryDecodeError(f"Malformed legacy entry: {raw_relic!r} -> {raw_owner!r}")
            pairs.append((Relic.from_dict(raw_relic), _parse_owner(raw_owner)))
        logger.info("Decoded legacy registry document with %d relics", len(pairs))
    return _build(pairs, claim_policy)


def loads(text: str, claim_policy: ClaimPolicy = ClaimPolicy.TRANSFER) -> RelicRegistry:
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise RegistryDecodeError(f"Registry document is not valid JSON: {e}") from e
    return decode(document, claim_policy)
