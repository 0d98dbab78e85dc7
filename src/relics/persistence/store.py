from __future__ import annotations

import logging
import os
from pathlib import Path

from ..exceptions import RegistryStoreError
from ..model.registry import ClaimPolicy, RelicRegistry
from . import codec

logger = logging.getLogger(__name__)


def _atomic_write(path: Path, data: str) -> None:
    """Write ``data`` to ``path`` through a temp file and an atomic replace.

    The previous file stays intact if anything fails before the replace.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        with tmp_path.open("w", encoding="utf-8") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.is_file():
            tmp_path.unlink()


class RegistryStore:
    """JSON file persistence for a RelicRegistry.

    A missing file is not an error: it means "start with an empty registry".
    Malformed content is reported, never replaced by an empty registry.
    """

    def __init__(self, path: str | os.PathLike, claim_policy: ClaimPolicy = ClaimPolicy.TRANSFER) -> None:
        self.path = Path(path)
        self.claim_policy = claim_policy

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> RelicRegistry:
        """Read the registry from disk.

        Raises:
            RegistryDecodeError: the file exists but its content is malformed.
            RegistryStoreError: the file exists but cannot be read.
        """
        if not self.path.exists():
            logger.info("Found no relic registry at %s, starting with an empty one", self.path)
            return RelicRegistry(claim_policy=self.claim_policy)
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise RegistryStoreError(f"Could not read relic registry at {self.path}: {e}") from e
        logger.info("Loading relic registry from %s", self.path)
        registry = codec.loads(text, self.claim_policy)
        logger.info("Loaded %d relics (%d owned) from %s", len(registry), len(registry.owned()), self.path)
        return registry

    def save(self, registry: RelicRegistry) -> None:
        """Write the registry to disk atomically.

        Raises:
            RegistryStoreError: the file could not be written. Neither the
                registry nor the previously saved file is modified.
        """
        payload = codec.dumps(registry)
        try:
            _atomic_write(self.path, payload)
        except OSError as e:
            logger.error("Failed to write relic registry to %s: %s", self.path, e)
            raise RegistryStoreError(f"Could not write relic registry to {self.path}: {e}") from e
        logger.info("Relic registry written to %s (%d relics)", self.path, len(registry))
