from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .exceptions import SettingsError
from .logging_config import resolve_log_level
from .model.registry import ClaimPolicy

logger = logging.getLogger(__name__)


@dataclass
class RelicsSettings:
    """Session settings.

    - registry_path: JSON file the registry is loaded from and flushed to.
    - claim_policy: "transfer" lets a claim overwrite the current owner;
      "unclaimed_only" rejects claims on relics that already have one.
    - autosave: also flush after every successful publish, not only at session end.
    - log_level: level name used by the CLI when configuring logging.
    """

    registry_path: Path = Path("relics.json")
    claim_policy: ClaimPolicy = ClaimPolicy.TRANSFER
    autosave: bool = False
    log_level: str = "INFO"

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise SettingsError(f"Settings file {path} is not valid YAML: {e}") from e
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {path} must contain a mapping")
        return data

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "RelicsSettings":
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown settings: %s", ", ".join(unknown))
        policy = ClaimPolicy.parse(data.get("claim_policy", ClaimPolicy.TRANSFER.value))
        if policy is None:
            raise SettingsError(
                f"Invalid claim_policy {data.get('claim_policy')!r}. Choose transfer or unclaimed_only."
            )
        autosave = data.get("autosave", False)
        if not isinstance(autosave, bool):
            raise SettingsError(f"Invalid autosave {autosave!r}. Use true or false.")
        log_level = str(data.get("log_level", "INFO")).strip().upper()
        resolve_log_level(log_level)
        return cls(
            registry_path=Path(data.get("registry_path", "relics.json")),
            claim_policy=policy,
            autosave=autosave,
            log_level=log_level,
        )

    @classmethod
    def load(cls, user_path: Optional[Path] = None) -> "RelicsSettings":
        """Load packaged defaults, overlaid with ``user_path`` when it exists."""
        try:
            text = resources.files("relics").joinpath("default_settings.yaml").read_text(encoding="utf-8")
            default_data = yaml.safe_load(text) or {}
        except FileNotFoundError:
            logger.warning("Default settings not found; falling back to dataclass defaults.")
            default_data = cls().to_dict()

        user_data: Dict[str, Any] = {}
        if user_path is not None:
            user_path = Path(user_path)
            if user_path.exists():
                user_data = cls._load_yaml(user_path)
                logger.info("Loaded user settings from %s", user_path)
            else:
                logger.warning("User settings file not found: %s", user_path)

        settings = cls._from_dict({**default_data, **user_data})
        logger.debug("Settings merged: %s", settings)
        return settings

    def to_dict(self) -> Dict[str, Any]:
        return {
            "registry_path": str(self.registry_path),
            "claim_policy": self.claim_policy.value,
            "autosave": self.autosave,
            "log_level": self.log_level,
        }

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)
        logger.info("Saved settings to %s", path)
