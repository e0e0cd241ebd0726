from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)


SECTION = "eventhub"


def _as_bool(value: Any) -> bool:
    """Interpret common truthy/falsey values into a bool.

    Accepts: True/False, 1/0, "true"/"false", "yes"/"no", "on"/"off" (case-insensitive).
    Other non-empty strings evaluate to True.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        v = value.strip().lower()
        if v in {"1", "true", "yes", "y", "on"}:
            return True
        if v in {"0", "false", "no", "n", "off"}:
            return False
        return True
    return bool(value)


@dataclass
class HubSettings:
    """Runtime options shared by every EventHub that doesn't override them.

    Values come from, lowest to highest precedence:
    - dataclass defaults
    - a YAML file (``EVENTHUB_SETTINGS_FILE`` or an explicit path)
    - environment variables (``EVENTHUB_ENV``, ``EVENTHUB_PRODUCTION``)

    Use the module-level SETTINGS instance:

        from eventhub.settings import SETTINGS
        if SETTINGS.production_mode:
            ...
    """

    # Skip listener-type validation in on()/once()
    production_mode: bool = False

    def validate(self) -> None:
        self.production_mode = _as_bool(self.production_mode)

    def as_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HubSettings":
        allowed = {f.name for f in dataclasses.fields(cls)}
        unknown = set(data) - allowed
        if unknown:
            logger.warning("Ignoring unknown settings keys: %s", ", ".join(sorted(map(str, unknown))))
        obj = cls(**{k: v for k, v in data.items() if k in allowed})
        obj.validate()
        return obj

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        env = os.environ if env is None else env
        out: Dict[str, Any] = {}
        mode = env.get("EVENTHUB_ENV", "")
        if mode:
            out["production_mode"] = mode.strip().lower() == "production"
        # An explicit flag wins over the environment name
        flag = env.get("EVENTHUB_PRODUCTION", "")
        if flag:
            out["production_mode"] = _as_bool(flag)
        return out

    @classmethod
    def from_yaml_file(cls, path: Path) -> Dict[str, Any]:
        if not path.exists():
            logger.warning("Settings file not found: %s", path)
            return {}
        try:
            with path.open("r", encoding="utf-8") as f:
                doc = yaml.safe_load(f) or {}
        except (OSError, ValueError, yaml.YAMLError) as exc:
            logger.error("Failed to read settings YAML %s: %s", path, exc)
            return {}
        if not isinstance(doc, dict):
            logger.error("Settings YAML %s must contain a mapping, got %s", path, type(doc).__name__)
            return {}
        flat: Dict[str, Any] = {k: v for k, v in doc.items() if not isinstance(v, dict)}
        if isinstance(doc.get(SECTION), dict):
            flat.update(doc[SECTION])
        bad_keys = [k for k in flat if not isinstance(k, str)]
        if bad_keys:
            logger.warning(
                "Ignoring non-string settings keys in %s: %s", path, ", ".join(map(repr, bad_keys))
            )
            flat = {k: v for k, v in flat.items() if isinstance(k, str)}
        logger.info("Loaded settings from %s", path)
        return flat

    @classmethod
    def discover_config_path(cls, env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
        env = os.environ if env is None else env
        env_path = env.get("EVENTHUB_SETTINGS_FILE")
        if env_path:
            return Path(env_path).expanduser().resolve()
        return None

    @classmethod
    def from_sources(
        cls,
        *,
        env: Optional[Mapping[str, str]] = None,
        file_path: Optional[Path | str] = None,
    ) -> "HubSettings":
        data: Dict[str, Any] = {}
        if file_path is not None:
            chosen_path: Optional[Path] = Path(file_path).expanduser().resolve()
        else:
            chosen_path = cls.discover_config_path(env)
        if chosen_path is not None:
            data.update(cls.from_yaml_file(chosen_path))
        data.update(cls.from_env(env))
        settings = cls.from_dict(data)
        logger.debug("Hub settings resolved: %s", settings)
        return settings


# Module-level singleton read by EventHub when no per-hub override is given.
SETTINGS: HubSettings = HubSettings.from_sources()

__all__ = ["HubSettings", "SETTINGS"]
