from __future__ import annotations

import dataclasses
import json
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from jsonschema import Draft7Validator

from .errors import ConfigError

logger = logging.getLogger(__name__)

_DATA_PKG = "rsc.data"

# Environment variable -> settings key. All of them hold integers.
ENV_OVERRIDES = {
    "RSC_SEED": "seed",
    "RSC_MAX_INPUT_ATTEMPTS": "max_input_attempts",
    "RSC_MAX_STEPS": "max_steps",
}


@dataclass
class RuntimeSettings:
    """
    Runtime settings with defaults matching the classic console behavior.

    Keys, overridable from a YAML file passed with ``--settings``:
      - prompt: str written before each read (default "Input: ")
      - invalid_message: str written after a rejected line
      - max_input_attempts: int or null, null retries forever
      - seed: int or null, null seeds from the wall clock
      - max_steps: int or null, null lets programs run unbounded
      - color: bool, colorize diagnostics
    """

    prompt: str = "Input: "
    invalid_message: str = "Invalid entry, try again."
    max_input_attempts: Optional[int] = None
    seed: Optional[int] = None
    max_steps: Optional[int] = None
    color: bool = False

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse settings file {path}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Could not read settings file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {path} must contain a mapping, got {type(data).__name__}")
        return data

    @staticmethod
    def _load_defaults() -> dict:
        try:
            with resources.files(_DATA_PKG).joinpath("default_settings.yaml").open("r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Default settings not found; falling back to dataclass defaults.")
            return dataclasses.asdict(RuntimeSettings())

    @classmethod
    def load(
        cls,
        user_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "RuntimeSettings":
        """Load packaged defaults, overlay the user file, then environment overrides.

        A user_path that does not exist is logged and ignored.
        """
        data = cls._load_defaults()

        if user_path is not None:
            if user_path.exists():
                data.update(cls._load_yaml(user_path))
                logger.info("Loaded user settings from %s", user_path)
            else:
                logger.warning("User settings file not found: %s", user_path)

        data.update(env_overrides(os.environ if environ is None else environ))
        validate_settings(data)
        # the schema accepts integral floats such as 5.0 as integers
        for key in ("max_input_attempts", "seed", "max_steps"):
            if data.get(key) is not None:
                data[key] = int(data[key])
        settings = cls(**data)
        logger.debug("Settings merged: %s", settings)
        return settings

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(dataclasses.asdict(self), f, sort_keys=False)
        logger.info("Saved settings to %s", path)


def env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for var, key in ENV_OVERRIDES.items():
        raw = environ.get(var)
        if raw is None or raw.strip() == "":
            continue
        try:
            overrides[key] = int(raw)
        except ValueError as e:
            raise ConfigError(f"{var} must be an integer, got {raw!r}") from e
        logger.debug("Environment override %s=%s", var, raw)
    return overrides


@lru_cache(maxsize=1)
def settings_schema() -> Dict[str, Any]:
    with resources.files(_DATA_PKG).joinpath("settings.schema.json").open("rb") as fh:
        return json.load(fh)


def validate_settings(data: Mapping[str, Any]) -> None:
    """Raise ConfigError listing every schema violation in ``data``."""
    validator = Draft7Validator(settings_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if not errors:
        return
    parts = ["Invalid settings:"]
    for e in errors:
        path = "/".join(str(p) for p in e.path) or "<root>"
        parts.append(f" - at {path}: {e.message}")
    raise ConfigError("\n".join(parts))


__all__ = ["ENV_OVERRIDES", "RuntimeSettings", "env_overrides", "settings_schema", "validate_settings"]
