"""Persistent settings.

Settings live in a YAML file. Values found in the environment (or a ``.env``
file) win over the file for the current run but are never written back:

    CARDVIEWER_VAULT      vault directory
    CARDVIEWER_BASE_URL   base URL prefixed to resolved asset paths
    CARDVIEWER_LOCALE     message locale ("en", "zh")
"""

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Optional

import jsonschema
import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = Path("cardviewer.yml")

ENV_OVERRIDES = {
    "CARDVIEWER_VAULT": "vault",
    "CARDVIEWER_BASE_URL": "base_url",
    "CARDVIEWER_LOCALE": "locale",
}

SETTINGS_SCHEMA = {
    "type": "object",
    "properties": {
        "enable_html_parsing": {"type": "boolean"},
        "locale": {"type": "string", "enum": ["en", "zh"]},
        "media_timeout_s": {"type": "number", "exclusiveMinimum": 0},
        "vault": {"type": ["string", "null"]},
        "base_url": {"type": ["string", "null"]},
    },
    "additionalProperties": False,
}


class SettingsError(Exception):
    """Settings file could not be written."""
    pass


@dataclass
class Settings:
    enable_html_parsing: bool = True
    locale: str = "en"
    media_timeout_s: float = 10.0
    vault: Optional[str] = None
    base_url: Optional[str] = None

    def __post_init__(self):
        # name -> value shadowed by an override
        self._shadowed: dict[str, Any] = {}

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def override(self, name: str, value: Any) -> None:
        """Set ``name`` for this run only; the saved file keeps its own value."""
        self._shadowed.setdefault(name, getattr(self, name))
        setattr(self, name, value)

    def persisted(self) -> dict[str, Any]:
        """Values to save: current settings with every override undone."""
        return {**self.to_dict(), **self._shadowed}


def _read_file(path: Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    jsonschema.validate(data, SETTINGS_SCHEMA)
    return data


def _apply_env(settings: Settings) -> Settings:
    for env_name, attr in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if not value:
            continue
        try:
            jsonschema.validate(value, SETTINGS_SCHEMA["properties"][attr])
        except jsonschema.ValidationError as e:
            logger.warning(f"Ignoring {env_name}: {e.message}")
            continue
        settings.override(attr, value)
    return settings


def load_settings(path: Optional[Path] = None, use_env: bool = True) -> Settings:
    """Load settings, falling back to defaults on any problem with the file.

    Args:
        path: YAML settings file (missing is fine)
        use_env: Apply ``CARDVIEWER_*`` environment overrides

    Returns:
        Settings with file values merged over the defaults
    """
    data: dict[str, Any] = {}
    if path is not None and Path(path).exists():
        try:
            data = _read_file(Path(path))
        except jsonschema.ValidationError as e:
            logger.warning(f"Invalid settings in {path}: {e.message} at {list(e.absolute_path)}")
            data = {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load settings from {path}: {e}")
            data = {}

    known = {f.name for f in fields(Settings)}
    settings = Settings(**{k: v for k, v in data.items() if k in known})

    if use_env:
        load_dotenv()
        _apply_env(settings)
    return settings


def save_settings(settings: Settings, path: Path) -> None:
    """Write ``settings`` to ``path`` as YAML, without run-only overrides.

    Raises:
        SettingsError: If the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(settings.persisted(), f, sort_keys=False, allow_unicode=True)
    except OSError as e:
        logger.error(f"Failed to save settings to {path}: {e}")
        raise SettingsError(f"Cannot write {path}: {e}") from e
