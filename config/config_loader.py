"""Load settings.yaml into typed dataclasses."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"

SETTINGS_ENV_VAR = "COUNCIL_CHAT_SETTINGS"


@dataclass
class DefaultsConfig:
    output_dir: Path
    inbox_dir: Path


@dataclass
class DisplayConfig:
    date_format: str = "%Y-%m-%d %H:%M:%S"
    allow_follow_ups: bool = False
    follow_interval_sec: float = 1.0


@dataclass
class AppConfig:
    defaults: DefaultsConfig
    display: DisplayConfig


def resolve_settings_path(settings_path: Path | None = None) -> Path:
    """Explicit path > COUNCIL_CHAT_SETTINGS > bundled settings.yaml."""
    if settings_path is not None:
        return settings_path
    env_path = os.environ.get(SETTINGS_ENV_VAR, "").strip()
    if env_path:
        return Path(env_path)
    return _SETTINGS_PATH


def load_config(settings_path: Path | None = None) -> AppConfig:
    """Load configuration from settings.yaml.

    Raises FileNotFoundError if settings file missing. The ``display``
    section is optional; missing keys fall back to the dataclass defaults.
    """
    path = resolve_settings_path(settings_path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    defaults_raw = raw["defaults"]
    defaults = DefaultsConfig(
        output_dir=Path(defaults_raw["output_dir"]),
        inbox_dir=Path(defaults_raw["inbox_dir"]),
    )

    display_raw = raw.get("display") or {}
    fallback = DisplayConfig()
    display = DisplayConfig(
        date_format=str(display_raw.get("date_format", fallback.date_format)),
        allow_follow_ups=bool(display_raw.get("allow_follow_ups", fallback.allow_follow_ups)),
        follow_interval_sec=float(
            display_raw.get("follow_interval_sec", fallback.follow_interval_sec)
        ),
    )

    logger.debug("Loaded settings from %s", path)
    return AppConfig(defaults=defaults, display=display)
