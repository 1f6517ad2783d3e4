"""
Configuration module with strict validation.

The floor plan (plane size, corridors, entry points, table coordinates) is
centralized in config.yaml - modify there, not in code. Server settings come
from environment variables and fail fast when missing.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Any

import yaml


class ConfigurationError(Exception):
    """Raised when required configuration is missing or malformed."""
    pass


# Load YAML config once at module level
_CONFIG_PATH = Path(__file__).parent / "config.yaml"
_YAML_CONFIG: dict = {}


def get_config_path() -> Path:
    """Path of the active YAML file (FLOORROUTE_FLOORPLAN overrides the bundled one)."""
    override = get_optional_env("FLOORROUTE_FLOORPLAN")
    return Path(override) if override else _CONFIG_PATH


def _load_yaml_config() -> dict:
    """Load configuration from the YAML file."""
    global _YAML_CONFIG
    if not _YAML_CONFIG:
        path = get_config_path()
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")
        with open(path, "r") as f:
            _YAML_CONFIG = yaml.safe_load(f) or {}
    return _YAML_CONFIG


def reset_yaml_config() -> None:
    """Forget the cached YAML (used by tests that switch files)."""
    global _YAML_CONFIG
    _YAML_CONFIG = {}


def get_yaml_setting(*keys: str, default: Any = None) -> Any:
    """
    Get a setting from the YAML config by key path.

    Example: get_yaml_setting("routing", "default_strategy") -> "corridor"
    """
    config = _load_yaml_config()
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value


def get_required_env(key: str) -> str:
    """Get a required environment variable. Raises if not set."""
    value = os.environ.get(key)
    if value is None or value.strip() == "":
        raise ConfigurationError(
            f"Missing required environment variable: {key}\n"
            f"Please set {key} in your .env file or environment."
        )
    return value.strip()


def get_optional_env(key: str) -> Optional[str]:
    """Get an optional environment variable. Returns None if not set."""
    value = os.environ.get(key)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def _require_int(section: str, entry: dict, key: str) -> int:
    if not isinstance(entry, dict) or key not in entry:
        raise ConfigurationError(f"{section}: missing '{key}'")
    value = entry[key]
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{section}: '{key}' must be an integer, got {value!r}")
    return value


def _parse_point(section: str, raw: Any):
    from .models.geometry import Point

    if isinstance(raw, dict):
        return Point(_require_int(section, raw, "x"), _require_int(section, raw, "y"))
    if isinstance(raw, (list, tuple)) and len(raw) == 2:
        return Point(
            _require_int(section, {"x": raw[0]}, "x"),
            _require_int(section, {"y": raw[1]}, "y"),
        )
    raise ConfigurationError(f"{section}: expected {{x, y}} or [x, y], got {raw!r}")


def parse_floor_plan(data: dict):
    """
    Build a FloorPlan from the 'floor_plan' section of the YAML config.

    Args:
        data: Parsed mapping with width, height, corridors, entries

    Returns:
        FloorPlan with an immutable CorridorModel

    Raises:
        ConfigurationError: On any missing or malformed value
    """
    from .models.geometry import CorridorModel, EntryRule, FloorPlan, Rect

    if not isinstance(data, dict):
        raise ConfigurationError("Missing 'floor_plan' section")

    width = _require_int("floor_plan", data, "width")
    height = _require_int("floor_plan", data, "height")

    corridors = []
    for i, raw in enumerate(data.get("corridors") or []):
        section = f"floor_plan.corridors[{i}]"
        if not isinstance(raw, dict):
            raise ConfigurationError(f"{section}: expected a mapping, got {raw!r}")
        corridors.append(
            Rect(
                x1=_require_int(section, raw, "x1"),
                y1=_require_int(section, raw, "y1"),
                x2=_require_int(section, raw, "x2"),
                y2=_require_int(section, raw, "y2"),
                name=str(raw.get("name", f"corridor_{i}")),
            )
        )
    model = CorridorModel(width=width, height=height, corridors=corridors)

    entries = data.get("entries")
    if not isinstance(entries, dict) or "default" not in entries:
        raise ConfigurationError("floor_plan.entries: missing 'default' entry point")
    default_raw = entries["default"]
    default_entry = _parse_point("floor_plan.entries.default", default_raw)
    default_name = str(default_raw.get("name", "default")) if isinstance(default_raw, dict) else "default"

    rules = []
    for i, raw in enumerate(entries.get("rules") or []):
        section = f"floor_plan.entries.rules[{i}]"
        if not isinstance(raw, dict):
            raise ConfigurationError(f"{section}: expected a mapping, got {raw!r}")
        rules.append(
            EntryRule(
                name=str(raw.get("name", f"entry_{i}")),
                point=_parse_point(section, raw),
                low=_require_int(section, raw, "low"),
                high=_require_int(section, raw, "high"),
            )
        )

    return FloorPlan(
        corridors=model,
        default_entry=default_entry,
        default_entry_name=default_name,
        entry_rules=rules,
        background=data.get("background"),
    )


def load_floor_plan():
    """Load and validate the floor plan from the YAML config."""
    return parse_floor_plan(get_yaml_setting("floor_plan"))


def load_tables() -> dict:
    """Load the table identifier -> Point mapping from the YAML config."""
    raw_tables = get_yaml_setting("tables", default={}) or {}
    if not isinstance(raw_tables, dict):
        raise ConfigurationError("'tables' must be a mapping of identifier -> [x, y]")
    return {
        str(key).strip(): _parse_point(f"tables.{key}", value)
        for key, value in raw_tables.items()
    }


def parse_max_expansions(value: Any) -> Optional[int]:
    """Validate routing.max_expansions: unset (None) or a non-negative integer."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(
            f"routing.max_expansions must be a non-negative integer, got {value!r}"
        )
    return value


def load_max_expansions() -> Optional[int]:
    """Load the optional search budget from the YAML config."""
    return parse_max_expansions(get_yaml_setting("routing", "max_expansions"))


@dataclass(frozen=True)
class Config:
    """Application configuration - immutable after creation."""

    # Server settings - REQUIRED
    backend_port: int
    backend_host: str

    # CORS settings - optional, defaults to any origin
    cors_origins: list[str]

    # Routing strategy used when a request does not name one
    default_strategy: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""

        # Required settings
        try:
            backend_port = int(get_required_env("BACKEND_PORT"))
        except ValueError as e:
            raise ConfigurationError(f"BACKEND_PORT must be an integer: {e}") from e
        backend_host = get_required_env("BACKEND_HOST")

        # Optional settings
        cors_origins_str = get_optional_env("CORS_ORIGINS") or "*"
        cors_origins = [origin.strip() for origin in cors_origins_str.split(",")]

        default_strategy = get_yaml_setting("routing", "default_strategy", default="corridor")

        return cls(
            backend_port=backend_port,
            backend_host=backend_host,
            cors_origins=cors_origins,
            default_strategy=default_strategy,
        )


def load_config() -> Config:
    """Load and validate configuration."""
    from dotenv import load_dotenv

    # Load .env file if present
    load_dotenv()

    return Config.from_env()
