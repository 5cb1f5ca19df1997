from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load an optional YAML config file
- Validate it against the bundled JSON schema
- Apply defaults (min_header_score=5, timeout_seconds=60)
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"

DEFAULT_MIN_HEADER_SCORE = 5
DEFAULT_TIMEOUT_SECONDS = 60.0


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class SeriesConfig:
    source: str | None = None  # path or URL; CLI --source wins over this
    min_header_score: int = DEFAULT_MIN_HEADER_SCORE
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    role_patterns: dict[str, list[str]] = field(default_factory=dict)  # extra LOOSE rules per role


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails schema validation.
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _validate_patterns(patterns: dict[str, list[str]]) -> None:
    for role, regexes in patterns.items():
        for regex in regexes:
            try:
                re.compile(regex)
            except re.error as e:
                raise ConfigError(f"invalid pattern for role '{role}': {regex!r} ({e})") from e


def load_config(path: Path) -> SeriesConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    patterns = {role: list(regexes) for role, regexes in (data.get("role_patterns") or {}).items()}
    _validate_patterns(patterns)
    return SeriesConfig(
        source=data.get("source"),
        min_header_score=data.get("min_header_score", DEFAULT_MIN_HEADER_SCORE),
        timeout_seconds=float(data.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
        role_patterns=patterns,
    )
