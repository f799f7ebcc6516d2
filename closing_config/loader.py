"""
Configuration Loader (``closing_config.loader``).

Responsibility
--------------
Loads a YAML settings file and parses it into the frozen
``closing_config.schema`` dataclasses.  Callers use
``closing_config.get_engine_settings()``; this module is the parsing
layer underneath it.

Invariants enforced
-------------------
* Every parse error raises ``ConfigurationError`` naming the offending
  key; no silent defaults for required fields.
* The timezone is checked against the IANA database at load time.
* The procedure name fits the configured backend: only Oracle accepts a
  three-part ``schema.package.procedure`` name.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing key, wrong type, unknown timezone, negative pool size,
  unparseable database URL, procedure name unusable on the backend
  -> ``ConfigurationError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from closing_kernel.exceptions import ConfigurationError

from closing_config.schema import DatabaseSettings, EngineSettings

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
_MAX_NAME_PARTS = {"oracle": 3}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping at top level")
    return data


def _require(data: dict[str, Any], key: str, kind: type, prefix: str = "") -> Any:
    full_key = f"{prefix}{key}"
    if key not in data or data[key] is None:
        raise ConfigurationError(f"Missing required setting '{full_key}'", key=full_key)
    value = data[key]
    # bool is a subclass of int; reject it where an int is expected
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ConfigurationError(
            f"Setting '{full_key}' must be {kind.__name__}, got {type(value).__name__}",
            key=full_key,
        )
    return value


def _optional(data: dict[str, Any], key: str, kind: type, default: Any, prefix: str = "") -> Any:
    if data.get(key) is None:
        return default
    return _require(data, key, kind, prefix)


def parse_database(data: dict[str, Any]) -> DatabaseSettings:
    """Parse the ``database`` section."""
    prefix = "database."
    settings = DatabaseSettings(
        url=_require(data, "url", str, prefix),
        schema=_optional(data, "schema", str, None, prefix) or None,
        pool_size=_optional(data, "pool_size", int, 5, prefix),
        max_overflow=_optional(data, "max_overflow", int, 10, prefix),
        echo=_optional(data, "echo", bool, False, prefix),
    )
    if settings.pool_size < 1:
        raise ConfigurationError(
            f"Setting 'database.pool_size' must be at least 1, got {settings.pool_size}",
            key="database.pool_size",
        )
    if settings.max_overflow < 0:
        raise ConfigurationError(
            f"Setting 'database.max_overflow' must be non-negative, got {settings.max_overflow}",
            key="database.max_overflow",
        )
    return settings


def parse_timezone(name: str) -> str:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown timezone '{name}'", key="timezone") from exc
    return name


def parse_procedure_name(name: str, url: str) -> str:
    """Reject a procedure name the configured backend cannot call.

    PostgreSQL reads ``a.b.c`` as database.schema.routine and refuses
    cross-database references; Oracle reads it as schema.package.member.
    """
    try:
        backend = make_url(url).get_backend_name()
    except ArgumentError as exc:
        raise ConfigurationError(
            "Setting 'database.url' is not a valid database URL", key="database.url",
        ) from exc
    max_parts = _MAX_NAME_PARTS.get(backend, 2)
    if len(name.split(".")) > max_parts:
        raise ConfigurationError(
            f"Procedure '{name}' has more than {max_parts} name parts, "
            f"which the {backend} backend cannot call",
            key="procedure_name",
        )
    return name


def parse_engine_settings(data: dict[str, Any]) -> EngineSettings:
    """
    Parse a full ``EngineSettings`` from a dict.

    Raises:
        ConfigurationError: on any missing or malformed setting.
    """
    reserved = _optional(data, "reserved_codes", list, [])
    if not all(isinstance(code, (str, int)) and not isinstance(code, bool) for code in reserved):
        raise ConfigurationError(
            "Setting 'reserved_codes' must be a list of process codes",
            key="reserved_codes",
        )

    log_level = str(_optional(data, "log_level", str, "INFO")).upper()
    if log_level not in _LOG_LEVELS:
        raise ConfigurationError(f"Unknown log level '{log_level}'", key="log_level")

    database = parse_database(_require(data, "database", dict))

    return EngineSettings(
        database=database,
        procedure_name=parse_procedure_name(
            _require(data, "procedure_name", str), database.url,
        ),
        reserved_codes=frozenset(str(code) for code in reserved),
        company_wide_sentinel=_require(data, "company_wide_sentinel", str),
        timezone=parse_timezone(_require(data, "timezone", str)),
        default_actor=_require(data, "default_actor", str),
        log_level=log_level,
    )
