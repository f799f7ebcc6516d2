"""
closing_config -- single public entrypoint for engine settings.

Responsibility:
    ``get_engine_settings()`` is the only way to obtain runtime settings.
    It reads ``defaults.yaml`` (or a caller-supplied file) and applies the
    ``CLOSING_DATABASE_URL`` / ``CLOSING_LOG_LEVEL`` environment overrides.

Architecture position:
    Configuration -- sits above ``closing_kernel`` and beside
    ``closing_batch``.  The kernel MUST NEVER import from
    ``closing_config``; values are passed into kernel constructors.

Failure modes:
    - ``FileNotFoundError`` -- settings file does not exist.
    - ``ConfigurationError`` -- missing or malformed setting.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from closing_config.loader import load_yaml_file, parse_engine_settings
from closing_config.schema import DatabaseSettings, EngineSettings

_logger = logging.getLogger("closing_kernel.config")

DEFAULT_SETTINGS_PATH = Path(__file__).parent / "defaults.yaml"

ENV_DATABASE_URL = "CLOSING_DATABASE_URL"
ENV_LOG_LEVEL = "CLOSING_LOG_LEVEL"


def get_engine_settings(path: Path | str | None = None) -> EngineSettings:
    """Load engine settings.

    Environment overrides win over the file.  A settings trace (without
    the database URL, which may carry credentials) is logged on each call.
    """
    settings_path = Path(path) if path is not None else DEFAULT_SETTINGS_PATH
    data = load_yaml_file(settings_path)

    env_url = os.environ.get(ENV_DATABASE_URL)
    if env_url:
        data["database"] = {**(data.get("database") or {}), "url": env_url}
    env_level = os.environ.get(ENV_LOG_LEVEL)
    if env_level:
        data["log_level"] = env_level

    settings = parse_engine_settings(data)

    _logger.info(
        "closing_settings_loaded",
        extra={
            "settings_path": str(settings_path),
            "schema": settings.database.schema,
            "procedure": settings.procedure_name,
            "timezone": settings.timezone,
            "reserved_code_count": len(settings.reserved_codes),
            "database_url_from_env": bool(env_url),
        },
    )
    return settings


__all__ = [
    "DEFAULT_SETTINGS_PATH",
    "DatabaseSettings",
    "EngineSettings",
    "get_engine_settings",
]
