"""
Configuration schema (``closing_config.schema``).

Frozen dataclasses describing the engine's runtime settings.  Instances
are produced only by ``closing_config.loader``; nothing here reads files
or the environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from zoneinfo import ZoneInfo


@dataclass(frozen=True)
class DatabaseSettings:
    url: str
    schema: str | None = None
    pool_size: int = 5
    max_overflow: int = 10
    echo: bool = False


@dataclass(frozen=True)
class EngineSettings:
    """Everything the closing engine needs at runtime.

    ``reserved_codes`` are system processes hidden from catalog listings.
    ``company_wide_sentinel`` is the company value meaning "every company".
    ``timezone`` is the business timezone used to derive "today".
    """

    database: DatabaseSettings
    procedure_name: str
    reserved_codes: frozenset[str]
    company_wide_sentinel: str
    timezone: str
    default_actor: str
    log_level: str = "INFO"

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)
