from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the Trekify ingestion tool.

Populated by ``trekify.config.loader``; environment variables resolved by the
CLI take precedence over the database values held here.
"""

DEFAULT_TABLE = "treks"


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None
    table: str = DEFAULT_TABLE


@dataclass(frozen=True)
class CacheConfig:
    """Staleness policy for the in-memory catalog."""
    max_age_seconds: float | None = None  # None = 経過時間では失効しない
    reload_on_change: bool = True  # ソースの mtime 変化で再読込


@dataclass(frozen=True)
class TrekifyConfig:
    """Root configuration object."""
    source_path: str
    duplicate_headers: str = "last"  # last | first
    cache: CacheConfig = field(default_factory=CacheConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
