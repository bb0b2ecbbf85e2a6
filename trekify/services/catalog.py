from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path

from ..ingest.header_resolver import DuplicateHeaderPolicy
from ..models.config_models import CacheConfig
from ..models.ingestion_result import IngestionResult
from ..models.trek_record import TrekRecord
from .ingestion import ingest

"""Caller-owned in-memory trek catalog.

Holds the records of the last successful ingestion pass and decides when they
are stale. The snapshot is an immutable tuple, so concurrent readers need no
locking; only reloads are serialized (single flight).

Staleness policy:
- never loaded -> stale
- older than ``max_age_seconds`` (when set) -> stale
- source mtime differs from the one seen at load (when ``reload_on_change``) -> stale
"""

__all__ = [
    "TrekCatalog",
]

logger = logging.getLogger(__name__)

Loader = Callable[..., IngestionResult]


class TrekCatalog:
    """Lazily loaded, explicitly reloadable record snapshot for one source."""

    def __init__(
        self,
        source_path: Path | str,
        *,
        duplicate_policy: str | DuplicateHeaderPolicy = DuplicateHeaderPolicy.LAST,
        max_age_seconds: float | None = None,
        reload_on_change: bool = True,
        loader: Loader = ingest,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.source_path = Path(source_path)
        self.duplicate_policy = duplicate_policy
        self.max_age_seconds = max_age_seconds
        self.reload_on_change = reload_on_change
        self._loader = loader
        self._clock = clock
        self._lock = threading.Lock()
        self._result: IngestionResult | None = None
        self._loaded_at: float | None = None
        self._source_mtime: float | None = None
        self._generation = 0

    @classmethod
    def from_config(
        cls,
        source_path: Path | str,
        cache: CacheConfig,
        *,
        duplicate_policy: str | DuplicateHeaderPolicy = DuplicateHeaderPolicy.LAST,
        loader: Loader = ingest,
    ) -> TrekCatalog:
        return cls(
            source_path,
            duplicate_policy=duplicate_policy,
            max_age_seconds=cache.max_age_seconds,
            reload_on_change=cache.reload_on_change,
            loader=loader,
        )

    @property
    def last_result(self) -> IngestionResult | None:
        """Result of the last successful pass (kept when a reload fails)."""
        return self._result

    @property
    def generation(self) -> int:
        """Number of successful loads so far."""
        return self._generation

    def _current_mtime(self) -> float | None:
        try:
            return self.source_path.stat().st_mtime
        except OSError:
            return None

    def is_stale(self) -> bool:
        if self._result is None or self._loaded_at is None:
            return True
        if self.max_age_seconds is not None:
            if self._clock() - self._loaded_at >= self.max_age_seconds:
                return True
        if self.reload_on_change and self._current_mtime() != self._source_mtime:
            return True
        return False

    def _load_locked(self) -> IngestionResult:
        mtime = self._current_mtime()
        result = self._loader(self.source_path, duplicate_policy=self.duplicate_policy)
        self._result = result
        self._loaded_at = self._clock()
        self._source_mtime = mtime
        self._generation += 1
        logger.debug(
            f"catalog loaded generation={self._generation} records={result.record_count}"
        )
        return result

    def reload(self) -> tuple[TrekRecord, ...]:
        """Re-ingest the source unconditionally and return the new records.

        On failure the exception propagates and the previous snapshot stays.
        """
        with self._lock:
            return self._load_locked().records

    def records(self) -> tuple[TrekRecord, ...]:
        """Current records, (re)loading first when the snapshot is stale."""
        result = self._result
        if result is not None and not self.is_stale():
            return result.records
        seen_generation = self._generation
        with self._lock:
            # 待機中に他スレッドが読み込み済みならそれを使う
            if self._generation != seen_generation and self._result is not None:
                return self._result.records
            if self._result is not None and not self.is_stale():
                return self._result.records
            return self._load_locked().records
