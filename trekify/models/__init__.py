"""Domain models for the Trekify catalog ingestion tool.

Cells, canonical trek records, ingestion results, configuration and
structured error records.
"""

from .cell import Cell, CellKind
from .config_models import CacheConfig, DatabaseConfig, TrekifyConfig
from .error_record import ErrorRecord
from .ingestion_result import IngestionResult
from .trek_record import TrekRecord

__all__ = [
    # Source cells
    "Cell",
    "CellKind",
    # Records
    "TrekRecord",
    "IngestionResult",
    "ErrorRecord",
    # Configuration models
    "CacheConfig",
    "DatabaseConfig",
    "TrekifyConfig",
]
