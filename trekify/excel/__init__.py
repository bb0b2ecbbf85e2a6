from .reader import SheetRows, SourceError, SourceMalformed, SourceUnavailable, read_first_sheet

__all__ = [
    "SheetRows",
    "SourceError",
    "SourceMalformed",
    "SourceUnavailable",
    "read_first_sheet",
]
