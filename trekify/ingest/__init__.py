"""Header resolution and row normalization for trek spreadsheets."""

from .header_resolver import DuplicateHeaderPolicy, HeaderIndex, normalize_header, resolve
from .record_normalizer import canonicalize_guide_needed, find_image_url, normalize, parse_snow_trek

__all__ = [
    "DuplicateHeaderPolicy",
    "HeaderIndex",
    "canonicalize_guide_needed",
    "find_image_url",
    "normalize",
    "normalize_header",
    "parse_snow_trek",
    "resolve",
]
