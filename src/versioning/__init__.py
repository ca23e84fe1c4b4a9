"""Version string parsing, comparison and shared data models."""

from .models import (
    ColorizedVersion,
    DependencyClass,
    DependencyNames,
    FetchOutcome,
    Severity,
    UpdateCandidate,
)
from .version_string import (
    VersionParseError,
    classify_severity,
    extract_range_prefix,
    format_colorized,
    normalize,
    normalize_or_zero,
    within_limit,
)

__all__ = [
    "ColorizedVersion",
    "DependencyClass",
    "DependencyNames",
    "FetchOutcome",
    "Severity",
    "UpdateCandidate",
    "VersionParseError",
    "classify_severity",
    "extract_range_prefix",
    "format_colorized",
    "normalize",
    "normalize_or_zero",
    "within_limit",
]
