"""Raw version specifier helpers.

Manifest specifiers mix a range prefix (``^``, ``~``, ``>=``) with a dotted
numeric version. These helpers split the two apart so versions can be
compared with ``semantic_version`` and the prefix re-applied afterwards.
"""

import re
from typing import Optional

import semantic_version

from constants import Constants, SemverLimit
from .models import ColorizedVersion, Severity

_NON_VERSION_CHARS = re.compile(r"[^0-9.]")
_LEADING_PREFIX = re.compile(r"^[^0-9.]*")
_ZERO = "0.0.0"


class VersionParseError(ValueError):
    """Raised when a specifier does not reduce to ``major.minor.patch``."""

    def __init__(self, spec: str, stripped: str):
        super().__init__(f"Cannot parse version {spec!r} (normalized to {stripped!r})")
        self.spec = spec
        self.stripped = stripped


def strip_version(spec: str) -> str:
    """Drop every character that is not an ASCII digit or a dot."""
    return _NON_VERSION_CHARS.sub("", spec)


def normalize(spec: str) -> semantic_version.Version:
    """Parse ``spec`` into a strict three-component version.

    Raises:
        VersionParseError: if the stripped text is not ``N.N.N``.
    """
    stripped = strip_version(spec)
    try:
        return semantic_version.Version(stripped)
    except ValueError as exc:
        raise VersionParseError(spec, stripped) from exc


def normalize_or_zero(spec: str) -> semantic_version.Version:
    """Like :func:`normalize` but specifiers without digits become ``0.0.0``."""
    if not strip_version(spec):
        return semantic_version.Version(_ZERO)
    return normalize(spec)


def extract_range_prefix(spec: str) -> str:
    """Return the leading non-version characters of ``spec``.

    The wildcard has no meaningful prefix, so ``"*"`` yields ``""``.
    """
    if spec == Constants.WILDCARD:
        return ""
    return _LEADING_PREFIX.match(spec).group(0)


def classify_severity(current: semantic_version.Version, latest: semantic_version.Version) -> Severity:
    """Label the upgrade from ``current`` to ``latest``.

    Only the first component in which ``latest`` is greater decides, so a
    2.9.9 -> 3.0.0 move is ``MAJOR``.
    """
    if latest.major > current.major:
        return Severity.MAJOR
    if latest.minor > current.minor:
        return Severity.MINOR
    if latest.patch > current.patch:
        return Severity.PATCH
    return Severity.NONE


def format_colorized(current: str, latest: str) -> ColorizedVersion:
    """Pair the normalized latest version with its severity label."""
    current_version = normalize_or_zero(current)
    latest_version = normalize(latest)
    return ColorizedVersion(
        text=str(latest_version),
        severity=classify_severity(current_version, latest_version),
    )


def within_limit(severity: Severity, limit: Optional[SemverLimit]) -> bool:
    """Return True if an upgrade of ``severity`` is allowed under ``limit``."""
    if limit is None or limit is SemverLimit.MAJOR:
        return True
    if limit is SemverLimit.MINOR:
        return severity is not Severity.MAJOR
    return severity in (Severity.PATCH, Severity.NONE)
