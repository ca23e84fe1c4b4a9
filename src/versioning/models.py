"""Data models for version comparison and update planning."""

from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Optional


class DependencyClass(Enum):
    """Manifest section a dependency is declared in."""
    PRODUCTION = "dependencies"
    DEV = "devDependencies"
    PEER = "peerDependencies"

    @property
    def field(self) -> str:
        """Name of the manifest field holding this class of dependency."""
        return self.value

    @property
    def label(self) -> str:
        """Short label used in listings."""
        return {"dependencies": "prod", "devDependencies": "dev", "peerDependencies": "peer"}[self.value]


class Severity(Enum):
    """Kind of upgrade between two versions, ordered by display priority."""
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    NONE = "none"

    @property
    def rank(self) -> int:
        """1 for major through 4 for no change."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.MAJOR: 1,
    Severity.MINOR: 2,
    Severity.PATCH: 3,
    Severity.NONE: 4,
}


@dataclass(frozen=True)
class FetchOutcome:
    """Result of asking the registry for one package's latest version."""
    name: str
    version: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class UpdateCandidate:
    """A dependency the planner considers upgradable."""
    name: str
    latest: str
    dependency_class: DependencyClass
    current: str = ""
    severity: Severity = Severity.NONE


@dataclass(frozen=True)
class ColorizedVersion:
    """Latest version text tagged with its severity; styling is applied by the caller."""
    text: str
    severity: Severity


class DependencyNames(NamedTuple):
    """Declared package names per dependency class, in manifest order."""
    production: List[str]
    dev: List[str]
    peer: List[str]
