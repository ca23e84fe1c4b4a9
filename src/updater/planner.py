"""Turn registry lookups into an ordered list of update candidates."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from constants import Constants, SemverLimit
from versioning.models import DependencyClass, FetchOutcome, Severity, UpdateCandidate
from versioning.version_string import (
    VersionParseError,
    classify_severity,
    normalize,
    normalize_or_zero,
    within_limit,
)

logger = logging.getLogger(__name__)


def build_class_index(
    dev_names: Iterable[str] = (),
    peer_names: Iterable[str] = (),
    production_names: Iterable[str] = (),
) -> Dict[str, DependencyClass]:
    """Map each name to the one class it is planned under.

    A name declared in several sections resolves dev first, then peer,
    then production.
    """
    index: Dict[str, DependencyClass] = {}
    for names, dependency_class in (
        (dev_names, DependencyClass.DEV),
        (peer_names, DependencyClass.PEER),
        (production_names, DependencyClass.PRODUCTION),
    ):
        for name in names:
            index.setdefault(name, dependency_class)
    return index


def current_specifier(manifest: Mapping[str, Any], name: str, dependency_class: DependencyClass) -> str:
    """Return the declared specifier, or the not-found sentinel."""
    section = manifest.get(dependency_class.field)
    if isinstance(section, Mapping):
        value = section.get(name)
        if isinstance(value, str):
            return value
    return Constants.VERSION_NOT_FOUND


def _report_fetch_error(outcome: FetchOutcome) -> None:
    logger.error("Error fetching package version: %s", outcome.error)


def _wildcard_severity(latest: str) -> Severity:
    try:
        return classify_severity(normalize_or_zero(Constants.WILDCARD), normalize(latest))
    except VersionParseError:
        return Severity.NONE


def plan_updates(
    outcomes: Iterable[FetchOutcome],
    manifest: Mapping[str, Any],
    dev_names: Iterable[str] = (),
    peer_names: Iterable[str] = (),
    update_any_wildcard: bool = False,
    semver_limit: Optional[SemverLimit] = None,
    on_error: Optional[Callable[[FetchOutcome], None]] = None,
) -> List[UpdateCandidate]:
    """Decide which fetched packages have a newer version.

    Args:
        outcomes: Registry results, one per package.
        manifest: Parsed manifest, read only.
        dev_names: Names gathered from ``devDependencies`` before fetching.
        peer_names: Names gathered from ``peerDependencies`` before fetching.
        update_any_wildcard: Treat ``"*"`` specifiers as always updatable.
        semver_limit: Drop candidates whose upgrade exceeds this cap.
        on_error: Sink for failed outcomes; defaults to logging them.

    Returns:
        Candidates in the order of ``outcomes``.
    """
    report = on_error or _report_fetch_error
    index = build_class_index(dev_names, peer_names)
    candidates: List[UpdateCandidate] = []

    for outcome in outcomes:
        if not outcome.ok:
            report(outcome)
            continue

        dependency_class = index.get(outcome.name, DependencyClass.PRODUCTION)
        current = current_specifier(manifest, outcome.name, dependency_class)

        try:
            current_version = normalize(current)
            latest_version = normalize(outcome.version)
        except VersionParseError as exc:
            if current == Constants.WILDCARD and update_any_wildcard:
                candidates.append(
                    UpdateCandidate(
                        name=outcome.name,
                        latest=outcome.version,
                        dependency_class=dependency_class,
                        current=current,
                        severity=_wildcard_severity(outcome.version),
                    )
                )
            else:
                logger.debug("Skipping %s: %s", outcome.name, exc)
            continue

        if latest_version <= current_version:
            continue

        severity = classify_severity(current_version, latest_version)
        if not within_limit(severity, semver_limit):
            logger.debug(
                "Skipping %s: %s update exceeds --semver %s",
                outcome.name,
                severity.value,
                semver_limit.value,
            )
            continue

        candidates.append(
            UpdateCandidate(
                name=outcome.name,
                latest=outcome.version,
                dependency_class=dependency_class,
                current=current,
                severity=severity,
            )
        )

    return candidates


def rank(candidate: UpdateCandidate) -> int:
    """Display priority: major=1, minor=2, patch=3, anything else=4."""
    return candidate.severity.rank


def sort_for_display(candidates: Iterable[UpdateCandidate]) -> List[UpdateCandidate]:
    """Stable sort putting the largest upgrades first."""
    return sorted(candidates, key=rank)
