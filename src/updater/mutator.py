"""Write chosen update candidates back into a parsed manifest."""

from typing import Any, Dict, Iterable

from versioning.models import UpdateCandidate
from versioning.version_string import extract_range_prefix


def apply_candidate(manifest: Dict[str, Any], candidate: UpdateCandidate, preserve_range: bool = True) -> None:
    """Set the new specifier for one candidate, in place.

    Only the section named by ``candidate.dependency_class`` is touched. With
    ``preserve_range`` the prefix of the specifier currently in the manifest
    (``^``, ``~``, ``>=``...) is kept in front of the new version.
    """
    field = candidate.dependency_class.field
    section = manifest.get(field)
    if not isinstance(section, dict):
        section = {}
        manifest[field] = section

    new_spec = candidate.latest
    if preserve_range:
        current = section.get(candidate.name)
        if isinstance(current, str):
            new_spec = extract_range_prefix(current) + candidate.latest
    section[candidate.name] = new_spec


def apply_candidates(
    manifest: Dict[str, Any],
    candidates: Iterable[UpdateCandidate],
    preserve_range: bool = True,
) -> Dict[str, Any]:
    """Apply every candidate in order and return the same manifest object."""
    for candidate in candidates:
        apply_candidate(manifest, candidate, preserve_range)
    return manifest
