"""package.json loading, saving and dependency name collection."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Any, Dict, List, Mapping

from versioning.models import DependencyClass, DependencyNames

logger = logging.getLogger(__name__)


class ManifestReadError(Exception):
    """The manifest is missing or is not a JSON object."""


class PersistenceError(Exception):
    """The updated manifest could not be written back."""


def load_manifest(path: str) -> Dict[str, Any]:
    """Read and parse the manifest at ``path``.

    Raises:
        ManifestReadError: if the file is missing, unreadable or malformed.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError as exc:
        raise ManifestReadError(f"No manifest found at {path}") from exc
    except OSError as exc:
        raise ManifestReadError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ManifestReadError(f"Unable to parse {path} as JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ManifestReadError(f"{path} does not contain a JSON object")
    return data


def dump_manifest(manifest: Mapping[str, Any]) -> str:
    """Serialize with two-space indentation, keeping key order."""
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"


def save_manifest(path: str, manifest: Mapping[str, Any]) -> None:
    """Replace ``path`` with the serialized manifest.

    The text is written to a sibling temp file first, so a failed write
    leaves the original untouched.

    Raises:
        PersistenceError: on an OS-level failure, or when the content cannot
            be encoded as UTF-8 (e.g. a lone surrogate escape).
    """
    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        text = dump_manifest(manifest)
        fd, tmp_path = tempfile.mkstemp(prefix=".package.", suffix=".json", dir=directory)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        os.replace(tmp_path, path)
        tmp_path = None
    except (OSError, ValueError) as exc:
        raise PersistenceError(f"Unable to write {path}: {exc}") from exc
    finally:
        if tmp_path and os.path.exists(tmp_path):
            os.unlink(tmp_path)
    logger.debug("Wrote %s", path)


def _section_names(manifest: Mapping[str, Any], dependency_class: DependencyClass) -> List[str]:
    section = manifest.get(dependency_class.field)
    if isinstance(section, Mapping):
        return list(section.keys())
    if section is not None:
        logger.warning("Ignoring %s: expected an object", dependency_class.field)
    return []


def collect_dependency_names(
    manifest: Mapping[str, Any],
    include_dev: bool = False,
    include_peer: bool = False,
) -> DependencyNames:
    """Gather declared names; excluded sections come back empty."""
    return DependencyNames(
        production=_section_names(manifest, DependencyClass.PRODUCTION),
        dev=_section_names(manifest, DependencyClass.DEV) if include_dev else [],
        peer=_section_names(manifest, DependencyClass.PEER) if include_peer else [],
    )


def fetch_names(names: DependencyNames) -> List[str]:
    """Merge the selected sections into one list without repeats."""
    merged: List[str] = []
    seen = set()
    for section in names:
        for name in section:
            if name not in seen:
                seen.add(name)
                merged.append(name)
    return merged
