"""Update engine: fetch latest versions, plan upgrades, rewrite the manifest."""

from .fetch import ProgressCounter, fetch_all, run_fetch_batch
from .manifest import (
    ManifestReadError,
    PersistenceError,
    collect_dependency_names,
    fetch_names,
    load_manifest,
    save_manifest,
)
from .mutator import apply_candidate, apply_candidates
from .planner import build_class_index, plan_updates, rank, sort_for_display

__all__ = [
    "ManifestReadError",
    "PersistenceError",
    "ProgressCounter",
    "apply_candidate",
    "apply_candidates",
    "build_class_index",
    "collect_dependency_names",
    "fetch_all",
    "fetch_names",
    "load_manifest",
    "plan_updates",
    "rank",
    "run_fetch_batch",
    "save_manifest",
    "sort_for_display",
]
