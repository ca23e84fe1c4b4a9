"""Run configuration resolved from CLI flags, the YAML config file and defaults.

Precedence is CLI flag, then config file, then ``Constants``. Bad values in
the config file are logged and ignored so a stale config never blocks a run.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from constants import Constants, SemverLimit

logger = logging.getLogger(__name__)


def _include_from_file(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        logger.warning("Ignoring config 'include': expected a list or comma-separated string")
        return []
    parts = [str(v).strip().lower() for v in value if str(v).strip()]
    unknown = [p for p in parts if p not in Constants.INCLUDE_CHOICES]
    if unknown:
        logger.warning("Ignoring unknown config 'include' entries: %s", ", ".join(unknown))
    return [p for p in parts if p in Constants.INCLUDE_CHOICES]


def _semver_from_file(value: Any) -> Optional[SemverLimit]:
    if value is None:
        return None
    try:
        return SemverLimit(str(value).lower())
    except ValueError:
        logger.warning("Ignoring config 'semver': %r is not one of %s", value, Constants.SEMVER_CHOICES)
        return None


def _timeout_from_file(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        timeout = 0
    if timeout <= 0:
        logger.warning("Ignoring config 'timeout': %r is not a positive number", value)
        return None
    return timeout


@dataclass
class RunConfig:
    """Everything one run needs to know."""

    path: Optional[str] = None
    update: bool = False
    interactive: bool = False
    dry_run: bool = False
    include_dev: bool = False
    include_peer: bool = False
    semver_limit: Optional[SemverLimit] = None
    preserve_range: bool = True
    update_any: bool = False
    registry_url: str = Constants.REGISTRY_URL_NPM
    timeout: float = Constants.REQUEST_TIMEOUT
    color: bool = True

    @classmethod
    def from_args(cls, args: Any, file_config: Optional[Mapping[str, Any]] = None) -> "RunConfig":
        """Create config from CLI arguments layered over the config file.

        Args:
            args: Parsed CLI arguments namespace.
            file_config: Mapping loaded from the YAML config, if any.

        Returns:
            RunConfig instance.
        """
        file_config = file_config or {}

        include = getattr(args, "INCLUDE", None)
        if include is None:
            include = _include_from_file(file_config.get("include"))

        semver = getattr(args, "SEMVER", None)
        semver_limit = SemverLimit(semver) if semver else _semver_from_file(file_config.get("semver"))

        skip_ranges = getattr(args, "SKIP_RANGES", None)
        if skip_ranges is None:
            skip_ranges = bool(file_config.get("skip_ranges", False))

        update_any = getattr(args, "UPDATE_ANY", None)
        if update_any is None:
            update_any = bool(file_config.get("update_any", False))

        timeout = getattr(args, "TIMEOUT", None) or _timeout_from_file(file_config.get("timeout"))

        return cls(
            path=getattr(args, "PATH", None),
            update=bool(getattr(args, "UPDATE", False)),
            interactive=bool(getattr(args, "INTERACTIVE", False)),
            dry_run=bool(getattr(args, "DRY_RUN", False)),
            include_dev="dev" in include,
            include_peer="peer" in include,
            semver_limit=semver_limit,
            preserve_range=not skip_ranges,
            update_any=update_any,
            registry_url=getattr(args, "REGISTRY", None) or file_config.get("registry") or Constants.REGISTRY_URL_NPM,
            timeout=timeout or Constants.REQUEST_TIMEOUT,
            color=not getattr(args, "NO_COLOR", False) and "NO_COLOR" not in os.environ,
        )
