"""Constants used in the project."""

import logging
import os
from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    USER_ABORT = 130


class SemverLimit(Enum):
    """Highest kind of upgrade the user is willing to accept.

    Args:
        Enum (string): Upgrade caps accepted by ``--semver``.
    """

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_NPM = "https://registry.npmjs.org/"
    PACKAGE_JSON_FILE = "package.json"
    CONFIG_FILE = ".depbump.yml"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for each registry request
    VERSION_NOT_FOUND = "Version not found"
    WILDCARD = "*"
    INCLUDE_CHOICES = ["dev", "peer"]
    SEMVER_CHOICES = [s.value for s in SemverLimit]
    ENV_LOG_LEVEL = "DEPBUMP_LOG_LEVEL"


def _load_yaml_config(path=None):
    """Load the optional YAML configuration file.

    Args:
        path (str, optional): Explicit config path. Falls back to
            ``Constants.CONFIG_FILE`` in the working directory.

    Returns:
        dict: Parsed mapping, empty when no file is present.
    """
    import yaml  # pylint: disable=import-outside-toplevel

    candidate = path or Constants.CONFIG_FILE
    if not os.path.isfile(candidate):
        if path:
            logging.warning("Config file not found: %s", path)
        return {}

    try:
        with open(candidate, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        logging.warning("Ignoring unreadable config file %s: %s", candidate, exc)
        return {}

    if not isinstance(data, dict):
        logging.warning("Ignoring config file %s: top level is not a mapping", candidate)
        return {}
    return data
