"""Argument parsing functionality for depbump."""

import argparse
from constants import Constants


def _include_list(value):
    """Split ``dev,peer`` and reject anything else."""
    parts = [p.strip().lower() for p in value.split(",") if p.strip()]
    invalid = [p for p in parts if p not in Constants.INCLUDE_CHOICES]
    if invalid or not parts:
        raise argparse.ArgumentTypeError(
            f"invalid include type {', '.join(invalid) or value!r} "
            f"(choose from {', '.join(Constants.INCLUDE_CHOICES)})"
        )
    return parts


def _positive_float(value):
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not a number") from None
    if number <= 0:
        raise argparse.ArgumentTypeError("timeout must be greater than zero")
    return number


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="depbump",
        description="depbump - find and apply newer versions of package.json dependencies",
        add_help=True,
    )

    parser.add_argument("-p", "--path",
                        dest="PATH",
                        help="Path to package.json (or the directory holding it)",
                        action="store", type=str)

    mode_group = parser.add_argument_group("update mode")
    mode_group.add_argument("-u", "--update",
                            dest="UPDATE",
                            help="Update all outdated packages without asking",
                            action="store_true")
    mode_group.add_argument("-i", "--interactive",
                            dest="INTERACTIVE",
                            help="Choose which packages to update",
                            action="store_true")
    mode_group.add_argument("--dry-run",
                            dest="DRY_RUN",
                            help="Only list outdated packages; never write package.json",
                            action="store_true")

    parser.add_argument("-s", "--semver",
                        dest="SEMVER",
                        help="Update up to the specified semver type (major, minor, patch)",
                        action="store", type=str.lower,
                        choices=Constants.SEMVER_CHOICES)
    parser.add_argument("--include",
                        dest="INCLUDE",
                        help="Include dev and/or peer dependencies, e.g. --include dev,peer",
                        action="store", type=_include_list)
    parser.add_argument("--skip-ranges",
                        dest="SKIP_RANGES",
                        help="Drop version range prefixes (^, ~, >=) when writing new versions",
                        action="store_true", default=None)
    parser.add_argument("--update-any",
                        dest="UPDATE_ANY",
                        help="Treat '*' specifiers as updatable",
                        action="store_true", default=None)

    parser.add_argument("--registry",
                        dest="REGISTRY",
                        help=f"Registry base URL (default: {Constants.REGISTRY_URL_NPM})",
                        action="store", type=str)
    parser.add_argument("--timeout",
                        dest="TIMEOUT",
                        help=f"Per-request timeout in seconds (default: {Constants.REQUEST_TIMEOUT})",
                        action="store", type=_positive_float)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help=f"Path to a YAML configuration file (default: {Constants.CONFIG_FILE} if present)",
                        action="store", type=str)
    parser.add_argument("--no-color",
                        dest="NO_COLOR",
                        help="Disable colored output",
                        action="store_true")
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
