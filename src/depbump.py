"""depbump - check package.json dependencies for newer versions and update them.

    Returns:
        int: Exit code
"""
import logging
import os
import sys

from rich.console import Console

from constants import Constants, ExitCodes, _load_yaml_config
from common.logging_utils import add_file_handler, configure_logging, Timer
from args import parse_args
from cli_config import RunConfig
from prompts import (
    PLAIN_STYLES,
    SEVERITY_STYLES,
    ProgressReporter,
    confirm,
    describe,
    dim,
    multi_select,
)
from updater.fetch import run_fetch_batch
from updater.manifest import (
    ManifestReadError,
    PersistenceError,
    collect_dependency_names,
    fetch_names,
    load_manifest,
    save_manifest,
)
from updater.mutator import apply_candidates
from updater.planner import plan_updates, sort_for_display

logger = logging.getLogger(__name__)


def locate_manifest(path=None, input_fn=None):
    """Find the package.json to work on.

    Args:
        path (str, optional): File or directory given by the user.
        input_fn (callable, optional): Asked for a path when no manifest is in
            the working directory; ``None`` disables the prompt.

    Returns:
        str: Manifest path (may not exist; loading reports that).
    """
    if path:
        if os.path.isdir(path):
            return os.path.join(path, Constants.PACKAGE_JSON_FILE)
        return path

    if os.path.isfile(Constants.PACKAGE_JSON_FILE) or input_fn is None:
        return Constants.PACKAGE_JSON_FILE

    answer = input_fn(
        "No package.json found in the current path. Please specify the path to package.json: "
    ).strip()
    return locate_manifest(answer or Constants.PACKAGE_JSON_FILE)


def _choose(config, candidates, lines, input_fn, output, styles):
    """Apply the selected update mode; return the candidates to write or None."""
    if config.dry_run:
        for line in lines:
            output(line)
        output("Dry run: no packages were updated.")
        return None

    if config.interactive:
        if config.update:
            output(dim("You're using both interactive and update flags. Continuing with interactive mode.", styles))
        selected = multi_select(
            lines,
            "Select packages to update " + dim("(numbers or ranges like 1,3-5; enter for all, n for none)", styles),
            input_fn=input_fn,
            output=output,
        )
        if not selected:
            output("Nothing was selected so no packages were updated.")
            return None
        return [candidates[i] for i in selected]

    if config.update:
        return list(candidates)

    for line in lines:
        output(line)
    if confirm("Do you want to update all of these packages?", default=False, input_fn=input_fn,
               console=Console(no_color=not config.color, highlight=False)):
        return list(candidates)
    output("No packages were updated.")
    return None


def run(config, input_fn=input, output=print, progress_stream=None):
    """Execute one check/update cycle.

    Args:
        config (RunConfig): Resolved run settings.
        input_fn (callable): Prompt source for confirmations and selections.
        output (callable): Line sink for user-facing messages.
        progress_stream: Where the progress bar is drawn (default stderr).

    Returns:
        int: Exit code.
    """
    styles = SEVERITY_STYLES if config.color else PLAIN_STYLES
    prompt_fn = input_fn if sys.stdin.isatty() else None
    path = locate_manifest(config.path, prompt_fn)

    with Timer() as run_timer:
        try:
            manifest = load_manifest(path)
        except ManifestReadError as exc:
            logger.error("%s", exc)
            return ExitCodes.FILE_ERROR.value

        names = collect_dependency_names(manifest, config.include_dev, config.include_peer)
        to_fetch = fetch_names(names)
        if not to_fetch:
            output("No dependencies to check.")
            return ExitCodes.SUCCESS.value

        output(f"Checking {len(to_fetch)} packages for updates...")
        with Timer() as fetch_timer, ProgressReporter(
            len(to_fetch), stream=progress_stream, color=config.color
        ) as reporter:
            outcomes = run_fetch_batch(
                to_fetch,
                reporter.increment,
                registry_url=config.registry_url,
                timeout=config.timeout,
            )
        output(dim(f"Checked {len(outcomes)} packages in {fetch_timer.duration_ms()}ms.", styles))

        candidates = plan_updates(
            outcomes,
            manifest,
            names.dev,
            names.peer,
            update_any_wildcard=config.update_any,
            semver_limit=config.semver_limit,
            on_error=lambda outcome: output(f"Error fetching package version: {outcome.error}"),
        )
        if not candidates:
            output("Everything is up to date!")
            return ExitCodes.SUCCESS.value

        candidates = sort_for_display(candidates)
        lines = [describe(c, styles) for c in candidates]
        try:
            chosen = _choose(config, candidates, lines, input_fn, output, styles)
        except (EOFError, KeyboardInterrupt):
            output("Aborted; no packages were updated.")
            return ExitCodes.USER_ABORT.value
        if not chosen:
            return ExitCodes.SUCCESS.value

        apply_candidates(manifest, chosen, config.preserve_range)
        try:
            save_manifest(path, manifest)
        except PersistenceError as exc:
            logger.error("%s", exc)
            output("Update failed; package.json was not changed.")
            return ExitCodes.FILE_ERROR.value

    output(f"Updated {len(chosen)} package(s) in {run_timer.duration_ms()}ms.")
    return ExitCodes.SUCCESS.value


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    # Honor CLI --loglevel by passing it to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = args.LOG_LEVEL
    configure_logging()
    if getattr(args, "LOG_FILE", None):
        add_file_handler(args.LOG_FILE)

    config = RunConfig.from_args(args, _load_yaml_config(getattr(args, "CONFIG", None)))
    logger.debug("Run configuration: %s", config)
    sys.exit(run(config))


if __name__ == "__main__":
    main()
