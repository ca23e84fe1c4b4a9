"""Terminal presentation: colors, prompts and the fetch progress bar."""

from __future__ import annotations

import re
import sys
from typing import Callable, Dict, List, Optional, Sequence, TextIO

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.prompt import Confirm

from versioning.models import ColorizedVersion, DependencyClass, Severity, UpdateCandidate
from versioning.version_string import VersionParseError, format_colorized

RESET = "\x1b[0m"
GRAY = "\x1b[90m"

SEVERITY_STYLES: Dict[Severity, str] = {
    Severity.MAJOR: "\x1b[31m",
    Severity.MINOR: "\x1b[33m",
    Severity.PATCH: "\x1b[32m",
    Severity.NONE: "",
}

PLAIN_STYLES: Dict[Severity, str] = {severity: "" for severity in Severity}

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


def dim(text: str, styles: Dict[Severity, str] = SEVERITY_STYLES) -> str:
    """Gray out secondary text unless styling is disabled."""
    if styles is PLAIN_STYLES:
        return text
    return f"{GRAY}{text}{RESET}"


def render_version(colorized: ColorizedVersion, styles: Dict[Severity, str] = SEVERITY_STYLES) -> str:
    """Render a latest version with its severity label and style."""
    if colorized.severity is Severity.NONE:
        return colorized.text
    label = f"{colorized.text} ({colorized.severity.value})"
    style = styles.get(colorized.severity, "")
    return f"{style}{label}{RESET}" if style else label


def describe(candidate: UpdateCandidate, styles: Dict[Severity, str] = SEVERITY_STYLES) -> str:
    """One listing line: ``name: current -> latest (severity)``."""
    try:
        latest = render_version(format_colorized(candidate.current, candidate.latest), styles)
    except VersionParseError:
        latest = candidate.latest
    line = f"{candidate.name}: {candidate.current} -> {latest}"
    if candidate.dependency_class is not DependencyClass.PRODUCTION:
        line += " " + dim(f"[{candidate.dependency_class.label}]", styles)
    return line


class _LineReader:
    """``readline`` over an ``input``-style callable, for rich prompts."""

    def __init__(self, input_fn: InputFn):
        self._input_fn = input_fn

    def readline(self) -> str:
        # rich only treats "" as "use the default", so drop the newline
        return self._input_fn("").rstrip("\n")


def confirm(
    message: str,
    default: bool = False,
    input_fn: Optional[InputFn] = None,
    console: Optional[Console] = None,
) -> bool:
    """Ask a yes/no question until the answer is ``y`` or ``n``.

    An empty answer returns ``default``. EOFError and KeyboardInterrupt from
    the input source propagate to the caller.
    """
    stream = _LineReader(input_fn) if input_fn is not None else None
    return Confirm.ask(message, default=default, console=console, stream=stream)


def parse_selection(answer: str, count: int) -> List[int]:
    """Turn ``"1,3 5-7"`` style input into sorted zero-based indexes.

    Empty input, ``a`` and ``all`` select everything; ``n`` and ``none``
    select nothing.

    Raises:
        ValueError: for tokens that are not numbers or fall outside 1..count.
    """
    answer = answer.strip().lower()
    if answer in ("", "a", "all"):
        return list(range(count))
    if answer in ("n", "none"):
        return []

    selected = set()
    for token in re.split(r"[,\s]+", answer):
        if not token:
            continue
        bounds = token.split("-", 1)
        try:
            low = int(bounds[0])
            high = int(bounds[-1])
        except ValueError:
            raise ValueError(f"'{token}' is not a number or range") from None
        if low > high or low < 1 or high > count:
            raise ValueError(f"'{token}' is outside 1-{count}")
        selected.update(range(low - 1, high))
    return sorted(selected)


def multi_select(
    items: Sequence[str],
    prompt: str,
    input_fn: InputFn = input,
    output: OutputFn = print,
) -> List[int]:
    """Show numbered items and return the chosen zero-based indexes."""
    for number, item in enumerate(items, start=1):
        output(f"  {number:>3}) {item}")
    while True:
        try:
            return parse_selection(input_fn(f"{prompt} "), len(items))
        except ValueError as exc:
            output(f"Invalid selection: {exc}")


class ProgressReporter:
    """Progress bar for the registry fan-out, drawn on stderr.

    Use as a context manager; ``increment`` may be called from any thread.
    """

    def __init__(
        self,
        total: int,
        message: str = "Fetching",
        stream: Optional[TextIO] = None,
        color: bool = True,
    ):
        self.console = Console(file=stream if stream is not None else sys.stderr, no_color=not color)
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=False,
        )
        self._task = self._progress.add_task(message, total=total)

    @property
    def count(self) -> int:
        return int(self._progress.tasks[0].completed)

    def increment(self) -> None:
        self._progress.advance(self._task)

    def __enter__(self) -> "ProgressReporter":
        self._progress.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._progress.stop()
