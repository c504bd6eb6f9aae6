"""Interactive choice of which outdated packages to update."""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from common.errors import SelectionError
from versioning.models import GroupResult, OutdatedPackage

logger = logging.getLogger(__name__)

_RANGE_RE = re.compile(r"^(\d+)-(\d+)$")

PROMPT_TEXT = "Which packages would you like to update? (e.g. 1,3-5, 'all', empty for none)"


def parse_selection(text: str, count: int) -> List[int]:
    """Turn selection input into sorted, unique 0-based indices.

    Accepts 1-based numbers and ``a-b`` ranges separated by commas or spaces,
    ``all`` or ``*`` for everything, and empty input for nothing.

    Raises:
        SelectionError: a token is malformed or out of range.
    """
    text = (text or "").strip().lower()
    if not text:
        return []
    if text in ("all", "*"):
        return list(range(count))

    chosen = set()
    for token in re.split(r"[,\s]+", text):
        if not token:
            continue
        match = _RANGE_RE.match(token)
        if match:
            start, end = int(match.group(1)), int(match.group(2))
        elif token.isdigit():
            start = end = int(token)
        else:
            raise SelectionError(f"Not a number or range: {token!r}")
        if start > end:
            raise SelectionError(f"Range is reversed: {token!r}")
        if start < 1 or end > count:
            raise SelectionError(f"Choose between 1 and {count}: {token!r}")
        chosen.update(range(start - 1, end))
    return sorted(chosen)


def _flatten(results: Sequence[GroupResult]) -> List[OutdatedPackage]:
    return [option.value for result in results for option in result.options]


def select_all(results: Sequence[GroupResult]) -> List[OutdatedPackage]:
    """Every outdated package, in display order."""
    return _flatten(results)


def render_options(results: Sequence[GroupResult], console: Console) -> None:
    """Print the numbered option list grouped by manifest section."""
    number = 0
    for result in results:
        if result.is_empty:
            continue
        console.print(f"[bold]{escape(result.group)}[/bold]")
        for option in result.options:
            number += 1
            console.print(f"  {number:>3}. {escape(option.label)}", highlight=False)


def prompt_selection(
    results: Sequence[GroupResult],
    console: Optional[Console] = None,
    ask: Optional[Callable[[str], str]] = None,
) -> List[OutdatedPackage]:
    """Show the options and ask until the answer parses.

    ``ask`` receives the prompt text and returns the raw answer; it defaults
    to ``rich.prompt.Prompt.ask``. KeyboardInterrupt and EOFError propagate
    to the caller.
    """
    console = console or Console()
    packages = _flatten(results)
    if not packages:
        return []
    if ask is None:
        def ask(text: str) -> str:
            return Prompt.ask(text, console=console, default="", show_default=False)

    render_options(results, console)
    while True:
        answer = ask(PROMPT_TEXT)
        try:
            indices = parse_selection(answer, len(packages))
        except SelectionError as exc:
            console.print(f"[red]{escape(str(exc))}[/red]")
            continue
        logger.debug("Selected %d of %d option(s)", len(indices), len(packages))
        return [packages[i] for i in indices]
