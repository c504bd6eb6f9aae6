"""Builds fixed-width option labels for the selection list."""

from typing import Iterable, List

from constants import Constants

from .models import DisplayOption, OutdatedPackage


def truncate(text: str, max_length: int) -> str:
    """Cut ``text`` to ``max_length`` characters, ending in an ellipsis when cut."""
    if len(text) <= max_length:
        return text
    return text[: max_length - len(Constants.LABEL_ELLIPSIS)] + Constants.LABEL_ELLIPSIS


def build_label(pkg: OutdatedPackage) -> str:
    """Render ``<name><current>→ <latest>`` with the name and current columns padded."""
    name = truncate(pkg.name, Constants.LABEL_NAME_MAX).ljust(Constants.LABEL_NAME_WIDTH)
    current = pkg.current.ljust(Constants.LABEL_VERSION_WIDTH)
    return f"{name}{current}{Constants.LABEL_ARROW}{pkg.latest}"


def format_options(outdated: Iterable[OutdatedPackage]) -> List[DisplayOption]:
    """Pair each outdated package with its label, keeping order."""
    return [DisplayOption(value=pkg, label=build_label(pkg)) for pkg in outdated]
