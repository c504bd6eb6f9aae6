"""package.json model: load, apply selected updates, persist.

The whole document is kept as the ordered dict produced by ``json``; only
the dependency groups are interpreted, every other field passes through
untouched and in its original position.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from common.errors import ManifestError
from constants import Constants
from versioning.models import OutdatedPackage

logger = logging.getLogger(__name__)


class Manifest:
    """An in-memory package.json document."""

    def __init__(self, data: Dict[str, Any], path: Optional[str] = None):
        self.data = data
        self.path = path

    @classmethod
    def load(cls, path: str) -> "Manifest":
        """Read and parse ``path``.

        Raises:
            ManifestError: the file is missing, unreadable, not JSON or not an object.
        """
        try:
            with open(path, encoding="utf-8") as file:
                data = json.load(file)
        except FileNotFoundError as exc:
            raise ManifestError(path, "file not found") from exc
        except OSError as exc:
            raise ManifestError(path, f"IO error: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ManifestError(path, f"invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ManifestError(path, "top-level value is not an object")
        logger.debug("Loaded manifest %s", path)
        return cls(data, path)

    @property
    def dependencies(self) -> Dict[str, str]:
        return self._group("dependencies")

    @property
    def dev_dependencies(self) -> Dict[str, str]:
        return self._group("devDependencies")

    def _group(self, group: str) -> Dict[str, str]:
        section = self.data.get(group)
        if not isinstance(section, dict):
            return {}
        return {name: version for name, version in section.items() if isinstance(version, str)}

    def groups(self, names: Sequence[str] = tuple(Constants.DEPENDENCY_GROUPS)) -> List[Tuple[str, Dict[str, str]]]:
        """Return ``(group, mapping)`` for each named group present as an object."""
        found = []
        for name in names:
            if not isinstance(self.data.get(name), dict):
                continue
            skipped = [key for key, value in self.data[name].items() if not isinstance(value, str)]
            if skipped:
                logger.warning("%s: ignoring non-string entries %s", name, ", ".join(skipped))
            found.append((name, self._group(name)))
        return found

    def apply(self, updates: Iterable[OutdatedPackage]) -> int:
        """Write each update's latest version into its group; return how many applied."""
        applied = 0
        for update in updates:
            section = self.data.get(update.group)
            if not isinstance(section, dict):
                logger.warning("Group %s is missing; cannot update %s", update.group, update.name)
                continue
            section[update.name] = update.latest
            applied += 1
        return applied

    def dumps(self) -> str:
        """Serialize as 2-space indented JSON with a trailing newline."""
        return json.dumps(self.data, indent=2, ensure_ascii=False) + "\n"

    def save(self, path: Optional[str] = None) -> str:
        """Write the document to ``path`` (default: where it was loaded from)."""
        target = path or self.path
        if not target:
            raise ManifestError("<memory>", "no path to save to")
        try:
            with open(target, "w", encoding="utf-8") as file:
                file.write(self.dumps())
        except OSError as exc:
            raise ManifestError(target, f"IO error: {exc}") from exc
        logger.info("Manifest written to %s", target)
        return target
