"""Data models for version resolution and option building."""

from dataclasses import dataclass
from typing import Mapping, Tuple


# Package name -> pinned version string, in manifest order.
PackageVersionMapping = Mapping[str, str]


@dataclass(frozen=True)
class OutdatedPackage:
    """A package whose registry version differs from its pinned version."""
    name: str
    current: str
    latest: str
    group: str

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "current": self.current,
            "latest": self.latest,
            "group": self.group,
        }


@dataclass(frozen=True)
class DisplayOption:
    """An update record paired with its single-line label."""
    value: OutdatedPackage
    label: str


@dataclass(frozen=True)
class GroupResult:
    """Options built for one manifest group."""
    group: str
    options: Tuple[DisplayOption, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.options
