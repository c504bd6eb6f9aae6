"""Version resolution and option building."""

from .formatter import build_label, format_options, truncate
from .models import DisplayOption, GroupResult, OutdatedPackage, PackageVersionMapping
from .resolver import VersionResolver, is_newer
from .service import VersionService

__all__ = [
    "DisplayOption",
    "GroupResult",
    "OutdatedPackage",
    "PackageVersionMapping",
    "VersionResolver",
    "VersionService",
    "build_label",
    "format_options",
    "is_newer",
    "truncate",
]
