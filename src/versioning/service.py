"""Version service: resolve and format one or more dependency groups."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional, Tuple

from .formatter import format_options
from .models import GroupResult, PackageVersionMapping
from .resolver import VersionResolver

logger = logging.getLogger(__name__)


class VersionService:
    """Composes the resolver and the formatter.

    Lookup failures are absorbed by the resolver, so neither method raises
    because of the registry; a group with nothing to update comes back with
    empty ``options``.
    """

    def __init__(self, resolver: VersionResolver):
        self._resolver = resolver

    async def get_group_versions(self, mapping: Optional[PackageVersionMapping], group: str) -> GroupResult:
        """Build the option set for one group."""
        outdated = await self._resolver.resolve(mapping, group)
        options = format_options(outdated)
        logger.info("%s: %d of %d package(s) outdated", group, len(options), len(mapping or {}))
        return GroupResult(group=group, options=tuple(options))

    async def get_all_group_versions(
        self, groups: Iterable[Tuple[str, PackageVersionMapping]]
    ) -> List[GroupResult]:
        """Build option sets for several groups concurrently, in input order."""
        return list(
            await asyncio.gather(
                *(self.get_group_versions(mapping, group) for group, mapping in groups)
            )
        )
