"""Concurrent lookup of the latest registry version for a dependency group."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import semantic_version
from semantic_version.base import AllOf, AnyOf, Range

from common.logging_utils import extra_context, is_debug_enabled, Timer
from registry.base import QueryFailure, RegistryQueryClient

from .models import OutdatedPackage, PackageVersionMapping

logger = logging.getLogger(__name__)

_LOWER_BOUND_OPERATORS = (Range.OP_EQ, Range.OP_GT, Range.OP_GTE)


def _lowest_bound(clause) -> Optional[semantic_version.Version]:
    """Lowest version a parsed npm range clause is anchored on, if it has one."""
    if isinstance(clause, (AllOf, AnyOf)):
        bounds = [_lowest_bound(child) for child in clause.clauses]
        if isinstance(clause, AnyOf):
            # an alternative without a floor leaves the whole range unbounded
            if not bounds or None in bounds:
                return None
            return min(bounds)
        bounds = [bound for bound in bounds if bound is not None]
        return max(bounds) if bounds else None
    if isinstance(clause, Range) and clause.operator in _LOWER_BOUND_OPERATORS:
        return clause.target
    return None


def _base_version(pinned: str) -> Optional[semantic_version.Version]:
    """Parse the version a pin is anchored on ("^1.2.3" -> 1.2.3)."""
    try:
        spec = semantic_version.NpmSpec(pinned.strip())
    except ValueError:
        return None
    return _lowest_bound(spec.clause)


def is_newer(current: str, latest: str) -> bool:
    """Return False only when both sides parse and ``latest`` is not above ``current``."""
    base = _base_version(current)
    if base is None:
        return True
    try:
        candidate = semantic_version.Version(latest)
    except ValueError:
        return True
    return candidate > base


class VersionResolver:
    """Finds the packages of one group whose registry version changed.

    Every lookup of a call to :meth:`resolve` is started at once and the
    batch is joined with settle-all semantics: a failing lookup only drops
    its own package.
    """

    def __init__(
        self,
        client: RegistryQueryClient,
        timeout: Optional[float] = None,
        max_concurrency: Optional[int] = None,
        newer_only: bool = False,
    ):
        """Initialize the resolver.

        Args:
            client: Registry query client.
            timeout: Per-query limit in seconds; None disables it.
            max_concurrency: Upper bound on in-flight queries; 0 or None is unbounded.
            newer_only: Drop registry versions that are not semantically newer.
        """
        self._client = client
        self._timeout = timeout
        self._max_concurrency = max_concurrency or 0
        self._newer_only = newer_only

    async def resolve(self, mapping: Optional[PackageVersionMapping], group: str) -> List[OutdatedPackage]:
        """Return the outdated packages of ``mapping`` tagged with ``group``."""
        if not mapping:
            return []

        entries = list(mapping.items())
        semaphore = asyncio.Semaphore(self._max_concurrency) if self._max_concurrency > 0 else None

        with Timer() as timer:
            results = await asyncio.gather(
                *(self._query(name, semaphore) for name, _ in entries),
                return_exceptions=True,
            )

        outdated: List[OutdatedPackage] = []
        for (name, current), result in zip(entries, results):
            if isinstance(result, BaseException):
                self._log_failure(name, group, result)
                continue
            if not isinstance(result, str):
                logger.warning("Skipping %s (%s): registry returned no version", name, group)
                continue
            latest = result.strip()
            if not latest or latest == current:
                continue
            if self._newer_only and not is_newer(current, latest):
                logger.debug("Skipping %s: %s is not newer than %s", name, latest, current)
                continue
            outdated.append(OutdatedPackage(name=name, current=current, latest=latest, group=group))

        if is_debug_enabled(logger):
            logger.debug(
                "Resolved group",
                extra=extra_context(
                    event="resolve",
                    component="version_resolver",
                    target=group,
                    count=len(entries),
                    outdated=len(outdated),
                    duration_ms=timer.duration_ms(),
                ),
            )
        return outdated

    async def _query(self, name: str, semaphore: Optional[asyncio.Semaphore]) -> str:
        if semaphore is None:
            return await self._query_once(name)
        async with semaphore:
            return await self._query_once(name)

    async def _query_once(self, name: str) -> str:
        if self._timeout is None:
            return await self._client.query_latest_version(name)
        try:
            return await asyncio.wait_for(self._client.query_latest_version(name), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise QueryFailure(name, f"timed out after {self._timeout} seconds") from exc

    @staticmethod
    def _log_failure(name: str, group: str, exc: BaseException) -> None:
        if isinstance(exc, QueryFailure):
            logger.warning("Lookup failed for %s (%s): %s", name, group, exc.reason)
        else:
            logger.warning("Lookup failed for %s (%s): %r", name, group, exc)
