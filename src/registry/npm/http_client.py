"""Registry lookups over the npm registry HTTP API."""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.parse
from typing import Any, Dict, Optional, Tuple

import aiohttp

from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from constants import Constants

from ..base import QueryFailure, RegistryQueryClient

logger = logging.getLogger(__name__)

# Abbreviated metadata is enough for dist-tags and much smaller than the full document.
PACKUMENT_ACCEPT = "application/vnd.npm.install-v1+json; q=1.0, application/json; q=0.8, */*"


def _extract_latest_version(packument: Dict[str, Any]) -> str:
    """Extract latest version from packument dist-tags.

    Args:
        packument: NPM packument dictionary

    Returns:
        Latest version string or empty string if not found
    """
    dist_tags = packument.get("dist-tags") or {}
    if not isinstance(dist_tags, dict):
        return ""
    latest = dist_tags.get("latest", "")
    return latest if isinstance(latest, str) else ""


def encode_package_name(package_name: str) -> str:
    """Encode a package name for use as a registry path segment.

    Scoped names keep the leading ``@`` and encode the separator, so
    ``@types/node`` becomes ``@types%2Fnode``.
    """
    if package_name.startswith("@"):
        return "@" + urllib.parse.quote(package_name[1:], safe="")
    return urllib.parse.quote(package_name, safe="")


class NpmRegistryClient(RegistryQueryClient):
    """Fetches package documents from an npm-compatible registry."""

    def __init__(
        self,
        registry_url: str = Constants.REGISTRY_URL_NPM,
        timeout: Optional[float] = Constants.REQUEST_TIMEOUT,
    ):
        """Initialize the client.

        Args:
            registry_url: Registry base URL.
            timeout: Total seconds allowed per request; None disables the limit.
        """
        self._registry_url = registry_url.rstrip("/") + "/"
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def name(self) -> str:
        return "http"

    async def start(self) -> aiohttp.ClientSession:
        """Start the HTTP session, or return the one already open."""
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers={"Accept": PACKUMENT_ACCEPT, "User-Agent": "pkgbump/1.0"},
            )
        return self._session

    async def close(self) -> None:
        """Stop the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "NpmRegistryClient":
        await self.start()
        return self

    def package_url(self, package_name: str) -> str:
        """Build the package document URL."""
        return f"{self._registry_url}{encode_package_name(package_name)}"

    async def _fetch(self, url: str) -> Tuple[int, str]:
        """GET ``url`` and return (status, body)."""
        session = await self.start()
        async with session.get(url) as response:
            return response.status, await response.text()

    async def query_latest_version(self, package_name: str) -> str:
        url = self.package_url(package_name)
        safe_target = safe_url(url)
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="npm_http_client",
                    action="GET",
                    target=safe_target,
                ),
            )

        with Timer() as timer:
            try:
                status, body = await self._fetch(url)
            except asyncio.TimeoutError as exc:
                raise QueryFailure(package_name, "request timed out") from exc
            except aiohttp.ClientError as exc:
                raise QueryFailure(package_name, f"connection error: {exc}") from exc

        if status == 404:
            raise QueryFailure(package_name, "not found in registry")
        if status < 200 or status >= 300:
            raise QueryFailure(package_name, f"unexpected status code ({status})")

        try:
            packument = json.loads(body)
        except json.JSONDecodeError as exc:
            raise QueryFailure(package_name, "couldn't decode JSON") from exc
        if not isinstance(packument, dict):
            raise QueryFailure(package_name, "unexpected document shape")

        latest = _extract_latest_version(packument)
        if not latest:
            raise QueryFailure(package_name, "no latest dist-tag")

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response ok",
                extra=extra_context(
                    event="http_response",
                    component="npm_http_client",
                    outcome="success",
                    status_code=status,
                    duration_ms=timer.duration_ms(),
                    target=safe_target,
                ),
            )
        return latest
