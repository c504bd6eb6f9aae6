"""Registry query clients and the factory that picks one."""

from __future__ import annotations

from typing import Optional

from constants import Constants, QueryBackends

from .base import QueryFailure, RegistryQueryClient
from .npm import NpmCliClient, NpmRegistryClient


def build_client(
    backend: str,
    registry: Optional[str] = None,
    timeout: Optional[float] = Constants.REQUEST_TIMEOUT,
    npm_bin: str = Constants.NPM_BIN,
) -> RegistryQueryClient:
    """Return the query client for ``backend``.

    Raises:
        ValueError: unknown backend name.
    """
    if backend == QueryBackends.NPM.value:
        return NpmCliClient(npm_bin=npm_bin, timeout=timeout, registry=registry)
    if backend == QueryBackends.HTTP.value:
        return NpmRegistryClient(registry_url=registry or Constants.REGISTRY_URL_NPM, timeout=timeout)
    raise ValueError(f"Unsupported query backend: {backend}")


__all__ = [
    "QueryFailure",
    "RegistryQueryClient",
    "NpmCliClient",
    "NpmRegistryClient",
    "build_client",
]
