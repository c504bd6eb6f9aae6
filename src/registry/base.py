"""Registry query contract shared by every transport."""

from __future__ import annotations

from abc import ABC, abstractmethod

from common.errors import PkgbumpError


class QueryFailure(PkgbumpError):
    """A registry lookup for a single package failed."""

    def __init__(self, package_name: str, reason: str):
        self.package_name = package_name
        self.reason = reason
        super().__init__(f"{package_name}: {reason}")


class RegistryQueryClient(ABC):
    """Reports the latest published version for a package name."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short transport name used in logs."""

    @abstractmethod
    async def query_latest_version(self, package_name: str) -> str:
        """Return the latest version string published for ``package_name``.

        Raises:
            QueryFailure: the lookup errored for any reason.
        """

    async def close(self) -> None:
        """Release transport resources. No-op by default."""

    async def __aenter__(self) -> "RegistryQueryClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
