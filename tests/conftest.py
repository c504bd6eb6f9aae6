"""Shared fixtures: an in-memory registry client."""

import asyncio
import logging
from typing import Dict, List, Optional, Union

import pytest

from registry.base import QueryFailure, RegistryQueryClient


class FakeRegistryClient(RegistryQueryClient):
    """Answers lookups from a dict; exception values are raised instead."""

    def __init__(
        self,
        versions: Dict[str, Union[str, BaseException]],
        delays: Optional[Dict[str, float]] = None,
    ):
        self.versions = versions
        self.delays = delays or {}
        self.calls: List[str] = []
        self.closed = False

    @property
    def name(self) -> str:
        return "fake"

    async def query_latest_version(self, package_name: str) -> str:
        self.calls.append(package_name)
        delay = self.delays.get(package_name)
        if delay:
            await asyncio.sleep(delay)
        if package_name not in self.versions:
            raise QueryFailure(package_name, "not found in registry")
        value = self.versions[package_name]
        if isinstance(value, BaseException):
            raise value
        return value

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_client():
    """Factory for FakeRegistryClient instances."""
    return FakeRegistryClient


@pytest.fixture(autouse=True)
def _reset_console_logging():
    """Drop the console handler main() installs so it never outlives a test's capture."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == "pkgbump-console":
            root.removeHandler(handler)
