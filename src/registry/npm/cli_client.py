"""Registry lookups through the ``npm show`` command."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from constants import Constants

from ..base import QueryFailure, RegistryQueryClient

logger = logging.getLogger(__name__)


class NpmCliClient(RegistryQueryClient):
    """Runs ``npm show <name> version`` once per lookup."""

    def __init__(
        self,
        npm_bin: str = Constants.NPM_BIN,
        timeout: Optional[float] = Constants.REQUEST_TIMEOUT,
        registry: Optional[str] = None,
    ):
        """Initialize the client.

        Args:
            npm_bin: Executable to invoke.
            timeout: Seconds before the subprocess is killed; None waits forever.
            registry: Optional registry URL passed through ``--registry``.
        """
        self._npm_bin = npm_bin
        self._timeout = timeout
        self._registry = registry

    @property
    def name(self) -> str:
        return "npm"

    def build_command(self, package_name: str) -> List[str]:
        """Build the argv for a lookup."""
        argv = [self._npm_bin, "show", package_name, "version"]
        if self._registry:
            argv.extend(["--registry", self._registry])
        return argv

    async def query_latest_version(self, package_name: str) -> str:
        argv = self.build_command(package_name)
        if is_debug_enabled(logger):
            logger.debug(
                "npm show",
                extra=extra_context(
                    event="subprocess_start",
                    component="npm_cli_client",
                    target=package_name,
                    registry=safe_url(self._registry) if self._registry else None,
                ),
            )

        with Timer() as timer:
            try:
                proc = await asyncio.create_subprocess_exec(
                    *argv,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as exc:  # includes FileNotFoundError for a missing npm
                raise QueryFailure(package_name, f"cannot run {self._npm_bin}: {exc}") from exc

            try:
                stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self._timeout)
            except asyncio.TimeoutError as exc:
                raise QueryFailure(package_name, f"timed out after {self._timeout} seconds") from exc
            finally:
                # also reached when the caller cancels the lookup
                if proc.returncode is None:
                    await _terminate(proc)

        if proc.returncode != 0:
            raise QueryFailure(package_name, _first_line(stderr) or f"exit status {proc.returncode}")

        if is_debug_enabled(logger):
            logger.debug(
                "npm show finished",
                extra=extra_context(
                    event="subprocess_exit",
                    component="npm_cli_client",
                    outcome="success",
                    duration_ms=timer.duration_ms(),
                    target=package_name,
                ),
            )
        return stdout.decode("utf-8", errors="replace")


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    """Kill ``proc`` and reap it."""
    try:
        proc.kill()
    except ProcessLookupError:
        pass
    await proc.wait()


def _first_line(stream: bytes) -> str:
    for line in stream.decode("utf-8", errors="replace").splitlines():
        if line.strip():
            return line.strip()
    return ""
