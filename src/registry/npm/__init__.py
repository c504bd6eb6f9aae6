"""npm registry query transports."""

from .cli_client import NpmCliClient
from .http_client import NpmRegistryClient

__all__ = [
    "NpmCliClient",
    "NpmRegistryClient",
]
