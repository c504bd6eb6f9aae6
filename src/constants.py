"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CANCELLED = 130


class QueryBackends(Enum):
    """Registry query transports supported by the program.

    Args:
        Enum (string): Backend names accepted on the command line.
    """

    NPM = "npm"
    HTTP = "http"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_NPM = "https://registry.npmjs.org/"
    NPM_BIN = "npm"
    SUPPORTED_BACKENDS = [
        QueryBackends.NPM.value,
        QueryBackends.HTTP.value,
    ]
    PACKAGE_JSON_FILE = "package.json"
    DEPENDENCY_GROUPS = ["dependencies", "devDependencies"]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    DEFAULT_LOG_LEVEL = "WARNING"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for each registry query
    MAX_CONCURRENCY = 0  # 0 = every query in a group starts at once

    # Option label layout
    LABEL_NAME_MAX = 30
    LABEL_NAME_WIDTH = 35
    LABEL_VERSION_WIDTH = 10
    LABEL_ELLIPSIS = "..."
    LABEL_ARROW = "→ "

    # Environment overrides
    ENV_LOG_LEVEL = "PKGBUMP_LOG_LEVEL"
    ENV_CONFIG = "PKGBUMP_CONFIG"
    ENV_REGISTRY = "PKGBUMP_REGISTRY"
    ENV_BACKEND = "PKGBUMP_BACKEND"
    ENV_TIMEOUT = "PKGBUMP_TIMEOUT"
