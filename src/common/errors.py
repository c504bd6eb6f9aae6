"""Exception hierarchy shared across pkgbump modules."""


class PkgbumpError(Exception):
    """Base exception for every error raised by pkgbump."""


class ConfigError(PkgbumpError):
    """Raised when a configuration file cannot be read or has the wrong shape."""


class ManifestError(PkgbumpError):
    """Raised when the manifest cannot be read, parsed or written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class SelectionError(PkgbumpError):
    """Raised for selection input that does not name valid options."""
