"""
Exceptions and warnings raised while bundling.

Every hard failure derives from BundleError so callers can collect
per-script failures with a single except clause.
"""


class BundleError(Exception):
    """Base class for bundling failures."""
    pass


class FetchError(BundleError):
    """Raised when a remote source cannot be retrieved or decoded."""

    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"Failed to fetch {address}: {reason}")


class CycleDetected(BundleError):
    """Raised when resolution re-enters an address already being expanded."""

    def __init__(self, chain):
        self.chain = list(chain)
        super().__init__(f"Import cycle detected: {' -> '.join(self.chain)}")


class BundleCancelled(BundleError):
    """Raised when the run's cancellation token is set mid-resolution."""
    pass


class ConfigError(BundleError):
    """Raised when configuration is missing or invalid."""
    pass


class MalformedImportWarning(UserWarning):
    """A project import line matched no recognized shape and was dropped."""
    pass


__all__ = [
    "BundleError",
    "FetchError",
    "CycleDetected",
    "BundleCancelled",
    "ConfigError",
    "MalformedImportWarning",
]
