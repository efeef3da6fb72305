"""
Exception classes for gopathlink.
"""


class GoPathLinkError(Exception):
    """Base exception for all gopathlink errors."""

    pass


class UnlocatableError(GoPathLinkError):
    """Raised when no repository, alias or module cache copy serves a module."""

    def __init__(self, path: str, version: str):
        self.path = path
        self.version = version
        super().__init__(f"{path}@{version}: could not be located (try vendoring it?)")


class DestinationConflictError(GoPathLinkError):
    """Raised when a destination holds content that must not be replaced."""

    def __init__(self, destination, reason: str = ""):
        self.destination = destination
        if reason:
            super().__init__(f"Refusing to replace {destination}: {reason}")
        else:
            super().__init__(f"Refusing to replace {destination}")


class DiscoveryError(GoPathLinkError):
    """Raised when alias discovery cannot fetch or parse a landing page."""

    def __init__(self, url: str, message: str = ""):
        self.url = url
        if message:
            super().__init__(f"Discovery failed for {url}: {message}")
        else:
            super().__init__(f"Discovery failed for {url}")


class TransportError(GoPathLinkError):
    """Raised when a git operation fails."""

    def __init__(self, operation: str, target: str, message: str = ""):
        self.operation = operation
        self.target = target
        detail = f": {message}" if message else ""
        super().__init__(f"git {operation} failed for {target}{detail}")
