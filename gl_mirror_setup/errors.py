"""Exception types for gl-mirror-setup."""

from __future__ import annotations


class MirrorSetupError(Exception):
    """Base class for all errors raised by gl-mirror-setup."""


class ConfigurationError(MirrorSetupError):
    """Required input is missing or invalid. Raised before any API call."""


class TransportError(MirrorSetupError):
    """The request/response exchange with GitLab could not be completed meaningfully."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(TransportError):
    """GitLab answered 404, or a lookup matched nothing."""

    def __init__(self, message: str, status_code: int | None = 404):
        super().__init__(message, status_code=status_code)


class AmbiguousNamespaceError(MirrorSetupError):
    """A namespace search did not yield exactly one exact match."""

    def __init__(self, namespace: str, candidates: list[str]):
        self.namespace = namespace
        self.candidates = candidates
        listed = ", ".join(candidates) if candidates else "none"
        super().__init__(f"Namespace '{namespace}' is ambiguous (candidates: {listed})")


class CreationError(MirrorSetupError):
    """GitLab rejected project creation."""
