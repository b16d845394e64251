"""
Error taxonomy for the Azure Stack samples.

Startup errors (ConfigError, DiscoveryError, AuthConfigError) are fatal and
end the run. CleanupError is raised only inside the cleanup scope and never
leaves it. SampleError wraps Azure SDK failures from a sample body.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional


class StackSampleError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(StackSampleError):
    """Configuration file missing, unreadable, or lacking required keys."""


class DiscoveryErrorKind(str, Enum):
    HTTP_FAILURE       = "http_failure"
    EMPTY_OR_MALFORMED = "empty_or_malformed"
    MISSING_FIELD      = "missing_field"
    TIMEOUT            = "timeout"


class DiscoveryError(StackSampleError):
    """Environment metadata could not be fetched or mapped."""

    def __init__(
        self,
        kind:    DiscoveryErrorKind,
        message: str,
        status:  Optional[int] = None,
        path:    Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.kind   = kind
        self.status = status
        self.path   = path


class AuthConfigError(StackSampleError):
    """Credential configuration is incomplete or the authority is invalid."""


class CleanupError(StackSampleError):
    """Deleting the primary resource group failed."""

    def __init__(self, resource_group: str, message: str, never_created: bool = False) -> None:
        super().__init__(message)
        self.resource_group = resource_group
        self.never_created  = never_created


class SampleError(StackSampleError):
    """An Azure call inside a sample body failed."""

    def __init__(self, sample: str, step: str, message: str) -> None:
        super().__init__(f"{sample}: {step} failed: {message}")
        self.sample = sample
        self.step   = step
