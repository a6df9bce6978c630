"""Error taxonomy for the plan pipeline.

Validation problems subclass ``ValueError`` and configuration/provider failures
subclass ``RuntimeError`` so the API layer can map them to 400 and 500 the same
way it maps plain Python errors.
"""
from __future__ import annotations

from typing import Literal, Optional

ProviderErrorKind = Literal[
    "rate_limited",
    "bad_request",
    "auth_error",
    "unknown",
    "malformed_response",
]


class PlannerError(Exception):
    """Base class for every failure the pipeline reports to callers."""

    status_code: int = 500


class PlanValidationError(PlannerError, ValueError):
    """The trip request (or a prompt derived from it) is missing or out of bounds."""

    status_code = 400


class ConfigError(PlannerError, RuntimeError):
    """A required service credential is not configured."""

    status_code = 500


class ProviderError(PlannerError, RuntimeError):
    """The text-generation provider call failed."""

    kind: ProviderErrorKind = "unknown"
    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        provider_message: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.provider_message = provider_message


class RateLimitedError(ProviderError):
    kind = "rate_limited"


class BadRequestError(ProviderError):
    kind = "bad_request"


class AuthError(ProviderError):
    kind = "auth_error"


class UnknownProviderError(ProviderError):
    kind = "unknown"


class MalformedResponseError(ProviderError):
    kind = "malformed_response"


__all__ = [
    "PlannerError",
    "PlanValidationError",
    "ConfigError",
    "ProviderError",
    "ProviderErrorKind",
    "RateLimitedError",
    "BadRequestError",
    "AuthError",
    "UnknownProviderError",
    "MalformedResponseError",
]
