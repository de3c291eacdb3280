"""
Error kinds raised by the identity core.

Every failure of a core operation is one of these, so the transport layer can
map each to a deterministic response without inspecting messages.
"""

from __future__ import annotations

from typing import Any, Optional


class IdentityError(Exception):
    """Base class for all identity core errors."""

    code: str = "identity_error"

    def __init__(self, message: str, *, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


class InvalidInput(IdentityError):
    """Malformed identity key or empty password."""

    code = "invalid_input"


class Conflict(IdentityError):
    """Identity key or id already exists."""

    code = "conflict"


class NotFound(IdentityError):
    """Target account does not exist."""

    code = "not_found"


class Unauthorized(IdentityError):
    """Credential mismatch or unknown identity.

    Raised with the same message for both cases.
    """

    code = "unauthorized"

    def __init__(self, message: str = "Invalid credentials.", *, details: Optional[dict[str, Any]] = None):
        super().__init__(message, details=details)


class InvalidToken(Unauthorized):
    """Bearer token failed signature, issuer, audience or expiry checks."""

    code = "invalid_token"

    def __init__(self, message: str = "Invalid or expired token.", *, details: Optional[dict[str, Any]] = None):
        super().__init__(message, details=details)


class RangeExhausted(IdentityError):
    """No free identifier found within the allocator's attempt budget."""

    code = "range_exhausted"


class StoreUnavailable(IdentityError):
    """Persistence layer failed for a reason other than a constraint."""

    code = "store_unavailable"
