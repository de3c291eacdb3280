"""
Account kind descriptors.

The lifecycle operations are the same for every kind of account; what differs
is captured here: which table, which column holds the identity key, how the
key is checked, which profile fields are accepted, and whether a successful
login mints a token.
"""

import re
import unicodedata
from dataclasses import dataclass, field
from typing import Callable, Optional, Type

from webauth.exceptions import InvalidInput
from webauth.kernel.models import JwtUser, User
from webauth.kernel.models.base import Base

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

NORMALIZATION_MODES = ("lower", "casefold")


def normalize_key(raw: Optional[str], mode: str = "lower") -> str:
    """
    Normalize an identity key for storage and lookup.

    ``lower`` trims and lower-cases. ``casefold`` also applies NFKC and full
    Unicode case folding, so e.g. ``"STRASSE"`` and ``"straße"`` collide.

    Raises:
        InvalidInput: If the key is missing or blank
    """
    if mode not in NORMALIZATION_MODES:
        raise ValueError(f"Unknown key normalization mode: {mode}")
    if raw is None or not raw.strip():
        raise InvalidInput("Identity key must not be empty.", details={"field": "key"})
    key = raw.strip()
    if mode == "casefold":
        return unicodedata.normalize("NFKC", key).casefold()
    return key.lower()


def is_email(key: str) -> bool:
    return EMAIL_PATTERN.match(key) is not None


@dataclass(frozen=True)
class AccountKind:
    """Capability descriptor for one kind of account."""

    name: str
    model: Type[Base]
    key_attr: str
    issues_token: bool
    key_validator: Optional[Callable[[str], bool]] = None
    key_error: str = "Invalid identity key."
    profile_fields: tuple[str, ...] = field(default_factory=tuple)
    required_profile_fields: tuple[str, ...] = field(default_factory=tuple)

    def validate_key(self, key: str) -> None:
        if self.key_validator is not None and not self.key_validator(key):
            raise InvalidInput(self.key_error, details={"field": self.key_attr})

    def validate_profile(self, profile: dict) -> dict:
        """Keep known profile fields, reject unknown or missing required ones."""
        unknown = set(profile) - set(self.profile_fields)
        if unknown:
            raise InvalidInput(
                "Unknown profile fields.",
                details={"fields": ",".join(sorted(unknown))},
            )
        for name in self.required_profile_fields:
            if profile.get(name) is None:
                raise InvalidInput(f"{name} is required.", details={"field": name})
        return {k: v for k, v in profile.items() if v is not None}


SIMPLE_ACCOUNT = AccountKind(
    name="user",
    model=User,
    key_attr="email",
    issues_token=False,
    key_validator=is_email,
    key_error="Invalid email format.",
    profile_fields=("first_name", "last_name", "two_fa_key", "two_fa_uri"),
    required_profile_fields=("first_name", "last_name"),
)

JWT_ACCOUNT = AccountKind(
    name="jwt_user",
    model=JwtUser,
    key_attr="name",
    issues_token=True,
)
