"""
Identity service for account lifecycle operations.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from webauth.config import get_settings
from webauth.exceptions import Conflict, InvalidInput, NotFound, Unauthorized
from webauth.kernel.identity.account_kinds import AccountKind, normalize_key
from webauth.kernel.identity.id_allocator import IdAllocator
from webauth.kernel.identity.jwt import IssuedToken, TokenService, get_token_service
from webauth.kernel.identity.password import (
    PasswordHasher,
    compute_hash,
    generate_salt,
    hashes_match,
)
from webauth.kernel.store.account_store import AccountStore
from webauth.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful login."""

    subject: str
    account_id: int
    token: Optional[IssuedToken] = None


@lru_cache
def _dummy_salt(rounds: int) -> str:
    # Hashed against when the key is unknown, so both failure paths cost the same
    return generate_salt(rounds)


class IdentityService:
    """
    Service for account identity operations.

    Handles registration, credential updates, deletion and login for one
    account kind.
    """

    def __init__(
        self,
        session: AsyncSession,
        kind: AccountKind,
        token_service: Optional[TokenService] = None,
        allocator: Optional[IdAllocator] = None,
    ):
        self.kind = kind
        self.store = AccountStore(session, kind.model, kind.key_attr)
        self.allocator = allocator or IdAllocator()
        self._token_service = token_service
        self._settings = get_settings()

    @property
    def token_service(self) -> TokenService:
        if self._token_service is None:
            self._token_service = get_token_service()
        return self._token_service

    def normalize(self, raw_key: Optional[str]) -> str:
        return normalize_key(raw_key, self._settings.key_normalization)

    async def register(self, key: str, password: str, **profile: Any):
        """
        Register a new account.

        Args:
            key: Raw identity key (email or name)
            password: Plain text password
            **profile: Kind-specific profile fields

        Returns:
            The created account

        Raises:
            InvalidInput: If the key is malformed or the password is empty
            Conflict: If the normalized key is already registered
            RangeExhausted: If no free id could be drawn
        """
        normalized = self.normalize(key)
        self.kind.validate_key(normalized)
        if not password:
            raise InvalidInput("Password must not be empty.", details={"field": "password"})
        fields = self.kind.validate_profile(profile)

        # Advisory only; the unique index is authoritative
        if await self.store.key_exists(normalized):
            raise Conflict(f"{self.kind.key_attr.capitalize()} already in use.")

        salt = generate_salt()
        account = self.kind.model(
            **{self.kind.key_attr: normalized},
            salt=salt,
            hash=compute_hash(password, salt),
            **fields,
        )
        account.id = await self.allocator.allocate(self.store.id_exists)

        await self.store.insert(account)
        logger.info(
            "Account registered",
            extra={"kind": self.kind.name, "account_id": account.id},
        )
        return account

    async def get(self, account_id: int):
        """Get an account by id or raise NotFound."""
        return await self.store.get(account_id)

    async def list_accounts(self) -> List[dict[str, Any]]:
        """List accounts without salt and hash."""
        return await self.store.list_all()

    async def update_credentials(
        self,
        account_id: int,
        *,
        password: Optional[str] = None,
        **fields: Any,
    ):
        """
        Update the supplied fields of an account.

        A new password replaces salt and hash together. Fields passed as
        None are left unchanged.

        Raises:
            NotFound: If the account does not exist
            InvalidInput: If a field is unknown or the new password is empty
        """
        unknown = set(fields) - set(self.kind.profile_fields)
        if unknown:
            raise InvalidInput(
                "Unknown profile fields.",
                details={"fields": ",".join(sorted(unknown))},
            )

        new_credentials = None
        if password is not None:
            salt = generate_salt()
            new_credentials = (salt, compute_hash(password, salt))

        account = await self.store.get(account_id)

        changed = []
        for name, value in fields.items():
            if value is not None:
                setattr(account, name, value)
                changed.append(name)
        if new_credentials is not None:
            account.salt, account.hash = new_credentials
            changed.append("password")

        account = await self.store.update(account)
        logger.info(
            "Account updated",
            extra={"kind": self.kind.name, "account_id": account_id, "fields": ",".join(changed)},
        )
        return account

    async def delete(self, account_id: int) -> None:
        """Delete an account or raise NotFound."""
        await self.store.delete(account_id)
        logger.info("Account deleted", extra={"kind": self.kind.name, "account_id": account_id})

    async def _rehash(self, account, password: str) -> None:
        """Re-salt a verified password at the configured bcrypt cost."""
        salt = generate_salt()
        account.salt, account.hash = salt, compute_hash(password, salt)
        await self.store.update(account)
        logger.info("Password rehashed", extra={"kind": self.kind.name, "account_id": account.id})

    async def authenticate(self, key: Optional[str], password: Optional[str]) -> AuthResult:
        """
        Verify a key/password pair.

        Unknown keys and wrong passwords fail identically, including the cost
        of hashing. A stored salt whose cost differs from ``bcrypt_rounds`` is
        replaced, together with the hash, after a successful match.

        Returns:
            AuthResult, carrying a token for token-bearing kinds

        Raises:
            Unauthorized: On any credential failure
        """
        if not password:
            raise Unauthorized()
        try:
            normalized = self.normalize(key)
        except InvalidInput:
            raise Unauthorized() from None

        try:
            account = await self.store.find_by_key(normalized)
        except NotFound:
            account = None

        salt = account.salt if account is not None else _dummy_salt(self._settings.bcrypt_rounds)
        candidate = compute_hash(password, salt)

        if account is None or not hashes_match(candidate, account.hash):
            logger.warning("Login failed", extra={"kind": self.kind.name})
            raise Unauthorized()

        if PasswordHasher.needs_rehash(account.salt):
            await self._rehash(account, password)

        token = None
        if self.kind.issues_token:
            token = self.token_service.issue(normalized)

        logger.info("Login succeeded", extra={"kind": self.kind.name, "account_id": account.id})
        return AuthResult(subject=normalized, account_id=account.id, token=token)
