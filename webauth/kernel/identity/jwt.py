"""
JWT token management for authentication.

Tokens are stateless: there is no server-side session store and no
revocation. A leaked token stays valid until its ``exp`` claim passes, so
keep ``jwt_expire_minutes`` short.
"""

import math
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import BaseModel

from webauth.config import Settings, get_settings
from webauth.exceptions import InvalidToken


class TokenClaims(BaseModel):
    """Decoded claims of a validated token."""

    sub: str  # Normalized account key
    iss: str
    aud: str
    iat: datetime
    exp: datetime
    jti: str


class IssuedToken(BaseModel):
    """A freshly minted bearer token."""

    token: str
    token_type: str = "bearer"
    expires_at: datetime
    jti: str


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class TokenService:
    """
    JWT token creation and verification.

    Built once per process from settings and handed to whoever needs it.
    """

    def __init__(
        self,
        secret_key: str,
        issuer: str,
        audience: str,
        expire_minutes: int = 60,
        algorithm: str = "HS256",
    ):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self.issuer = issuer
        self.audience = audience
        self.expire_minutes = expire_minutes
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret_key=settings.jwt_secret_key,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            expire_minutes=settings.jwt_expire_minutes,
            algorithm=settings.jwt_algorithm,
        )

    def issue(
        self,
        subject: str,
        ttl: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ) -> IssuedToken:
        """
        Create a signed token for ``subject``.

        Args:
            subject: Normalized account key
            ttl: Lifetime, defaults to ``expire_minutes``
            now: Issue time, defaults to the current time

        Returns:
            IssuedToken with the encoded token and its expiry
        """
        issued_at = _as_utc(now) if now else datetime.now(timezone.utc)
        expire = issued_at + (ttl if ttl is not None else timedelta(minutes=self.expire_minutes))
        jti = str(uuid.uuid4())

        # Claims are whole seconds: iat rounds down, exp rounds up, so the
        # token never expires before issued_at + ttl
        payload = {
            "sub": subject,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": math.floor(issued_at.timestamp()),
            "exp": math.ceil(expire.timestamp()),
            "jti": jti,
        }

        token = jwt.encode(payload, self._secret_key, algorithm=self.algorithm)
        return IssuedToken(
            token=token,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            jti=jti,
        )

    def validate(self, token: str, now: Optional[datetime] = None) -> TokenClaims:
        """
        Verify and decode a token.

        Signature, issuer and audience are checked by python-jose. Presence
        and value of ``exp`` are checked here against ``now`` so callers can
        evaluate a token at a given instant. python-jose's ``require_exp``
        would re-enable its own wall-clock expiry check, so it is not used.

        Raises:
            InvalidToken: On any failed check
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options={
                    "verify_exp": False,
                    "require_sub": True,
                    "require_iss": True,
                    "require_aud": True,
                },
            )
        except JWTError as exc:
            raise InvalidToken(details={"reason": str(exc)}) from exc

        current = _as_utc(now) if now else datetime.now(timezone.utc)
        if "exp" not in payload:
            raise InvalidToken(details={"reason": "missing exp"})
        try:
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
            issued_at = datetime.fromtimestamp(int(payload.get("iat", 0)), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError) as exc:
            raise InvalidToken(details={"reason": "malformed timestamps"}) from exc

        if current >= expires_at:
            raise InvalidToken(details={"reason": "expired"})

        return TokenClaims(
            sub=payload["sub"],
            iss=payload["iss"],
            aud=payload["aud"],
            iat=issued_at,
            exp=expires_at,
            jti=payload.get("jti", ""),
        )


# Default service instance
_token_service: Optional[TokenService] = None


def get_token_service() -> TokenService:
    """Get or create the process-wide token service."""
    global _token_service
    if _token_service is None:
        _token_service = TokenService.from_settings(get_settings())
    return _token_service
