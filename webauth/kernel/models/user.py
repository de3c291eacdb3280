"""
Account models.

Two account kinds live in separate tables: password-only users keyed by
email, and token-bearing users keyed by name. Ids are assigned by the
application (random 7-digit numbers), never by the database.
"""

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from webauth.kernel.models.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """Password-only account keyed by normalized email."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        "id_user",
        Integer,
        primary_key=True,
        autoincrement=False,
    )
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    salt: Mapped[str] = mapped_column(String(64), nullable=False)
    hash: Mapped[str] = mapped_column(String(128), nullable=False)

    # Carried opaquely, never interpreted
    two_fa_key: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    two_fa_uri: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email}>"


class JwtUser(Base, TimestampMixin):
    """Token-bearing account keyed by normalized name."""

    __tablename__ = "jwt_users"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=False,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    salt: Mapped[str] = mapped_column(String(64), nullable=False)
    hash: Mapped[str] = mapped_column(String(128), nullable=False)

    def __repr__(self) -> str:
        return f"<JwtUser {self.id} {self.name}>"
