"""
Kernel Data Models

SQLAlchemy models for the two account kinds.
"""

from webauth.kernel.models.base import Base, TimestampMixin
from webauth.kernel.models.user import User, JwtUser

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "JwtUser",
]
