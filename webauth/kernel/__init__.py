"""
Kernel Layer

Credential and token lifecycle:
- Identity Core (hashing, id allocation, tokens, account lifecycle)
- Account Store (one table per account kind, unique id and key)

Transport code calls into the kernel only through IdentityService and
TokenService.
"""

from webauth.kernel.models import Base, User, JwtUser

__all__ = [
    "Base",
    "User",
    "JwtUser",
]
