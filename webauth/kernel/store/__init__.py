"""
Account persistence.
"""

from webauth.kernel.store.account_store import AccountStore, SECRET_ATTRIBUTES

__all__ = ["AccountStore", "SECRET_ATTRIBUTES"]
