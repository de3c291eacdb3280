"""
Random numeric account identifiers.

A drawn id is only known to be free at the moment it was checked. Two
concurrent registrations can draw the same id; the primary key constraint in
the store decides which one wins.
"""

import secrets
from typing import Awaitable, Callable, Optional

from webauth.config import get_settings
from webauth.exceptions import RangeExhausted


class IdAllocator:
    """Draws ids from ``[id_min, id_max)`` until the predicate reports one free."""

    def __init__(
        self,
        id_min: Optional[int] = None,
        id_max: Optional[int] = None,
        max_attempts: Optional[int] = None,
    ):
        settings = get_settings()
        self.id_min = settings.account_id_min if id_min is None else id_min
        self.id_max = settings.account_id_max if id_max is None else id_max
        self.max_attempts = (
            settings.account_id_max_attempts if max_attempts is None else max_attempts
        )
        if self.id_max <= self.id_min:
            raise ValueError("id_max must be greater than id_min")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def _candidate(self) -> int:
        return self.id_min + secrets.randbelow(self.id_max - self.id_min)

    def _exhausted(self) -> RangeExhausted:
        return RangeExhausted(
            "No free account id found.",
            details={
                "attempts": self.max_attempts,
                "range": f"[{self.id_min}, {self.id_max})",
            },
        )

    async def allocate(self, exists: Callable[[int], Awaitable[bool]]) -> int:
        """
        Return an id for which ``exists`` is false.

        Args:
            exists: Async predicate checking the live store

        Raises:
            RangeExhausted: If every attempt hit an occupied id
        """
        for _ in range(self.max_attempts):
            candidate = self._candidate()
            if not await exists(candidate):
                return candidate
        raise self._exhausted()
