"""
Persisted account collection.

One store instance wraps one account table. Uniqueness of the id and of the
normalized key is enforced by the table's primary key and unique index, so a
successful ``insert`` holds even when two requests race past the
application-level pre-check.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Generic, List, Type, TypeVar

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from webauth.exceptions import Conflict, NotFound, StoreUnavailable
from webauth.kernel.models.base import Base
from webauth.logging_config import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

# Never part of any projection
SECRET_ATTRIBUTES = frozenset({"salt", "hash"})


class AccountStore(Generic[ModelT]):
    """
    CRUD over a single account table.

    Args:
        session: Request-scoped async session
        model: Mapped account class
        key_attr: Attribute holding the normalized identity key
    """

    def __init__(self, session: AsyncSession, model: Type[ModelT], key_attr: str):
        self.session = session
        self.model = model
        self.key_attr = key_attr
        self._key_column = getattr(model, key_attr)

    @asynccontextmanager
    async def _reading(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error(
                "Store read failed",
                extra={"table": self.model.__tablename__, "operation": operation},
            )
            raise StoreUnavailable(
                "Account store unavailable.",
                details={"operation": operation},
            ) from exc

    async def _commit(self, operation: str) -> None:
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise Conflict(
                f"{self.key_attr.capitalize()} already in use.",
                details={"table": self.model.__tablename__},
            ) from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error(
                "Store write failed",
                extra={"table": self.model.__tablename__, "operation": operation},
            )
            raise StoreUnavailable(
                "Account store unavailable.",
                details={"operation": operation},
            ) from exc

    def _not_found(self, **details: Any) -> NotFound:
        return NotFound("Account not found.", details={"table": self.model.__tablename__, **details})

    async def get(self, account_id: int) -> ModelT:
        """Get an account by id or raise NotFound."""
        async with self._reading("get"):
            account = await self.session.get(self.model, account_id)
        if account is None:
            raise self._not_found(id=account_id)
        return account

    async def find_by_key(self, key: str) -> ModelT:
        """Get an account by its normalized key or raise NotFound."""
        async with self._reading("find_by_key"):
            result = await self.session.execute(
                select(self.model).where(self._key_column == key)
            )
            account = result.scalar_one_or_none()
        if account is None:
            raise self._not_found()
        return account

    async def id_exists(self, account_id: int) -> bool:
        async with self._reading("id_exists"):
            result = await self.session.execute(
                select(exists().where(self.model.id == account_id))
            )
            return bool(result.scalar())

    async def key_exists(self, key: str) -> bool:
        async with self._reading("key_exists"):
            result = await self.session.execute(
                select(exists().where(self._key_column == key))
            )
            return bool(result.scalar())

    async def insert(self, account: ModelT) -> ModelT:
        """
        Persist a new account.

        Raises:
            Conflict: If the id or the normalized key is already taken
        """
        self.session.add(account)
        await self._commit("insert")
        return account

    async def update(self, account: ModelT) -> ModelT:
        """Persist changes to an existing account or raise NotFound."""
        async with self._reading("update"):
            current = await self.session.get(self.model, account.id)
        if current is None:
            raise self._not_found(id=account.id)
        if current is not account:
            account = await self.session.merge(account)
        await self._commit("update")
        return account

    async def delete(self, account_id: int) -> None:
        """Remove an account or raise NotFound."""
        account = await self.get(account_id)
        await self.session.delete(account)
        await self._commit("delete")

    async def list_all(self) -> List[dict[str, Any]]:
        """
        List every account as a projection without salt and hash.

        Returns:
            One dict per account, keyed by attribute name
        """
        columns = [
            getattr(self.model, attr.key).label(attr.key)
            for attr in self.model.__mapper__.column_attrs
            if attr.key not in SECRET_ATTRIBUTES
        ]
        async with self._reading("list_all"):
            result = await self.session.execute(
                select(*columns).order_by(self.model.id)
            )
            return [dict(row) for row in result.mappings().all()]
