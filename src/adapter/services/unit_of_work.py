"""SQLAlchemy-backed UnitOfWork"""

from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """
    Commits or rolls back the wrapped AsyncSession

    Each commit/rollback ends the current database transaction. On SQLite
    that also releases the write lock taken by BEGIN IMMEDIATE, so use cases
    end their transaction before any slow external call.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self) -> "SqlAlchemyUnitOfWork":
        return self

    async def __aexit__(self, *args) -> None:
        await self.rollback()

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
