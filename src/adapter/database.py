"""Async engine construction

SQLite needs extra care for concurrent writers: every transaction is opened
with BEGIN IMMEDIATE so writers queue on the database lock (bounded by the
busy timeout) instead of failing when a read lock is upgraded.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession


def build_engine(db_uri: str, busy_timeout_seconds: float = 30.0, echo: bool = False) -> AsyncEngine:
    if not db_uri.startswith("sqlite"):
        return create_async_engine(db_uri, echo=echo, future=True)

    engine = create_async_engine(
        db_uri,
        echo=echo,
        future=True,
        connect_args={"timeout": busy_timeout_seconds},
    )
    file_backed = ":memory:" not in db_uri

    @event.listens_for(engine.sync_engine, "connect")
    def sqlite_connect(dbapi_connection, connection_record):
        # let the begin hook below issue BEGIN itself
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout_seconds * 1000)};")
        cursor.execute("PRAGMA foreign_keys=ON;")
        if file_backed:
            cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def sqlite_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def build_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


async def create_schema(engine: AsyncEngine) -> None:
    """Create any missing tables for the registered SQLModel entities"""
    import src.domain  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
