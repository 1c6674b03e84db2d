from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from partstock.core.config import settings


def create_engine_for(database_uri: str, echo: bool = False) -> AsyncEngine:
    """
    Build an async engine for the given URI

    SQLite gets explicit BEGIN handling so that SAVEPOINT (used per row by
    bulk import) behaves under the pysqlite/aiosqlite driver.
    """
    engine = create_async_engine(database_uri, echo=echo, future=True)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine.sync_engine, "connect")
        def _disable_driver_transactions(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(engine.sync_engine, "begin")
        def _emit_begin(conn):
            conn.exec_driver_sql("BEGIN")

    return engine


def create_session_factory(bind: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
    )


engine = create_engine_for(settings.async_database_uri, echo=settings.SQL_ECHO)

SessionLocal = create_session_factory(engine)
