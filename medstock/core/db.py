# medstock/core/db.py

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from medstock.core.config import (
    DB_ECHO_POOL,
    DB_MAX_OVERFLOW,
    DB_POOL_SIZE,
    DB_POOL_TIMEOUT,
)

# =====================================================
# BASE
# =====================================================
Base = declarative_base()


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


# =====================================================
# ENGINE
# =====================================================
def build_engine(database_url: str) -> AsyncEngine:
    connect_args = {}
    pool_args = {}

    if _is_sqlite(database_url):
        # Writers queue on the database lock instead of failing straight away
        connect_args = {"check_same_thread": False, "timeout": 30}
    else:
        pool_args = {
            "pool_size": DB_POOL_SIZE,
            "max_overflow": DB_MAX_OVERFLOW,
            "pool_timeout": DB_POOL_TIMEOUT,
            "pool_pre_ping": True,
        }

    engine = create_async_engine(
        database_url,
        echo=False,
        echo_pool=DB_ECHO_POOL,
        connect_args=connect_args,
        **pool_args,
    )

    # =====================================================
    # SQLITE FK ENFORCEMENT
    # =====================================================
    if _is_sqlite(database_url):
        @event.listens_for(engine.sync_engine, "connect")
        def enable_sqlite_foreign_keys(dbapi_connection, _):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


# =====================================================
# SESSION
# =====================================================
def build_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )
