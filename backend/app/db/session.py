"""
Store handle: one SQLAlchemy engine plus its session factory.

The application builds a ``Database`` in its lifespan and tears it down on
shutdown; request handlers get a ``Session`` through ``get_db``.
"""

from collections.abc import Iterator

from fastapi import Request
import sqlalchemy as sa
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings


def _is_memory_sqlite(url: sa.URL) -> bool:
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


class Database:
    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 5,
        max_overflow: int = 5,
        pool_timeout: int = 30,
        pool_recycle: int = 1800,
        echo: bool = False,
    ):
        parsed = sa.make_url(url)
        if parsed.get_backend_name() == "sqlite":
            kwargs: dict = {"connect_args": {"check_same_thread": False}}
            if _is_memory_sqlite(parsed):
                kwargs["poolclass"] = StaticPool
        else:
            kwargs = {
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "pool_timeout": pool_timeout,
                "pool_recycle": pool_recycle,
                "pool_pre_ping": True,
            }

        self.engine = sa.create_engine(parsed, echo=echo, **kwargs)
        if parsed.get_backend_name() == "sqlite":
            sa.event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT_SECONDS,
            pool_recycle=settings.DB_POOL_RECYCLE_SECONDS,
            echo=settings.DB_ECHO,
        )

    def session(self) -> Session:
        return self.session_factory()

    def create_all(self) -> None:
        # Registers every mapped table on Base.metadata.
        import app.models  # noqa: F401
        from app.db.base import Base

        Base.metadata.create_all(self.engine)

    def drop_all(self) -> None:
        import app.models  # noqa: F401
        from app.db.base import Base

        Base.metadata.drop_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
