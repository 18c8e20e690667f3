"""Process-wide handle on the relational store.

The handle is built once at process start and handed to the dispatcher.
`open()` connects on first use and is a no-op afterwards, so warm Lambda
invocations reuse the same engine and pool. A closed handle reconnects
on the next `open()`.
"""

import asyncio
import ssl

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from content_service.config.settings import Settings
from content_service.errors import StoreNotOpenError
from content_service.logging.structured import get_logger
from content_service.store.models import Base

logger = get_logger("store")


class ContentStore:
    """Owns the async engine and session factory."""

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        sync_schema: bool = False,
        engine_options: dict | None = None,
    ):
        self._url = url
        self._echo = echo
        self._sync_schema = sync_schema
        self._engine_options = engine_options or {}
        self._engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None
        self._open_count = 0
        self._open_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ContentStore":
        url = settings.sqlalchemy_url
        options: dict = {}

        if make_url(url).get_backend_name() == "postgresql":
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_timeout=settings.db_pool_timeout,
                pool_recycle=settings.db_pool_recycle,
                pool_pre_ping=True,
            )
            if settings.db_ssl:
                options["connect_args"] = {"ssl": _unverified_ssl_context()}

        return cls(
            url,
            echo=settings.is_development,
            sync_schema=settings.is_development,
            engine_options=options,
        )

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    async def open(self) -> None:
        """Connect if not already connected. Concurrent callers share one connect."""
        if self._engine is not None:
            return
        async with self._open_lock:
            if self._engine is None:
                await self._connect()

    async def _connect(self) -> None:
        engine = create_async_engine(self._url, echo=self._echo, **self._engine_options)
        try:
            if self._sync_schema:
                async with engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
        except Exception:
            await engine.dispose()
            logger.exception("Database initialization failed")
            raise

        self._engine = engine
        self._sessions = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self._open_count += 1
        if self._open_count == 1:
            logger.info("Database connection initialized")
        else:
            logger.info("Database connection re-initialized")

    async def close(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessions = None
        logger.info("Database connection closed")

    def session(self) -> AsyncSession:
        """New session; use as `async with store.session() as session:`."""
        if self._sessions is None:
            raise StoreNotOpenError("ContentStore.open() has not been awaited")
        return self._sessions()

    async def create_schema(self) -> None:
        """Create all content tables (development and tests)."""
        if self._engine is None:
            raise StoreNotOpenError("ContentStore.open() has not been awaited")
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)


def _unverified_ssl_context() -> ssl.SSLContext:
    """TLS without certificate verification (RDS default certificates)."""
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context
