"""
Database management: async engine, session factory and schema bootstrap
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import event, func, select, text
from sqlalchemy.exc import DisconnectionError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from event_manager.core.settings import DatabaseSettings

logger = logging.getLogger(__name__)

# SQLAlchemy declarative base
Base = declarative_base()

DEFAULT_ORGANISERS = (
    ("Sarah Johnson", "Lead Yoga Instructor and Studio Manager"),
    ("Mike Chen", "Assistant Instructor and Event Coordinator"),
)


class DatabaseManager:
    """Owns the async engine and session factory for one application instance"""

    def __init__(self, database_settings: DatabaseSettings) -> None:
        self.settings = database_settings
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None
        self._setup_engine()

    def _setup_engine(self) -> None:
        """Setup database engine"""
        db_url = self.settings.database_url

        self.engine = create_async_engine(db_url, **self._get_engine_kwargs(db_url))

        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
            autocommit=False,
        )

        self._setup_event_listeners()

        logger.info(f"Database engine initialized with URL: {self._mask_url(db_url)}")

    def _get_engine_kwargs(self, db_url: str) -> Dict[str, Any]:
        """Get engine configuration based on database type"""
        base_kwargs: Dict[str, Any] = {
            "echo": self.settings.ECHO,
            "pool_pre_ping": self.settings.POOL_PRE_PING,
        }

        if "sqlite" in db_url:
            base_kwargs["connect_args"] = {"check_same_thread": False, "timeout": 20}
            if ":memory:" in db_url:
                # One shared connection, otherwise every checkout sees an empty database
                base_kwargs["poolclass"] = StaticPool

        return base_kwargs

    def _setup_event_listeners(self) -> None:
        """Setup connection listeners"""
        if not self.engine:
            return

        @event.listens_for(self.engine.sync_engine, "connect")  # type: ignore
        def enable_sqlite_foreign_keys(
            dbapi_connection: Any, connection_record: Any
        ) -> None:
            """SQLite ignores ON DELETE clauses unless foreign keys are switched on"""
            if self.engine is not None and self.engine.dialect.name == "sqlite":
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        @event.listens_for(self.engine.sync_engine, "invalidate")  # type: ignore
        def receive_invalidate(
            dbapi_connection: Any, connection_record: Any, exception: Any
        ) -> None:
            logger.warning(f"Database connection invalidated: {exception}")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get database session; commits on success, rolls back on error"""
        if not self.session_factory:
            raise RuntimeError("Database not initialized")

        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error(f"Database session error: {e}")
            raise
        finally:
            await session.close()

    async def create_all(self) -> None:
        """Create all tables known to the metadata"""
        # Registers the mappers on Base.metadata
        import event_manager.models  # noqa: F401

        if not self.engine:
            raise RuntimeError("Database not initialized")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def seed_defaults(self) -> int:
        """Insert the default organisers when the table is empty"""
        from event_manager.models.organiser import Organiser

        async with self.get_session() as session:
            count = (
                await session.execute(select(func.count(Organiser.organiser_id)))
            ).scalar_one()
            if count:
                return 0
            session.add_all(
                Organiser(name=name, description=description)
                for name, description in DEFAULT_ORGANISERS
            )
        logger.info("Seeded %d default organisers", len(DEFAULT_ORGANISERS))
        return len(DEFAULT_ORGANISERS)

    async def health_check(self) -> dict[str, Any]:
        """Database connectivity check"""
        if not self.engine:
            return {"status": "error", "message": "Database engine not initialized"}

        try:
            start_time = time.time()

            async with self.get_session() as session:
                result = await session.execute(text("SELECT 1 as health_check"))
                if result.scalar() != 1:
                    return {"status": "error", "message": "Health check query failed"}

            response_time = (time.time() - start_time) * 1000

            return {
                "status": "healthy",
                "response_time_ms": round(response_time, 2),
                "database_url": self._mask_url(str(self.engine.url)),
            }

        except DisconnectionError as e:
            logger.error(f"Database disconnection error: {e}")
            return {"status": "error", "message": "Database disconnected"}
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            return {"status": "error", "message": str(e)}

    async def close(self) -> None:
        """Close database engine and all connections"""
        if self.engine:
            await self.engine.dispose()
            logger.info("Database engine closed")

    def _mask_url(self, url: str) -> str:
        """Mask sensitive information in database URL"""
        if "@" in url:
            parts = url.split("@")
            if len(parts) == 2:
                auth_part = parts[0]
                if ":" in auth_part:
                    protocol_user = auth_part.rsplit(":", 1)[0]
                    return f"{protocol_user}:***@{parts[1]}"
        return url
