"""Database session and engine configuration."""

from typing import AsyncGenerator

from dotenv import load_dotenv
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.pool import StaticPool
import structlog

from campuscircle.config import settings
from campuscircle.core.exceptions import ConflictError
from campuscircle.db.base import Base

# Load environment variables
load_dotenv()

logger = structlog.get_logger(__name__)


def build_engine(database_url: str, echo: bool = False):
    """Create an async engine with pool settings suited to the backend."""
    if database_url.startswith("sqlite"):
        # In-memory SQLite must share one connection across sessions
        engine = create_async_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

        @event.listens_for(engine.sync_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_pre_ping=True,
    )


# Create async engine
engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def commit_or_conflict(
    session: AsyncSession,
    detail: str = "Resource was modified concurrently, please retry",
) -> None:
    """
    Commit the unit of work, translating lost-update and unique-key
    violations into ConflictError.
    """
    try:
        await session.commit()
    except StaleDataError:
        await session.rollback()
        logger.warning("optimistic_lock_conflict", detail=detail)
        raise ConflictError(detail)
    except IntegrityError as exc:
        await session.rollback()
        logger.warning("integrity_conflict", detail=detail, error=str(exc.orig))
        raise ConflictError(detail)


async def init_db():
    """Initialize database tables."""
    # Import all models to register them
    from campuscircle import models  # noqa: F401

    async with engine.begin() as conn:
        # Create tables (in production, use Alembic migrations)
        if settings.DATABASE_CREATE_TABLES or settings.DEBUG or settings.is_sqlite:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("database_tables_created", url=engine.url.render_as_string(hide_password=True))
