from sqlmodel import SQLModel
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from app.core.config import Settings
import structlog

# Register table metadata before create_all
import app.models  # noqa: F401

logger = structlog.get_logger()


def build_engine(settings: Settings) -> AsyncEngine:
    if settings.is_sqlite:
        options = {"connect_args": {"check_same_thread": False}}
        if make_url(settings.database_url).database in (None, "", ":memory:"):
            # One shared connection, otherwise every session sees an empty database
            options["poolclass"] = StaticPool
    else:
        options = {
            "pool_size": settings.db_pool_size,
            "max_overflow": settings.db_max_overflow,
        }

    engine = create_async_engine(
        settings.database_url,
        echo=settings.log_level.upper() == "DEBUG",
        **options,
    )

    if settings.is_sqlite:
        @event.listens_for(engine.sync_engine, "connect")
        def enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_db_and_tables(engine: AsyncEngine):
    logger.info("Creating database tables", url=engine.url.render_as_string(hide_password=True))
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def close_db(engine: AsyncEngine):
    await engine.dispose()
