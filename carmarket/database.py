"""
Async database engine, session factory and declarative base.
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from carmarket.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

engine = create_async_engine(settings.database_url, echo=settings.debug)
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


async def get_db():
    """Yield a session per request."""
    async with AsyncSessionLocal() as session:
        yield session


async def init_db():
    """Create tables and seed the administrator account if configured."""
    # Register models on the metadata
    from carmarket import models  # noqa: F401
    from carmarket.models.user import User, UserRole
    from carmarket.auth import hash_password

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if not (settings.admin_email and settings.admin_password):
        return

    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.email == settings.admin_email))
        if result.scalar_one_or_none():
            return

        session.add(User(
            name=settings.admin_name,
            email=settings.admin_email,
            hashed_password=hash_password(settings.admin_password),
            role=UserRole.ADMIN,
        ))
        await session.commit()
        logger.info("✅ Administrator account created for %s", settings.admin_email)


async def close_db():
    await engine.dispose()
