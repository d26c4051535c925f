"""
Main FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from carmarket.booking import BookingEngine
from carmarket.config import get_settings
from carmarket.database import close_db, get_db, init_db
from carmarket.exceptions import register_exception_handlers
from carmarket.routers import admin, auth, cars, test_drives, users

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan events for the application.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("🚀 Starting %s...", settings.app_name)
    logger.info("📊 Initializing database...")
    await init_db()
    app.state.booking_engine = BookingEngine()
    logger.info("✅ Database initialized successfully")
    logger.info("🌐 API available at: %s", settings.api_prefix)

    yield

    # Shutdown
    await close_db()
    logger.info("👋 Shutting down %s...", settings.app_name)


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    ## 🚗 Car Marketplace API

    Buy and sell used cars.

    ### Entities:
    * **Users**: Registration, cookie or bearer JWT authentication, profiles
    * **Cars**: Listings with AI-written descriptions and search by photo
    * **Test drives**: Slot booking with owner/admin-gated status changes
    * **Admin**: Platform analytics and review
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(users.router, prefix=settings.api_prefix)
app.include_router(cars.router, prefix=settings.api_prefix)
app.include_router(test_drives.router, prefix=settings.api_prefix)
app.include_router(admin.router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to the AI Car Marketplace API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Health check endpoint."""
    await db.execute(text("SELECT 1"))
    return {
        "status": "healthy",
        "database": "connected",
        "version": settings.app_version,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "carmarket.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
