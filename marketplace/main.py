import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

# Import all models so relationships between model modules resolve
from marketplace.db.models import availability, booking, listing, provider, review, service, user  # noqa: F401
from marketplace.api.routes import admin as admin_router
from marketplace.api.routes import auth as auth_router
from marketplace.api.routes import availability as availability_router
from marketplace.api.routes import bookings as bookings_router
from marketplace.api.routes import listings as listings_router
from marketplace.api.routes import review as review_router
from marketplace.api.routes import services as services_router
from marketplace.core.config import LOG_LEVEL
from marketplace.core.responses import register_exception_handlers
from marketplace.db.base import Base, engine

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info("Database tables ready")
    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Service Marketplace API", version="1.0.0", lifespan=lifespan)
register_exception_handlers(app)


@app.get("/")
def root():
    return {"message": "Service Marketplace API running"}


app.include_router(auth_router.router, prefix="/api")
app.include_router(services_router.router, prefix="/api")
app.include_router(bookings_router.router, prefix="/api")
app.include_router(review_router.router, prefix="/api")
app.include_router(availability_router.router, prefix="/api")
app.include_router(listings_router.router, prefix="/api")
app.include_router(admin_router.router, prefix="/api")
