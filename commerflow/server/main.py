"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging), registers the exception handlers and includes all API
routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from commerflow.core.cache import get_cache
from commerflow.core.database import init_db
from commerflow.core.logging_config import get_logger, setup_logging
from commerflow.core.monitoring import initialize_logfire

from .api.v1 import admin, cart, categories, health, orders, products, users
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestLoggingMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Startup validates the settings for the current environment and makes sure
    the tables exist; shutdown drops the catalogue cache.
    """
    settings.validate_for_environment()
    logger.info(f"Starting up {constant.PROJECT_NAME} ({settings.environment})...")
    try:
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info(f"Shutting down {constant.PROJECT_NAME}...")
    get_cache().clear()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    CommerFlow Storefront API

    REST backend for an online store: accounts, catalogue, shopping cart,
    orders with status history, and an administrator dashboard.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_PREFIX}/openapi.json",
    docs_url=f"{constant.API_PREFIX}/docs",
    redoc_url=f"{constant.API_PREFIX}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origin_list,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.method_list,
    allow_headers=cors.header_list,
)
app.add_middleware(RequestLoggingMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)

app.include_router(health.router, tags=["health"])
app.include_router(users.router, prefix=f"{constant.API_PREFIX}/users", tags=["users"])
app.include_router(products.router, prefix=f"{constant.API_PREFIX}/products", tags=["products"])
app.include_router(categories.router, prefix=f"{constant.API_PREFIX}/categories", tags=["categories"])
app.include_router(cart.router, prefix=f"{constant.API_PREFIX}/cart", tags=["cart"])
app.include_router(orders.router, prefix=f"{constant.API_PREFIX}/orders", tags=["orders"])
app.include_router(admin.router, prefix=f"{constant.API_PREFIX}/admin", tags=["admin"])
