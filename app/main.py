# app/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.exception_handlers import (
    http_exception_handler,
    request_validation_exception_handler,
)
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.cart_cookie import attach_cart_cookie
from app.core.config import get_settings
from app.core.errors import StorefrontError, storefront_error_handler
from app.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from app.models import user as _user_models  # noqa: F401
from app.models import product as _product_models  # noqa: F401
from app.models import cart as _cart_models  # noqa: F401


# Routers
from app.routers.products import router as products_router
from app.routers.cart import router as cart_router
from app.routers.sitemap import router as sitemap_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.

    Shutdown:
      - No special cleanup needed for sync engine.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(StorefrontError, storefront_error_handler)


@app.exception_handler(StarletteHTTPException)
async def http_error_with_cart_cookie(request: Request, exc: StarletteHTTPException):
    response = await http_exception_handler(request, exc)
    return attach_cart_cookie(request, response)


@app.exception_handler(RequestValidationError)
async def validation_error_with_cart_cookie(request: Request, exc: RequestValidationError):
    response = await request_validation_exception_handler(request, exc)
    return attach_cart_cookie(request, response)


# --- CORS configuration ---
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "https://reeown.eco-dispose.com",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(products_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)

# Crawler-facing routes live at the site root
app.include_router(sitemap_router)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "reeown-storefront"}
