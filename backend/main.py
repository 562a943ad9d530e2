"""
Nuke Brand Storefront — FastAPI Application

Product catalogue, cart, orders and contact form, with checkout through
PayFast (signed payment forms + ITN callbacks).
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi import HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from config import settings
from domain.errors import DomainError
from routes import cart, contact, health, orders, payments, products

# ── Logging ─────────────────────────────────────────────────────────

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: validate settings, create tables, seed catalogue. Shutdown: stop mail pool."""
    # Ensure data/ directory exists for SQLite
    os.makedirs("data", exist_ok=True)

    settings.validate_production_settings()

    from database import async_session, init_db
    await init_db()
    logger.info("Database initialized")

    try:
        from services.catalog_service import seed_products
        async with async_session() as session:
            await seed_products(session)
    except SQLAlchemyError as e:
        logger.warning(f"Product seeding skipped (non-fatal): {e}")

    yield  # app runs here

    from services.async_executor import shutdown_executor
    shutdown_executor()

    logger.info("Shutting down")


# ── App Factory ─────────────────────────────────────────────────────

app = FastAPI(
    title=f"{settings.store_name} Storefront API",
    description="Storefront backend with PayFast checkout",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routes ──────────────────────────────────────────────────────────

app.include_router(health.router)
app.include_router(products.router)
app.include_router(cart.router)
app.include_router(orders.router)
app.include_router(contact.router)
app.include_router(payments.router)


# ── Exception Handlers ──────────────────────────────────────────────
# Every JSON error has the shape
#   {"success": false, "error": {"code", "message", "details"}}


def _error_response(status_code: int, code: str, message: str, details=None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        headers=headers,
        content={
            "success": False,
            "error": {"code": code, "message": message, "details": details},
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Unhandled errors: full traceback in the log, a generic 500 to the client."""
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return _error_response(500, "internal_server_error", "Internal server error")


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """
    Wrap HTTPExceptions in the error envelope, keeping status and headers.

    DomainErrors get a code derived from their class name
    (NotFoundError → "notfound").
    """
    if isinstance(exc, DomainError):
        code = exc.__class__.__name__.replace("Error", "").lower()
        return _error_response(exc.status_code, code, exc.message, exc.details, exc.headers)

    if isinstance(exc.detail, str):
        return _error_response(exc.status_code, "http_error", exc.detail, headers=exc.headers)
    return _error_response(exc.status_code, "http_error", "Request failed", exc.detail, exc.headers)


# ── Entrypoint ──────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", 5000)), log_level="info")
