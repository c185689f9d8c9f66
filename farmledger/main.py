"""
FarmLedger - Employee and Egg Inventory Records
FastAPI Application Entry Point
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from farmledger import __version__
from farmledger.config import settings
from farmledger.database import engine, Base
from farmledger.exceptions import FarmLedgerError, RecordValidationError
from farmledger.helpers import format_errors
from farmledger.routers import employees as employees_router
from farmledger.routers import egg_inventory as egg_inventory_router
from farmledger.routers import pages as pages_router


def configure_logging():
    """Configure application logging."""
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    logger.info("Starting FarmLedger application...")
    # Startup: Create database tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created/verified")
    yield
    # Shutdown: Clean up resources
    logger.info("Shutting down FarmLedger application...")
    await engine.dispose()


app = FastAPI(
    title="FarmLedger",
    description="Employee registrations and daily egg inventory",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(FarmLedgerError)
async def farmledger_error_handler(request: Request, exc: FarmLedgerError):
    """Render service errors with their status code."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "Internal server error"}
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Bad query parameters or body shape are client errors, reported as 400."""
    error = RecordValidationError(format_errors(exc.errors()))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Log unexpected failures; never leak their details to the caller."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )


# Mount static files
app.mount(
    "/static",
    StaticFiles(directory=str(Path(__file__).resolve().parent / "static")),
    name="static"
)

# Include routers
app.include_router(pages_router.router, tags=["pages"])
app.include_router(employees_router.router, prefix="/api/employee", tags=["employees"])
app.include_router(egg_inventory_router.router, prefix="/api/egg-inventory", tags=["egg-inventory"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}
