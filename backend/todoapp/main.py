from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from todoapp.core.config import settings
from todoapp.core.database import get_db, init_db
from todoapp.core.errors import AppError, ErrorKind
from todoapp.core.logging_config import configure_logging
from todoapp.core.scheduler import start_scheduler, stop_scheduler
from todoapp.api.routes import auth, todos

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage app lifecycle events.

    Startup: create missing tables, start the purge scheduler
    Shutdown: stop the scheduler
    """
    init_db()
    if settings.SCHEDULER_ENABLED:
        start_scheduler()
    yield
    stop_scheduler()


app = FastAPI(
    title="Todo API",
    description="Account registration, token auth and per-user todos",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
)

app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(todos.router, prefix=settings.API_PREFIX)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Render every AppError as {"error": ...} with the status for its kind"""
    body = {"error": exc.message}
    headers = None
    if exc.kind is ErrorKind.VALIDATION and exc.fields:
        body["errors"] = exc.fields
    elif exc.kind is ErrorKind.UNAUTHENTICATED:
        headers = {"WWW-Authenticate": "Bearer"}

    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code} {exc.kind.value}")
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Unparseable JSON or wrongly-typed fields: 400 instead of FastAPI's 422"""
    logger.warning(f"{request.method} {request.url.path} -> 400 invalid request body")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.get("/")
async def root():
    """Root endpoint - API information"""
    return {"message": "Todo API", "version": "1.0.0"}


@app.get("/health")
def health(db: Session = Depends(get_db)):
    """Health check endpoint - pings the database"""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {str(e)}")
        return JSONResponse(
            status_code=500,
            content={"status": "unhealthy", "error": "Database connection failed"},
        )
    return {"status": "healthy"}
