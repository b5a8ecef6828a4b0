from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from pydantic import BaseModel, ValidationError
from typing import Any, Optional
from sqlalchemy.exc import SQLAlchemyError
import logging

from config.settings import settings
from config.validate_env import validate_env_variables
from db.session import create_tables
from middleware.logging import LoggingMiddleware, ErrorLoggingMiddleware

from api.click import router as click_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

class ErrorEnvelope(BaseModel):
    """Body of every non-webhook failure: transport and infrastructure faults"""
    success: bool = False
    message: str
    data: Optional[Any] = None

def error_response(message: str, data: Any = None) -> dict:
    return ErrorEnvelope(message=message, data=data).model_dump()

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info("Starting Click Payments API...")

    # Missing Click credentials are reported, not fatal
    validate_env_variables()

    create_tables()
    logger.info("Database tables created/verified")

    yield

    # Shutdown
    logger.info("Shutting down Click Payments API...")

app = FastAPI(
    title="Click Payments API",
    description="Prepare/complete webhooks for the Click payment gateway",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(ErrorLoggingMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Business failures never reach these handlers: they are HTTP 200 bodies
# carrying a Click error code. Only transport and infrastructure faults do.

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.detail if isinstance(exc.detail, str) else str(exc.detail))
    )

@app.exception_handler(RequestValidationError)
@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: Exception):
    """Handle malformed webhook payloads"""
    logger.warning(f"Malformed request to {request.url.path}: {exc}")
    return JSONResponse(
        status_code=400,
        content=error_response("Malformed request", data=_validation_errors(exc))
    )

@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Handle record store failures"""
    logger.error(f"Database failure on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=503,
        content=error_response("Service temporarily unavailable")
    )

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=error_response("Internal server error")
    )

def _validation_errors(exc: Exception):
    return [
        {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg")}
        for err in exc.errors()
    ]

# Health check
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "Click Payments API is running"}

# Root endpoint
@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Click Payments API",
        "version": "1.0.0",
        "docs": "/docs",
        "redoc": "/redoc"
    }

app.include_router(click_router, prefix="/api")

# Click merchant cabinets are usually configured with the bare /click/* URLs
app.include_router(click_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=True,
        log_level="info"
    )
