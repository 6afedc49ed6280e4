"""
EDC Offering Backend: FastAPI application entry point.

This module initializes the FastAPI application exposing the use-case API
of the connector. It configures logging and CORS, connects to MongoDB,
assembles the offering service on startup, and maps offering errors to
HTTP responses.

Environment variables:
    - CORS_ORIGINS: Comma separated list of allowed origins (default: *)
"""

import os
from contextlib import asynccontextmanager

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.errors import OfferingError, PersistenceFailure
from app.core.logging import setup_logging
from app.db.client import build_stores, close_mongo, get_db, init_mongo
from app.routes import offering_routes
from app.services.offering_service import OfferingService
from app.services.transform_service import OfferingTransformer

load_dotenv()

logger = structlog.get_logger(__name__)

# ------------------------------------------------------------------------------
# Application lifecycle
# ------------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the service graph on startup and release it on shutdown.

    The offering service receives its stores and transform stage explicitly;
    routes get it through `offering_routes.get_offering_service`.
    """
    setup_logging()
    await init_mongo()
    asset_store, policy_store, contract_store = build_stores(get_db())
    app.state.offering_service = OfferingService(asset_store, policy_store, contract_store, OfferingTransformer())
    logger.info("app.started")
    yield
    close_mongo()

# ------------------------------------------------------------------------------
# Application initialization
# ------------------------------------------------------------------------------

app = FastAPI(
    title="EDC Offering Backend",
    description="Use-case API to create and update connector offerings",
    version="0.1.0",
    lifespan=lifespan,
)

# ------------------------------------------------------------------------------
# Middleware configuration
# ------------------------------------------------------------------------------

# Adjust CORS_ORIGINS for production deployment.
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ------------------------------------------------------------------------------
# Error handlers
# ------------------------------------------------------------------------------

@app.exception_handler(OfferingError)
async def offering_error_handler(request: Request, exc: OfferingError):
    if isinstance(exc, PersistenceFailure):
        logger.error("offering.persistence_failure", path=request.url.path, step=exc.step, cause=str(exc.cause))
    else:
        logger.info("offering.rejected", path=request.url.path, error=exc.category, message=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors (400), not 422."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg')}" if location else str(first.get("msg", "Invalid request body"))
    return JSONResponse(status_code=400, content={"error": "invalid_input", "message": message})

# ------------------------------------------------------------------------------
# API routes registration
# ------------------------------------------------------------------------------

app.include_router(offering_routes.router, prefix="/wrapper/use-case-api", tags=["Use Case"])
