# squad/main.py

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from squad import auth, config
from squad.db import Base, engine
from squad.responses import api_response

# Import routers
from squad.routers import (
    players,
    attendance,
    performance_notes
)

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

# ---------------------------
# Create database tables
# ---------------------------
# This will create all tables from models.py if they don't exist
Base.metadata.create_all(bind=engine)

# ---------------------------
# FastAPI app initialization
# ---------------------------
app = FastAPI(
    title="Squad Management System",
    description="Backend API for managing players, session attendance and performance notes.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# ---------------------------
# CORS setup (allow frontend domains)
# ---------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

# ---------------------------
# Error envelope
# ---------------------------
def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    return f"Invalid value for {location}: {first.get('msg')}" if location else f"Invalid request: {first.get('msg')}"

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return api_response(False, error=str(exc.detail), status_code=exc.status_code, headers=getattr(exc, "headers", None))

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return api_response(False, error=_validation_message(exc), status_code=400)

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return api_response(False, error="Internal server error", status_code=500)

# ---------------------------
# Include routers
# ---------------------------
routers = [
    auth.router,
    players.router,
    attendance.router,
    performance_notes.router
]

for r in routers:
    app.include_router(r)

# ---------------------------
# Root endpoint
# ---------------------------
@app.get("/", tags=["Root"])
def root():
    return {"message": "Welcome to Squad Management API"}
