import logging

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import get_settings
from core.exceptions import LegalAssistantError
from db.connection import close_client, ensure_indexes, get_client
from utils.logging import configure_logging

# Routers
from routers.ask_route import router as ask_router
from routers.history_route import router as history_router
from routers.user_route import router as user_router

settings = get_settings()

# Logging Configuration
configure_logging(settings.log_level)
logger = logging.getLogger("legal_assistant")


# Lifespan Events (Startup/Shutdown)
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up Legal Assistant API...")
    await ensure_indexes(get_client(settings)[settings.mongo_db_name])
    yield
    close_client()
    logger.info("Shutting down Legal Assistant API...")


# FastAPI App Setup
app = FastAPI(
    title=settings.app_name,
    description="AI-powered Indian legal assistance API with a free usage quota.",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


@app.exception_handler(LegalAssistantError)
async def legal_assistant_error_handler(request: Request, exc: LegalAssistantError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


# Routers
app.include_router(ask_router, prefix=settings.api_prefix, tags=["Ask Legal"])

app.include_router(history_router, prefix=settings.api_prefix, tags=["History"])

app.include_router(user_router, prefix=settings.api_prefix, tags=["User"])


# Health & Root Endpoints
@app.get("/health", tags=["System"], summary="Health Check")
async def health_check():
    """Check if the API is healthy and running."""
    logger.info("Health check requested")
    return {"status": "ok"}


@app.get("/", tags=["Root"], summary="API Root")
async def root():
    """Welcome message and basic info."""
    return {"message": "Welcome to Legal Assistant API"}
