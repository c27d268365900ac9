from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from studydocs.api.v1 import api
from studydocs.core.config import settings
from studydocs.search.service import initialize_search_index
import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Make sure the search index exists before serving requests."""
    # Startup
    logger.info("Initializing search index...")
    app.state.search_ready = await run_in_threadpool(initialize_search_index)
    if app.state.search_ready:
        logger.info("Search index initialized successfully")
    else:
        # The API still serves; queries fail with 502 until the index is reachable
        logger.warning("Search index is not available")

    yield

    # Shutdown
    logger.info("Application shutdown completed")


app = FastAPI(
    title="StudyDocs API",
    description="Document management backend: search and indexing",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api.router, prefix=settings.API_V1_STR)

@app.get("/")
async def root():
    return {"message": "StudyDocs API is running"}

@app.get("/health")
async def health_check():
    return {"status": "healthy", "searchEnabled": settings.SEARCH_ENABLED}
