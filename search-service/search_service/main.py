"""
FastAPI application for Search Service
"""
from fastapi import FastAPI, Depends, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional, Union
import logging

from .config import settings
from .database import db, get_search_repository
from .dependencies import get_current_user
from .domain.repositories import ISearchRepository
from .exceptions import SearchError
from .query import build_search_query
from .schemas import (
    User,
    MessageResponse,
    TabSearchResponse,
    OverallSearchResponse,
)
from .service import SearchService

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.DEBUG else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info("Starting Search Service...")

    await db.connect()
    logger.info("Database connected")

    logger.info(f"Search Service started successfully on port {settings.PORT}")

    yield

    # Shutdown
    logger.info("Shutting down Search Service...")
    await db.disconnect()
    logger.info("Search Service shut down successfully")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Instagram Search Service - Weighted search across users, posts and quilts",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SearchError)
async def search_error_handler(request: Request, exc: SearchError):
    return JSONResponse(
        status_code=exc.status,
        content={"message": exc.message},
    )


# Helper function to get service instance
def get_search_service(
    repository: ISearchRepository = Depends(get_search_repository),
) -> SearchService:
    """Get SearchService instance with dependencies"""
    return SearchService(repository)


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": settings.APP_NAME}


@app.get(
    "/api/v1/search",
    response_model=Union[TabSearchResponse, OverallSearchResponse],
    responses={400: {"model": MessageResponse}, 500: {"model": MessageResponse}},
    tags=["Search"],
    summary="Search users, posts and quilts",
)
@app.get(
    "/search",
    response_model=Union[TabSearchResponse, OverallSearchResponse],
    responses={400: {"model": MessageResponse}, 500: {"model": MessageResponse}},
    tags=["Search"],
    summary="Search users, posts and quilts",
)
async def search(
    q: Optional[str] = Query(None, description="Search text"),
    tab: Optional[str] = Query(
        None, description="overall, users, social, marketplace or quilts"
    ),
    limit: Optional[str] = Query(None, description="Page size for entity tabs (1-50)"),
    offset: Optional[str] = Query(None, description="Offset for entity tabs"),
    section_limit: Optional[str] = Query(
        None, alias="sectionLimit", description="Items per section in overall (1-10)"
    ),
    current_user: User = Depends(get_current_user),
    service: SearchService = Depends(get_search_service),
):
    """
    Search across entity types

    - **overall**: top results of each entity type, not pageable
    - **users / social / marketplace / quilts**: a single paginated list
    - Queries shorter than two characters return an empty result
    - Paging parameters out of range are clamped
    """
    search_query = build_search_query(
        q=q, tab=tab, limit=limit, offset=offset, section_limit=section_limit
    )
    return await service.search(search_query, current_user.id)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "search_service.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
