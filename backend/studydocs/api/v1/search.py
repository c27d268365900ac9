"""
Document search API endpoints for StudyDocs.

This module provides:
- Full-text document search with filters, sorting and highlighting
- Title autocomplete
- Similar document recommendations
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool
from typing import Optional
import logging

from ...core.exceptions import SearchExecutionError
from ...schemas.search import (
    AutocompleteResponse,
    SearchRequest,
    SearchResponse,
    SimilarDocumentsResponse,
)
from ..deps import get_query_engine

router = APIRouter(tags=["search"])
logger = logging.getLogger(__name__)

SEARCH_UNAVAILABLE = "Search is temporarily unavailable"


@router.post("/documents", response_model=SearchResponse, response_model_by_alias=True)
async def search_documents(
    request: SearchRequest,
    engine=Depends(get_query_engine),
) -> SearchResponse:
    """
    Search documents by text, filters and sort order.

    Results are paginated from page 0. A backend failure is returned as 502,
    never as an empty page.
    """
    logger.info(f"Search request: query='{request.query}', page={request.page}, size={request.size}")
    try:
        return await run_in_threadpool(engine.search, request)
    except SearchExecutionError as e:
        logger.error(f"Search failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=SEARCH_UNAVAILABLE)


@router.get("/autocomplete", response_model=AutocompleteResponse, response_model_by_alias=True)
async def autocomplete(
    q: Optional[str] = Query(None, description="Title prefix typed so far"),
    engine=Depends(get_query_engine),
) -> AutocompleteResponse:
    """Title suggestions for a prefix (at most 10, no duplicates)."""
    try:
        suggestions = await run_in_threadpool(engine.autocomplete, q)
    except SearchExecutionError as e:
        logger.error(f"Autocomplete failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=SEARCH_UNAVAILABLE)

    return AutocompleteResponse(query=q or "", suggestions=suggestions)


@router.get("/similar/{document_id}", response_model=SimilarDocumentsResponse, response_model_by_alias=True)
async def similar_documents(
    document_id: int,
    limit: int = Query(10, ge=1, le=50, description="Maximum number of similar documents"),
    engine=Depends(get_query_engine),
) -> SimilarDocumentsResponse:
    """Documents similar in title, description and tags. Unindexed ids return an empty list."""
    try:
        similar = await run_in_threadpool(engine.find_similar, document_id, limit)
    except SearchExecutionError as e:
        logger.error(f"Similarity search failed for document {document_id}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=SEARCH_UNAVAILABLE)

    return SimilarDocumentsResponse(document_id=document_id, similar=similar, count=len(similar))
