"""
Index administration endpoints. All routes require the X-Admin-Token header.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
import logging

from ...core.exceptions import SearchExecutionError
from ...schemas.search import (
    AuthorReindexResponse,
    IndexStats,
    ReindexDocumentResponse,
    ReindexResponse,
)
from ..deps import get_indexing_pipeline, get_query_engine, verify_admin_token

router = APIRouter(tags=["search-admin"], dependencies=[Depends(verify_admin_token)])
logger = logging.getLogger(__name__)


@router.post("/reindex", response_model=ReindexResponse, response_model_by_alias=True)
async def reindex_all(pipeline=Depends(get_indexing_pipeline)) -> ReindexResponse:
    """
    Rebuild the index from every published document.

    Runs synchronously; per-document failures are counted, not raised.
    """
    logger.info("Admin requested full re-index")
    result = await run_in_threadpool(pipeline.bulk_index_all)
    return ReindexResponse(
        message="Re-indexing completed",
        documents_indexed=result.indexed,
        documents_failed=result.failed,
    )


@router.post("/reindex/author/{user_id}", response_model=AuthorReindexResponse, response_model_by_alias=True)
async def reindex_author(user_id: int, pipeline=Depends(get_indexing_pipeline)) -> AuthorReindexResponse:
    logger.info(f"Admin requested re-index of documents by user {user_id}")
    result = await run_in_threadpool(pipeline.reindex_by_author, user_id)
    return AuthorReindexResponse(
        message="Re-indexing completed",
        user_id=user_id,
        documents_indexed=result.indexed,
        documents_failed=result.failed,
    )


@router.post("/reindex/{document_id}", response_model=ReindexDocumentResponse, response_model_by_alias=True)
async def reindex_document(document_id: int, pipeline=Depends(get_indexing_pipeline)) -> ReindexDocumentResponse:
    """Re-evaluate one document: index it if published, otherwise remove it."""
    logger.info(f"Admin requested re-index of document {document_id}")
    outcome = await run_in_threadpool(pipeline.reindex_document, document_id)
    return ReindexDocumentResponse(
        message="Document re-indexed",
        document_id=document_id,
        outcome=outcome.value,
    )


@router.get("/stats", response_model=IndexStats, response_model_by_alias=True)
async def index_stats(engine=Depends(get_query_engine)) -> IndexStats:
    try:
        return await run_in_threadpool(engine.stats)
    except SearchExecutionError as e:
        logger.error(f"Failed to read index stats: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Search index is unavailable")
