import secrets
from fastapi import Depends, HTTPException, status, Header
from sqlalchemy.orm import Session
from typing import Optional

from ..database import get_db
from ..core.config import settings
from ..search.service import build_indexing_pipeline, build_query_engine


def get_query_engine():
    """
    Dependency providing the query engine (or its disabled stand-in).
    """
    return build_query_engine()


def get_indexing_pipeline(db: Session = Depends(get_db)):
    """
    Dependency providing an indexing pipeline bound to the request's session.
    """
    return build_indexing_pipeline(db)


async def verify_admin_token(x_admin_token: Optional[str] = Header(None)) -> None:
    """
    Dependency guarding the index administration endpoints.
    """
    if not x_admin_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Admin-Token header is required",
        )

    if not secrets.compare_digest(x_admin_token, settings.ADMIN_API_TOKEN):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin token",
        )
