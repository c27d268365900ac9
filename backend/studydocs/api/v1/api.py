from fastapi import APIRouter
from .search import router as search_router
from .search_admin import router as search_admin_router

router = APIRouter()

router.include_router(search_router, prefix="/search", tags=["search"])
router.include_router(search_admin_router, prefix="/search/admin", tags=["search-admin"])

# Alias for tests
api_router = router
