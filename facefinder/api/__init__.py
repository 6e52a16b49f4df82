"""API v1 router initialization."""
from fastapi import APIRouter

from .records import router as records_router

# Create v1 router
router = APIRouter()

router.include_router(records_router, tags=["records"])
