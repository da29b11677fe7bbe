"""API v1 routers."""

from fastapi import APIRouter

from .billing import router as billing_router
from .risk import router as risk_router

router = APIRouter(prefix="/v1")

router.include_router(risk_router)
router.include_router(billing_router)

__all__ = ["router", "risk_router", "billing_router"]
