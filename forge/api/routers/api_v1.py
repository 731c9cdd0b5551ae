from fastapi import APIRouter

from .v1 import logs, assets, leads, compute

router = APIRouter()

router.include_router(logs.router, prefix="", tags=["logs"])
router.include_router(assets.router, prefix="", tags=["assets"])
router.include_router(leads.router, prefix="", tags=["leads"])
router.include_router(compute.router, prefix="", tags=["compute"])
