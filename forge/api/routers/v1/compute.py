from fastapi import APIRouter, Depends

from ...services.compute import ComputeTracker, get_tracker

router = APIRouter()


@router.get("/compute")
def compute_stats(tracker: ComputeTracker = Depends(get_tracker)):
    return tracker.snapshot()
