from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from ...models.models import AssetRecord, Lead
from ...services.engine import Engine, get_engine

router = APIRouter()


@router.post("/leads")
def generate_leads(payload: dict, engine: Engine = Depends(get_engine)):
    market = payload.get("market")
    niche = payload.get("niche")
    if not (market and niche):
        raise HTTPException(status_code=400, detail="market and niche are required")
    count = payload.get("count")
    if count is None:
        count = 5
    try:
        count = int(count)
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail="count must be an integer")
    if count < 1:
        raise HTTPException(status_code=400, detail="count must be at least 1")
    result = engine.generate_leads(market, niche, count)
    return result.model_dump(by_alias=True)


@router.post("/forge")
def orchestrate(payload: dict, engine: Engine = Depends(get_engine)):
    if not payload.get("lead"):
        raise HTTPException(status_code=400, detail="lead is required")
    try:
        lead = Lead.model_validate(payload["lead"])
        assets = [AssetRecord.model_validate(a) for a in payload.get("assets") or []]
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"invalid payload: {e.errors()[0]['msg']}")
    return {"package": engine.orchestrate_business_package(lead, assets)}
