from fastapi import APIRouter, Depends, HTTPException

from ...services.production import Production, get_production

router = APIRouter()


@router.get("/logs")
def list_logs(limit: int | None = None, production: Production = Depends(get_production)):
    items = production.logs()
    if limit is not None:
        items = items[: max(limit, 0)]
    return {"items": items}


@router.post("/logs")
def push_log(payload: dict, production: Production = Depends(get_production)):
    message = (payload.get("message") or "").strip()
    if not message:
        raise HTTPException(status_code=400, detail="message is required")
    production.push_log(message)
    return {"ok": True, "entry": production.logs()[0]}
