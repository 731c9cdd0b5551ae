from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from ...services.production import Production, get_production

router = APIRouter()


def _serialize(asset):
    return asset.model_dump(by_alias=True)


@router.get("/assets")
def list_assets(module: str | None = None, lead_id: str | None = None, production: Production = Depends(get_production)):
    rows = production.assets()
    if module is not None:
        rows = [a for a in rows if a.module == module]
    if lead_id is not None:
        rows = [a for a in rows if a.lead_id == lead_id]
    return {"items": [_serialize(a) for a in rows]}


@router.post("/assets")
def save_asset(payload: dict, production: Production = Depends(get_production)):
    asset_type = payload.get("type")
    title = payload.get("title")
    module = payload.get("module")
    if not (asset_type and title and module):
        raise HTTPException(status_code=400, detail="type, title and module are required")
    try:
        asset = production.save_asset(
            asset_type,
            title,
            payload.get("data") or "",
            module,
            lead_id=payload.get("leadId"),
            metadata=payload.get("metadata"),
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"invalid asset: {e.errors()[0]['msg']}")
    production.push_log(f"VAULT_SAVE: {asset.title} ({asset.type})")
    return _serialize(asset)


@router.post("/assets/import")
def import_assets(payload: dict, production: Production = Depends(get_production)):
    items = payload.get("items")
    if not isinstance(items, list):
        raise HTTPException(status_code=400, detail="items must be a list")
    try:
        imported = production.import_vault(items)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"invalid asset: {e.errors()[0]['msg']}")
    return {"imported": imported, "total": len(production.vault)}


@router.delete("/assets/{asset_id}")
def delete_asset(asset_id: str, production: Production = Depends(get_production)):
    if not production.delete_asset(asset_id):
        raise HTTPException(status_code=404, detail="asset not found")
    return {"ok": True}


@router.delete("/assets")
def clear_assets(production: Production = Depends(get_production)):
    production.clear_vault()
    return {"ok": True}
