from fastapi import APIRouter, Depends

from ..deps import get_registry
from ..services.unit_catalogue import CategoryRegistry

router = APIRouter()


@router.get("/ready")
def ready(registry: CategoryRegistry = Depends(get_registry)):
    return {"ok": True, "categories": len(registry)}
