"""
Router for unit catalogue and conversion.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_engine, get_registry
from ..schemas import (
    CategoryListOut,
    CategoryOut,
    RecipeScaleRequest,
    RecipeScaleResponse,
    UnitConvertRequest,
    UnitConvertResponse,
    UnitOut,
)
from ..services.recipe_scaling import scale_lines
from ..services.unit_catalogue import CategoryRegistry
from ..services.unit_conversion import ConversionEngine, UnitConversionError, check_value, format_qty
from ..settings import settings

logger = logging.getLogger("creamery.units")

router = APIRouter()


@router.get("/categories", response_model=CategoryListOut)
def list_categories(registry: CategoryRegistry = Depends(get_registry)):
    """All categories in catalogue order, for the category selector."""
    return {"categories": [c.to_dict() for c in registry.list_categories()]}


@router.get("/categories/{category_type}", response_model=CategoryOut)
def get_category(category_type: str, registry: CategoryRegistry = Depends(get_registry)):
    category = registry.get_category(category_type)
    if category is None:
        raise HTTPException(status_code=404, detail=f"Unknown unit category '{category_type}'")
    return category.to_dict()


@router.get("/categories/{category_type}/units", response_model=list[UnitOut])
def list_units(category_type: str, registry: CategoryRegistry = Depends(get_registry)):
    # Unknown category -> empty list; "no units to show" is a valid selector state
    return [u.to_dict() for u in registry.list_units(category_type)]


@router.get("/convertible/{symbol}", response_model=list[UnitOut])
def list_convertible_units(symbol: str, registry: CategoryRegistry = Depends(get_registry)):
    """Units a quantity in `symbol` can be converted into."""
    return [u.to_dict() for u in registry.convertible_units(symbol)]


@router.post("/convert", response_model=UnitConvertResponse)
def convert_units(
    req: UnitConvertRequest,
    engine: ConversionEngine = Depends(get_engine),
):
    """
    Convert a quantity from one unit to another.
    """
    result = engine.convert(req.qty, req.from_unit, req.to_unit)
    if not result.ok:
        logger.warning(f"Conversion rejected ({result.kind}): {result.message}")
        raise HTTPException(status_code=400, detail=result.to_dict())

    # Identity passes NaN/inf through untouched; JSON cannot carry them
    invalid = check_value(result.value)
    if invalid is not None:
        raise HTTPException(status_code=400, detail=invalid.to_dict())

    decimals = req.decimals if req.decimals is not None else settings.display_decimals

    return UnitConvertResponse(
        **result.to_dict(),
        display=format_qty(result.value, decimals),
    )


@router.post("/scale", response_model=RecipeScaleResponse)
def scale_recipe(
    req: RecipeScaleRequest,
    engine: ConversionEngine = Depends(get_engine),
):
    """
    Scale recipe lines by `factor` and express each in its stock unit.
    """
    try:
        lines = scale_lines(engine, req.lines, req.factor)
    except UnitConversionError as e:
        logger.warning(f"Recipe scaling failed: {e}")
        raise HTTPException(status_code=400, detail=e.to_dict())

    return RecipeScaleResponse(factor=req.factor, lines=lines)
