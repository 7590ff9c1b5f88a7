"""
Pydantic schemas for the Creamery Units API.
"""

from typing import Optional

from pydantic import BaseModel, Field


# --- Catalogue ---

class UnitOut(BaseModel):
    symbol: str
    name: str
    factor: float


class CategoryOut(BaseModel):
    type: str
    name: str
    description: str = ""
    base_unit: str
    units: list[UnitOut]


class CategoryListOut(BaseModel):
    categories: list[CategoryOut]


# --- Unit Conversion ---

class UnitConvertRequest(BaseModel):
    qty: float
    from_unit: str
    to_unit: str
    decimals: Optional[int] = Field(default=None, ge=0, le=10)


class UnitConvertResponse(BaseModel):
    qty: float
    unit: str
    from_unit: str
    display: float  # qty rounded for display


# --- Recipe Scaling ---

class ScaleLine(BaseModel):
    label: str
    qty: float = Field(allow_inf_nan=False)
    unit: str
    stock_unit: Optional[str] = None  # defaults to `unit`


class ScaledLine(BaseModel):
    label: str
    qty: float
    unit: str
    source_qty: float
    source_unit: str


class RecipeScaleRequest(BaseModel):
    factor: float = Field(default=1.0, gt=0, allow_inf_nan=False)
    lines: list[ScaleLine]


class RecipeScaleResponse(BaseModel):
    factor: float
    lines: list[ScaledLine]
