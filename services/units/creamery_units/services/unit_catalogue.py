"""
Unit catalogue for the creamery dashboard.

Holds the measurement categories (weight, dairy liquids, packaging, count) and
their units. Every unit carries a factor to its category's base unit, so each
conversion is two multiplications through the base unit.

The registry is built once at startup and is read-only afterwards.
"""

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

logger = logging.getLogger("creamery.catalogue")


class CatalogueError(ValueError):
    """Raised when the catalogue breaks the authoring contract."""
    pass


# --- Records ---

@dataclass(frozen=True)
class UnitDefinition:
    symbol: str
    name: str
    factor: float  # base units per one of this unit

    def to_dict(self):
        return {"symbol": self.symbol, "name": self.name, "factor": self.factor}


@dataclass(frozen=True)
class MeasurementCategory:
    type: str
    name: str
    units: Tuple[UnitDefinition, ...]
    description: str = ""

    @property
    def base_unit(self) -> UnitDefinition:
        for unit in self.units:
            if unit.factor == 1:
                return unit
        raise CatalogueError(f"Category '{self.type}' has no base unit")

    def get_unit(self, symbol: str) -> Optional[UnitDefinition]:
        for unit in self.units:
            if unit.symbol == symbol:
                return unit
        return None

    def has_unit(self, symbol: str) -> bool:
        return self.get_unit(symbol) is not None

    def to_dict(self):
        return {
            "type": self.type,
            "name": self.name,
            "description": self.description,
            "base_unit": self.base_unit.symbol,
            "units": [u.to_dict() for u in self.units],
        }


# --- Data Tables ---

# Each symbol belongs to exactly one category, so first-match lookup always
# lands on the category that lists it. Dry goods and mix-ins are weighed;
# their scoop measures get their own symbols next to the liquid ones.
UNIT_CATEGORIES = [
    {
        "type": "weight",
        "name": "Weight",
        "description": "Sugar, cocoa powder, stabilizers, chocolate chips, nuts, and other weighed ingredients",
        "units": [
            {"symbol": "g", "name": "Grams", "factor": 1.0},
            {"symbol": "mg", "name": "Milligrams", "factor": 0.001},
            {"symbol": "kg", "name": "Kilograms", "factor": 1000.0},
            {"symbol": "oz", "name": "Ounces", "factor": 28.3495},
            {"symbol": "lb", "name": "Pounds", "factor": 453.592},
            {"symbol": "cup_dry", "name": "Cups (dry)", "factor": 128.0},  # approximate
            {"symbol": "tbsp_dry", "name": "Tablespoons (dry)", "factor": 15.0},  # approximate
            {"symbol": "tsp_dry", "name": "Teaspoons (dry)", "factor": 5.0},  # approximate
        ],
    },
    {
        "type": "dairy_liquid",
        "name": "Dairy & Liquid Ingredients",
        "description": "Units for milk, cream, liquid flavorings, and other liquid ingredients",
        "units": [
            {"symbol": "ml", "name": "Milliliters", "factor": 1.0},
            {"symbol": "l", "name": "Liters", "factor": 1000.0},
            {"symbol": "drop", "name": "Drops", "factor": 0.05},
            {"symbol": "tsp", "name": "Teaspoons", "factor": 4.92892},
            {"symbol": "tbsp", "name": "Tablespoons", "factor": 14.7868},
            {"symbol": "fl_oz", "name": "Fluid Ounces", "factor": 29.5735},
            {"symbol": "cup", "name": "Cups", "factor": 236.588},
            {"symbol": "pt", "name": "Pints", "factor": 473.176},
            {"symbol": "qt", "name": "Quarts", "factor": 946.353},
            {"symbol": "gal", "name": "Gallons", "factor": 3785.41},
            {"symbol": "tube", "name": "Tubes", "factor": 500.0},
        ],
    },
    {
        "type": "packaging",
        "name": "Packaging & Cones",
        "description": "Units for waffle cones, sugar cones, cups, and packaging supplies",
        "units": [
            {"symbol": "unit", "name": "Units", "factor": 1.0},
            {"symbol": "dz", "name": "Dozens", "factor": 12.0},
            {"symbol": "box", "name": "Boxes", "factor": 24.0},  # 24 units per box
            {"symbol": "case", "name": "Cases", "factor": 144.0},  # 6 boxes per case
        ],
    },
    {
        "type": "count",
        "name": "Count",
        "description": "Loose items counted one by one",
        "units": [
            {"symbol": "each", "name": "Each", "factor": 1.0},
            {"symbol": "pair", "name": "Pairs", "factor": 2.0},
        ],
    },
]


# --- Validation ---

def _check_factor(category_type: str, symbol: str, factor) -> float:
    if isinstance(factor, bool) or not isinstance(factor, (int, float)):
        raise CatalogueError(
            f"Unit '{symbol}' in '{category_type}' has a non-numeric factor: {factor!r}"
        )
    if not math.isfinite(factor) or factor <= 0:
        raise CatalogueError(
            f"Unit '{symbol}' in '{category_type}' needs a positive finite factor, got {factor!r}"
        )
    return float(factor)


def validate_categories(categories: Iterable[MeasurementCategory]) -> None:
    """
    Enforce the authoring contract.

    - category types are non-empty and unique
    - every category has units, and exactly one of them has factor 1
    - every factor is a positive finite number
    - no symbol repeats inside one category
    """
    seen_types = set()
    for category in categories:
        if not isinstance(category.type, str) or not category.type:
            raise CatalogueError("Category type must not be empty")
        if category.type in seen_types:
            raise CatalogueError(f"Duplicate category type '{category.type}'")
        seen_types.add(category.type)

        if not category.units:
            raise CatalogueError(f"Category '{category.type}' has no units")

        symbols = set()
        base_units = []
        for unit in category.units:
            if not isinstance(unit.symbol, str) or not unit.symbol:
                raise CatalogueError(f"Empty unit symbol in '{category.type}'")
            if unit.symbol in symbols:
                raise CatalogueError(
                    f"Duplicate unit symbol '{unit.symbol}' in '{category.type}'"
                )
            symbols.add(unit.symbol)
            _check_factor(category.type, unit.symbol, unit.factor)
            if unit.factor == 1:
                base_units.append(unit.symbol)

        if len(base_units) != 1:
            raise CatalogueError(
                f"Category '{category.type}' needs exactly one base unit (factor 1), "
                f"found {len(base_units)}: {base_units}"
            )


# --- Registry ---

class CategoryRegistry:
    """Read-only set of measurement categories, in definition order."""

    def __init__(self, categories: Iterable[MeasurementCategory]):
        ordered = tuple(categories)
        validate_categories(ordered)
        self._ordered = ordered
        self._by_type = MappingProxyType({c.type: c for c in ordered})

    @classmethod
    def from_dicts(cls, raw: Iterable[dict]) -> "CategoryRegistry":
        categories = []
        for item in raw:
            if not isinstance(item, dict):
                raise CatalogueError(f"Category entry must be an object, got {item!r}")
            try:
                category_type = item["type"]
                units = tuple(
                    UnitDefinition(
                        symbol=u["symbol"],
                        name=u.get("name", u["symbol"]),
                        factor=_check_factor(category_type, u["symbol"], u["factor"]),
                    )
                    for u in item["units"]
                )
            except (KeyError, TypeError, AttributeError) as e:
                raise CatalogueError(f"Malformed catalogue entry {item!r}: {e}") from e

            categories.append(
                MeasurementCategory(
                    type=category_type,
                    name=item.get("name", category_type),
                    description=item.get("description", ""),
                    units=units,
                )
            )
        return cls(categories)

    @property
    def categories(self) -> Mapping[str, MeasurementCategory]:
        return self._by_type

    def list_categories(self) -> Tuple[MeasurementCategory, ...]:
        return self._ordered

    def get_category(self, category_type: str) -> Optional[MeasurementCategory]:
        return self._by_type.get(category_type)

    def list_units(self, category_type: str) -> Tuple[UnitDefinition, ...]:
        category = self.get_category(category_type)
        if category is None:
            return ()
        return category.units

    def find_unit(self, symbol: str) -> Optional[Tuple[MeasurementCategory, UnitDefinition]]:
        """First category (in registry order) that lists the symbol."""
        for category in self._ordered:
            unit = category.get_unit(symbol)
            if unit is not None:
                return category, unit
        return None

    def categories_for_symbol(self, symbol: str) -> Tuple[MeasurementCategory, ...]:
        return tuple(c for c in self._ordered if c.has_unit(symbol))

    def convertible_units(self, symbol: str) -> Tuple[UnitDefinition, ...]:
        """Units a quantity in `symbol` can be converted into."""
        found = self.find_unit(symbol)
        if found is None:
            return ()
        return found[0].units

    def ambiguous_symbols(self) -> dict[str, Tuple[str, ...]]:
        """Symbols listed by more than one category, mapped to those category types."""
        owners: dict[str, list[str]] = {}
        for category in self._ordered:
            for unit in category.units:
                owners.setdefault(unit.symbol, []).append(category.type)
        return {s: tuple(types) for s, types in owners.items() if len(types) > 1}

    def __len__(self) -> int:
        return len(self._ordered)

    def __contains__(self, category_type) -> bool:
        return category_type in self._by_type


def load_registry(path: Optional[str] = None) -> CategoryRegistry:
    """
    Build the registry from a JSON file, or from the built-in table.

    Raises CatalogueError if the source is unreadable or breaks the contract.
    """
    if path:
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogueError(f"Cannot read unit catalogue from {path}: {e}") from e
        if isinstance(raw, dict):
            raw = raw.get("categories")
        if not isinstance(raw, list):
            raise CatalogueError(f"Unit catalogue {path} must hold a list of categories")
        source = path
    else:
        raw = UNIT_CATEGORIES
        source = "built-in table"

    registry = CategoryRegistry.from_dicts(raw)
    logger.info(f"Loaded {len(registry)} unit categories from {source}")

    ambiguous = registry.ambiguous_symbols()
    if ambiguous:
        listing = ", ".join(f"{s} -> {'/'.join(types)}" for s, types in ambiguous.items())
        logger.warning(f"Unit symbols shared across categories resolve to the first listed: {listing}")

    return registry
