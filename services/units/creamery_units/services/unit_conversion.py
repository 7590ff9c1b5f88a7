"""
Unit Conversion Service.

Converts quantities between units of the same measurement category. Results
are tagged values: `Converted` on success, or one of `UnknownUnit`,
`UnitsIncompatible`, `InvalidValue`. Nothing here raises for a bad
conversion; callers branch on `result.ok`.
"""

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import ClassVar, Literal, Optional, Union

from .unit_catalogue import CategoryRegistry

# --- Types ---

FailureKind = Literal["unknown_unit", "units_incompatible", "invalid_value"]


@dataclass(frozen=True)
class Converted:
    value: float
    from_unit: str
    to_unit: str

    ok: ClassVar[bool] = True

    def to_dict(self):
        return {"qty": self.value, "unit": self.to_unit, "from_unit": self.from_unit}


@dataclass(frozen=True)
class UnknownUnit:
    symbol: str

    ok: ClassVar[bool] = False
    kind: ClassVar[FailureKind] = "unknown_unit"

    @property
    def message(self) -> str:
        return f"Unknown unit '{self.symbol}'"

    def to_dict(self):
        return {"kind": self.kind, "message": self.message, "symbol": self.symbol}


@dataclass(frozen=True)
class UnitsIncompatible:
    from_unit: str
    to_unit: str
    from_category: str
    to_category: Optional[str]

    ok: ClassVar[bool] = False
    kind: ClassVar[FailureKind] = "units_incompatible"

    @property
    def message(self) -> str:
        where = f"'{self.to_category}'" if self.to_category else "another category"
        return (
            f"Cannot convert '{self.from_unit}' ({self.from_category}) "
            f"to '{self.to_unit}' ({where})"
        )

    def to_dict(self):
        return {
            "kind": self.kind,
            "message": self.message,
            "from_unit": self.from_unit,
            "to_unit": self.to_unit,
            "from_category": self.from_category,
            "to_category": self.to_category,
        }


@dataclass(frozen=True)
class InvalidValue:
    reason: str
    value: object = None

    ok: ClassVar[bool] = False
    kind: ClassVar[FailureKind] = "invalid_value"

    @property
    def message(self) -> str:
        return f"Invalid quantity {self.value!r}: {self.reason}"

    def to_dict(self):
        # The raw value may be NaN/inf, which JSON cannot carry
        return {"kind": self.kind, "message": self.message, "reason": self.reason}


ConversionFailure = Union[UnknownUnit, UnitsIncompatible, InvalidValue]
ConversionResult = Union[Converted, ConversionFailure]


class UnitConversionError(Exception):
    """Raised by callers that cannot continue past a failed conversion."""

    def __init__(self, failure: ConversionFailure, label: Optional[str] = None):
        self.failure = failure
        self.label = label
        prefix = f"{label}: " if label else ""
        super().__init__(f"{prefix}{failure.message}")

    def to_dict(self):
        detail = self.failure.to_dict()
        if self.label:
            detail["label"] = self.label
            detail["message"] = str(self)
        return detail


# --- Core Functions ---

def check_value(value) -> Optional[InvalidValue]:
    """Return an InvalidValue if `value` is not a finite real number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return InvalidValue("quantity must be a number", value)
    try:
        if not math.isfinite(value):
            return InvalidValue("quantity must be finite", value)
    except OverflowError:
        return InvalidValue("quantity is out of range", value)
    return None


class ConversionEngine:
    """
    Converts between unit symbols of one registry.

    The registry is shared read-only; the engine keeps no other state, so one
    instance can serve any number of threads.
    """

    def __init__(self, registry: CategoryRegistry):
        self.registry = registry

    def convert(self, value: float, from_symbol: str, to_symbol: str) -> ConversionResult:
        # 1. Identity: no lookup, no arithmetic
        if from_symbol == to_symbol:
            return Converted(value, from_symbol, to_symbol)

        invalid = check_value(value)
        if invalid is not None:
            return invalid

        # 2. First category listing the source symbol is the candidate
        found = self.registry.find_unit(from_symbol)
        if found is None:
            return UnknownUnit(from_symbol)
        category, from_def = found

        # 3. Target must live in that same category
        to_def = category.get_unit(to_symbol)
        if to_def is None:
            others = self.registry.categories_for_symbol(to_symbol)
            if not others:
                return UnknownUnit(to_symbol)
            return UnitsIncompatible(from_symbol, to_symbol, category.type, others[0].type)

        # 4. Always through the base unit
        try:
            base_qty = value * from_def.factor
            result = base_qty / to_def.factor
        except OverflowError:
            return InvalidValue("quantity is out of range", value)
        if not math.isfinite(result):
            return InvalidValue("converted quantity is out of range", value)

        return Converted(result, from_symbol, to_symbol)

    def convert_or_raise(
        self,
        value: float,
        from_symbol: str,
        to_symbol: str,
        label: Optional[str] = None,
    ) -> float:
        """Like `convert`, but raises UnitConversionError on failure."""
        result = self.convert(value, from_symbol, to_symbol)
        if not result.ok:
            raise UnitConversionError(result, label)
        return result.value


def format_qty(qty: float, decimals: int = 3) -> float:
    """
    Round for display, half-up, e.g. 0.236588 -> 0.237.

    Goes through Decimal so 2.0005 rounds to 2.001 rather than 2.0.
    Non-finite values are returned unchanged.
    """
    if not math.isfinite(qty):
        return qty
    exponent = Decimal(1).scaleb(-decimals)
    try:
        return float(Decimal(str(qty)).quantize(exponent, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # too many digits for the decimal context
        return round(qty, decimals)
