import math

from creamery_units.schemas import ScaleLine, ScaledLine
from creamery_units.services.unit_conversion import ConversionEngine, UnitConversionError, check_value


def scale_lines(engine: ConversionEngine, lines: list[ScaleLine], factor: float = 1.0) -> list[ScaledLine]:
    """
    Scale recipe lines for a production batch and express each in its stock unit.

    Raises UnitConversionError naming the first line whose unit cannot be
    converted; a failed line is never replaced by a default quantity.
    """
    if isinstance(factor, bool) or not isinstance(factor, (int, float)) \
            or not math.isfinite(factor) or factor <= 0:
        raise ValueError(f"Scale factor must be a positive finite number, got {factor!r}")

    results = []
    for line in lines:
        # 1. Scale in the recipe's own unit
        qty_needed = line.qty * factor
        invalid = check_value(qty_needed)
        if invalid is not None:
            raise UnitConversionError(invalid, line.label)

        # 2. Convert to the stock unit if it differs
        target = line.stock_unit or line.unit
        qty_stock = engine.convert_or_raise(qty_needed, line.unit, target, label=line.label)

        results.append(ScaledLine(
            label=line.label,
            qty=qty_stock,
            unit=target,
            source_qty=qty_needed,
            source_unit=line.unit,
        ))

    return results
