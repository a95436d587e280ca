"""
Unit-of-measure conversion.

Stock is always held in an item's base unit. Operators may type quantities
in a secondary unit; this module turns (qty, unit) into the base-unit
quantity plus the matching unit price.

Conversion configuration is one of three shapes:

* ``NoConversion``      item only has its base unit
* ``SingleConversion``  inventory items: 1 unit = ratio base units
* ``DualConversion``    reject items: up to two extra units, each either
                        multiplying or dividing into the base unit

Rounding is not part of the arithmetic; callers that need a display
precision pass the result through ``round_quantity``.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Union

from shared.core.exceptions import ValidationError
from ..enum.inventory_enum import ConversionOperation

ONE = Decimal("1")


@dataclass(frozen=True)
class NoConversion:
    pass


@dataclass(frozen=True)
class SingleConversion:
    unit: str
    ratio: Optional[Decimal]


@dataclass(frozen=True)
class DualConversion:
    unit2: Optional[str] = None
    ratio2: Optional[Decimal] = None
    op2: ConversionOperation = ConversionOperation.multiply
    unit3: Optional[str] = None
    ratio3: Optional[Decimal] = None
    op3: ConversionOperation = ConversionOperation.multiply


ConversionConfig = Union[NoConversion, SingleConversion, DualConversion]


@dataclass(frozen=True)
class ConversionResult:
    base_qty: Decimal
    unit_price: Decimal
    uom: str
    ratio: Decimal
    operation: ConversionOperation


def to_decimal(value, field: str = "value") -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number, got {value!r}")
    if not number.is_finite():
        raise ValidationError(f"{field} must be a finite number, got {value!r}")
    return number


def to_operation(value) -> ConversionOperation:
    if value is None or value == "":
        return ConversionOperation.multiply
    try:
        return ConversionOperation(value)
    except ValueError:
        raise ValidationError(
            f"Conversion operation must be 'multiply' or 'divide', got {value!r}")


def conversion_for_item(item) -> ConversionConfig:
    """Inventory items carry at most one multiply-only secondary unit."""
    if not item.conversion_unit:
        return NoConversion()
    return SingleConversion(unit=item.conversion_unit,
                            ratio=to_decimal(item.conversion_ratio, "conversion_ratio"))


def conversion_for_reject_item(item) -> ConversionConfig:
    if not item.unit2 and not item.unit3:
        return NoConversion()
    return DualConversion(
        unit2=item.unit2,
        ratio2=to_decimal(item.ratio2, "ratio2"),
        op2=to_operation(item.op2),
        unit3=item.unit3,
        ratio3=to_decimal(item.ratio3, "ratio3"),
        op3=to_operation(item.op3),
    )


def _secondary_units(conversion: ConversionConfig):
    """Yield (unit, ratio, operation) for every configured secondary unit."""
    if isinstance(conversion, NoConversion):
        return []
    if isinstance(conversion, SingleConversion):
        return [(conversion.unit, conversion.ratio, ConversionOperation.multiply)]
    if isinstance(conversion, DualConversion):
        return [
            (unit, ratio, op)
            for unit, ratio, op in (
                (conversion.unit2, conversion.ratio2, conversion.op2),
                (conversion.unit3, conversion.ratio3, conversion.op3),
            )
            if unit
        ]
    raise TypeError(f"Unknown conversion config {conversion!r}")


def available_units(base_unit: str, conversion: ConversionConfig) -> list[str]:
    """Units an operator may pick; secondary units without a usable ratio are left out."""
    units = [base_unit]
    for unit, ratio, _ in _secondary_units(conversion):
        if ratio is not None and ratio > 0 and unit not in units:
            units.append(unit)
    return units


def validate_conversion(conversion: ConversionConfig):
    """Raise if a configured secondary unit has no positive ratio."""
    for unit, ratio, _ in _secondary_units(conversion):
        if ratio is None or ratio <= 0:
            raise ValidationError(
                f"Conversion ratio for unit '{unit}' must be greater than zero")


def resolve_conversion(
    base_unit: str,
    price,
    conversion: ConversionConfig,
    qty,
    unit: Optional[str] = None,
) -> ConversionResult:
    qty = to_decimal(qty, "qty")
    price = to_decimal(price, "price") or Decimal("0")

    if qty is None or qty <= 0:
        raise ValidationError("Quantity must be greater than zero")

    if not unit or unit == base_unit:
        return ConversionResult(
            base_qty=qty,
            unit_price=price,
            uom=base_unit,
            ratio=ONE,
            operation=ConversionOperation.multiply,
        )

    for secondary, ratio, operation in _secondary_units(conversion):
        if secondary != unit:
            continue

        if ratio is None or ratio <= 0:
            raise ValidationError(
                f"Unit '{unit}' has no valid conversion ratio")

        if operation == ConversionOperation.divide:
            base_qty, unit_price = qty / ratio, price / ratio
        else:
            base_qty, unit_price = qty * ratio, price * ratio

        return ConversionResult(
            base_qty=base_qty,
            unit_price=unit_price,
            uom=unit,
            ratio=ratio,
            operation=operation,
        )

    raise ValidationError(
        f"Unit '{unit}' is not defined for this item (base unit '{base_unit}')")


def round_quantity(value: Decimal, decimals: Optional[int]) -> Decimal:
    if decimals is None:
        return value
    return value.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
