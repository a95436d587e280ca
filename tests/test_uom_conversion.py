from decimal import Decimal
from types import SimpleNamespace

import pytest

from shared.core.exceptions import ValidationError
from warehouse_service.app.enum.inventory_enum import ConversionOperation
from warehouse_service.app.services.uom_conversion import (
    DualConversion, NoConversion, SingleConversion, available_units, conversion_for_item,
    resolve_conversion, round_quantity, validate_conversion,
)

BOX = SingleConversion(unit="Box", ratio=Decimal("12"))
REJECT = DualConversion(
    unit2="Kg", ratio2=Decimal("1000"), op2=ConversionOperation.divide,
    unit3="Pack", ratio3=Decimal("6"), op3=ConversionOperation.multiply,
)


def test_multiply_converts_to_base_unit_and_scales_price():
    result = resolve_conversion("Pcs", Decimal("5"), BOX, 2, "Box")
    assert result.base_qty == Decimal("24")
    assert result.unit_price == Decimal("60")
    assert result.uom == "Box"
    assert result.ratio == Decimal("12")


def test_divide_converts_to_base_unit():
    result = resolve_conversion("Gram", None, REJECT, 2, "Kg")
    assert result.base_qty == Decimal("0.002")
    assert result.operation == ConversionOperation.divide


def test_second_unit_of_dual_conversion():
    result = resolve_conversion("Gram", None, REJECT, 3, "Pack")
    assert result.base_qty == Decimal("18")


@pytest.mark.parametrize("conversion", [NoConversion(), BOX, REJECT])
def test_base_unit_is_returned_unchanged(conversion):
    result = resolve_conversion("Pcs", Decimal("7.5"), conversion, Decimal("3.25"), "Pcs")
    assert result.base_qty == Decimal("3.25")
    assert result.unit_price == Decimal("7.5")
    assert result.uom == "Pcs"


def test_missing_unit_means_base_unit():
    result = resolve_conversion("Pcs", Decimal("1"), BOX, 4)
    assert result.base_qty == Decimal("4")
    assert result.uom == "Pcs"


@pytest.mark.parametrize("ratio", [Decimal("0"), None])
def test_zero_or_missing_ratio_is_rejected(ratio):
    with pytest.raises(ValidationError):
        resolve_conversion("Pcs", Decimal("1"), SingleConversion("Box", ratio), 2, "Box")
    with pytest.raises(ValidationError):
        validate_conversion(SingleConversion("Box", ratio))


def test_unknown_unit_is_rejected():
    with pytest.raises(ValidationError):
        resolve_conversion("Pcs", Decimal("1"), BOX, 2, "Pallet")


@pytest.mark.parametrize("qty", [0, -1])
def test_non_positive_quantity_is_rejected(qty):
    with pytest.raises(ValidationError):
        resolve_conversion("Pcs", Decimal("1"), NoConversion(), qty)


def test_rounding_is_a_separate_step():
    raw = resolve_conversion("Gram", None, REJECT, 1, "Kg").base_qty
    assert raw == Decimal("0.001")
    assert round_quantity(raw, 1) == Decimal("0.0")
    assert round_quantity(Decimal("0.25"), 1) == Decimal("0.3")
    assert round_quantity(raw, None) == raw


def test_available_units_skip_unusable_ratios():
    assert available_units("Pcs", BOX) == ["Pcs", "Box"]
    assert available_units("Pcs", SingleConversion("Box", None)) == ["Pcs"]
    assert available_units("Gram", REJECT) == ["Gram", "Kg", "Pack"]


@pytest.mark.parametrize("qty", [float("nan"), float("inf"), "NaN"])
def test_non_finite_quantity_is_rejected(qty):
    with pytest.raises(ValidationError):
        resolve_conversion("Pcs", Decimal("1"), NoConversion(), qty)


def test_non_finite_ratio_is_rejected():
    with pytest.raises(ValidationError):
        conversion_for_item(SimpleNamespace(conversion_unit="Box", conversion_ratio=float("inf")))
