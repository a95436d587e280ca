from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from shared.core.config import settings
from shared.core.exceptions import (
    InsufficientStockError, NotFoundError, PersistenceError, ValidationError,
)
from warehouse_service.app.crud.inventory import inventory_items_crud
from warehouse_service.app.crud.inventory import stock_transactions_crud as crud
from warehouse_service.app.schemas.inventory.stock_transactions_schemas import (
    StockTransactionCreate, StockTransactionsRequest, StockTransactionUpdate,
)


def _payload(tx_type, *lines, **header):
    return StockTransactionCreate(
        type=tx_type,
        items=[{"item_id": item_id, "qty": qty, "uom": uom} for item_id, qty, uom in lines],
        **header
    )


def _stock(db, item):
    db.refresh(item)
    return item.stock


def test_inbound_in_secondary_unit_adds_base_quantity(db, make_item, staff_user):
    item = make_item("BOLT", stock=0, price=2, conversion_unit="Box", conversion_ratio=12)

    tx = crud.create_transaction(
        db, _payload("inbound", (item.id, 2, "Box"), supplier="Acme", po_number="PO-1"), staff_user)

    assert tx.id.startswith("TRX-")
    line = tx.lines[0]
    assert line.qty == Decimal("24")
    assert line.uom == "Box"
    assert line.unit_price == Decimal("24")
    assert tx.total_value == Decimal("48")
    assert _stock(db, item) == Decimal("24")


def test_outbound_clears_inbound_only_fields(db, make_item, staff_user):
    item = make_item("A", stock=10)
    tx = crud.create_transaction(
        db, _payload("outbound", (item.id, 1, None), supplier="Acme"), staff_user)
    assert tx.supplier is None
    assert _stock(db, item) == Decimal("9")


def test_delete_inbound_restores_stock(db, make_item, staff_user):
    item = make_item("A", stock=50)
    tx = crud.create_transaction(db, _payload("inbound", (item.id, 20, None)), staff_user)
    assert _stock(db, item) == Decimal("70")

    assert crud.delete_transaction(db, tx.id) is True
    assert _stock(db, item) == Decimal("50")
    assert crud.get_transaction(db, tx.id) is None


def test_delete_unknown_transaction_is_a_no_op(db):
    assert crud.delete_transaction(db, "TRX-00000000-000000-000") is False


def test_update_applies_only_the_net_change(db, make_item, staff_user):
    item = make_item("A", stock=100)
    tx = crud.create_transaction(db, _payload("outbound", (item.id, 5, None)), staff_user)
    assert _stock(db, item) == Decimal("95")

    crud.update_transaction(
        db, tx.id, StockTransactionUpdate(**_payload("outbound", (item.id, 8, None)).model_dump()),
        staff_user)
    assert _stock(db, item) == Decimal("92")


def test_update_can_switch_type_and_items(db, make_item, staff_user):
    a = make_item("A", stock=10)
    b = make_item("B", stock=10)
    tx = crud.create_transaction(db, _payload("inbound", (a.id, 4, None)), staff_user)

    updated = crud.update_transaction(
        db, tx.id, StockTransactionUpdate(**_payload("outbound", (b.id, 3, None)).model_dump()),
        staff_user)

    assert updated.type == "outbound"
    assert [l.item_id for l in updated.lines] == [b.id]
    assert _stock(db, a) == Decimal("10")
    assert _stock(db, b) == Decimal("7")


def test_insufficient_stock_rolls_back(db, make_item, staff_user, monkeypatch):
    monkeypatch.setattr(settings, "ENFORCE_STOCK_FLOOR", True)
    a = make_item("A", stock=10)
    b = make_item("B", stock=2)

    with pytest.raises(InsufficientStockError) as exc:
        crud.create_transaction(
            db, _payload("outbound", (a.id, 1, None), (b.id, 5, None)), staff_user)

    assert exc.value.available == Decimal("2")
    assert exc.value.requested == Decimal("5")
    assert _stock(db, a) == Decimal("10")
    assert _stock(db, b) == Decimal("2")
    assert crud.list_transactions(db, StockTransactionsRequest()).total == 0


def test_stock_floor_can_be_disabled(db, make_item, staff_user, monkeypatch):
    monkeypatch.setattr(settings, "ENFORCE_STOCK_FLOOR", False)
    item = make_item("A", stock=1)
    crud.create_transaction(db, _payload("outbound", (item.id, 3, None)), staff_user)
    assert _stock(db, item) == Decimal("-2")


def test_persistence_failure_leaves_stock_and_records_untouched(db, make_item, staff_user, monkeypatch):
    item = make_item("A", stock=40)

    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", failing_commit)
    with pytest.raises(PersistenceError) as exc:
        crud.create_transaction(db, _payload("inbound", (item.id, 5, None)), staff_user)
    monkeypatch.undo()

    assert exc.value.retryable is True
    assert _stock(db, item) == Decimal("40")
    assert crud.list_transactions(db, StockTransactionsRequest()).total == 0


def test_inactive_item_is_rejected_on_create(db, make_item, staff_user):
    item = make_item("A", stock=5, active=False)
    with pytest.raises(ValidationError):
        crud.create_transaction(db, _payload("inbound", (item.id, 1, None)), staff_user)


def test_unknown_item_is_rejected(db, staff_user):
    with pytest.raises(NotFoundError):
        crud.create_transaction(db, _payload("inbound", ("missing", 1, None)), staff_user)


def test_empty_transaction_is_rejected(db, staff_user):
    with pytest.raises(ValidationError):
        crud.create_transaction(db, _payload("inbound"), staff_user)


def test_history_survives_item_deletion(db, make_item, staff_user):
    keep = make_item("KEEP", stock=10)
    gone = make_item("GONE", stock=10)
    tx = crud.create_transaction(
        db, _payload("inbound", (keep.id, 2, None), (gone.id, 3, None)), staff_user)

    inventory_items_crud.delete_item(db, gone.id)
    stored = crud.get_transaction_or_404(db, tx.id)
    assert {l.sku for l in stored.lines} == {"KEEP", "GONE"}

    # the dangling line is skipped, the rest is reverted
    assert crud.delete_transaction(db, tx.id) is True
    assert _stock(db, keep) == Decimal("10")


def test_search_terms_are_anded_across_fields(db, make_item, staff_user):
    bolt = make_item("BOLT-10", name="Hex bolt", stock=100)
    nut = make_item("NUT-10", name="Hex nut", stock=100)

    crud.create_transaction(
        db, _payload("inbound", (bolt.id, 1, None), supplier="Acme Steel"), staff_user)
    crud.create_transaction(
        db, _payload("inbound", (nut.id, 1, None), supplier="Acme Steel"), staff_user)
    crud.create_transaction(
        db, _payload("outbound", (bolt.id, 1, None), notes="line 4"), staff_user)

    def search(text, **kwargs):
        return crud.list_transactions(db, StockTransactionsRequest(search=text, **kwargs)).total

    assert search("acme") == 2
    assert search("acme bolt") == 1
    assert search("hex") == 3
    assert search("hex", type="outbound") == 1
    assert search("acme nothing-matches") == 0


def test_date_range_end_is_inclusive(db, make_item, staff_user):
    item = make_item("A", stock=10)
    crud.create_transaction(
        db, _payload("inbound", (item.id, 1, None), date=datetime(2024, 3, 5, 18, 30)), staff_user)

    def count(start, end):
        return crud.list_transactions(
            db, StockTransactionsRequest(start_date=start, end_date=end)).total

    assert count("2024-03-05", "2024-03-05") == 1
    assert count("2024-03-06", None) == 0
    assert count(None, "2024-03-04") == 0


def test_unknown_type_filter_is_rejected(db):
    with pytest.raises(ValidationError):
        crud.list_transactions(db, StockTransactionsRequest(type="sideways"))


def test_deleting_partly_issued_inbound_goes_through(db, make_item, staff_user, monkeypatch):
    monkeypatch.setattr(settings, "ENFORCE_STOCK_FLOOR", True)
    item = make_item("A", stock=0)
    inbound = crud.create_transaction(db, _payload("inbound", (item.id, 20, None)), staff_user)
    crud.create_transaction(db, _payload("outbound", (item.id, 15, None)), staff_user)

    assert crud.delete_transaction(db, inbound.id) is True
    assert _stock(db, item) == Decimal("-15")
    assert crud.get_transaction(db, inbound.id) is None


def _failing_commit():
    raise OperationalError("COMMIT", {}, Exception("disk I/O error"))


def test_failed_update_keeps_old_record_and_stock(db, make_item, staff_user, monkeypatch):
    item = make_item("A", stock=100)
    tx = crud.create_transaction(
        db, _payload("outbound", (item.id, 5, None), notes="first"), staff_user)

    monkeypatch.setattr(db, "commit", _failing_commit)
    with pytest.raises(PersistenceError):
        crud.update_transaction(
            db, tx.id,
            StockTransactionUpdate(**_payload("outbound", (item.id, 8, None), notes="second").model_dump()),
            staff_user)
    monkeypatch.undo()

    stored = crud.get_transaction_or_404(db, tx.id)
    assert stored.notes == "first"
    assert [l.qty for l in stored.lines] == [Decimal("5")]
    assert _stock(db, item) == Decimal("95")


def test_failed_delete_keeps_record_and_stock(db, make_item, staff_user, monkeypatch):
    item = make_item("A", stock=50)
    tx = crud.create_transaction(db, _payload("inbound", (item.id, 20, None)), staff_user)

    monkeypatch.setattr(db, "commit", _failing_commit)
    with pytest.raises(PersistenceError):
        crud.delete_transaction(db, tx.id)
    monkeypatch.undo()

    assert crud.get_transaction(db, tx.id) is not None
    assert _stock(db, item) == Decimal("70")
