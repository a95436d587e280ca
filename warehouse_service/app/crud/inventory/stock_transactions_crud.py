# app/crud/inventory/stock_transactions_crud.py
import logging
from datetime import datetime, time, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Tuple
from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from shared.core.config import settings
from shared.core.exceptions import (
    InsufficientStockError, NotFoundError, PersistenceError, ValidationError, WarehouseError,
)
from shared.core.schemas import UserToken
from shared.helpers.document_id_helper import TRANSACTION_PREFIX, generate_unique_document_id
from ...enum.inventory_enum import TransactionType
from ...models.inventory.stock_transactions import StockTransaction, StockTransactionLine
from ...schemas.inventory.stock_transactions_schemas import (
    StockTransactionCreate, StockTransactionLineCreate, StockTransactionOut, StockTransactionUpdate,
    StockTransactionsRequest, StockTransactionsResponse,
)
from ...services.stock_ledger import LedgerResult, Movement, StockLedger
from ...services.uom_conversion import conversion_for_item, resolve_conversion
from . import inventory_items_crud

logger = logging.getLogger(__name__)

QTY_PLACES = Decimal("0.001")
PRICE_PLACES = Decimal("0.0001")
MONEY_PLACES = Decimal("0.01")

INBOUND_ONLY_FIELDS = ("supplier", "po_number", "delivery_note", "documents")


def _q(value: Decimal, places: Decimal) -> Decimal:
    return value.quantize(places, rounding=ROUND_HALF_UP)


def _transaction_exists(db: Session, tx_id: str) -> bool:
    return db.query(StockTransaction.id).filter(StockTransaction.id == tx_id).first() is not None


def build_lines(
    db: Session,
    items: List[StockTransactionLineCreate],
    require_active: bool = True,
) -> Tuple[List[StockTransactionLine], Decimal]:
    """Resolve each requested line against the item master.

    Quantities are converted to base unit and sku/name are copied onto the
    line so history still reads correctly after the item is renamed or
    deleted.
    """
    if not items:
        raise ValidationError("Transaction must have at least one item")

    lines = []
    total_value = Decimal("0")
    for position, line in enumerate(items):
        item = inventory_items_crud.get_item(db, line.item_id)
        if not item:
            raise NotFoundError(
                "Inventory item not found", "build_lines", line.item_id)
        if require_active and not item.active:
            raise ValidationError(
                f"Item '{item.sku}' is inactive", "build_lines", item.id)

        conversion = resolve_conversion(
            item.unit, item.price, conversion_for_item(item), line.qty, line.uom)

        uom_qty = Decimal(str(line.qty))
        base_qty = _q(conversion.base_qty, QTY_PLACES)
        if base_qty <= 0:
            raise ValidationError(
                f"Quantity for '{item.sku}' rounds to zero in base unit", "build_lines", item.id)
        unit_price = _q(conversion.unit_price, PRICE_PLACES)
        total = _q(uom_qty * unit_price, MONEY_PLACES)

        lines.append(StockTransactionLine(
            position=position,
            item_id=item.id,
            sku=item.sku,
            name=item.name,
            qty=base_qty,
            uom=conversion.uom,
            uom_qty=uom_qty,
            unit_price=unit_price,
            total=total,
        ))
        total_value += total

    return lines, total_value


def _header_fields(payload: StockTransactionCreate) -> dict:
    data = payload.model_dump(exclude={"items", "date"})
    data["type"] = payload.type.value
    if payload.type != TransactionType.inbound:
        for key in INBOUND_ONLY_FIELDS:
            data[key] = None
    return data


def _check_stock_floor(result: LedgerResult, labels: Dict[str, str], operation: str, tx_id: str):
    """Reject the whole movement if it pushed any stock it reduced below zero.

    The ledger never clamps; this is the caller-side sufficiency check and
    runs before commit so a rejection rolls everything back.
    """
    if not settings.ENFORCE_STOCK_FLOOR:
        return

    short = result.reduced_below_zero()
    if not short:
        return

    item_id = short[0]
    available = result.before[item_id]
    requested = -result.deltas[item_id]
    names = ", ".join(labels.get(i, i) for i in short)
    raise InsufficientStockError(
        f"Insufficient stock for {names}: available {available}, requested {requested}",
        operation, tx_id, available=available, requested=requested)


def _run_unit_of_work(db: Session, operation: str, tx_id: Optional[str], work):
    try:
        outcome = work()
        db.commit()
        return outcome
    except WarehouseError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("%s failed for transaction %s: %s", operation, tx_id, e)
        raise PersistenceError(
            "Could not save stock transaction, nothing was changed", operation, tx_id) from e


def get_transaction(db: Session, tx_id: str) -> Optional[StockTransaction]:
    return (
        db.query(StockTransaction)
        .options(selectinload(StockTransaction.lines))
        .filter(StockTransaction.id == tx_id)
        .first()
    )


def get_transaction_or_404(db: Session, tx_id: str) -> StockTransaction:
    db_tx = get_transaction(db, tx_id)
    if not db_tx:
        raise NotFoundError("Transaction not found", "get_transaction", tx_id)
    return db_tx


def create_transaction(db: Session, payload: StockTransactionCreate, current_user: UserToken) -> StockTransaction:
    lines, total_value = build_lines(db, payload.items)
    tx_id = generate_unique_document_id(
        TRANSACTION_PREFIX, lambda candidate: _transaction_exists(db, candidate))

    def work():
        db_tx = StockTransaction(
            id=tx_id,
            date=payload.date or datetime.now(timezone.utc),
            total_value=total_value,
            user_id=current_user.user_id,
            **_header_fields(payload)
        )
        db_tx.lines = lines
        db.add(db_tx)
        db.flush()

        result = StockLedger(db).apply(Movement.of(payload.type, lines))
        _check_stock_floor(result, {l.item_id: l.sku for l in lines},
                           "create_transaction", tx_id)
        return db_tx

    db_tx = _run_unit_of_work(db, "create_transaction", tx_id, work)
    db.refresh(db_tx)
    logger.info("Created %s transaction %s with %s line(s), total %s",
                payload.type.value, tx_id, len(lines), total_value)
    return db_tx


def update_transaction(db: Session, tx_id: str, payload: StockTransactionUpdate, current_user: UserToken) -> StockTransaction:
    """Revert the stored effect, apply the edited one, overwrite the record.

    Both steps and the overwrite share one database transaction; on failure
    the old record and the old stock are left in place.
    """
    db_tx = get_transaction_or_404(db, tx_id)
    old = Movement.of(db_tx.type, db_tx.lines)
    labels = {l.item_id: l.sku for l in db_tx.lines}

    # items already on the transaction may have been deactivated since
    lines, total_value = build_lines(db, payload.items, require_active=False)
    labels.update({l.item_id: l.sku for l in lines})

    def work():
        result = StockLedger(db).reapply(old, Movement.of(payload.type, lines))
        _check_stock_floor(result, labels, "update_transaction", tx_id)

        for key, value in _header_fields(payload).items():
            setattr(db_tx, key, value)
        if payload.date:
            db_tx.date = payload.date
        db_tx.total_value = total_value
        db_tx.lines = lines
        db.flush()
        return db_tx

    db_tx = _run_unit_of_work(db, "update_transaction", tx_id, work)
    db.refresh(db_tx)
    logger.info("Updated transaction %s by %s", tx_id, current_user.user_id)
    return db_tx


def delete_transaction(db: Session, tx_id: str) -> bool:
    """Revert the stock effect and remove the record. False if it does not exist.

    No stock floor here: reverting an inbound whose goods were already
    issued may leave stock negative, and the delete still goes through.
    """
    db_tx = get_transaction(db, tx_id)
    if not db_tx:
        return False

    movement = Movement.of(db_tx.type, db_tx.lines)

    def work():
        result = StockLedger(db).revert(movement)
        for item_id in result.reduced_below_zero():
            logger.warning("Deleting %s leaves item %s at %s",
                           tx_id, item_id, result.after[item_id])
        db.delete(db_tx)
        db.flush()

    _run_unit_of_work(db, "delete_transaction", tx_id, work)
    logger.info("Deleted transaction %s", tx_id)
    return True


def build_transaction_filters(params: StockTransactionsRequest):
    filters = []

    if params.type and params.type.lower() != "all":
        try:
            filters.append(StockTransaction.type ==
                           TransactionType(params.type.lower()).value)
        except ValueError:
            raise ValidationError(f"Unknown transaction type '{params.type}'")

    if params.start_date:
        filters.append(StockTransaction.date >=
                       datetime.combine(params.start_date, time.min))

    if params.end_date:
        # end date is inclusive
        filters.append(StockTransaction.date < datetime.combine(
            params.end_date + timedelta(days=1), time.min))

    # every term must match somewhere in the header or in any line
    for term in (params.search or "").split():
        search_term = f"%{term}%"
        filters.append(or_(
            StockTransaction.id.ilike(search_term),
            StockTransaction.supplier.ilike(search_term),
            StockTransaction.po_number.ilike(search_term),
            StockTransaction.delivery_note.ilike(search_term),
            StockTransaction.notes.ilike(search_term),
            StockTransaction.lines.any(or_(
                StockTransactionLine.name.ilike(search_term),
                StockTransactionLine.sku.ilike(search_term),
            )),
        ))

    return filters


def list_transactions(db: Session, params: StockTransactionsRequest) -> StockTransactionsResponse:
    filters = build_transaction_filters(params)

    base_query = db.query(StockTransaction).filter(*filters)
    total = base_query.with_entities(func.count(StockTransaction.id)).scalar()

    query = (
        base_query
        .options(selectinload(StockTransaction.lines))
        .order_by(StockTransaction.date.desc(), StockTransaction.id.desc())
        .offset(params.skip)
    )
    if params.limit:
        query = query.limit(params.limit)

    return StockTransactionsResponse(
        transactions=[StockTransactionOut.model_validate(t) for t in query.all()],
        total=total or 0
    )
