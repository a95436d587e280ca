# app/crud/rejects/reject_items_crud.py
import logging
import uuid
from typing import List, Optional
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from shared.core.exceptions import NotFoundError, PersistenceError, ValidationError
from ...models.rejects.reject_items import RejectItem
from ...schemas.rejects.reject_items_schemas import (
    RejectItemCreate, RejectItemOut, RejectItemUpdate, RejectItemsBulkResult,
    RejectItemsRequest, RejectItemsResponse,
)
from ...services.uom_conversion import conversion_for_reject_item, to_decimal, validate_conversion

logger = logging.getLogger(__name__)


def _to_columns(data: dict) -> dict:
    columns = {}
    for k, v in data.items():
        if k in ("ratio2", "ratio3"):
            v = to_decimal(v, k)
        elif k in ("op2", "op3") and v is not None:
            v = getattr(v, "value", v)
        columns[k] = v
    return columns


def _validate(db_item: RejectItem):
    for unit in (db_item.unit2, db_item.unit3):
        if unit and unit == db_item.base_unit:
            raise ValidationError(
                f"Unit '{unit}' duplicates the base unit", "validate_reject_item", db_item.id)
    if db_item.unit2 and db_item.unit2 == db_item.unit3:
        raise ValidationError(
            "unit2 and unit3 must differ", "validate_reject_item", db_item.id)
    validate_conversion(conversion_for_reject_item(db_item))


def _commit(db: Session, operation: str, entity_id: Optional[str] = None):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ValidationError(
            "A reject item with this SKU already exists", operation, entity_id) from e
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(
            "Could not save reject item", operation, entity_id) from e


def get_reject_items(db: Session, params: RejectItemsRequest) -> RejectItemsResponse:
    filters = []
    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(
            RejectItem.name.ilike(search_term),
            RejectItem.sku.ilike(search_term),
        ))

    base_query = db.query(RejectItem).filter(*filters)
    total = base_query.with_entities(func.count(RejectItem.id)).scalar()

    query = base_query.order_by(RejectItem.name).offset(params.skip)
    if params.limit:
        query = query.limit(params.limit)

    return RejectItemsResponse(
        items=[RejectItemOut.model_validate(i) for i in query.all()],
        total=total or 0
    )


def get_reject_item(db: Session, item_id: str) -> Optional[RejectItem]:
    return db.query(RejectItem).filter(RejectItem.id == item_id).first()


def get_reject_item_or_404(db: Session, item_id: str) -> RejectItem:
    db_item = get_reject_item(db, item_id)
    if not db_item:
        raise NotFoundError("Reject item not found", "get_reject_item", item_id)
    return db_item


def get_reject_item_by_sku(db: Session, sku: str) -> Optional[RejectItem]:
    return db.query(RejectItem).filter(RejectItem.sku == sku.strip()).first()


def create_reject_item(db: Session, item: RejectItemCreate) -> RejectItem:
    if get_reject_item_by_sku(db, item.sku):
        raise ValidationError(
            f"SKU '{item.sku}' already exists", "create_reject_item")

    db_item = RejectItem(id=str(uuid.uuid4()), **_to_columns(item.model_dump()))
    _validate(db_item)
    db.add(db_item)
    _commit(db, "create_reject_item", db_item.id)
    db.refresh(db_item)
    return db_item


def update_reject_item(db: Session, item: RejectItemUpdate) -> RejectItem:
    db_item = get_reject_item_or_404(db, item.id)

    for k, v in _to_columns(item.model_dump(exclude_unset=True, exclude={"id"})).items():
        setattr(db_item, k, v)

    # a cleared unit drops its ratio too
    if not db_item.unit2:
        db_item.ratio2 = None
    if not db_item.unit3:
        db_item.ratio3 = None

    try:
        _validate(db_item)
    except ValidationError:
        db.rollback()
        raise

    _commit(db, "update_reject_item", db_item.id)
    db.refresh(db_item)
    return db_item


def delete_reject_item(db: Session, item_id: str) -> bool:
    """Existing reject logs keep their own snapshot of the item."""
    db_item = get_reject_item(db, item_id)
    if not db_item:
        return False
    db.delete(db_item)
    _commit(db, "delete_reject_item", item_id)
    return True


def bulk_upsert_reject_items(db: Session, items: List[RejectItemCreate]) -> RejectItemsBulkResult:
    skus = [i.sku for i in items]
    if len(set(skus)) != len(skus):
        raise ValidationError("Reject master contains duplicate SKUs",
                              "bulk_upsert_reject_items")

    created = updated = 0
    try:
        for item in items:
            db_item = get_reject_item_by_sku(db, item.sku)
            if db_item is None:
                db_item = RejectItem(id=str(uuid.uuid4()))
                db.add(db_item)
                created += 1
            else:
                updated += 1
            for k, v in _to_columns(item.model_dump()).items():
                setattr(db_item, k, v)
            _validate(db_item)
            db.flush()
    except ValidationError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError("Reject master import failed",
                               "bulk_upsert_reject_items") from e

    _commit(db, "bulk_upsert_reject_items")
    logger.info("Reject master upsert: %s created, %s updated", created, updated)
    return RejectItemsBulkResult(created=created, updated=updated)
