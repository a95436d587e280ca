# app/crud/inventory/inventory_items_crud.py
import logging
import uuid
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from shared.core.exceptions import NotFoundError, PersistenceError, ValidationError
from shared.core.schemas import Lookup
from ...models.inventory.inventory_items import InventoryItem
from ...schemas.inventory.inventory_items_schemas import (
    InventoryImportResult, InventoryImportRow, InventoryItemCreate, InventoryItemsRequest,
    InventoryItemsResponse, InventoryItemOut, InventoryItemUpdate,
)
from ...services.uom_conversion import conversion_for_item, to_decimal, validate_conversion

logger = logging.getLogger(__name__)

DECIMAL_FIELDS = {"price", "stock", "min_level", "conversion_ratio"}


def _to_columns(data: dict) -> dict:
    return {
        k: (to_decimal(v, k) if k in DECIMAL_FIELDS else v)
        for k, v in data.items()
    }


def _commit(db: Session, operation: str, entity_id: Optional[str] = None):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ValidationError(
            "An item with this SKU already exists", operation, entity_id) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("%s failed for item %s: %s", operation, entity_id, e)
        raise PersistenceError(
            "Could not save inventory item", operation, entity_id) from e


def get_inventory_items(db: Session, params: InventoryItemsRequest) -> InventoryItemsResponse:
    filters = []

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(
            InventoryItem.name.ilike(search_term),
            InventoryItem.sku.ilike(search_term),
        ))

    if params.category and params.category.lower() != "all":
        filters.append(InventoryItem.category == params.category)

    if params.active is not None:
        filters.append(InventoryItem.active == params.active)

    base_query = db.query(InventoryItem).filter(*filters)
    total = base_query.with_entities(func.count(InventoryItem.id)).scalar()

    query = base_query.order_by(InventoryItem.name).offset(params.skip)
    if params.limit:
        query = query.limit(params.limit)

    return InventoryItemsResponse(
        items=[InventoryItemOut.model_validate(i) for i in query.all()],
        total=total or 0
    )


def get_item(db: Session, item_id: str) -> Optional[InventoryItem]:
    return db.query(InventoryItem).filter(InventoryItem.id == item_id).first()


def get_item_or_404(db: Session, item_id: str) -> InventoryItem:
    db_item = get_item(db, item_id)
    if not db_item:
        raise NotFoundError("Inventory item not found", "get_item", item_id)
    return db_item


def get_item_by_sku(db: Session, sku: str) -> Optional[InventoryItem]:
    return db.query(InventoryItem).filter(InventoryItem.sku == sku.strip()).first()


def get_items_for_update(db: Session, item_ids: Iterable[str]) -> Dict[str, InventoryItem]:
    """Load and row-lock items, always in id order."""
    ids = sorted(set(item_ids))
    if not ids:
        return {}
    rows = (
        db.query(InventoryItem)
        .filter(InventoryItem.id.in_(ids))
        .order_by(InventoryItem.id)
        .with_for_update()
        .all()
    )
    return {row.id: row for row in rows}


def set_stock(db: Session, item: InventoryItem, new_stock: Decimal) -> InventoryItem:
    """Write the stock column. Does not commit; the caller owns the unit of work."""
    item.stock = new_stock
    return item


def create_item(db: Session, item: InventoryItemCreate) -> InventoryItem:
    if get_item_by_sku(db, item.sku):
        raise ValidationError(
            f"SKU '{item.sku}' already exists", "create_item")

    db_item = InventoryItem(id=str(uuid.uuid4()), **_to_columns(item.model_dump()))
    validate_conversion(conversion_for_item(db_item))
    db.add(db_item)
    _commit(db, "create_item", db_item.id)
    db.refresh(db_item)
    logger.info("Created inventory item %s (%s)", db_item.id, db_item.sku)
    return db_item


def update_item(db: Session, item: InventoryItemUpdate) -> InventoryItem:
    db_item = get_item_or_404(db, item.id)

    changes = item.model_dump(exclude_unset=True, exclude={"id"})
    if "sku" in changes and changes["sku"] != db_item.sku:
        clash = get_item_by_sku(db, changes["sku"])
        if clash and clash.id != db_item.id:
            raise ValidationError(
                f"SKU '{changes['sku']}' already exists", "update_item", item.id)

    # Update only the fields that are provided
    for k, v in _to_columns(changes).items():
        setattr(db_item, k, v)

    if not db_item.conversion_unit:
        db_item.conversion_ratio = None
    try:
        if db_item.conversion_unit and db_item.conversion_unit == db_item.unit:
            raise ValidationError(
                "conversion_unit must differ from the base unit", "update_item", item.id)
        validate_conversion(conversion_for_item(db_item))
    except ValidationError:
        db.rollback()
        raise

    _commit(db, "update_item", db_item.id)
    db.refresh(db_item)
    return db_item


def set_item_active(db: Session, item_id: str, active: bool) -> InventoryItem:
    db_item = get_item_or_404(db, item_id)
    db_item.active = active
    _commit(db, "set_item_active", item_id)
    db.refresh(db_item)
    return db_item


def delete_item(db: Session, item_id: str) -> bool:
    """Hard delete. Transaction lines keep their sku/name snapshot."""
    db_item = get_item(db, item_id)
    if not db_item:
        return False

    db.delete(db_item)
    _commit(db, "delete_item", item_id)
    logger.info("Deleted inventory item %s (%s)", item_id, db_item.sku)
    return True


def upsert_item(db: Session, row: InventoryImportRow) -> tuple[InventoryItem, bool]:
    """Match on SKU; returns (item, created). Does not commit."""
    data = _to_columns(row.model_dump(exclude_unset=True))
    db_item = get_item_by_sku(db, row.sku)
    created = db_item is None

    if created:
        db_item = InventoryItem(id=str(uuid.uuid4()), stock=Decimal("0"))
        db.add(db_item)
    elif data.get("stock") is not None and data["stock"] != db_item.stock:
        # an imported stock figure replaces the ledger baseline
        logger.info("Import resets stock of %s from %s to %s",
                    db_item.sku, db_item.stock, data["stock"])

    for k, v in data.items():
        if k == "stock" and v is None:
            continue
        setattr(db_item, k, v)

    validate_conversion(conversion_for_item(db_item))
    db.flush()
    return db_item, created


def bulk_import_items(db: Session, rows: List[InventoryImportRow]) -> InventoryImportResult:
    if not rows:
        raise ValidationError("Import must contain at least one row",
                              "bulk_import_items")

    skus = [r.sku for r in rows]
    if len(set(skus)) != len(skus):
        raise ValidationError("Import contains duplicate SKUs",
                              "bulk_import_items")

    created = updated = 0
    ids = []
    try:
        for row in rows:
            db_item, was_created = upsert_item(db, row)
            ids.append(db_item.id)
            if was_created:
                created += 1
            else:
                updated += 1
    except ValidationError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError("Inventory import failed",
                               "bulk_import_items") from e

    _commit(db, "bulk_import_items")
    logger.info("Imported inventory: %s created, %s updated", created, updated)
    return InventoryImportResult(created=created, updated=updated, ids=ids)


def get_categories(db: Session) -> List[Lookup]:
    rows = (
        db.query(InventoryItem.category)
        .filter(InventoryItem.category.isnot(None))
        .distinct()
        .order_by(InventoryItem.category)
        .all()
    )
    return [Lookup(id=r.category, name=r.category) for r in rows]
