# app/crud/rejects/reject_logs_crud.py
# Reject logs are an audit trail of discarded goods. They read the reject
# master for display data and never write to inventory stock.
import logging
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from shared.core.config import settings
from shared.core.exceptions import NotFoundError, PersistenceError, ValidationError
from shared.core.schemas import UserToken
from shared.helpers.document_id_helper import REJECT_PREFIX, generate_unique_document_id
from ...models.rejects.reject_logs import RejectLog, RejectLogLine
from ...schemas.rejects.reject_logs_schemas import (
    RejectLogCreate, RejectLogLineCreate, RejectLogOut, RejectLogUpdate,
    RejectLogsRequest, RejectLogsResponse,
)
from ...services.uom_conversion import (
    conversion_for_reject_item, resolve_conversion, round_quantity, to_decimal,
)
from . import reject_items_crud

logger = logging.getLogger(__name__)

# scale of reject_log_lines.total_base_quantity
BASE_QTY_SCALE = RejectLogLine.__table__.c.total_base_quantity.type.scale


def _base_qty_decimals() -> int:
    """Configured precision, capped at what the column can store."""
    decimals = settings.reject_qty_decimals
    if decimals is None:
        return BASE_QTY_SCALE
    return min(decimals, BASE_QTY_SCALE)


def build_reject_lines(db: Session, items: List[RejectLogLineCreate]) -> List[RejectLogLine]:
    if not items:
        raise ValidationError("Reject log must have at least one item")

    lines = []
    for position, line in enumerate(items):
        master = reject_items_crud.get_reject_item(db, line.item_id)
        if not master:
            raise NotFoundError("Reject item not found",
                                "build_reject_lines", line.item_id)

        conversion = resolve_conversion(
            master.base_unit, None, conversion_for_reject_item(master), line.quantity, line.unit)

        lines.append(RejectLogLine(
            position=position,
            item_id=master.id,
            item_name=master.name,
            sku=master.sku,
            base_unit=master.base_unit,
            quantity=to_decimal(line.quantity, "quantity"),
            unit=conversion.uom,
            ratio=conversion.ratio,
            operation=conversion.operation.value,
            total_base_quantity=round_quantity(
                conversion.base_qty, _base_qty_decimals()),
            reason=line.reason,
        ))
    return lines


def _commit(db: Session, operation: str, log_id: Optional[str]):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("%s failed for reject log %s: %s", operation, log_id, e)
        raise PersistenceError(
            "Could not save reject log", operation, log_id) from e


def get_reject_log(db: Session, log_id: str) -> Optional[RejectLog]:
    return (
        db.query(RejectLog)
        .options(selectinload(RejectLog.lines))
        .filter(RejectLog.id == log_id)
        .first()
    )


def get_reject_log_or_404(db: Session, log_id: str) -> RejectLog:
    db_log = get_reject_log(db, log_id)
    if not db_log:
        raise NotFoundError("Reject log not found", "get_reject_log", log_id)
    return db_log


def create_reject_log(db: Session, payload: RejectLogCreate, current_user: UserToken) -> RejectLog:
    lines = build_reject_lines(db, payload.items)
    log_id = generate_unique_document_id(
        REJECT_PREFIX,
        lambda candidate: db.query(RejectLog.id).filter(RejectLog.id == candidate).first() is not None
    )

    db_log = RejectLog(
        id=log_id,
        date=payload.date,
        notes=payload.notes,
        user_id=current_user.user_id,
        timestamp=datetime.now(timezone.utc),
    )
    db_log.lines = lines
    db.add(db_log)
    _commit(db, "create_reject_log", log_id)
    db.refresh(db_log)
    logger.info("Logged reject batch %s with %s line(s)", log_id, len(lines))
    return db_log


def update_reject_log(db: Session, log_id: str, payload: RejectLogUpdate) -> RejectLog:
    db_log = get_reject_log_or_404(db, log_id)
    lines = build_reject_lines(db, payload.items)

    db_log.date = payload.date
    db_log.notes = payload.notes
    db_log.lines = lines
    _commit(db, "update_reject_log", log_id)
    db.refresh(db_log)
    return db_log


def delete_reject_log(db: Session, log_id: str) -> bool:
    db_log = get_reject_log(db, log_id)
    if not db_log:
        return False
    db.delete(db_log)
    _commit(db, "delete_reject_log", log_id)
    return True


def list_reject_logs(db: Session, params: RejectLogsRequest) -> RejectLogsResponse:
    filters = []
    if params.start_date:
        filters.append(RejectLog.date >= params.start_date)
    if params.end_date:
        filters.append(RejectLog.date <= params.end_date)

    for term in (params.search or "").split():
        search_term = f"%{term}%"
        filters.append(or_(
            RejectLog.id.ilike(search_term),
            RejectLog.notes.ilike(search_term),
            RejectLog.lines.any(or_(
                RejectLogLine.item_name.ilike(search_term),
                RejectLogLine.sku.ilike(search_term),
                RejectLogLine.reason.ilike(search_term),
            )),
        ))

    base_query = db.query(RejectLog).filter(*filters)
    total = base_query.with_entities(func.count(RejectLog.id)).scalar()

    query = (
        base_query
        .options(selectinload(RejectLog.lines))
        .order_by(RejectLog.date.desc(), RejectLog.timestamp.desc())
        .offset(params.skip)
    )
    if params.limit:
        query = query.limit(params.limit)

    return RejectLogsResponse(
        logs=[RejectLogOut.model_validate(l) for l in query.all()],
        total=total or 0
    )
