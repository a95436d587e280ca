"""
Stock ledger: the only writer of ``InventoryItem.stock`` for transactions.

Every method works inside the caller's open database transaction and never
commits. The stock transaction store wraps each lifecycle event (create,
update, delete) in one unit of work so the stock change and the record
change either both land or neither does.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Protocol

from sqlalchemy.orm import Session

from ..crud.inventory import inventory_items_crud
from ..enum.inventory_enum import TransactionType

logger = logging.getLogger(__name__)


class LedgerLine(Protocol):
    item_id: str
    qty: Decimal


@dataclass(frozen=True)
class Movement:
    """A detached copy of a transaction's stock effect.

    Taken before an edit overwrites the stored lines, so the old effect
    can still be reverted afterwards.
    """
    type: TransactionType
    lines: tuple

    @classmethod
    def of(cls, tx_type, lines: Iterable[LedgerLine]) -> "Movement":
        return cls(
            type=TransactionType(tx_type),
            lines=tuple((line.item_id, Decimal(str(line.qty))) for line in lines),
        )


@dataclass
class LedgerResult:
    deltas: Dict[str, Decimal] = field(default_factory=dict)
    before: Dict[str, Decimal] = field(default_factory=dict)
    after: Dict[str, Decimal] = field(default_factory=dict)
    # item ids that no longer exist (deleted after the transaction was recorded)
    skipped: List[str] = field(default_factory=list)

    def reduced_below_zero(self) -> List[str]:
        return [
            item_id for item_id, delta in self.deltas.items()
            if delta < 0 and item_id in self.after and self.after[item_id] < 0
        ]


def signed_deltas(movement: Movement, direction: int = 1) -> Dict[str, Decimal]:
    """Per-item stock change; inbound adds, outbound subtracts."""
    sign = direction if movement.type == TransactionType.inbound else -direction
    deltas: Dict[str, Decimal] = defaultdict(Decimal)
    for item_id, qty in movement.lines:
        deltas[item_id] += sign * qty
    return dict(deltas)


class StockLedger:

    def __init__(self, db: Session):
        self.db = db

    def apply(self, movement: Movement) -> LedgerResult:
        return self._post(signed_deltas(movement, 1), "apply")

    def revert(self, movement: Movement) -> LedgerResult:
        return self._post(signed_deltas(movement, -1), "revert")

    def reapply(self, old: Movement, new: Movement) -> LedgerResult:
        """Revert ``old`` and apply ``new`` as one net adjustment."""
        deltas: Dict[str, Decimal] = defaultdict(Decimal)
        for item_id, delta in signed_deltas(old, -1).items():
            deltas[item_id] += delta
        for item_id, delta in signed_deltas(new, 1).items():
            deltas[item_id] += delta
        return self._post(dict(deltas), "reapply")

    def _post(self, deltas: Dict[str, Decimal], operation: str) -> LedgerResult:
        result = LedgerResult(deltas=deltas)
        items = inventory_items_crud.get_items_for_update(self.db, deltas.keys())

        for item_id in sorted(deltas):
            delta = deltas[item_id]
            item = items.get(item_id)
            if item is None:
                logger.warning(
                    "Ledger %s skipped missing item %s (delta %s)", operation, item_id, delta)
                result.skipped.append(item_id)
                continue

            current = Decimal(str(item.stock or 0))
            new_stock = current + delta
            inventory_items_crud.set_stock(self.db, item, new_stock)
            result.before[item_id] = current
            result.after[item_id] = new_stock
            logger.debug("Ledger %s %s: %s -> %s", operation,
                         item.sku, current, new_stock)

        self.db.flush()
        return result
