import logging
import random
from datetime import datetime
from typing import Callable, Optional

from shared.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)

TRANSACTION_PREFIX = "TRX"
REJECT_PREFIX = "REJ"

MAX_ATTEMPTS = 10


def generate_document_id(prefix: str, now: Optional[datetime] = None) -> str:
    """Build ``{PREFIX}-{yyyymmdd}-{hhmmss}-{3-digit random}``."""
    now = now or datetime.now()
    return f"{prefix}-{now.strftime('%Y%m%d')}-{now.strftime('%H%M%S')}-{random.randint(0, 999):03d}"


def generate_unique_document_id(prefix: str, exists: Callable[[str], bool]) -> str:
    """Retry the random suffix until ``exists`` reports a free id."""
    for _ in range(MAX_ATTEMPTS):
        candidate = generate_document_id(prefix)
        if not exists(candidate):
            return candidate
        logger.warning("Document id collision on %s, regenerating", candidate)

    raise PersistenceError(
        f"Could not generate a unique {prefix} id after {MAX_ATTEMPTS} attempts",
        operation="generate_id")
