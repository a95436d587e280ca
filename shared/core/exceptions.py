from typing import Optional

from shared.utils.app_status_code import AppStatusCode


class WarehouseError(Exception):
    """Base for errors raised by the warehouse stores and services.

    Carries the failing operation and entity id so the caller can log
    and retry without parsing the message.
    """
    http_status = 400
    status_code = AppStatusCode.OPERATION_FAILED

    def __init__(self, message: str, operation: Optional[str] = None, entity_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.entity_id = entity_id

    def __str__(self):
        context = ", ".join(
            f"{k}={v}" for k, v in (("operation", self.operation), ("id", self.entity_id)) if v
        )
        return f"{self.message} ({context})" if context else self.message


class ValidationError(WarehouseError):
    http_status = 400
    status_code = AppStatusCode.INVALID_INPUT


class NotFoundError(WarehouseError):
    http_status = 404
    status_code = AppStatusCode.RECORD_NOT_FOUND


class InsufficientStockError(WarehouseError):
    http_status = 409
    status_code = AppStatusCode.INSUFFICIENT_STOCK

    def __init__(self, message: str, operation: Optional[str] = None, entity_id: Optional[str] = None,
                 available=None, requested=None):
        super().__init__(message, operation, entity_id)
        self.available = available
        self.requested = requested


class PersistenceError(WarehouseError):
    """Storage failure; state was rolled back and the call may be retried."""
    http_status = 503
    status_code = AppStatusCode.PERSISTENCE_FAILED
    retryable = True
