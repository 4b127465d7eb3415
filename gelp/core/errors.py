from typing import Any, Dict, Iterable, List, Optional


class GelpError(Exception):
    """Base class for every error the API knows how to report."""

    code = "error"
    status_code = 500
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.code, "detail": self.message}
        if self.retryable:
            body["retryable"] = True
        return body


# Business-rule failures

class ValidationError(GelpError):
    code = "validation_error"
    status_code = 422


class InvalidQuantity(ValidationError):
    code = "invalid_quantity"


class EmptySaleError(ValidationError):
    code = "empty_sale"

    def __init__(self, message: str = "A sale must contain at least one item"):
        super().__init__(message)


class NotFoundError(GelpError):
    code = "not_found"
    status_code = 404

    def __init__(self, entity: str, ids: Iterable[Any]):
        self.entity = entity
        self.ids = list(ids)
        joined = ", ".join(str(i) for i in self.ids)
        super().__init__(f"{entity} not found: {joined}")

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["entity"] = self.entity
        body["ids"] = self.ids
        return body


class InsufficientStock(GelpError):
    code = "insufficient_stock"
    status_code = 409

    def __init__(self, shortages: Dict[int, Dict[str, int]]):
        # product_id -> {"requested": n, "available": m}
        self.shortages = shortages
        parts = [
            f"product {pid} (requested {s['requested']}, available {s['available']})"
            for pid, s in sorted(shortages.items())
        ]
        super().__init__("Insufficient stock for " + "; ".join(parts))

    @property
    def product_ids(self) -> List[int]:
        return sorted(self.shortages)

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["product_ids"] = self.product_ids
        return body


class ConflictError(GelpError):
    code = "conflict"
    status_code = 409

    def __init__(self, message: str, retryable: bool = False):
        super().__init__(message)
        self.retryable = retryable


class SaleTimeoutError(ConflictError):
    code = "sale_timeout"

    def __init__(self, timeout: float):
        super().__init__(f"Sale transaction did not complete within {timeout:g}s", retryable=True)


# Infrastructure failures

class StorageUnavailable(GelpError):
    code = "storage_unavailable"
    status_code = 503
    retryable = True

    def __init__(self, message: str = "Storage backend unavailable", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
