"""
Exceptions for the reconciliation core.

All errors are ReconciliationError with a structured code for programmatic
handling. Record Source failures are not wrapped: they propagate unchanged.
"""

from datetime import date
from typing import Any


class ReconciliationError(Exception):
    """
    Structured exception for reconciliation operations.

    Usage:
        try:
            engine.reconstruct_timeline(42, window)
        except ReconciliationError as e:
            if e.code == 'PRODUCT_NOT_FOUND':
                print(f"No product {e.data['product_id']}")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'PRODUCT_NOT_FOUND': 'Product not found',
        'INVALID_QUANTITY': 'Quantity outside the allowed range for this record',
        'EXPORT_NOT_FOUND': 'Export file not found',
    }

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: v.isoformat() if isinstance(v, date) else v
                for k, v in self.data.items()
            },
        }


class ProductNotFoundError(ReconciliationError):
    """Raised by single-product lookups; bulk runs skip missing products."""

    def __init__(self, product_id: int):
        super().__init__('PRODUCT_NOT_FOUND', product_id=product_id)
