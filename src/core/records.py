"""
Record types shared by the reconciliation components.

Three independently-recorded sources describe the same stock:
- LedgerEntry: purchase/sale transactions
- StaffReport: informally reported sales
- WarehouseCount: physical counts, one warehouse at one date

All records are immutable; the core only reads them.
"""

import calendar
from dataclasses import dataclass
from datetime import date
from enum import Enum

from core.exceptions import ReconciliationError


class LedgerKind(Enum):
    """Direction of a ledger entry."""

    PURCHASE = "purchase"
    SALE = "sale"


class Warehouse(Enum):
    """The two counted warehouses."""

    W1 = "Warehouse 1"
    W2 = "Warehouse 2"


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    category: str
    initial_stock: int = 0


@dataclass(frozen=True)
class LedgerEntry:
    """A recorded purchase or sale. Quantity is always positive."""

    id: int
    product_id: int
    date: date
    quantity: int
    kind: LedgerKind
    counterparty: str | None = None

    def __post_init__(self):
        _require_quantity(self, minimum=1)

    @property
    def stock_effect(self) -> int:
        """Signed effect on stock: purchases add, sales remove."""
        if self.kind == LedgerKind.PURCHASE:
            return self.quantity
        return -self.quantity


@dataclass(frozen=True)
class StaffReport:
    """A sale reported by staff outside the ledger."""

    id: int
    product_id: int
    date: date
    quantity: int
    counterparty: str | None = None

    def __post_init__(self):
        _require_quantity(self, minimum=1)


@dataclass(frozen=True)
class WarehouseCount:
    """Physical stock counted in one warehouse on one date."""

    id: int
    product_id: int
    date: date
    warehouse: Warehouse
    quantity: int

    def __post_init__(self):
        _require_quantity(self, minimum=0)


def _require_quantity(record, minimum: int) -> None:
    if record.quantity < minimum:
        raise ReconciliationError(
            "INVALID_QUANTITY",
            record=type(record).__name__,
            record_id=record.id,
            quantity=record.quantity,
            minimum=minimum,
        )


@dataclass(frozen=True)
class DateWindow:
    """
    Inclusive calendar-date window.

    A window whose start falls after its end is empty: it contains no date
    and is never an error.
    """

    start: date
    end: date

    @classmethod
    def month(cls, year: int, month: int) -> "DateWindow":
        """Full calendar month, e.g. 2024-11-01..2024-11-30."""
        last_day = calendar.monthrange(year, month)[1]
        return cls(date(year, month, 1), date(year, month, last_day))

    @classmethod
    def current_month(cls, today: date | None = None) -> "DateWindow":
        today = today or date.today()
        return cls.month(today.year, today.month)

    @property
    def is_empty(self) -> bool:
        return self.start > self.end

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()}..{self.end.isoformat()}"
