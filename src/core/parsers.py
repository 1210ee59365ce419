"""
Parsers for the values found in record exports.

These handle the inconsistencies between the people and tools that produce
the three record sources:
- Multiple date formats (ledger exports vs hand-entered counts)
- Warehouse labels ("Warehouse 1", "W1", "wh-1")
- Ledger direction spelled several ways
"""

import re
from datetime import date, datetime

import pandas as pd

from core.records import LedgerKind, Warehouse


class DateParser:
    """
    Calendar-date parser that handles multiple formats.

    Records carry no time of day: datetimes are truncated to their date.
    To extend: Add new format patterns to DATE_FORMATS.
    """

    # Ordered by specificity
    DATE_FORMATS = [
        "%Y-%m-%d",      # ISO: 2024-10-31
        "%Y-%m-%d %H:%M:%S",  # SQL timestamp: 2024-10-31 09:15:00
        "%m/%d/%Y",      # US: 10/31/2024
        "%d-%m-%Y",      # EU: 31-10-2024
        "%d/%m/%Y",      # EU slash: 31/10/2024
        "%Y/%m/%d",      # ISO slash: 2024/10/31
    ]

    def __init__(self, custom_formats: list[str] | None = None):
        """
        Args:
            custom_formats: Additional date formats to try (prepended to defaults)
        """
        self.formats = (custom_formats or []) + self.DATE_FORMATS
        self._cache: dict[str, date | None] = {}

    def parse(self, value) -> date | None:
        """Parse a date, trying multiple formats. Returns None if unparseable."""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if value is None or pd.isna(value) or not str(value).strip():
            return None

        date_str = str(value).strip()

        if date_str in self._cache:
            return self._cache[date_str]

        for fmt in self.formats:
            try:
                result = datetime.strptime(date_str, fmt).date()
                self._cache[date_str] = result
                return result
            except ValueError:
                continue

        self._cache[date_str] = None
        return None

    def parse_series(self, series: pd.Series) -> pd.Series:
        """Parse an entire pandas Series of dates."""
        return series.apply(self.parse)


class WarehouseNormalizer:
    """
    Maps warehouse labels to Warehouse members.

    Handled:
    - "Warehouse 1" / "warehouse 2"
    - "W1", "WH2", "wh-1", "WH_2"
    - bare "1" / "2"
    """

    _NUMBER = re.compile(r"^(?:warehouse|wh|w)?[\s_-]*(\d+)$")

    def __init__(self, aliases: dict[str, Warehouse] | None = None):
        """
        Args:
            aliases: Extra site-specific labels (matched case-insensitively)
        """
        self.aliases = {k.strip().lower(): v for k, v in (aliases or {}).items()}

    def normalize(self, label) -> Warehouse | None:
        if isinstance(label, Warehouse):
            return label
        if label is None or pd.isna(label) or not str(label).strip():
            return None

        result = " ".join(str(label).split()).lower()
        if result in self.aliases:
            return self.aliases[result]

        match = self._NUMBER.match(result)
        if not match:
            return None
        return {1: Warehouse.W1, 2: Warehouse.W2}.get(int(match.group(1)))

    def normalize_series(self, series: pd.Series) -> pd.Series:
        return series.apply(self.normalize)


class LedgerKindNormalizer:
    """Maps ledger direction spellings to LedgerKind."""

    KIND_MAP = {
        "purchase": LedgerKind.PURCHASE,
        "buy": LedgerKind.PURCHASE,
        "in": LedgerKind.PURCHASE,
        "sale": LedgerKind.SALE,
        "sell": LedgerKind.SALE,
        "out": LedgerKind.SALE,
    }

    def normalize(self, kind) -> LedgerKind | None:
        if isinstance(kind, LedgerKind):
            return kind
        if kind is None or pd.isna(kind):
            return None
        return self.KIND_MAP.get(str(kind).strip().lower())

    def normalize_series(self, series: pd.Series) -> pd.Series:
        return series.apply(self.normalize)
