"""
Quality checks for record exports.

Runs over the DataFrame of one export before its rows become records, so
problems are reported per source instead of failing the whole load. Each
issue keeps the index labels of the offending rows; the loader drops rows
behind critical issues.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

import pandas as pd


@dataclass
class RecordIssue:
    """A single problem found in an export."""

    column: str
    issue_type: str  # e.g., "missing", "invalid_value", "below_minimum", "unknown_product"
    severity: str  # "critical", "warning", "info"
    count: int
    percentage: float
    rows: list[Any] = field(default_factory=list)
    sample_values: list[Any] = field(default_factory=list)
    description: str = ""


@dataclass
class RecordQualityReport:
    """Quality summary for one export."""

    source_name: str
    total_rows: int
    issues: list[RecordIssue] = field(default_factory=list)

    @property
    def critical_issues(self) -> list[RecordIssue]:
        return [i for i in self.issues if i.severity == "critical"]

    @property
    def warning_issues(self) -> list[RecordIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def has_critical_issues(self) -> bool:
        return len(self.critical_issues) > 0

    def rejected_rows(self) -> set:
        """Index labels of rows behind at least one critical issue."""
        return {row for issue in self.critical_issues for row in issue.rows}

    def summary(self) -> dict:
        return {
            "source": self.source_name,
            "total_rows": self.total_rows,
            "rejected_rows": len(self.rejected_rows()),
            "critical": len(self.critical_issues),
            "warnings": len(self.warning_issues),
            "info": len([i for i in self.issues if i.severity == "info"]),
        }


class RecordQualityChecker:
    """
    Chainable checks over one export DataFrame.

    Usage:
        report = (
            RecordQualityChecker("Warehouse counts", required=["date", "quantity"])
            .check_min_quantity("quantity", 0)
            .check_same_date_counts()
            .run(df)
        )
    """

    def __init__(self, source_name: str, required: list[str] | None = None):
        self.source_name = source_name
        self._checks: list[Callable[[pd.DataFrame], list[RecordIssue]]] = []
        if required:
            self.check_required(required)

    def add_check(
        self, check_fn: Callable[[pd.DataFrame], list[RecordIssue]]
    ) -> "RecordQualityChecker":
        """Add a custom check function. Returns self for chaining."""
        self._checks.append(check_fn)
        return self

    @staticmethod
    def _issue(
        df: pd.DataFrame,
        mask: pd.Series,
        column: str,
        issue_type: str,
        severity: str,
        description: str,
        sample_column: str | None = None,
    ) -> list[RecordIssue]:
        count = int(mask.sum())
        if count == 0:
            return []
        sample_col = sample_column or column
        return [
            RecordIssue(
                column=column,
                issue_type=issue_type,
                severity=severity,
                count=count,
                percentage=(count / len(df)) * 100,
                rows=df.index[mask].tolist(),
                sample_values=df.loc[mask, sample_col].head(5).tolist()
                if sample_col in df.columns
                else [],
                description=description.format(count=count),
            )
        ]

    def check_required(self, columns: list[str]) -> "RecordQualityChecker":
        """Rows missing a required value cannot become records (critical)."""

        def check(df: pd.DataFrame) -> list[RecordIssue]:
            issues = []
            for col in columns:
                if col not in df.columns:
                    mask = pd.Series(True, index=df.index)
                else:
                    mask = df[col].isna()
                issues += self._issue(
                    df, mask, col, "missing", "critical", "{count:,} rows without " + col
                )
            return issues

        return self.add_check(check)

    def check_parsed(
        self, raw_column: str, parsed_column: str, severity: str = "critical"
    ) -> "RecordQualityChecker":
        """Values present in the raw column that the parser rejected."""

        def check(df: pd.DataFrame) -> list[RecordIssue]:
            if raw_column not in df.columns or parsed_column not in df.columns:
                return []
            mask = df[raw_column].notna() & df[parsed_column].isna()
            return self._issue(
                df, mask, raw_column, "invalid_value", severity,
                "{count:,} values couldn't be parsed",
            )

        return self.add_check(check)

    def check_min_quantity(
        self, column: str, minimum: int, severity: str = "critical"
    ) -> "RecordQualityChecker":
        """Quantities below the record's allowed minimum, or not whole numbers."""

        def check(df: pd.DataFrame) -> list[RecordIssue]:
            if column not in df.columns:
                return []
            values = pd.to_numeric(df[column], errors="coerce")
            mask = df[column].notna() & (
                values.isna() | (values < minimum) | (values % 1 != 0)
            )
            return self._issue(
                df, mask, column, "below_minimum", severity,
                "{count:,} quantities not whole numbers >= " + str(minimum),
            )

        return self.add_check(check)

    def check_duplicates(
        self, key_columns: list[str], severity: str = "warning"
    ) -> "RecordQualityChecker":
        """Rows repeating a key (e.g. a record id). Every copy is flagged."""

        def check(df: pd.DataFrame) -> list[RecordIssue]:
            if not set(key_columns) <= set(df.columns):
                return []
            mask = df.duplicated(subset=key_columns, keep=False) & df[key_columns].notna().all(axis=1)
            return self._issue(
                df, mask, ", ".join(key_columns), "duplicate", severity,
                "{count:,} rows share a " + ", ".join(key_columns),
                sample_column=key_columns[0],
            )

        return self.add_check(check)

    def check_known_products(
        self, product_ids: set[int], column: str = "product_id", severity: str = "warning"
    ) -> "RecordQualityChecker":
        """
        Records pointing at products that don't exist.

        Kept (warning) by default: products drive every calculation, so such
        records are simply never read.
        """

        def check(df: pd.DataFrame) -> list[RecordIssue]:
            if column not in df.columns:
                return []
            ids = pd.to_numeric(df[column], errors="coerce")
            mask = df[column].notna() & ~ids.isin(product_ids)
            return self._issue(
                df, mask, column, "unknown_product", severity,
                "{count:,} records reference unknown products",
            )

        return self.add_check(check)

    def check_same_date_counts(
        self, key_columns: list[str] | None = None, severity: str = "info"
    ) -> "RecordQualityChecker":
        """
        Several counts for one product and warehouse on one date.

        Not an error: the count with the highest id wins.
        """
        keys = key_columns or ["product_id", "warehouse", "date"]

        def check(df: pd.DataFrame) -> list[RecordIssue]:
            if not set(keys) <= set(df.columns):
                return []
            mask = df.duplicated(subset=keys, keep=False) & df[keys].notna().all(axis=1)
            return self._issue(
                df, mask, ", ".join(keys), "same_date_count", severity,
                "{count:,} counts share a product, warehouse and date",
                sample_column="quantity",
            )

        return self.add_check(check)

    def run(self, df: pd.DataFrame) -> RecordQualityReport:
        """Run all checks and return a quality report."""
        all_issues = []
        for check_fn in self._checks:
            all_issues.extend(check_fn(df))

        return RecordQualityReport(
            source_name=self.source_name, total_rows=len(df), issues=all_issues
        )
