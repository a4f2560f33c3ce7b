"""
CSV Connector — import expected incoming payments from CSV files.

Handy for pasting a payment calendar out of a spreadsheet. Supports common
column names for counterparty, amount and date; rows that cannot be parsed
are skipped.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

import pandas as pd
from pydantic import ValidationError

from cashgap.connectors.base import BaseConnector
from cashgap.models.records import IncomingKind, IncomingPayment, PlanSnapshot
from cashgap.parsing import parse_amount

logger = logging.getLogger("cashgap.connectors.csv")

# Common column name mappings
_COLUMN_ALIASES: dict[str, list[str]] = {
    "counterparty": ["counterparty_name", "counterparty", "customer", "payer", "client", "контрагент"],
    "amount": ["amount", "sum", "total", "value", "сумма"],
    "expected_date": ["expected_date", "date", "due_date", "payment_date", "дата"],
    "kind": ["kind", "type", "status"],
    "notes": ["notes", "note", "comment", "description", "комментарий"],
    "id": ["id"],
}

_KIND_ALIASES = {
    "fixed": IncomingKind.FIXED,
    "фиксированный": IncomingKind.FIXED,
    "planned": IncomingKind.PLANNED,
    "плановый": IncomingKind.PLANNED,
}


class CSVConnector(BaseConnector):
    """Import expected payments from a CSV file.

    Usage::

        snapshot = CSVConnector(file_path="inflows.csv").load()

    Only ``inflows`` is filled in the returned snapshot.
    """

    name = "csv"
    description = "Import expected incoming payments from CSV files"

    def __init__(self, file_path: str | None = None, **options: Any) -> None:
        super().__init__(file_path, **options)
        self.encoding = options.get("encoding", "utf-8")
        self.delimiter = options.get("delimiter", ",")

    def load(self) -> PlanSnapshot:
        path = self._require_file()
        df = pd.read_csv(path, encoding=self.encoding, delimiter=self.delimiter, dtype=str, keep_default_na=False)
        df.columns = df.columns.str.strip().str.lower()

        col_map = self._detect_columns(df)
        inflows = self._parse_inflows(df, col_map)

        logger.info("Parsed %d inflows from %s", len(inflows), path.name)
        return PlanSnapshot(inflows=inflows)

    def _detect_columns(self, df: pd.DataFrame) -> dict[str, str]:
        """Auto-detect column mappings from the DataFrame."""
        col_map: dict[str, str] = {}
        df_cols = set(df.columns)

        for field, aliases in _COLUMN_ALIASES.items():
            for alias in aliases:
                if alias in df_cols:
                    col_map[field] = alias
                    break

        return col_map

    def _parse_inflows(self, df: pd.DataFrame, col_map: dict[str, str]) -> list[IncomingPayment]:
        """Convert DataFrame rows to IncomingPayment objects."""
        inflows: list[IncomingPayment] = []

        name_col = col_map.get("counterparty")
        amount_col = col_map.get("amount")
        date_col = col_map.get("expected_date")

        if not name_col or not amount_col or not date_col:
            logger.warning("CSV missing required columns (counterparty, amount, expected_date)")
            return inflows

        for index, row in df.iterrows():
            name = (row[name_col] or "").strip()
            amount = parse_amount(row[amount_col])
            expected = (row[date_col] or "").strip()
            if not name or amount is None or not expected:
                logger.debug("Skipping row %s: incomplete", index)
                continue

            try:
                inflows.append(
                    IncomingPayment(
                        id=self._cell(row, col_map, "id") or str(uuid.uuid4()),
                        counterparty=name,
                        amount=amount,
                        expected_date=pd.to_datetime(expected, dayfirst="." in expected).date(),
                        kind=self._map_kind(self._cell(row, col_map, "kind")),
                        notes=self._cell(row, col_map, "notes"),
                    )
                )
            except (ValidationError, ValueError) as e:
                logger.debug("Skipping row %s: %s", index, e)

        return inflows

    @staticmethod
    def _cell(row: pd.Series, col_map: dict[str, str], field: str) -> str | None:
        col = col_map.get(field)
        if not col:
            return None
        value = row[col]
        if not isinstance(value, str):
            return None
        return value.strip() or None

    @staticmethod
    def _map_kind(raw: str | None) -> IncomingKind:
        if not raw:
            return IncomingKind.FIXED
        return _KIND_ALIASES.get(raw.strip().lower(), IncomingKind.FIXED)
