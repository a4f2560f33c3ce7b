"""
Snapshot Connector — load all records from one YAML or JSON file.

Expected layout (every key optional)::

    accounts:  [{id, name, balance}]
    inflows:   [{id, counterparty, amount, expected_date, kind}]
    orders:    [{id, title, total_amount, deposit_amount, deposit_paid,
                 deposit_date, due_date, currency, supplier_name}]
    expenses:  [{id, title, amount, day_primary, day_secondary,
                 amount_primary, amount_secondary}]
    settings:  {cnyRate: 12.5}
"""

from __future__ import annotations

import json
import logging
from typing import Any

import yaml

from cashgap.connectors.base import BaseConnector
from cashgap.models.records import PlanSnapshot

logger = logging.getLogger("cashgap.connectors.snapshot")

_YAML_SUFFIXES = {".yaml", ".yml"}
_JSON_SUFFIXES = {".json"}


class SnapshotConnector(BaseConnector):
    """Load a full record snapshot from YAML or JSON.

    Usage::

        snapshot = SnapshotConnector("records.yaml").load()
    """

    name = "snapshot"
    description = "Load accounts, payments, orders and expenses from YAML/JSON"

    def load(self) -> PlanSnapshot:
        path = self._require_file()
        suffix = path.suffix.lower()

        with open(path, encoding=self.options.get("encoding", "utf-8")) as f:
            if suffix in _YAML_SUFFIXES:
                raw: Any = yaml.safe_load(f)
            elif suffix in _JSON_SUFFIXES:
                raw = json.load(f)
            else:
                raise ValueError(f"Unsupported snapshot format: {suffix or path.name}")

        raw = raw or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Snapshot {path.name} must be a mapping, got {type(raw).__name__}")

        snapshot = PlanSnapshot.model_validate(raw)
        logger.info(
            "Loaded snapshot %s: %d accounts, %d inflows, %d orders, %d expenses",
            path.name,
            len(snapshot.accounts),
            len(snapshot.inflows),
            len(snapshot.orders),
            len(snapshot.expenses),
        )
        return snapshot
