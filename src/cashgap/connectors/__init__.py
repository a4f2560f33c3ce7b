"""
cashgap connectors — read records from files into a PlanSnapshot.
"""

from __future__ import annotations

from pathlib import Path

from cashgap.connectors.base import BaseConnector
from cashgap.connectors.csv_connector import CSVConnector
from cashgap.connectors.snapshot_connector import SnapshotConnector

__all__ = ["BaseConnector", "CSVConnector", "SnapshotConnector", "connector_for"]


def connector_for(path: str | Path) -> BaseConnector:
    """Pick a connector by file extension."""
    if Path(path).suffix.lower() == ".csv":
        return CSVConnector(file_path=str(path))
    return SnapshotConnector(file_path=path)
