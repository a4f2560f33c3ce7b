"""
Base connector — abstract interface for record sources.

Connectors read accounts, payments, orders and expenses from somewhere
(a snapshot file, a spreadsheet export) and normalize them into a
:class:`~cashgap.models.records.PlanSnapshot` for the planner.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from cashgap.models.records import PlanSnapshot


class BaseConnector(ABC):
    """Abstract base class for all record connectors.

    To create a new connector, subclass this and implement:
    - `name`: Unique connector identifier.
    - `load()`: Return a PlanSnapshot.
    """

    name: str = "base"
    description: str = "Base connector"

    def __init__(self, file_path: str | Path | None = None, **options: Any) -> None:
        self.file_path = Path(file_path or options.get("file_path", ""))
        self.options = options

    @abstractmethod
    def load(self) -> PlanSnapshot:
        """Read records from the source."""
        ...

    def validate(self) -> bool:
        """Check the source exists and is readable."""
        return self.file_path.exists() and self.file_path.is_file()

    def _require_file(self) -> Path:
        if not self.validate():
            raise FileNotFoundError(f"{self.name} source not found: {self.file_path}")
        return self.file_path
