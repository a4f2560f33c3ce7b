"""
cashgap configuration management.

Supports loading from YAML files, environment variables, and keyword overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from cashgap.models.records import AppSettings


class CashGapConfig(BaseModel):
    """Root configuration for cashgap."""

    horizon_days: int = Field(default=120, ge=1, description="Days to project ahead of today")
    include_opening_event: bool = Field(
        default=False,
        description="Show the opening balance as an event instead of the starting point",
    )
    settings: AppSettings = Field(default_factory=AppSettings)

    @classmethod
    def load(cls, config_path: str | None = None, **overrides: Any) -> CashGapConfig:
        """Load configuration from file, env vars, and overrides.

        Priority: overrides > env vars > config file > defaults.
        """
        data: dict[str, Any] = {}

        # 1. Load from YAML file if provided
        if config_path:
            path = Path(config_path)
            if path.exists():
                with open(path, encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}

        # 2. Override from environment variables
        env_horizon = os.environ.get("CASHGAP_HORIZON_DAYS")
        env_rate = os.environ.get("CASHGAP_CNY_RATE")
        env_opening = os.environ.get("CASHGAP_OPENING_EVENT")

        if env_horizon:
            data["horizon_days"] = env_horizon
        if env_rate:
            settings = dict(data.get("settings") or {})
            settings["cny_rate"] = env_rate
            settings.pop("cnyRate", None)
            data["settings"] = settings
        if env_opening:
            data["include_opening_event"] = env_opening.lower() in ("1", "true", "yes")

        # 3. Apply keyword overrides
        data.update(overrides)

        return cls.model_validate(data)
