"""
Configuration for lunchpick runs.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from lunchpick.models import Frequency


@dataclass
class LunchConfig:
    """Settings for suggestion runs."""

    top_n: int = 5
    max_jitter: float = 0.25
    seed: int | None = None  # None = fresh randomness each run
    default_frequency: Frequency = Frequency.WEEKLY
    lookback_days: int = 90  # visits older than this are ignored
    ballot_template: Path = Path("ballots_template.yaml")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LunchConfig":
        """Create config from a dictionary (e.g., from YAML)."""
        config = cls()

        if "top_n" in data:
            config.top_n = int(data["top_n"])
        if "max_jitter" in data:
            config.max_jitter = float(data["max_jitter"])
        if "seed" in data:
            config.seed = None if data["seed"] is None else int(data["seed"])
        if "default_frequency" in data:
            config.default_frequency = Frequency.from_label(str(data["default_frequency"]))
        if "lookback_days" in data:
            config.lookback_days = int(data["lookback_days"])
        if "ballot_template" in data:
            config.ballot_template = Path(data["ballot_template"])

        if config.max_jitter < 0:
            raise ValueError("max_jitter must not be negative")
        if config.default_frequency is Frequency.NEVER:
            raise ValueError("default_frequency cannot be 'never'")

        return config

    @classmethod
    def from_yaml(cls, path: Path) -> "LunchConfig":
        """Load config from a YAML file, falling back to defaults if it is missing."""
        if not path.exists():
            return cls()

        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must be a mapping")
        data = data.get("lunchpick", data)
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must be a mapping")

        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a plain dictionary."""
        return {
            "top_n": self.top_n,
            "max_jitter": self.max_jitter,
            "seed": self.seed,
            "default_frequency": self.default_frequency.label,
            "lookback_days": self.lookback_days,
            "ballot_template": str(self.ballot_template),
        }
