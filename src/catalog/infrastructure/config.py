"""Runtime configuration and logging setup.

Settings come from environment variables, optionally seeded from a
``.env`` file in the working directory:

- ``CATALOG_DATA_DIR``: directory holding the JSON tables
  (default: ``<project root>/data``)
- ``CATALOG_LOG_LEVEL``: logging level name (default: ``INFO``)
- ``CATALOG_SNAPSHOT_DEPTH``: component levels captured in order
  snapshots (default: ``2``)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from catalog.domain.service.snapshot_service import DEFAULT_SNAPSHOT_DEPTH

# When installed in editable mode the project root is the repo root.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Config:
    data_dir: Path
    log_level: str = "INFO"
    snapshot_depth: int = DEFAULT_SNAPSHOT_DEPTH

    @staticmethod
    def from_env() -> Config:
        load_dotenv()
        raw_depth = os.getenv("CATALOG_SNAPSHOT_DEPTH", str(DEFAULT_SNAPSHOT_DEPTH))
        try:
            depth = int(raw_depth)
        except ValueError as exc:
            raise ValueError(
                f"CATALOG_SNAPSHOT_DEPTH must be an integer, got {raw_depth!r}"
            ) from exc
        if depth < 1:
            raise ValueError(f"CATALOG_SNAPSHOT_DEPTH must be at least 1, got {depth}")

        log_level = os.getenv("CATALOG_LOG_LEVEL", "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"Unknown CATALOG_LOG_LEVEL {log_level!r}")

        return Config(
            data_dir=Path(os.getenv("CATALOG_DATA_DIR", str(_PROJECT_ROOT / "data"))),
            log_level=log_level,
            snapshot_depth=depth,
        )


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=_LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )
