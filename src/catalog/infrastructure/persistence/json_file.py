"""Shared file helpers for the JSON-backed repositories.

Each table is one JSON array on disk. Writes go to a sibling temp file
first and are moved into place, so a crash mid-write never leaves a
truncated table behind.
"""

from __future__ import annotations

import json
import os
from pathlib import Path


class JsonTable:

    def __init__(self, file_path: Path) -> None:
        self.file_path = file_path
        self._ensure_file()

    def load(self) -> list[dict]:
        return json.loads(self.file_path.read_text(encoding="utf-8"))

    def persist(self, rows: list[dict]) -> None:
        tmp_path = self.file_path.with_suffix(self.file_path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(rows, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp_path, self.file_path)

    def read_bytes(self) -> bytes:
        return self.file_path.read_bytes()

    def restore_bytes(self, content: bytes) -> None:
        tmp_path = self.file_path.with_suffix(self.file_path.suffix + ".tmp")
        tmp_path.write_bytes(content)
        os.replace(tmp_path, self.file_path)

    def _ensure_file(self) -> None:
        if not self.file_path.exists():
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            self.file_path.write_text("[]", encoding="utf-8")
