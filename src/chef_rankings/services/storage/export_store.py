"""Ranking export files (CSV, JSON, Markdown)."""

from __future__ import annotations

import asyncio
import csv
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import structlog

logger = structlog.get_logger()

EXPORT_COLUMNS = (
    "rank",
    "name",
    "restaurant",
    "city",
    "country",
    "score",
    "top_accolade",
)


class ExportStore:
    """Write ranking exports under a base directory."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = base_dir

    def _path(self, filename: str) -> Path:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        return self.base_dir / filename

    async def save_csv(self, filename: str, rows: Sequence[dict[str, Any]]) -> Path:
        """Save export rows as CSV with a fixed column order."""

        def _save() -> Path:
            path = self._path(filename)
            with path.open("w", encoding="utf-8", newline="") as f:
                writer = csv.DictWriter(f, fieldnames=list(EXPORT_COLUMNS))
                writer.writeheader()
                for row in rows:
                    writer.writerow({key: row.get(key, "") for key in EXPORT_COLUMNS})
            logger.debug("saved_export", path=str(path))
            return path

        return await asyncio.to_thread(_save)

    async def save_json(self, filename: str, data: Any) -> Path:
        """Export data to JSON for dashboard consumption."""

        def _save() -> Path:
            path = self._path(filename)
            with path.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, default=str)
            logger.debug("saved_export", path=str(path))
            return path

        return await asyncio.to_thread(_save)

    async def save_text(self, filename: str, content: str) -> Path:
        """Save a Markdown or plain-text report."""

        def _save() -> Path:
            path = self._path(filename)
            path.write_text(content, encoding="utf-8")
            logger.debug("saved_export", path=str(path))
            return path

        return await asyncio.to_thread(_save)
