"""Persistence of run reports as timestamped JSON artifacts."""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from uitest_support.core.exceptions import ReportStorageError
from uitest_support.reporting.models import RunReport

logger = logging.getLogger(__name__)


class ReportWriter:
    """Writes RunReports to ``metrics-<date>-<epoch ms>.json`` files."""

    def __init__(self, output_dir: Path | str) -> None:
        self.output_dir = Path(output_dir)

    def _make_path(self, now: datetime | None = None) -> Path:
        now = now or datetime.now(timezone.utc)
        epoch_ms = int(time.time() * 1000)
        return self.output_dir / f"metrics-{now.strftime('%Y-%m-%d')}-{epoch_ms}.json"

    def save(self, report: RunReport) -> Path:
        """Save a report.

        Args:
            report: Finalized run report

        Returns:
            Path of the written file

        Raises:
            ReportStorageError: If the directory or file cannot be written
        """
        path = self._make_path()
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as f:
                json.dump(report.to_dict(), f, indent=2, default=str)
        except OSError as e:
            raise ReportStorageError(
                f"Failed to save report: {e}", path=str(path)
            ) from e

        logger.info(f"Run metrics saved to: {path}")
        return path

    def latest(self) -> Path | None:
        """Return the most recently written report, if any."""
        if not self.output_dir.exists():
            return None
        reports = sorted(
            self.output_dir.glob("metrics-*.json"),
            key=lambda p: p.stat().st_mtime,
        )
        return reports[-1] if reports else None

    def load(self, path: Path | str) -> dict[str, Any]:
        """Load a saved report as a dictionary.

        Raises:
            ReportStorageError: If the file is missing or not valid JSON
        """
        try:
            with open(path) as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ReportStorageError(f"Failed to load report: {e}", path=str(path)) from e
