"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from tx_engine import config
from tx_engine.sources.base import DatasetSource, SourceUnavailableError


class SnapshotDatasetSource(DatasetSource):
    """
    Loads dataset CSVs from a local snapshot directory.
    """

    source_id = "snapshot"

    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir) if data_dir is not None else config.DATA_DIR

    def path_for(self, filename: str) -> Path:
        return self.data_dir / filename

    def fetch_text(self, filename: str) -> str:
        path = self.path_for(filename)
        if not path.exists():
            raise SourceUnavailableError(filename, f"snapshot missing: {path}")
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise SourceUnavailableError(filename, f"snapshot not utf-8: {path}") from exc
        except OSError as exc:
            raise SourceUnavailableError(filename, f"snapshot unreadable: {path}: {exc}") from exc
