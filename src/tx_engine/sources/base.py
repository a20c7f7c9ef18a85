"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

# src/tx_engine/sources/base.py

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class SourceUnavailableError(RuntimeError):
    """A required dataset could not be retrieved. Fatal to the calling pipeline step."""

    dataset: str
    reason: str
    attempts: int = 0
    status_code: Optional[int] = None

    def __str__(self) -> str:
        parts = [self.dataset, self.reason]
        if self.attempts:
            parts.append(f"attempts={self.attempts}")
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        return "SourceUnavailableError(" + ", ".join(parts) + ")"


class DatasetSource(ABC):
    """
    Supplies the raw CSV text of a dataset file.

    Implementations decide where the bytes come from (HTTP, local snapshot);
    the pipeline never looks past `fetch_text`.
    """

    source_id: str = "base"

    @abstractmethod
    def fetch_text(self, filename: str) -> str:
        """Return the full text of `filename` or raise SourceUnavailableError."""
        raise NotImplementedError


class FallbackDatasetSource(DatasetSource):
    """
    Mode=AUTO: try the primary (live) source; on failure fall back to the
    secondary (snapshot) source.
    """

    def __init__(self, primary: DatasetSource, fallback: DatasetSource):
        self.primary = primary
        self.fallback = fallback
        self.source_id = f"{primary.source_id}+{fallback.source_id}"

    def fetch_text(self, filename: str) -> str:
        try:
            return self.primary.fetch_text(filename)
        except SourceUnavailableError as primary_exc:
            logger.warning(
                "[sources][fallback] dataset=%s primary=%s failed (%s); trying %s",
                filename,
                self.primary.source_id,
                primary_exc.reason,
                self.fallback.source_id,
            )
            try:
                return self.fallback.fetch_text(filename)
            except SourceUnavailableError as fallback_exc:
                raise SourceUnavailableError(
                    filename,
                    f"{self.primary.source_id}: {primary_exc.reason}; "
                    f"{self.fallback.source_id}: {fallback_exc.reason}",
                    attempts=primary_exc.attempts,
                    status_code=primary_exc.status_code,
                ) from fallback_exc
