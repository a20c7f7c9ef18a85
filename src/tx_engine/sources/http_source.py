"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

import logging
from typing import Optional

from tx_engine import config
from tx_engine.sources.base import DatasetSource, SourceUnavailableError
from tx_engine.sources.cache import SourceCache
from tx_engine.sources.retry import FetchError, fetch_csv_text_with_retry

logger = logging.getLogger(__name__)


class HttpDatasetSource(DatasetSource):
    """Mode=LIVE: GET `<base_url>/<filename>` with retry; optional on-disk text cache."""

    source_id = "http"

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout_s: Optional[float] = None,
        max_attempts: Optional[int] = None,
        backoff_base_s: Optional[float] = None,
        backoff_max_s: Optional[float] = None,
        text_cache: Optional[SourceCache] = None,
    ):
        self.base_url = (base_url or config.DATASET_BASE_URL).rstrip("/")
        self.timeout_s = timeout_s if timeout_s is not None else config.FETCH_TIMEOUT_S
        self.max_attempts = max_attempts if max_attempts is not None else config.FETCH_MAX_ATTEMPTS
        self.backoff_base_s = backoff_base_s if backoff_base_s is not None else config.FETCH_BACKOFF_BASE_S
        self.backoff_max_s = backoff_max_s if backoff_max_s is not None else config.FETCH_BACKOFF_MAX_S
        self.text_cache = text_cache

    def url_for(self, filename: str) -> str:
        return f"{self.base_url}/{filename}"

    def fetch_text(self, filename: str) -> str:
        if self.text_cache is not None:
            cached = self.text_cache.get(filename)
            if cached is not None:
                logger.info("[sources][http] cache hit dataset=%s", filename)
                return cached

        url = self.url_for(filename)
        logger.info("[sources][http] fetching dataset=%s url=%s", filename, url)
        try:
            text = fetch_csv_text_with_retry(
                url,
                headers={"User-Agent": config.USER_AGENT, "Accept": "text/csv,text/plain;q=0.9,*/*;q=0.8"},
                timeout_s=self.timeout_s,
                max_attempts=self.max_attempts,
                backoff_base_s=self.backoff_base_s,
                backoff_max_s=self.backoff_max_s,
            )
        except FetchError as exc:
            logger.error("[sources][http] fetch failed dataset=%s error=%s", filename, exc)
            raise SourceUnavailableError(
                filename,
                exc.reason,
                attempts=exc.attempts,
                status_code=exc.status_code,
            ) from exc

        if self.text_cache is not None:
            self.text_cache.put(filename, text)
        return text
