from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

import requests

logger = logging.getLogger(__name__)

_HTML_MARKERS = ("<!doctype html", "<html")


@dataclass
class FetchError(RuntimeError):
    reason: str
    attempts: int
    status_code: Optional[int] = None

    def __str__(self) -> str:
        parts = [self.reason, f"attempts={self.attempts}"]
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        return "FetchError(" + ", ".join(parts) + ")"


def _classify_status(status: int) -> str:
    if status in (401, 403):
        return "auth_error"
    if status in (404, 410):
        return "unavailable"
    if status == 429:
        return "rate_limited"
    if status in (408, 504):
        return "timeout"
    return "network_error"


def _should_retry(reason: str, status: Optional[int]) -> bool:
    if reason in {"auth_error", "unavailable", "invalid_response"}:
        return False
    if reason in {"network_error", "timeout", "rate_limited"}:
        return True
    if status is not None and 500 <= status <= 599:
        return True
    return False


def _sleep_backoff(*, url: str, attempt: int, base_s: float, max_s: float, reason: str, status: Optional[int]) -> None:
    delay = min(max_s, base_s * (2 ** (attempt - 1)))
    logger.info(
        "[sources][backoff] url=%s attempt=%s sleep_s=%.3f reason=%s status=%s",
        url,
        attempt,
        delay,
        reason,
        status,
    )
    time.sleep(delay)


def _looks_like_html(text: str) -> bool:
    head = text[:512].lstrip().lower()
    return any(head.startswith(marker) for marker in _HTML_MARKERS)


def fetch_csv_text_with_retry(
    url: str,
    *,
    headers: Optional[dict[str, str]] = None,
    timeout_s: float = 30,
    max_attempts: int = 3,
    backoff_base_s: float = 0.5,
    backoff_max_s: float = 3.0,
) -> str:
    """
    GET a CSV file. Transient failures (timeouts, 429, 5xx, connection errors)
    are retried with exponential backoff; everything else fails fast.
    """
    attempts = max(1, max_attempts)
    last_reason = "network_error"
    last_status: Optional[int] = None

    for attempt in range(1, attempts + 1):
        try:
            resp = requests.get(url, headers=headers or {}, timeout=timeout_s)
            last_status = resp.status_code
            if resp.status_code != 200:
                last_reason = _classify_status(resp.status_code)
                if attempt < attempts and _should_retry(last_reason, resp.status_code):
                    _sleep_backoff(
                        url=url,
                        attempt=attempt,
                        base_s=backoff_base_s,
                        max_s=backoff_max_s,
                        reason=last_reason,
                        status=last_status,
                    )
                    continue
                raise FetchError(last_reason, attempt, resp.status_code)

            # requests falls back to ISO-8859-1 for text/* without a charset; the datasets are UTF-8.
            try:
                text = resp.content.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise FetchError("invalid_response", attempt, resp.status_code) from exc
            # HF serves an HTML error/login page with 200 for some gated paths.
            if not text or _looks_like_html(text):
                raise FetchError("invalid_response", attempt, resp.status_code)
            return text
        except requests.Timeout:
            last_reason = "timeout"
        except requests.RequestException:
            last_reason = "network_error"

        if attempt < attempts and _should_retry(last_reason, last_status):
            _sleep_backoff(
                url=url,
                attempt=attempt,
                base_s=backoff_base_s,
                max_s=backoff_max_s,
                reason=last_reason,
                status=last_status,
            )
            continue
        raise FetchError(last_reason, attempt, last_status)

    raise FetchError(last_reason, attempts, last_status)


__all__ = ["FetchError", "fetch_csv_text_with_retry"]
