"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from tx_engine.utils.atomic_write import atomic_write_text

logger = logging.getLogger(__name__)


class SourceCache(ABC):
    """
    Memoizes source retrievals by key. `ttl_s` of None or <= 0 means entries
    never expire on their own; `invalidate`/`clear` always drop them.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    @abstractmethod
    def put(self, key: str, value: Any) -> None:
        raise NotImplementedError

    @abstractmethod
    def invalidate(self, key: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError


def _ttl_enabled(ttl_s: Optional[float]) -> bool:
    return ttl_s is not None and ttl_s > 0


class MemorySourceCache(SourceCache):
    def __init__(self, ttl_s: Optional[float] = None, *, clock: Callable[[], float] = time.monotonic):
        self.ttl_s = ttl_s
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if _ttl_enabled(self.ttl_s) and self._clock() - stored_at >= self.ttl_s:
                del self._entries[key]
                logger.debug("[sources][cache] expired key=%s", key)
                return None
            return value

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class FileSystemSourceCache(SourceCache):
    """Raw CSV text on disk, one file per key. Expiry is by file mtime."""

    def __init__(self, root: Path, ttl_s: Optional[float] = None, *, clock: Callable[[], float] = time.time):
        self.root = root
        self.ttl_s = ttl_s
        self._clock = clock

    def _path(self, key: str) -> Path:
        safe = "".join(ch if ch.isalnum() or ch in {"-", "_", "."} else "_" for ch in key)
        return self.root / safe

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            if _ttl_enabled(self.ttl_s) and self._clock() - path.stat().st_mtime >= self.ttl_s:
                path.unlink()
                logger.debug("[sources][cache] expired path=%s", path)
                return None
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("[sources][cache] unreadable entry path=%s error=%s", path, exc)
            return None

    def put(self, key: str, value: Any) -> None:
        if not isinstance(value, str):
            raise TypeError("FileSystemSourceCache stores text only")
        path = self._path(key)
        try:
            atomic_write_text(path, value)
        except OSError as exc:
            # Not fatal: the entry is simply absent on the next get().
            logger.warning("[sources][cache] write failed path=%s error=%s", path, exc)

    def invalidate(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()

    def clear(self) -> None:
        if not self.root.exists():
            return
        for path in self.root.iterdir():
            if path.is_file():
                path.unlink()
