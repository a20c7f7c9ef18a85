"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from tx_engine import config
from tx_engine.models import (
    ONetTaskRecord,
    SocStructureRecord,
    TaskAutomationRecord,
    TaskThinkingRecord,
)
from tx_engine.sources.base import DatasetSource, FallbackDatasetSource, SourceUnavailableError
from tx_engine.sources.cache import FileSystemSourceCache, MemorySourceCache, SourceCache
from tx_engine.sources.datasets import (
    DATASETS,
    ONET_TASKS,
    SOC_STRUCTURE,
    TASK_AUTOMATION,
    TASK_THINKING,
    get_dataset,
)
from tx_engine.sources.http_source import HttpDatasetSource
from tx_engine.sources.records import parse_csv_records
from tx_engine.sources.snapshot_source import SnapshotDatasetSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceBundle:
    task_automation: List[TaskAutomationRecord]
    onet_tasks: List[ONetTaskRecord]
    soc_structure: List[SocStructureRecord]
    task_thinking: List[TaskThinkingRecord]


def build_dataset_source(
    mode: Optional[str] = None,
    *,
    data_dir: Optional[Path] = None,
    base_url: Optional[str] = None,
    text_cache_dir: Optional[Path] = None,
) -> DatasetSource:
    """
    Modes:
      - snapshot: only read local CSVs from data_dir
      - live: HTTP fetch (with on-disk text cache when text_cache_dir is set)
      - auto: live, falling back to snapshot on failure
    """
    selected = (mode or config.SOURCE_MODE).strip().lower()
    if selected not in config.SUPPORTED_SOURCE_MODES:
        raise ValueError(f"unsupported source mode '{selected}'")

    snapshot = SnapshotDatasetSource(data_dir)
    if selected == "snapshot":
        return snapshot

    text_cache = None
    if text_cache_dir is not None:
        text_cache = FileSystemSourceCache(text_cache_dir, ttl_s=config.SOURCE_CACHE_TTL_S)
    live = HttpDatasetSource(base_url, text_cache=text_cache)
    if selected == "live":
        return live
    return FallbackDatasetSource(live, snapshot)


class DatasetLoader:
    """
    Loads and parses the four datasets, memoizing parsed records per
    (source, dataset) in an injectable cache.
    """

    def __init__(
        self,
        source: DatasetSource,
        *,
        cache: Optional[SourceCache] = None,
        max_workers: Optional[int] = None,
    ):
        self.source = source
        self.cache = cache if cache is not None else MemorySourceCache(ttl_s=config.SOURCE_CACHE_TTL_S)
        self.max_workers = max_workers if max_workers is not None else config.LOADER_MAX_WORKERS

    def _cache_key(self, dataset: str) -> str:
        return f"{self.source.source_id}:{get_dataset(dataset).filename}"

    def load_records(self, dataset: str) -> List[Any]:
        spec = get_dataset(dataset)
        key = self._cache_key(dataset)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        text = self.source.fetch_text(spec.filename)
        records = parse_csv_records(text, spec.model, dataset=spec.filename)
        logger.info(
            "[sources][load] dataset=%s source=%s records=%d",
            spec.filename,
            self.source.source_id,
            len(records),
        )
        self.cache.put(key, records)
        return records

    def load_task_automation(self) -> List[TaskAutomationRecord]:
        return self.load_records(TASK_AUTOMATION)

    def load_onet_tasks(self) -> List[ONetTaskRecord]:
        return self.load_records(ONET_TASKS)

    def load_soc_structure(self) -> List[SocStructureRecord]:
        return self.load_records(SOC_STRUCTURE)

    def load_task_thinking(self) -> List[TaskThinkingRecord]:
        return self.load_records(TASK_THINKING)

    def load_all(self) -> SourceBundle:
        """
        Retrieve all four datasets concurrently. Any failure is raised once every
        retrieval has settled; no partial bundle is returned.
        """
        names = list(DATASETS.keys())
        results: Dict[str, List[Any]] = {}
        failures: List[Tuple[str, BaseException]] = []
        with ThreadPoolExecutor(max_workers=max(1, self.max_workers)) as pool:
            futures = [(name, pool.submit(self.load_records, name)) for name in names]
            # deterministic ordering by dataset registry order
            for name, fut in futures:
                try:
                    results[name] = fut.result()
                except SourceUnavailableError as exc:
                    failures.append((name, exc))

        if failures:
            name, exc = failures[0]
            logger.error(
                "[sources][load] %d dataset(s) unavailable; first=%s error=%s",
                len(failures),
                name,
                exc,
            )
            raise exc

        return SourceBundle(
            task_automation=results[TASK_AUTOMATION],
            onet_tasks=results[ONET_TASKS],
            soc_structure=results[SOC_STRUCTURE],
            task_thinking=results[TASK_THINKING],
        )

    def clear_cache(self) -> None:
        self.cache.clear()
