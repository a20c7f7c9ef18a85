"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from .base import DatasetSource, FallbackDatasetSource, SourceUnavailableError
from .cache import FileSystemSourceCache, MemorySourceCache, SourceCache
from .datasets import DATASETS, ONET_TASKS, SOC_STRUCTURE, TASK_AUTOMATION, TASK_THINKING, DatasetSpec
from .http_source import HttpDatasetSource
from .loader import DatasetLoader, SourceBundle, build_dataset_source
from .records import MalformedRecordError, parse_csv_records
from .snapshot_source import SnapshotDatasetSource

__all__ = [
    "DATASETS",
    "ONET_TASKS",
    "SOC_STRUCTURE",
    "TASK_AUTOMATION",
    "TASK_THINKING",
    "DatasetSpec",
    "DatasetSource",
    "FallbackDatasetSource",
    "HttpDatasetSource",
    "SnapshotDatasetSource",
    "SourceUnavailableError",
    "SourceCache",
    "MemorySourceCache",
    "FileSystemSourceCache",
    "DatasetLoader",
    "SourceBundle",
    "build_dataset_source",
    "MalformedRecordError",
    "parse_csv_records",
]
