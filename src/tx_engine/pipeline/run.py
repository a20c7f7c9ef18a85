"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional

from tx_engine.models import (
    AutomationAugmentationSplit,
    DataSummary,
    MajorGroupSummary,
    OccupationSummary,
    ProcessedTask,
    RiskRankingEntry,
    TaskAutomationRecord,
    TaskThinkingRecord,
)
from tx_engine.pipeline.aggregate import summarize_occupations
from tx_engine.pipeline.linker import OccupationLinker, link_task_names, normalize_task_text
from tx_engine.pipeline.scoring import is_excluded, score_task
from tx_engine.pipeline.views import (
    build_data_summary,
    major_group_breakdown,
    partition_by_category,
    top_risk_occupations,
)
from tx_engine.sources.loader import DatasetLoader, SourceBundle, build_dataset_source

logger = logging.getLogger(__name__)


def build_thinking_index(records: Iterable[TaskThinkingRecord]) -> Dict[str, float]:
    """Normalized task name -> thinking fraction; later rows overwrite earlier ones."""
    return {normalize_task_text(r.task_name): r.thinking_fraction for r in records}


def process_tasks(
    automation_records: Iterable[TaskAutomationRecord],
    linker: OccupationLinker,
    thinking_index: Dict[str, float],
) -> List[ProcessedTask]:
    """Single pass: drop excluded rows, link, score. Output keeps input order."""
    kept = [r for r in automation_records if not is_excluded(r)]
    matches = link_task_names(linker, (r.task_name for r in kept))
    processed = [
        score_task(
            record,
            matches[record.task_name],
            thinking_index.get(normalize_task_text(record.task_name), 0.0),
        )
        for record in kept
    ]
    categories = Counter(t.category.value for t in processed)
    logger.info(
        "[pipeline] processed=%d categories=%s",
        len(processed),
        dict(sorted(categories.items())),
    )
    return processed


def process_bundle(bundle: SourceBundle) -> List[ProcessedTask]:
    excluded = sum(1 for r in bundle.task_automation if is_excluded(r))
    logger.info(
        "[pipeline] input rows=%d excluded=%d onet_tasks=%d thinking=%d",
        len(bundle.task_automation),
        excluded,
        len(bundle.onet_tasks),
        len(bundle.task_thinking),
    )
    linker = OccupationLinker.from_records(bundle.onet_tasks)
    return process_tasks(bundle.task_automation, linker, build_thinking_index(bundle.task_thinking))


class TaskExposurePipeline:
    """
    Facade the CLI and dashboard call into. Every call re-runs the pipeline over
    the loader's (memoized) sources; processed records are never stored here.
    """

    def __init__(self, loader: Optional[DatasetLoader] = None):
        self.loader = loader or DatasetLoader(build_dataset_source())

    def process_all(self) -> List[ProcessedTask]:
        return process_bundle(self.loader.load_all())

    def summary(self) -> DataSummary:
        return build_data_summary(self.process_all())

    def occupation_summaries(self) -> List[OccupationSummary]:
        return summarize_occupations(self.process_all())

    def top_risk_occupations(self, limit: int = 20) -> List[RiskRankingEntry]:
        return top_risk_occupations(self.occupation_summaries(), limit)

    def automation_vs_augmentation(self) -> AutomationAugmentationSplit:
        return partition_by_category(self.process_all())

    def major_groups(self) -> List[MajorGroupSummary]:
        bundle = self.loader.load_all()
        return major_group_breakdown(process_bundle(bundle), bundle.soc_structure)


__all__ = [
    "TaskExposurePipeline",
    "build_thinking_index",
    "process_bundle",
    "process_tasks",
]
