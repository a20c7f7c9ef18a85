"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.

Headline numbers, rankings and partitions derived from processed tasks.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Sequence

from tx_engine.models import (
    UNKNOWN_OCCUPATION_CODE,
    AutomationAugmentationSplit,
    DataSummary,
    MajorGroupSummary,
    OccupationSummary,
    ProcessedTask,
    RiskRankingEntry,
    SocStructureRecord,
    TaskCategory,
)
from tx_engine.pipeline.aggregate import HIGH_RISK_THRESHOLD, mean

logger = logging.getLogger(__name__)

LOW_RISK_THRESHOLD = 0.3
PARTITION_CAP = 100


class EmptyResultSetError(ValueError):
    """An average was requested over zero qualifying records."""


def round_half_up(value: float, digits: int = 2) -> float:
    # Matches Math.round(x * 100) / 100 rather than banker's rounding.
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def known_tasks(tasks: Iterable[ProcessedTask]) -> List[ProcessedTask]:
    return [t for t in tasks if t.occupation_code != UNKNOWN_OCCUPATION_CODE]


def build_data_summary(tasks: Iterable[ProcessedTask]) -> DataSummary:
    valid = known_tasks(tasks)
    if not valid:
        raise EmptyResultSetError("no tasks with a resolved occupation; cannot compute averages")

    summary = DataSummary(
        total_occupations=len({t.occupation_code for t in valid}),
        total_tasks=len(valid),
        avg_automation_score=round_half_up(mean([t.automation_score for t in valid])),
        avg_augmentation_score=round_half_up(mean([t.augmentation_score for t in valid])),
        high_risk_tasks=sum(1 for t in valid if t.automation_score > HIGH_RISK_THRESHOLD),
        low_risk_tasks=sum(1 for t in valid if t.automation_score < LOW_RISK_THRESHOLD),
    )
    logger.info(
        "[views] summary occupations=%d tasks=%d high_risk=%d low_risk=%d",
        summary.total_occupations,
        summary.total_tasks,
        summary.high_risk_tasks,
        summary.low_risk_tasks,
    )
    return summary


def top_risk_occupations(summaries: Sequence[OccupationSummary], limit: int = 20) -> List[RiskRankingEntry]:
    """`summaries` must already be sorted (see summarize_occupations)."""
    if limit < 0:
        raise ValueError("limit must be >= 0")
    return [
        RiskRankingEntry(
            title=s.occupation_title,
            avg_automation_score=s.avg_automation_score,
            task_count=s.total_tasks,
            code=s.occupation_code,
        )
        for s in summaries[:limit]
    ]


def partition_by_category(tasks: Iterable[ProcessedTask], cap: int = PARTITION_CAP) -> AutomationAugmentationSplit:
    buckets: Dict[TaskCategory, List[ProcessedTask]] = {
        TaskCategory.HIGH_AUTOMATION: [],
        TaskCategory.HIGH_AUGMENTATION: [],
        TaskCategory.BALANCED: [],
    }
    for task in tasks:
        bucket = buckets.get(task.category)
        if bucket is not None and len(bucket) < cap:
            bucket.append(task)
    return AutomationAugmentationSplit(
        automation_dominant=buckets[TaskCategory.HIGH_AUTOMATION],
        augmentation_dominant=buckets[TaskCategory.HIGH_AUGMENTATION],
        balanced=buckets[TaskCategory.BALANCED],
    )


def major_group_code(occupation_code: str) -> str:
    return f"{occupation_code[:2]}-0000"


def major_group_titles(soc_records: Iterable[SocStructureRecord]) -> Dict[str, str]:
    titles: Dict[str, str] = {}
    for record in soc_records:
        if record.major_group and record.title:
            titles.setdefault(record.major_group.strip(), record.title.strip())
    return titles


def major_group_breakdown(
    tasks: Iterable[ProcessedTask],
    soc_records: Iterable[SocStructureRecord],
) -> List[MajorGroupSummary]:
    titles = major_group_titles(soc_records)
    groups: Dict[str, List[ProcessedTask]] = {}
    for task in known_tasks(tasks):
        groups.setdefault(major_group_code(task.occupation_code), []).append(task)

    out = [
        MajorGroupSummary(
            major_group_code=code,
            major_group_title=titles.get(code, code),
            occupation_count=len({t.occupation_code for t in members}),
            total_tasks=len(members),
            avg_automation_score=mean([t.automation_score for t in members]),
            avg_augmentation_score=mean([t.augmentation_score for t in members]),
        )
        for code, members in groups.items()
    ]
    return sorted(out, key=lambda g: g.avg_automation_score, reverse=True)
