"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from tx_engine.models import ImpactCategory, OccupationSummary, ProcessedTask
from tx_engine.pipeline.scoring import dominates

HIGH_RISK_THRESHOLD = 0.7


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def dominant_category(avg_automation: float, avg_augmentation: float) -> ImpactCategory:
    if dominates(avg_automation, avg_augmentation):
        return ImpactCategory.AUTOMATION_DOMINANT
    if dominates(avg_augmentation, avg_automation):
        return ImpactCategory.AUGMENTATION_DOMINANT
    return ImpactCategory.BALANCED_IMPACT


def group_by_occupation(tasks: Iterable[ProcessedTask]) -> Dict[str, List[ProcessedTask]]:
    """Group in first-seen order; "Unknown" is a group like any other."""
    groups: Dict[str, List[ProcessedTask]] = {}
    for task in tasks:
        groups.setdefault(task.occupation_code, []).append(task)
    return groups


def summarize_group(code: str, tasks: Sequence[ProcessedTask]) -> OccupationSummary:
    avg_auto = mean([t.automation_score for t in tasks])
    avg_aug = mean([t.augmentation_score for t in tasks])
    return OccupationSummary(
        occupation_code=code,
        occupation_title=tasks[0].occupation_title,
        total_tasks=len(tasks),
        avg_automation_score=avg_auto,
        avg_augmentation_score=avg_aug,
        avg_thinking_fraction=mean([t.thinking_fraction for t in tasks]),
        high_risk_tasks=sum(1 for t in tasks if t.automation_score > HIGH_RISK_THRESHOLD),
        category=dominant_category(avg_auto, avg_aug),
    )


def summarize_occupations(tasks: Iterable[ProcessedTask]) -> List[OccupationSummary]:
    """Per-occupation summaries, highest average automation first (stable sort)."""
    summaries = [summarize_group(code, members) for code, members in group_by_occupation(tasks).items() if members]
    return sorted(summaries, key=lambda s: s.avg_automation_score, reverse=True)
