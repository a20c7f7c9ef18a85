"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

from typing import Optional

from tx_engine.models import (
    UNKNOWN_OCCUPATION,
    OccupationMatch,
    ProcessedTask,
    RiskLevel,
    TaskAutomationRecord,
    TaskCategory,
)

FILTERED_EXCLUSION_THRESHOLD = 0.8

DOMINANCE_THRESHOLD = 0.6
DOMINANCE_MARGIN = 0.2
BALANCED_THRESHOLD = 0.3

# Exclusive lower bounds, checked top-down.
RISK_BANDS = (
    (0.8, RiskLevel.VERY_HIGH),
    (0.6, RiskLevel.HIGH),
    (0.4, RiskLevel.MEDIUM),
    (0.2, RiskLevel.LOW),
)


def is_excluded(record: TaskAutomationRecord) -> bool:
    return record.filtered >= FILTERED_EXCLUSION_THRESHOLD


def automation_score(record: TaskAutomationRecord) -> float:
    return max(record.directive, record.feedback_loop)


def augmentation_score(record: TaskAutomationRecord) -> float:
    return max(record.validation, record.task_iteration, record.learning)


def dominates(score: float, other: float) -> bool:
    return score > DOMINANCE_THRESHOLD and score > other + DOMINANCE_MARGIN


def categorize(automation: float, augmentation: float) -> TaskCategory:
    if dominates(automation, augmentation):
        return TaskCategory.HIGH_AUTOMATION
    if dominates(augmentation, automation):
        return TaskCategory.HIGH_AUGMENTATION
    if automation > BALANCED_THRESHOLD or augmentation > BALANCED_THRESHOLD:
        return TaskCategory.BALANCED
    return TaskCategory.FILTERED


def risk_level(automation: float) -> RiskLevel:
    for lower_bound, level in RISK_BANDS:
        if automation > lower_bound:
            return level
    return RiskLevel.VERY_LOW


def score_task(
    record: TaskAutomationRecord,
    occupation: Optional[OccupationMatch] = None,
    thinking_fraction: float = 0.0,
) -> ProcessedTask:
    """Score one signal row. Pure: the result depends only on the arguments."""
    occ = occupation or UNKNOWN_OCCUPATION
    auto = automation_score(record)
    aug = augmentation_score(record)
    return ProcessedTask(
        task_name=record.task_name,
        occupation_code=occ.occupation_code,
        occupation_title=occ.occupation_title,
        automation_score=auto,
        augmentation_score=aug,
        thinking_fraction=thinking_fraction,
        category=categorize(auto, aug),
        risk_level=risk_level(auto),
    )
