from __future__ import annotations

import pytest

from tx_engine.models import OccupationMatch, RiskLevel, TaskAutomationRecord, TaskCategory
from tx_engine.pipeline.scoring import (
    augmentation_score,
    automation_score,
    categorize,
    is_excluded,
    risk_level,
    score_task,
)


def _record(**signals: float) -> TaskAutomationRecord:
    return TaskAutomationRecord(task_name="Some task", **signals)


def test_scores_take_the_max_of_their_signals() -> None:
    record = _record(directive=0.3, feedback_loop=0.7, validation=0.1, task_iteration=0.5, learning=0.4)
    assert automation_score(record) == 0.7
    assert augmentation_score(record) == 0.5


def test_missing_signals_default_to_zero() -> None:
    record = _record()
    assert automation_score(record) == 0.0
    assert augmentation_score(record) == 0.0


@pytest.mark.parametrize(
    "filtered, excluded",
    [(0.0, False), (0.79, False), (0.8, True), (0.85, True), (1.0, True)],
)
def test_exclusion_threshold(filtered: float, excluded: bool) -> None:
    assert is_excluded(_record(filtered=filtered)) is excluded


@pytest.mark.parametrize(
    "automation, augmentation, expected",
    [
        (0.9, 0.2, TaskCategory.HIGH_AUTOMATION),
        (0.7, 0.3, TaskCategory.HIGH_AUTOMATION),
        (0.2, 0.8, TaskCategory.HIGH_AUGMENTATION),
        (0.5, 0.5, TaskCategory.BALANCED),
        (0.7, 0.6, TaskCategory.BALANCED),
        (0.6, 0.0, TaskCategory.BALANCED),
        (0.0, 0.31, TaskCategory.BALANCED),
        (0.3, 0.3, TaskCategory.FILTERED),
        (0.1, 0.2, TaskCategory.FILTERED),
        (0.0, 0.0, TaskCategory.FILTERED),
    ],
)
def test_categorize(automation: float, augmentation: float, expected: TaskCategory) -> None:
    assert categorize(automation, augmentation) is expected


@pytest.mark.parametrize(
    "automation, expected",
    [
        (1.0, RiskLevel.VERY_HIGH),
        (0.81, RiskLevel.VERY_HIGH),
        (0.8, RiskLevel.HIGH),
        (0.61, RiskLevel.HIGH),
        (0.6, RiskLevel.MEDIUM),
        (0.41, RiskLevel.MEDIUM),
        (0.4, RiskLevel.LOW),
        (0.21, RiskLevel.LOW),
        (0.2, RiskLevel.VERY_LOW),
        (0.0, RiskLevel.VERY_LOW),
    ],
)
def test_risk_bands_use_exclusive_lower_bounds(automation: float, expected: RiskLevel) -> None:
    assert risk_level(automation) is expected


def test_score_task_links_occupation_and_thinking_fraction() -> None:
    record = TaskAutomationRecord(task_name="Review contracts", directive=0.9, feedback_loop=0.5, validation=0.2)
    task = score_task(record, OccupationMatch("13-2011.00", "Accountants"), 0.4)

    assert task.task_name == "Review contracts"
    assert task.occupation_code == "13-2011.00"
    assert task.occupation_title == "Accountants"
    assert task.automation_score == 0.9
    assert task.augmentation_score == 0.2
    assert task.thinking_fraction == 0.4
    assert task.category is TaskCategory.HIGH_AUTOMATION
    assert task.risk_level is RiskLevel.VERY_HIGH


def test_score_task_defaults_to_unknown_occupation() -> None:
    task = score_task(_record(validation=0.9))
    assert task.occupation_code == "Unknown"
    assert task.occupation_title == "Unknown Occupation"
    assert task.thinking_fraction == 0.0
    assert task.category is TaskCategory.HIGH_AUGMENTATION


def test_score_task_is_pure() -> None:
    record = _record(directive=0.45, learning=0.35)
    assert score_task(record) == score_task(record)


def test_to_dict_uses_enum_values() -> None:
    payload = score_task(_record(directive=0.9)).to_dict()
    assert payload["category"] == "high_automation"
    assert payload["risk_level"] == "Very High"
