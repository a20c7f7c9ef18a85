from __future__ import annotations

import pytest

from tx_engine.models import ProcessedTask, RiskLevel, SocStructureRecord, TaskCategory
from tx_engine.pipeline.aggregate import summarize_occupations
from tx_engine.pipeline.views import (
    EmptyResultSetError,
    build_data_summary,
    major_group_breakdown,
    major_group_code,
    partition_by_category,
    round_half_up,
    top_risk_occupations,
)


def _task(
    code: str,
    auto: float,
    aug: float,
    category: TaskCategory = TaskCategory.BALANCED,
    name: str = "task",
) -> ProcessedTask:
    return ProcessedTask(
        task_name=name,
        occupation_code=code,
        occupation_title=f"Title {code}",
        automation_score=auto,
        augmentation_score=aug,
        thinking_fraction=0.0,
        category=category,
        risk_level=RiskLevel.MEDIUM,
    )


def test_summary_excludes_unknown_tasks() -> None:
    tasks = [
        _task("13-2011.00", 0.9, 0.2),
        _task("13-2011.00", 0.7, 0.3),
        _task("15-1252.00", 0.2, 0.8),
        _task("Unknown", 0.95, 0.0),
    ]
    summary = build_data_summary(tasks)

    assert summary.total_occupations == 2
    assert summary.total_tasks == 3
    assert summary.avg_automation_score == 0.6
    assert summary.avg_augmentation_score == 0.43
    assert summary.high_risk_tasks == 1
    assert summary.low_risk_tasks == 1


def test_summary_low_risk_is_strictly_below_threshold() -> None:
    summary = build_data_summary([_task("A", 0.3, 0.0), _task("A", 0.29, 0.0)])
    assert summary.low_risk_tasks == 1


def test_summary_raises_when_only_unknown_tasks() -> None:
    with pytest.raises(EmptyResultSetError):
        build_data_summary([_task("Unknown", 0.5, 0.5)])


def test_summary_raises_on_empty_input() -> None:
    with pytest.raises(EmptyResultSetError):
        build_data_summary([])


@pytest.mark.parametrize(
    "value, expected",
    [(0.625, 0.63), (0.375, 0.38), (0.5, 0.5), (0.004, 0.0), (0.005, 0.01), (1.0, 1.0)],
)
def test_round_half_up(value: float, expected: float) -> None:
    assert round_half_up(value) == expected


def test_top_risk_is_prefix_of_sorted_summaries() -> None:
    tasks = [_task(f"{i:02d}-0000.00", i / 10, 0.0) for i in range(1, 10)]
    summaries = summarize_occupations(tasks)
    top = top_risk_occupations(summaries, 3)

    assert [e.code for e in top] == ["09-0000.00", "08-0000.00", "07-0000.00"]
    assert top[0].title == "Title 09-0000.00"
    assert top[0].task_count == 1
    assert top[0].to_dict()["avg_automation_score"] == pytest.approx(0.9)


def test_top_risk_limit_larger_than_input_returns_all() -> None:
    summaries = summarize_occupations([_task("A", 0.5, 0.1), _task("B", 0.4, 0.1)])
    assert len(top_risk_occupations(summaries, 20)) == 2
    assert top_risk_occupations(summaries, 0) == []


def test_top_risk_rejects_negative_limit() -> None:
    with pytest.raises(ValueError):
        top_risk_occupations([], -1)


def test_partition_buckets_are_disjoint_and_ordered() -> None:
    tasks = [
        _task("A", 0.9, 0.1, TaskCategory.HIGH_AUTOMATION, "a1"),
        _task("A", 0.1, 0.9, TaskCategory.HIGH_AUGMENTATION, "g1"),
        _task("A", 0.5, 0.5, TaskCategory.BALANCED, "b1"),
        _task("A", 0.1, 0.1, TaskCategory.FILTERED, "f1"),
        _task("A", 0.95, 0.1, TaskCategory.HIGH_AUTOMATION, "a2"),
    ]
    split = partition_by_category(tasks)

    assert [t.task_name for t in split.automation_dominant] == ["a1", "a2"]
    assert [t.task_name for t in split.augmentation_dominant] == ["g1"]
    assert [t.task_name for t in split.balanced] == ["b1"]


def test_partition_caps_each_bucket_at_first_hundred() -> None:
    tasks = [_task("A", 0.9, 0.1, TaskCategory.HIGH_AUTOMATION, f"a{i}") for i in range(150)]
    tasks.append(_task("A", 0.5, 0.5, TaskCategory.BALANCED, "b0"))
    split = partition_by_category(tasks)

    assert len(split.automation_dominant) == 100
    assert split.automation_dominant[-1].task_name == "a99"
    assert len(split.balanced) == 1


def test_partition_includes_unknown_occupation_tasks() -> None:
    split = partition_by_category([_task("Unknown", 0.9, 0.1, TaskCategory.HIGH_AUTOMATION)])
    assert len(split.automation_dominant) == 1


def test_major_group_code() -> None:
    assert major_group_code("15-1252.00") == "15-0000"


def test_major_group_breakdown_uses_soc_titles() -> None:
    soc = [
        SocStructureRecord(major_group="13-0000", title="Business and Financial Operations Occupations"),
        SocStructureRecord(major_group=None, title="Some minor group"),
        SocStructureRecord(major_group="13-0000", title="Duplicate title ignored"),
    ]
    tasks = [
        _task("13-2011.00", 0.9, 0.2),
        _task("13-1111.00", 0.5, 0.4),
        _task("15-1252.00", 0.2, 0.8),
        _task("Unknown", 1.0, 0.0),
    ]
    groups = major_group_breakdown(tasks, soc)

    assert [g.major_group_code for g in groups] == ["13-0000", "15-0000"]
    business, computing = groups
    assert business.major_group_title == "Business and Financial Operations Occupations"
    assert business.occupation_count == 2
    assert business.total_tasks == 2
    assert business.avg_automation_score == pytest.approx(0.7)
    assert computing.major_group_title == "15-0000"
