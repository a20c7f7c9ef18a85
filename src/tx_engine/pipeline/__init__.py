"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from .aggregate import dominant_category, summarize_occupations
from .linker import OccupationLinker, normalize_task_text
from .run import TaskExposurePipeline, process_bundle, process_tasks
from .scoring import augmentation_score, automation_score, categorize, is_excluded, risk_level, score_task
from .views import (
    EmptyResultSetError,
    build_data_summary,
    major_group_breakdown,
    partition_by_category,
    top_risk_occupations,
)

__all__ = [
    "OccupationLinker",
    "normalize_task_text",
    "is_excluded",
    "automation_score",
    "augmentation_score",
    "categorize",
    "risk_level",
    "score_task",
    "dominant_category",
    "summarize_occupations",
    "EmptyResultSetError",
    "build_data_summary",
    "top_risk_occupations",
    "partition_by_category",
    "major_group_breakdown",
    "TaskExposurePipeline",
    "process_bundle",
    "process_tasks",
]
