from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple, Type

from pydantic import BaseModel

from tx_engine.models import (
    ONetTaskRecord,
    SocStructureRecord,
    TaskAutomationRecord,
    TaskThinkingRecord,
)

TASK_AUTOMATION = "task_automation"
ONET_TASKS = "onet_tasks"
SOC_STRUCTURE = "soc_structure"
TASK_THINKING = "task_thinking"


@dataclass(frozen=True)
class DatasetSpec:
    name: str
    filename: str
    model: Type[BaseModel]
    required_columns: Tuple[str, ...]


DATASETS: Dict[str, DatasetSpec] = {
    TASK_AUTOMATION: DatasetSpec(
        name=TASK_AUTOMATION,
        filename="automation_vs_augmentation_by_task.csv",
        model=TaskAutomationRecord,
        required_columns=(
            "task_name",
            "feedback_loop",
            "directive",
            "task_iteration",
            "validation",
            "learning",
            "filtered",
        ),
    ),
    ONET_TASKS: DatasetSpec(
        name=ONET_TASKS,
        filename="onet_task_statements.csv",
        model=ONetTaskRecord,
        required_columns=("O*NET-SOC Code", "Title", "Task"),
    ),
    SOC_STRUCTURE: DatasetSpec(
        name=SOC_STRUCTURE,
        filename="SOC_Structure.csv",
        model=SocStructureRecord,
        required_columns=("Major Group", "SOC or O*NET-SOC 2019 Title"),
    ),
    TASK_THINKING: DatasetSpec(
        name=TASK_THINKING,
        filename="task_thinking_fractions.csv",
        model=TaskThinkingRecord,
        required_columns=("task_name", "thinking_fraction"),
    ),
}


def get_dataset(name: str) -> DatasetSpec:
    try:
        return DATASETS[name]
    except KeyError as exc:
        raise ValueError(f"unknown dataset '{name}'") from exc
