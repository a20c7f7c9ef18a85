"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.

Raw dataset rows (validated with pydantic) and the derived, immutable records
the pipeline produces from them.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNKNOWN_OCCUPATION_CODE = "Unknown"
UNKNOWN_OCCUPATION_TITLE = "Unknown Occupation"


def _blank_as_zero(value: Any) -> Any:
    if value is None:
        return 0.0
    if isinstance(value, str) and not value.strip():
        return 0.0
    return value


def _require_text(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError("must be a non-empty string")
    return value


# ---- raw rows ----


class TaskAutomationRecord(BaseModel):
    """One row of automation_vs_augmentation_by_task.csv."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    task_name: str
    feedback_loop: float = Field(default=0.0, ge=0.0, le=1.0)
    directive: float = Field(default=0.0, ge=0.0, le=1.0)
    validation: float = Field(default=0.0, ge=0.0, le=1.0)
    task_iteration: float = Field(default=0.0, ge=0.0, le=1.0)
    learning: float = Field(default=0.0, ge=0.0, le=1.0)
    filtered: float = Field(default=0.0, ge=0.0, le=1.0)

    @field_validator("task_name", mode="before")
    @classmethod
    def _validate_task_name(cls, value: Any) -> Any:
        return _require_text(value)

    @field_validator(
        "feedback_loop",
        "directive",
        "validation",
        "task_iteration",
        "learning",
        "filtered",
        mode="before",
    )
    @classmethod
    def _blank_signal(cls, value: Any) -> Any:
        return _blank_as_zero(value)


class ONetTaskRecord(BaseModel):
    """One row of onet_task_statements.csv."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    occupation_code: str = Field(alias="O*NET-SOC Code")
    occupation_title: str = Field(alias="Title")
    task: str = Field(alias="Task")

    @field_validator("occupation_code", "occupation_title", "task", mode="before")
    @classmethod
    def _validate_text(cls, value: Any) -> Any:
        return _require_text(value)


class SocStructureRecord(BaseModel):
    """One row of SOC_Structure.csv; only major-group rows carry `major_group`."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    major_group: Optional[str] = Field(default=None, alias="Major Group")
    title: Optional[str] = Field(default=None, alias="SOC or O*NET-SOC 2019 Title")

    @field_validator("major_group", "title", mode="before")
    @classmethod
    def _blank_as_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TaskThinkingRecord(BaseModel):
    """One row of task_thinking_fractions.csv."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    task_name: str
    thinking_fraction: float = Field(default=0.0, ge=0.0, le=1.0)

    @field_validator("task_name", mode="before")
    @classmethod
    def _validate_task_name(cls, value: Any) -> Any:
        return _require_text(value)

    @field_validator("thinking_fraction", mode="before")
    @classmethod
    def _blank_fraction(cls, value: Any) -> Any:
        return _blank_as_zero(value)


# ---- derived records ----


class TaskCategory(str, Enum):
    HIGH_AUTOMATION = "high_automation"
    HIGH_AUGMENTATION = "high_augmentation"
    BALANCED = "balanced"
    FILTERED = "filtered"


class RiskLevel(str, Enum):
    VERY_HIGH = "Very High"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    VERY_LOW = "Very Low"


class ImpactCategory(str, Enum):
    AUTOMATION_DOMINANT = "Automation Dominant"
    AUGMENTATION_DOMINANT = "Augmentation Dominant"
    BALANCED_IMPACT = "Balanced Impact"


@dataclass(frozen=True)
class OccupationMatch:
    occupation_code: str
    occupation_title: str

    @property
    def is_unknown(self) -> bool:
        return self.occupation_code == UNKNOWN_OCCUPATION_CODE


UNKNOWN_OCCUPATION = OccupationMatch(UNKNOWN_OCCUPATION_CODE, UNKNOWN_OCCUPATION_TITLE)


@dataclass(frozen=True)
class ProcessedTask:
    """A scored task linked to its occupation. Created once per qualifying raw row."""

    task_name: str
    occupation_code: str
    occupation_title: str
    automation_score: float
    augmentation_score: float
    thinking_fraction: float
    category: TaskCategory
    risk_level: RiskLevel

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["category"] = self.category.value
        d["risk_level"] = self.risk_level.value
        return d


@dataclass(frozen=True)
class OccupationSummary:
    occupation_code: str
    occupation_title: str
    total_tasks: int
    avg_automation_score: float
    avg_augmentation_score: float
    avg_thinking_fraction: float
    high_risk_tasks: int
    category: ImpactCategory

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["category"] = self.category.value
        return d


@dataclass(frozen=True)
class DataSummary:
    total_occupations: int
    total_tasks: int
    avg_automation_score: float
    avg_augmentation_score: float
    high_risk_tasks: int
    low_risk_tasks: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RiskRankingEntry:
    title: str
    avg_automation_score: float
    task_count: int
    code: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AutomationAugmentationSplit:
    automation_dominant: List[ProcessedTask] = field(default_factory=list)
    augmentation_dominant: List[ProcessedTask] = field(default_factory=list)
    balanced: List[ProcessedTask] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "automation_dominant": [t.to_dict() for t in self.automation_dominant],
            "augmentation_dominant": [t.to_dict() for t in self.augmentation_dominant],
            "balanced": [t.to_dict() for t in self.balanced],
        }


@dataclass(frozen=True)
class MajorGroupSummary:
    major_group_code: str
    major_group_title: str
    occupation_count: int
    total_tasks: int
    avg_automation_score: float
    avg_augmentation_score: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
