"""Domain models for bouwplan."""

from bouwplan.models.configuration import BuildConfiguration
from bouwplan.models.enums import (
    EnergyLevel,
    EvidenceKind,
    EvidenceOutcome,
    ExtraFeature,
    MaterialType,
    PlotSize,
    SizeCategory,
    TaskStatus,
    TrancheStatus,
)
from bouwplan.models.project import Evidence, Phase, ProjectState, Task, Tranche
from bouwplan.models.reports import (
    BudgetSummary,
    ComplianceSummary,
    CostBreakdown,
    PhaseProgress,
    ProgressSummary,
    TaskSnapshot,
)

__all__ = [
    "BudgetSummary",
    "BuildConfiguration",
    "ComplianceSummary",
    "CostBreakdown",
    "EnergyLevel",
    "Evidence",
    "EvidenceKind",
    "EvidenceOutcome",
    "ExtraFeature",
    "MaterialType",
    "Phase",
    "PhaseProgress",
    "PlotSize",
    "ProgressSummary",
    "ProjectState",
    "SizeCategory",
    "Task",
    "TaskSnapshot",
    "TaskStatus",
    "Tranche",
    "TrancheStatus",
]
