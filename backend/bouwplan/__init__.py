"""Bouwplan: construction milestones, payment tranches and cost estimates.

Usage::

    from bouwplan import BuildConfiguration, create_project_service, estimate_cost

    service = create_project_service()
    service.apply_evidence("grondonderzoek", "document", "approved")
    service.advance("grondonderzoek", verified_by="Bureau Broersma")
    service.overall_progress()

    estimate_cost(BuildConfiguration(area_sqm=150, energy_tier="standard", vibe=0))
"""

from bouwplan.estimator import CostEstimator, estimate_cost
from bouwplan.exceptions import (
    AlreadyReleased,
    BouwplanError,
    ConfigurationError,
    InvalidTransition,
    TrancheNotReady,
    UnknownEntity,
)
from bouwplan.factory import create_default_project, create_project_service
from bouwplan.milestones import MilestoneEngine
from bouwplan.models.configuration import BuildConfiguration
from bouwplan.models.enums import (
    EvidenceKind,
    EvidenceOutcome,
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
from bouwplan.service import ProjectService
from bouwplan.tranches import TrancheEngine

__all__ = [
    "AlreadyReleased",
    "BouwplanError",
    "BudgetSummary",
    "BuildConfiguration",
    "ComplianceSummary",
    "ConfigurationError",
    "CostBreakdown",
    "CostEstimator",
    "Evidence",
    "EvidenceKind",
    "EvidenceOutcome",
    "InvalidTransition",
    "MilestoneEngine",
    "Phase",
    "PhaseProgress",
    "ProgressSummary",
    "ProjectService",
    "ProjectState",
    "Task",
    "TaskSnapshot",
    "TaskStatus",
    "Tranche",
    "TrancheEngine",
    "TrancheNotReady",
    "TrancheStatus",
    "UnknownEntity",
    "create_default_project",
    "create_project_service",
    "estimate_cost",
]
