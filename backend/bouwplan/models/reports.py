"""Read models produced by the engines: snapshots, progress and budgets."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from bouwplan.models.enums import EvidenceKind, TaskStatus
from bouwplan.models.project import Evidence


class TaskSnapshot(BaseModel):
    """A task together with its derived status and evidence trail."""

    id: str
    name: str
    description: str
    phase_id: str
    status: TaskStatus
    requires_evidence: bool
    required_evidence: list[EvidenceKind]
    outstanding_evidence: list[EvidenceKind] = Field(default_factory=list)
    evidence: list[Evidence] = Field(default_factory=list)
    rejection_reason: str | None = None
    unlocks_amount: float | None = None
    verified_by: str | None = None
    completed_at: datetime | None = None


class PhaseProgress(BaseModel):
    """Progress of a single phase."""

    phase_id: str
    name: str
    completed: int
    total: int
    percent: int = Field(ge=0, le=100)
    is_complete: bool
    active_task_id: str | None = None


class ProgressSummary(BaseModel):
    """Overall project progress with a per-phase breakdown."""

    completed: int
    total: int
    percent: int = Field(ge=0, le=100)
    current_phase_id: str | None = None
    phases: list[PhaseProgress] = Field(default_factory=list)


class BudgetSummary(BaseModel):
    """Tranche totals by status, for budget dashboards."""

    contract_total: float
    released: float
    pending: float
    locked: float
    percent_released: int = Field(ge=0, le=100)
    next_tranche_id: str | None = None

    def to_summary_dict(self) -> dict[str, Any]:
        from bouwplan.formatting import format_currency, format_percent

        return {
            "contract_total_formatted": format_currency(self.contract_total),
            "released_formatted": format_currency(self.released),
            "pending_formatted": format_currency(self.pending),
            "locked_formatted": format_currency(self.locked),
            "percent_released_formatted": format_percent(self.percent_released),
            "next_tranche_id": self.next_tranche_id,
        }


class CostBreakdown(BaseModel):
    """Build plus land cost for a configuration, with budget feasibility.

    ``budget``, ``budget_difference`` and ``is_feasible`` are only set when a
    budget was supplied.
    """

    build_cost: int
    land_cost: int
    total: int
    max_cost: int
    indicative_saving: int
    budget: int | None = None
    budget_difference: int | None = None
    is_feasible: bool | None = None

    def to_summary_dict(self) -> dict[str, Any]:
        """Produce a flat dict of display strings for the wizard result screen."""
        from bouwplan.formatting import format_cost_range, format_currency

        summary: dict[str, Any] = {
            "build_cost_formatted": format_currency(self.build_cost),
            "land_cost_formatted": format_currency(self.land_cost),
            "total_formatted": format_currency(self.total),
            "range_formatted": format_cost_range(self.total, self.max_cost),
            "indicative_saving_formatted": format_currency(self.indicative_saving),
        }
        if self.budget is not None:
            summary["budget_formatted"] = format_currency(self.budget)
            summary["is_feasible"] = self.is_feasible
        return summary


class ComplianceSummary(BaseModel):
    """Evidence collected against the points required by all tasks.

    Every required evidence kind of every task is one point. A point is
    collected once its task is completed or its most recent submission is
    approved. ``critical_missing`` lists the open points of the tasks that
    are active right now.
    """

    total_points: int
    collected: int
    pending: int
    rejected: int
    critical_missing: list[str] = Field(default_factory=list)
    percent: int = Field(ge=0, le=100)

    def to_summary_dict(self) -> dict[str, Any]:
        from bouwplan.formatting import format_percent

        return {
            "points_formatted": f"{self.collected}/{self.total_points} punten",
            "percent_formatted": format_percent(self.percent),
            "critical_missing": list(self.critical_missing),
        }
