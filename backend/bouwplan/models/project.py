"""Project state models: phases, tasks, evidence and payment tranches.

``ProjectState`` is the single owned aggregate the engines operate on. ``Task``
stores only its terminal completion record; ``locked`` / ``pending`` /
``active`` are derived by ``MilestoneEngine`` from the current completions.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from bouwplan.models.configuration import BuildConfiguration
from bouwplan.models.enums import EvidenceKind, EvidenceOutcome, TrancheStatus


class Task(BaseModel):
    """An atomic unit of construction work belonging to exactly one phase."""

    id: str
    name: str
    description: str = ""
    requires_evidence: bool = False
    required_evidence: list[EvidenceKind] = Field(default_factory=list)
    depends_on: list[str] = Field(default_factory=list)
    unlocks_amount: float | None = Field(default=None, ge=0)
    verified_by: str | None = None
    completed_at: datetime | None = None

    @model_validator(mode="after")
    def align_evidence_requirements(self) -> Task:
        if self.required_evidence:
            self.requires_evidence = True
        elif self.requires_evidence:
            self.required_evidence = [EvidenceKind.PHOTO]
        return self

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


class Phase(BaseModel):
    """An ordered construction stage composed of ordered tasks."""

    id: str
    name: str
    tasks: list[Task] = Field(default_factory=list)
    planned_budget: float | None = Field(default=None, ge=0)


class Evidence(BaseModel):
    """A submitted artifact (photo, inspection report, document) for one task.

    Records are append-only. A rejected record stays rejected; the task needs
    a new submission before it can be completed.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    task_id: str
    kind: EvidenceKind
    submitted_at: datetime
    outcome: EvidenceOutcome = EvidenceOutcome.PENDING
    rejection_reason: str | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None


class Tranche(BaseModel):
    """A slice of the contract value released when its tasks are completed."""

    id: str
    name: str
    phase_id: str
    amount: float = Field(ge=0)
    unlock_task_ids: list[str] = Field(min_length=1)
    unlock_condition: str | None = None
    required_action: EvidenceKind | None = None
    status: TrancheStatus = TrancheStatus.LOCKED
    released_at: datetime | None = None


class ProjectState(BaseModel):
    """The explicit, owned state of one construction project."""

    project_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str = "Nieuw project"
    phases: list[Phase] = Field(default_factory=list)
    tranches: list[Tranche] = Field(default_factory=list)
    evidence: list[Evidence] = Field(default_factory=list)
    configuration: BuildConfiguration | None = None
    contract_total: float | None = None

    @model_validator(mode="after")
    def check_references(self) -> ProjectState:
        phase_ids = [p.id for p in self.phases]
        if len(phase_ids) != len(set(phase_ids)):
            msg = "Phase ids must be unique"
            raise ValueError(msg)

        task_ids = [t.id for p in self.phases for t in p.tasks]
        if len(task_ids) != len(set(task_ids)):
            msg = "Task ids must be unique across all phases"
            raise ValueError(msg)

        known = set(task_ids)
        # (phase index, task index): a dependency must sort before its task
        position = {
            task.id: (p, t)
            for p, phase in enumerate(self.phases)
            for t, task in enumerate(phase.tasks)
        }
        for phase in self.phases:
            for task in phase.tasks:
                missing = [d for d in task.depends_on if d not in known]
                if missing:
                    msg = f"Task '{task.id}' depends on unknown tasks {missing}"
                    raise ValueError(msg)
                later = [d for d in task.depends_on if position[d] >= position[task.id]]
                if later:
                    msg = (
                        f"Task '{task.id}' can only depend on tasks that come "
                        f"before it, got {later}"
                    )
                    raise ValueError(msg)

        tranche_ids = [t.id for t in self.tranches]
        if len(tranche_ids) != len(set(tranche_ids)):
            msg = "Tranche ids must be unique"
            raise ValueError(msg)
        for tranche in self.tranches:
            missing = [t for t in tranche.unlock_task_ids if t not in known]
            if missing:
                msg = f"Tranche '{tranche.id}' unlocks on unknown tasks {missing}"
                raise ValueError(msg)

        for item in self.evidence:
            if item.task_id not in known:
                msg = f"Evidence '{item.id}' references unknown task '{item.task_id}'"
                raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def check_lifecycle(self) -> ProjectState:
        """Reject stored progress the engines could never have produced.

        Tasks complete strictly in catalog order (phase by phase, task by
        task), so the completed tasks must form a prefix of that order. A
        tranche past ``locked`` needs all of its unlock tasks completed, and
        only a released tranche carries a release timestamp.
        """
        first_open: Task | None = None
        for phase in self.phases:
            for task in phase.tasks:
                if not task.is_completed:
                    first_open = first_open or task
                elif first_open is not None:
                    msg = (
                        f"Task '{task.id}' is completed while earlier task "
                        f"'{first_open.id}' is still open"
                    )
                    raise ValueError(msg)

        completed = {t.id for p in self.phases for t in p.tasks if t.is_completed}
        for tranche in self.tranches:
            if tranche.status != TrancheStatus.LOCKED:
                open_ids = [t for t in tranche.unlock_task_ids if t not in completed]
                if open_ids:
                    msg = (
                        f"Tranche '{tranche.id}' is {tranche.status} but tasks "
                        f"{open_ids} are not completed"
                    )
                    raise ValueError(msg)
            is_released = tranche.status == TrancheStatus.RELEASED
            if is_released != (tranche.released_at is not None):
                msg = (
                    f"Tranche '{tranche.id}' is {tranche.status} but released_at "
                    f"is {tranche.released_at}"
                )
                raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def fix_contract_total(self) -> ProjectState:
        tranche_sum = sum(t.amount for t in self.tranches)
        if self.contract_total is None:
            self.contract_total = tranche_sum
        elif abs(self.contract_total - tranche_sum) > 0.005:
            msg = (
                f"Tranche amounts ({tranche_sum:,.2f}) must add up to the "
                f"contract total ({self.contract_total:,.2f})"
            )
            raise ValueError(msg)
        return self

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)

    @classmethod
    def from_json(cls, payload: str | bytes) -> ProjectState:
        return cls.model_validate_json(payload)
