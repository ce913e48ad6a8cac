"""Milestone engine: task lifecycle, evidence gating and progress.

Task status is derived from the completion records in ``ProjectState`` every
time it is read:

1. **completed**: the task has a completion record. Terminal.
2. **locked**: some dependency is not completed. Dependencies are the
   task's explicit ``depends_on`` ids plus every task of all earlier phases.
3. **active**: the earliest non-completed task of its phase, provided it is
   not locked. A phase therefore has at most one active task.
4. **pending**: dependencies are met but an earlier task in the phase is
   still open.

Only the active task can be completed, and only once every required kind of
evidence has an approved most-recent submission. A rejected submission does
not change the task status; the task waits for a new submission.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from bouwplan.exceptions import InvalidTransition, UnknownEntity
from bouwplan.models.enums import EvidenceKind, EvidenceOutcome, TaskStatus
from bouwplan.models.project import Evidence
from bouwplan.models.reports import (
    ComplianceSummary,
    PhaseProgress,
    ProgressSummary,
    TaskSnapshot,
)

if TYPE_CHECKING:
    from bouwplan.models.project import Phase, ProjectState, Task

logger = logging.getLogger(__name__)


def progress_percent(completed: int, total: int) -> int:
    """Integer percentage of *completed* over *total*, rounded half-up.

    An empty set reports 0.
    """
    if total == 0:
        return 0
    return (200 * completed + total) // (2 * total)


class MilestoneEngine:
    """Queries and commands over the phases and tasks of one project.

    Args:
        state: The project state to operate on. The engine keeps no copy
            and no cache, so every read reflects the latest mutation.
    """

    def __init__(self, state: ProjectState) -> None:
        self._state = state

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _locate(self, task_id: str) -> tuple[int, Phase, Task]:
        for index, phase in enumerate(self._state.phases):
            for task in phase.tasks:
                if task.id == task_id:
                    return index, phase, task
        raise UnknownEntity("task", task_id)

    def list_phases(self) -> list[Phase]:
        return list(self._state.phases)

    def get_phase(self, phase_id: str) -> Phase:
        for phase in self._state.phases:
            if phase.id == phase_id:
                return phase
        raise UnknownEntity("phase", phase_id)

    def get_task(self, task_id: str) -> Task:
        return self._locate(task_id)[2]

    def get_phase_for_task(self, task_id: str) -> Phase:
        return self._locate(task_id)[1]

    def list_tasks_in_phase(self, phase_id: str) -> list[Task]:
        return list(self.get_phase(phase_id).tasks)

    def get_evidence(self, evidence_id: str) -> Evidence:
        for item in self._state.evidence:
            if item.id == evidence_id:
                return item
        raise UnknownEntity("evidence", evidence_id)

    def evidence_for(self, task_id: str) -> list[Evidence]:
        """All evidence submitted for a task, oldest first."""
        self._locate(task_id)
        return [e for e in self._state.evidence if e.task_id == task_id]

    def rejections(self, task_id: str) -> list[Evidence]:
        return [
            e for e in self.evidence_for(task_id)
            if e.outcome == EvidenceOutcome.REJECTED
        ]

    # ------------------------------------------------------------------
    # Status derivation
    # ------------------------------------------------------------------

    def _dependencies_met(self, phase_index: int, task: Task) -> bool:
        for earlier in self._state.phases[:phase_index]:
            if not all(t.is_completed for t in earlier.tasks):
                return False
        for dep_id in task.depends_on:
            if not self._locate(dep_id)[2].is_completed:
                return False
        return True

    def _status(self, phase_index: int, phase: Phase, task: Task) -> TaskStatus:
        if task.is_completed:
            return TaskStatus.COMPLETED
        if not self._dependencies_met(phase_index, task):
            return TaskStatus.LOCKED
        earliest_open = next(t for t in phase.tasks if not t.is_completed)
        if earliest_open.id == task.id:
            return TaskStatus.ACTIVE
        return TaskStatus.PENDING

    def status_of(self, task_id: str) -> TaskStatus:
        return self._status(*self._locate(task_id))

    def active_task(self, phase_id: str) -> Task | None:
        """The phase's current task, or None when the phase is complete or blocked."""
        phase = self.get_phase(phase_id)
        index = self._state.phases.index(phase)
        for task in phase.tasks:
            if not task.is_completed:
                if self._status(index, phase, task) == TaskStatus.ACTIVE:
                    return task
                return None
        return None

    def _latest_by_kind(self, task_id: str) -> dict[EvidenceKind, Evidence]:
        latest: dict[EvidenceKind, Evidence] = {}
        for item in self.evidence_for(task_id):
            latest[item.kind] = item
        return latest

    def outstanding_evidence(self, task_id: str) -> list[EvidenceKind]:
        """Required evidence kinds whose most recent submission is not approved."""
        task = self.get_task(task_id)
        if task.is_completed:
            return []
        latest = self._latest_by_kind(task_id)
        return [
            kind for kind in task.required_evidence
            if kind not in latest or latest[kind].outcome != EvidenceOutcome.APPROVED
        ]

    def rejection_reason(self, task_id: str) -> str | None:
        """Reason of a rejected submission that still blocks the task, if any."""
        task = self.get_task(task_id)
        latest = self._latest_by_kind(task_id)
        for kind in task.required_evidence:
            item = latest.get(kind)
            if item is not None and item.outcome == EvidenceOutcome.REJECTED:
                return item.rejection_reason or f"{kind} evidence rejected"
        return None

    def snapshot(self, task_id: str) -> TaskSnapshot:
        index, phase, task = self._locate(task_id)
        return TaskSnapshot(
            id=task.id,
            name=task.name,
            description=task.description,
            phase_id=phase.id,
            status=self._status(index, phase, task),
            requires_evidence=task.requires_evidence,
            required_evidence=list(task.required_evidence),
            outstanding_evidence=self.outstanding_evidence(task_id),
            evidence=[e.model_copy() for e in self.evidence_for(task_id)],
            rejection_reason=None if task.is_completed else self.rejection_reason(task_id),
            unlocks_amount=task.unlocks_amount,
            verified_by=task.verified_by,
            completed_at=task.completed_at,
        )

    def phase_snapshots(self, phase_id: str) -> list[TaskSnapshot]:
        return [self.snapshot(t.id) for t in self.get_phase(phase_id).tasks]

    def next_actions(self) -> list[TaskSnapshot]:
        """Snapshots of the active tasks still waiting for evidence, in phase order."""
        actions = []
        for phase in self._state.phases:
            task = self.active_task(phase.id)
            if task is not None and self.outstanding_evidence(task.id):
                actions.append(self.snapshot(task.id))
        return actions

    def compliance_summary(self) -> ComplianceSummary:
        """Count evidence points over all tasks by their review state."""
        total = collected = pending = rejected = 0
        critical: list[str] = []
        for index, phase in enumerate(self._state.phases):
            for task in phase.tasks:
                total += len(task.required_evidence)
                if task.is_completed:
                    collected += len(task.required_evidence)
                    continue
                latest = self._latest_by_kind(task.id)
                is_active = self._status(index, phase, task) == TaskStatus.ACTIVE
                for kind in task.required_evidence:
                    item = latest.get(kind)
                    outcome = item.outcome if item is not None else None
                    if outcome == EvidenceOutcome.APPROVED:
                        collected += 1
                        continue
                    if outcome == EvidenceOutcome.PENDING:
                        pending += 1
                    elif outcome == EvidenceOutcome.REJECTED:
                        rejected += 1
                    if is_active:
                        critical.append(f"{task.name} ({kind})")
        return ComplianceSummary(
            total_points=total,
            collected=collected,
            pending=pending,
            rejected=rejected,
            critical_missing=critical,
            percent=progress_percent(collected, total),
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def submit_evidence(
        self,
        task_id: str,
        kind: EvidenceKind | str,
        submitted_at: datetime | None = None,
    ) -> Evidence:
        """Record a new, unreviewed evidence submission for a task.

        Raises:
            UnknownEntity: If the task does not exist.
            InvalidTransition: If the task is locked or completed, or does
                not accept this kind of evidence.
        """
        index, phase, task = self._locate(task_id)
        status = self._status(index, phase, task)
        kind = EvidenceKind(kind)

        if status in (TaskStatus.LOCKED, TaskStatus.COMPLETED):
            raise InvalidTransition(
                task_id, status, "evidence can only be submitted for pending or active tasks"
            )
        if task.requires_evidence and kind not in task.required_evidence:
            raise InvalidTransition(
                task_id, status, f"task does not require {kind} evidence"
            )

        evidence = Evidence(
            task_id=task_id,
            kind=kind,
            submitted_at=submitted_at or datetime.now(UTC),
        )
        self._state.evidence.append(evidence)
        logger.info("Evidence %s (%s) submitted for task %s", evidence.id, kind, task_id)
        return evidence

    def review_evidence(
        self,
        evidence_id: str,
        outcome: EvidenceOutcome | str,
        reason: str | None = None,
        reviewed_by: str | None = None,
        reviewed_at: datetime | None = None,
    ) -> Evidence:
        """Approve or reject a pending evidence submission.

        Raises:
            UnknownEntity: If the evidence does not exist.
            InvalidTransition: If the evidence was already reviewed or the
                outcome is not approved/rejected.
        """
        evidence = self.get_evidence(evidence_id)
        outcome = EvidenceOutcome(outcome)
        status = self.status_of(evidence.task_id)

        if evidence.outcome != EvidenceOutcome.PENDING:
            raise InvalidTransition(
                evidence.task_id,
                status,
                f"evidence '{evidence_id}' was already {evidence.outcome}",
            )
        if outcome == EvidenceOutcome.PENDING:
            raise InvalidTransition(
                evidence.task_id, status, "a review must approve or reject the evidence"
            )

        evidence.outcome = outcome
        evidence.rejection_reason = reason if outcome == EvidenceOutcome.REJECTED else None
        evidence.reviewed_by = reviewed_by
        evidence.reviewed_at = reviewed_at or datetime.now(UTC)

        if outcome == EvidenceOutcome.REJECTED:
            logger.warning(
                "Evidence %s for task %s rejected: %s",
                evidence_id, evidence.task_id, reason or "no reason given",
            )
        else:
            logger.info("Evidence %s for task %s approved", evidence_id, evidence.task_id)
        return evidence

    def apply_evidence(
        self,
        task_id: str,
        kind: EvidenceKind | str,
        outcome: EvidenceOutcome | str = EvidenceOutcome.PENDING,
        reason: str | None = None,
        reviewed_by: str | None = None,
    ) -> TaskSnapshot:
        """Submit evidence and, unless *outcome* is pending, review it at once."""
        outcome = EvidenceOutcome(outcome)
        evidence = self.submit_evidence(task_id, kind)
        if outcome != EvidenceOutcome.PENDING:
            self.review_evidence(evidence.id, outcome, reason=reason, reviewed_by=reviewed_by)
        return self.snapshot(task_id)

    def advance(
        self,
        task_id: str,
        verified_by: str | None = None,
        completed_at: datetime | None = None,
    ) -> TaskSnapshot:
        """Complete the active task of a phase.

        Raises:
            UnknownEntity: If the task does not exist.
            InvalidTransition: If the task is not active, or required
                evidence is missing, pending or rejected. State is left
                untouched.
        """
        index, phase, task = self._locate(task_id)
        status = self._status(index, phase, task)

        if status == TaskStatus.COMPLETED:
            raise InvalidTransition(task_id, status, "task is already completed")
        if status != TaskStatus.ACTIVE:
            raise InvalidTransition(
                task_id, status, "only the active task of a phase can be completed"
            )

        outstanding = self.outstanding_evidence(task_id)
        if outstanding:
            latest = self._latest_by_kind(task_id)
            details = []
            for kind in outstanding:
                item = latest.get(kind)
                if item is None:
                    details.append(f"{kind} (missing)")
                elif item.outcome == EvidenceOutcome.REJECTED:
                    details.append(f"{kind} (rejected: {item.rejection_reason or 'no reason given'})")
                else:
                    details.append(f"{kind} ({item.outcome})")
            raise InvalidTransition(
                task_id, status, "required evidence not approved: " + ", ".join(details)
            )

        task.verified_by = verified_by
        task.completed_at = completed_at or datetime.now(UTC)
        logger.info("Task %s completed (verified by %s)", task_id, verified_by or "-")
        return self.snapshot(task_id)

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def phase_summary(self, phase_id: str) -> PhaseProgress:
        phase = self.get_phase(phase_id)
        completed = sum(1 for t in phase.tasks if t.is_completed)
        total = len(phase.tasks)
        percent = progress_percent(completed, total)
        active = self.active_task(phase_id)
        return PhaseProgress(
            phase_id=phase.id,
            name=phase.name,
            completed=completed,
            total=total,
            percent=percent,
            is_complete=completed == total,
            active_task_id=active.id if active else None,
        )

    def phase_progress(self, phase_id: str) -> int:
        return self.phase_summary(phase_id).percent

    def overall_progress(self) -> int:
        tasks = [t for p in self._state.phases for t in p.tasks]
        return progress_percent(sum(1 for t in tasks if t.is_completed), len(tasks))

    def progress_summary(self) -> ProgressSummary:
        phases = [self.phase_summary(p.id) for p in self._state.phases]
        completed = sum(p.completed for p in phases)
        total = sum(p.total for p in phases)
        current = next((p.phase_id for p in phases if not p.is_complete), None)
        return ProgressSummary(
            completed=completed,
            total=total,
            percent=progress_percent(completed, total),
            current_phase_id=current,
            phases=phases,
        )
