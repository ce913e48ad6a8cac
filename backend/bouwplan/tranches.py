"""Tranche engine: turns completed tasks into releasable payments.

A tranche moves ``locked -> pending`` when every task in its unlock
condition is completed, and ``pending -> released`` when a person or the
financing institution releases it. Tranches are never created or removed
after initialisation, so the totals per status always partition the
contract value.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bouwplan.exceptions import AlreadyReleased, TrancheNotReady, UnknownEntity
from bouwplan.milestones import progress_percent
from bouwplan.models.enums import TaskStatus, TrancheStatus
from bouwplan.models.reports import BudgetSummary

if TYPE_CHECKING:
    from datetime import datetime

    from bouwplan.milestones import MilestoneEngine
    from bouwplan.models.project import ProjectState, Tranche

logger = logging.getLogger(__name__)


class TrancheEngine:
    """Evaluates and releases the payment tranches of one project.

    Args:
        state: The project state holding the tranches.
        milestones: Milestone engine over the same state, used to read task
            completion.
        idempotent_release: When True, releasing an already released tranche
            returns it unchanged instead of raising ``AlreadyReleased``.
    """

    def __init__(
        self,
        state: ProjectState,
        milestones: MilestoneEngine,
        *,
        idempotent_release: bool = False,
    ) -> None:
        self._state = state
        self._milestones = milestones
        self._idempotent_release = idempotent_release

    def list_tranches(self) -> list[Tranche]:
        return list(self._state.tranches)

    def get_tranche(self, tranche_id: str) -> Tranche:
        for tranche in self._state.tranches:
            if tranche.id == tranche_id:
                return tranche
        raise UnknownEntity("tranche", tranche_id)

    def is_unlocked(self, tranche_id: str) -> bool:
        """True when every task in the tranche's unlock condition is completed."""
        tranche = self.get_tranche(tranche_id)
        return all(
            self._milestones.status_of(task_id) == TaskStatus.COMPLETED
            for task_id in tranche.unlock_task_ids
        )

    def evaluate_tranche(self, tranche_id: str) -> Tranche:
        """Move a locked tranche to pending once its unlock condition holds."""
        tranche = self.get_tranche(tranche_id)
        if tranche.status == TrancheStatus.LOCKED and self.is_unlocked(tranche_id):
            tranche.status = TrancheStatus.PENDING
            logger.info(
                "Tranche %s (%s, EUR %.2f) ready for release",
                tranche.id, tranche.name, tranche.amount,
            )
        return tranche

    def evaluate_all(self) -> list[Tranche]:
        """Evaluate every tranche; returns the ones that became pending."""
        moved = []
        for tranche in self._state.tranches:
            before = tranche.status
            if self.evaluate_tranche(tranche.id).status != before:
                moved.append(tranche)
        return moved

    def release_tranche(self, tranche_id: str, released_at: datetime) -> Tranche:
        """Release a pending tranche.

        Raises:
            UnknownEntity: If the tranche does not exist.
            TrancheNotReady: If the tranche is still locked.
            AlreadyReleased: If the tranche was released before (unless the
                engine was built with ``idempotent_release``).
        """
        tranche = self.get_tranche(tranche_id)

        if tranche.status == TrancheStatus.RELEASED:
            if self._idempotent_release:
                return tranche
            logger.warning("Tranche %s release refused: already released", tranche_id)
            msg = f"Tranche '{tranche_id}' was already released at {tranche.released_at}"
            raise AlreadyReleased(msg)

        if tranche.status != TrancheStatus.PENDING or not self.is_unlocked(tranche_id):
            open_tasks = [
                task_id for task_id in tranche.unlock_task_ids
                if self._milestones.status_of(task_id) != TaskStatus.COMPLETED
            ]
            logger.warning("Tranche %s release refused: not ready", tranche_id)
            if open_tasks:
                msg = (
                    f"Tranche '{tranche_id}' is not ready: waiting for "
                    f"{', '.join(open_tasks)}"
                )
            else:
                msg = f"Tranche '{tranche_id}' is not ready: evaluate it before releasing"
            raise TrancheNotReady(msg)

        tranche.status = TrancheStatus.RELEASED
        tranche.released_at = released_at
        logger.info("Tranche %s released (EUR %.2f)", tranche.id, tranche.amount)
        return tranche

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------

    def _total(self, status: TrancheStatus) -> float:
        return sum(t.amount for t in self._state.tranches if t.status == status)

    @property
    def contract_total(self) -> float:
        return self._state.contract_total or 0.0

    def total_released(self) -> float:
        return self._total(TrancheStatus.RELEASED)

    def total_pending(self) -> float:
        return self._total(TrancheStatus.PENDING)

    def total_locked(self) -> float:
        return self._total(TrancheStatus.LOCKED)

    def budget_summary(self) -> BudgetSummary:
        released = self.total_released()
        next_tranche = next(
            (t.id for t in self._state.tranches if t.status != TrancheStatus.RELEASED),
            None,
        )
        percent = 0
        if self.contract_total > 0:
            # in cents
            percent = progress_percent(
                round(released * 100), round(self.contract_total * 100)
            )
        return BudgetSummary(
            contract_total=self.contract_total,
            released=released,
            pending=self.total_pending(),
            locked=self.total_locked(),
            percent_released=percent,
            next_tranche_id=next_tranche,
        )
