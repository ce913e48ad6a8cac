"""Project service: the command/query surface over one project's state."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bouwplan.estimator import CostEstimator
from bouwplan.exceptions import ConfigurationError
from bouwplan.milestones import MilestoneEngine
from bouwplan.models.enums import EvidenceOutcome
from bouwplan.tranches import TrancheEngine

if TYPE_CHECKING:
    from datetime import datetime

    from bouwplan.models.configuration import BuildConfiguration
    from bouwplan.models.enums import EvidenceKind
    from bouwplan.models.project import Evidence, Phase, ProjectState, Tranche
    from bouwplan.models.reports import (
        BudgetSummary,
        ComplianceSummary,
        PhaseProgress,
        ProgressSummary,
        TaskSnapshot,
    )

logger = logging.getLogger(__name__)


class ProjectService:
    """Wires the milestone engine, tranche engine and estimator to one project.

    Completing a task re-evaluates every tranche, so a tranche whose tasks
    are all completed is pending by the time ``advance`` returns.

    Args:
        state: The project state this service owns.
        estimator: Cost estimator; defaults to catalog prices.
        idempotent_release: Passed through to ``TrancheEngine``.

    Example::

        service = create_project_service()
        service.apply_evidence("grondonderzoek", "document", "approved")
        service.advance("grondonderzoek", verified_by="Bureau Broersma")
    """

    def __init__(
        self,
        state: ProjectState,
        *,
        estimator: CostEstimator | None = None,
        idempotent_release: bool = False,
    ) -> None:
        self.state = state
        self.milestones = MilestoneEngine(state)
        self.tranches = TrancheEngine(
            state, self.milestones, idempotent_release=idempotent_release
        )
        self.estimator = estimator or CostEstimator()

    @property
    def project_id(self) -> str:
        return self.state.project_id

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def submit_evidence(
        self,
        task_id: str,
        kind: EvidenceKind | str,
        submitted_at: datetime | None = None,
    ) -> Evidence:
        return self.milestones.submit_evidence(task_id, kind, submitted_at)

    def review_evidence(
        self,
        evidence_id: str,
        outcome: EvidenceOutcome | str,
        reason: str | None = None,
        reviewed_by: str | None = None,
    ) -> Evidence:
        return self.milestones.review_evidence(
            evidence_id, outcome, reason=reason, reviewed_by=reviewed_by
        )

    def apply_evidence(
        self,
        task_id: str,
        kind: EvidenceKind | str,
        outcome: EvidenceOutcome | str = EvidenceOutcome.PENDING,
        reason: str | None = None,
        reviewed_by: str | None = None,
    ) -> TaskSnapshot:
        return self.milestones.apply_evidence(
            task_id, kind, outcome, reason=reason, reviewed_by=reviewed_by
        )

    def advance(
        self,
        task_id: str,
        verified_by: str | None = None,
        completed_at: datetime | None = None,
    ) -> TaskSnapshot:
        snapshot = self.milestones.advance(task_id, verified_by, completed_at)
        moved = self.tranches.evaluate_all()
        if moved:
            logger.info(
                "Completing %s unlocked tranches %s",
                task_id, ", ".join(t.id for t in moved),
            )
        return snapshot

    def evaluate_tranche(self, tranche_id: str) -> Tranche:
        return self.tranches.evaluate_tranche(tranche_id)

    def release_tranche(self, tranche_id: str, released_at: datetime) -> Tranche:
        return self.tranches.release_tranche(tranche_id, released_at)

    def set_configuration(self, config: BuildConfiguration) -> int:
        """Replace the build configuration and return its estimate.

        The configuration is validated by estimating it before it is stored.
        """
        estimate = self.estimator.estimate(config)
        self.state.configuration = config
        return estimate

    def estimate_cost(self, config: BuildConfiguration | None = None) -> int:
        config = config or self.state.configuration
        if config is None:
            msg = f"Project '{self.project_id}' has no build configuration"
            raise ConfigurationError(msg)
        return self.estimator.estimate(config)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def snapshot(self, task_id: str) -> TaskSnapshot:
        return self.milestones.snapshot(task_id)

    def list_phases(self) -> list[Phase]:
        return self.milestones.list_phases()

    def list_tranches(self) -> list[Tranche]:
        return self.tranches.list_tranches()

    def overall_progress(self) -> int:
        return self.milestones.overall_progress()

    def phase_progress(self, phase_id: str) -> int:
        return self.milestones.phase_progress(phase_id)

    def phase_summary(self, phase_id: str) -> PhaseProgress:
        return self.milestones.phase_summary(phase_id)

    def progress_summary(self) -> ProgressSummary:
        return self.milestones.progress_summary()

    def budget_summary(self) -> BudgetSummary:
        return self.tranches.budget_summary()

    def compliance_summary(self) -> ComplianceSummary:
        return self.milestones.compliance_summary()

    def to_json(self) -> str:
        return self.state.to_json()
