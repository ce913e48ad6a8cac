"""Tests for ProjectService, the combined command/query surface."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from bouwplan.config import Settings
from bouwplan.exceptions import AlreadyReleased, ConfigurationError, InvalidTransition
from bouwplan.factory import create_project_service
from bouwplan.models.configuration import BuildConfiguration
from bouwplan.models.enums import TaskStatus, TrancheStatus
from bouwplan.service import ProjectService

RELEASED_AT = datetime(2026, 4, 1, tzinfo=UTC)


@pytest.fixture()
def service() -> ProjectService:
    return create_project_service(name="Villa Zonneweide")


@pytest.fixture()
def demo() -> ProjectService:
    return create_project_service(settings=Settings(seed_demo=True))


def _complete(service: ProjectService, task_id: str) -> None:
    for kind in service.milestones.get_task(task_id).required_evidence:
        service.apply_evidence(task_id, kind, "approved", reviewed_by="Kiwa")
    service.advance(task_id, verified_by="Kiwa")


class TestAdvanceEvaluatesTranches:
    def test_completing_unlock_task_makes_tranche_pending(
        self, service: ProjectService
    ) -> None:
        _complete(service, "grondonderzoek")
        assert service.tranches.get_tranche("t1").status == TrancheStatus.LOCKED
        _complete(service, "bouwvergunning")
        assert service.tranches.get_tranche("t1").status == TrancheStatus.PENDING

    def test_release_after_completion(self, service: ProjectService) -> None:
        _complete(service, "grondonderzoek")
        _complete(service, "bouwvergunning")
        released = service.release_tranche("t1", RELEASED_AT)
        assert released.status == TrancheStatus.RELEASED
        assert service.budget_summary().released == 15_000

    def test_double_release_is_refused_by_default(self, service: ProjectService) -> None:
        _complete(service, "grondonderzoek")
        _complete(service, "bouwvergunning")
        service.release_tranche("t1", RELEASED_AT)
        with pytest.raises(AlreadyReleased):
            service.release_tranche("t1", RELEASED_AT)

    def test_idempotent_release_setting(self) -> None:
        service = create_project_service(settings=Settings(idempotent_release=True))
        _complete(service, "grondonderzoek")
        _complete(service, "bouwvergunning")
        service.release_tranche("t1", RELEASED_AT)
        assert service.release_tranche("t1", RELEASED_AT).released_at == RELEASED_AT

    def test_failed_advance_leaves_tranches_alone(self, service: ProjectService) -> None:
        _complete(service, "grondonderzoek")
        with pytest.raises(InvalidTransition):
            service.advance("bouwvergunning")
        assert service.tranches.get_tranche("t1").status == TrancheStatus.LOCKED

    def test_full_project(self, service: ProjectService) -> None:
        for phase in service.list_phases():
            for task in phase.tasks:
                _complete(service, task.id)
        assert all(t.status == TrancheStatus.PENDING for t in service.list_tranches())
        for tranche in service.list_tranches():
            service.release_tranche(tranche.id, RELEASED_AT)
        summary = service.budget_summary()
        assert summary.percent_released == 100
        assert summary.next_tranche_id is None
        assert service.overall_progress() == 100


class TestEvidenceCommands:
    def test_submit_then_review(self, service: ProjectService) -> None:
        evidence = service.submit_evidence("grondonderzoek", "document")
        service.review_evidence(evidence.id, "approved", reviewed_by="Kiwa")
        snapshot = service.advance("grondonderzoek")
        assert snapshot.status == TaskStatus.COMPLETED

    def test_apply_evidence_returns_snapshot(self, service: ProjectService) -> None:
        snapshot = service.apply_evidence("grondonderzoek", "document", "rejected", "Onleesbaar")
        assert snapshot.status == TaskStatus.ACTIVE
        assert snapshot.rejection_reason == "Onleesbaar"


class TestEstimates:
    def test_estimate_given_configuration(self, service: ProjectService) -> None:
        config = BuildConfiguration(area_sqm=150, energy_tier="standard", vibe=0)
        assert service.estimate_cost(config) == 330_000

    def test_estimate_stored_configuration(self, service: ProjectService) -> None:
        service.set_configuration(BuildConfiguration())
        assert service.estimate_cost() == 360_000

    def test_no_configuration(self, service: ProjectService) -> None:
        with pytest.raises(ConfigurationError, match="no build configuration"):
            service.estimate_cost()

    def test_invalid_configuration_is_not_stored(self, service: ProjectService) -> None:
        with pytest.raises(ConfigurationError):
            service.set_configuration(BuildConfiguration(vibe=120))
        assert service.state.configuration is None


class TestQueries:
    def test_progress(self, demo: ProjectService) -> None:
        assert demo.overall_progress() == 29
        assert demo.phase_progress("fundering") == 50
        assert demo.progress_summary().current_phase_id == "fundering"
        assert demo.phase_summary("fundering").active_task_id == "betonbon"

    def test_snapshot(self, demo: ProjectService) -> None:
        snapshot = demo.snapshot("storten-fundering")
        assert snapshot.status == TaskStatus.PENDING
        assert snapshot.unlocks_amount == 15_000

    def test_compliance_summary(self, demo: ProjectService) -> None:
        summary = demo.compliance_summary()
        assert (summary.total_points, summary.collected) == (12, 5)
        assert summary.critical_missing == ["Betonlevering & Betonbon (document)"]

    def test_to_json(self, demo: ProjectService) -> None:
        payload = json.loads(demo.to_json())
        assert payload["project_id"] == demo.project_id
        assert len(payload["phases"]) == 5
        assert payload["tranches"][0]["status"] == "released"
