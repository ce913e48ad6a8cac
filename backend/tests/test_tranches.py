"""Tests for the TrancheEngine: evaluation, release and budget totals."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import pytest

from bouwplan.exceptions import AlreadyReleased, TrancheNotReady, UnknownEntity
from bouwplan.factory import create_default_project
from bouwplan.milestones import MilestoneEngine
from bouwplan.models.enums import EvidenceOutcome, TrancheStatus
from bouwplan.models.project import Phase, ProjectState, Task, Tranche
from bouwplan.tranches import TrancheEngine

RELEASED_AT = datetime(2026, 2, 1, 12, 0, tzinfo=UTC)


def _roof_project() -> ProjectState:
    """One phase, two tasks, one tranche that needs both."""
    return ProjectState(
        name="Dakrenovatie",
        phases=[
            Phase(
                id="dak",
                name="Dak",
                tasks=[
                    Task(id="spanten", name="Spanten"),
                    Task(id="pannen", name="Pannen", required_evidence=["inspection"]),
                ],
            ),
        ],
        tranches=[
            Tranche(
                id="dak-dicht",
                name="Dak dicht",
                phase_id="dak",
                amount=55_000,
                unlock_task_ids=["spanten", "pannen"],
            ),
            Tranche(
                id="spanten-klaar",
                name="Spanten klaar",
                phase_id="dak",
                amount=12_500.5,
                unlock_task_ids=["spanten"],
            ),
        ],
    )


@pytest.fixture()
def state() -> ProjectState:
    return _roof_project()


@pytest.fixture()
def milestones(state: ProjectState) -> MilestoneEngine:
    return MilestoneEngine(state)


@pytest.fixture()
def tranches(state: ProjectState, milestones: MilestoneEngine) -> TrancheEngine:
    return TrancheEngine(state, milestones)


def _finish_roof(milestones: MilestoneEngine) -> None:
    milestones.advance("spanten")
    milestones.apply_evidence("pannen", "inspection", EvidenceOutcome.APPROVED)
    milestones.advance("pannen")


def _assert_partition(tranches: TrancheEngine) -> None:
    total = tranches.total_locked() + tranches.total_pending() + tranches.total_released()
    assert total == pytest.approx(tranches.contract_total)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


class TestEvaluateTranche:
    def test_stays_locked_with_open_tasks(self, tranches: TrancheEngine) -> None:
        assert tranches.evaluate_tranche("dak-dicht").status == TrancheStatus.LOCKED

    def test_stays_locked_with_one_of_two_tasks(
        self, tranches: TrancheEngine, milestones: MilestoneEngine
    ) -> None:
        milestones.advance("spanten")
        assert tranches.evaluate_tranche("dak-dicht").status == TrancheStatus.LOCKED

    def test_moves_to_pending_when_all_tasks_complete(
        self, tranches: TrancheEngine, milestones: MilestoneEngine
    ) -> None:
        _finish_roof(milestones)
        assert tranches.evaluate_tranche("dak-dicht").status == TrancheStatus.PENDING

    def test_evaluation_is_idempotent(
        self, tranches: TrancheEngine, milestones: MilestoneEngine
    ) -> None:
        _finish_roof(milestones)
        tranches.evaluate_tranche("dak-dicht")
        assert tranches.evaluate_tranche("dak-dicht").status == TrancheStatus.PENDING

    def test_released_tranche_is_left_alone(
        self, tranches: TrancheEngine, milestones: MilestoneEngine
    ) -> None:
        _finish_roof(milestones)
        tranches.evaluate_tranche("dak-dicht")
        tranches.release_tranche("dak-dicht", RELEASED_AT)
        assert tranches.evaluate_tranche("dak-dicht").status == TrancheStatus.RELEASED

    def test_evaluate_all_returns_moved_tranches(
        self, tranches: TrancheEngine, milestones: MilestoneEngine
    ) -> None:
        milestones.advance("spanten")
        moved = tranches.evaluate_all()
        assert [t.id for t in moved] == ["spanten-klaar"]
        assert tranches.evaluate_all() == []

    def test_unknown_tranche(self, tranches: TrancheEngine) -> None:
        with pytest.raises(UnknownEntity, match="Unknown tranche 'x'"):
            tranches.evaluate_tranche("x")


# ---------------------------------------------------------------------------
# Release
# ---------------------------------------------------------------------------


class TestReleaseTranche:
    def test_release_pending_tranche(
        self, tranches: TrancheEngine, milestones: MilestoneEngine
    ) -> None:
        _finish_roof(milestones)
        tranches.evaluate_tranche("dak-dicht")
        released = tranches.release_tranche("dak-dicht", RELEASED_AT)
        assert released.status == TrancheStatus.RELEASED
        assert released.released_at == RELEASED_AT

    def test_second_release_fails(
        self, tranches: TrancheEngine, milestones: MilestoneEngine
    ) -> None:
        _finish_roof(milestones)
        tranches.evaluate_tranche("dak-dicht")
        tranches.release_tranche("dak-dicht", RELEASED_AT)
        with pytest.raises(AlreadyReleased):
            tranches.release_tranche("dak-dicht", datetime(2026, 3, 1, tzinfo=UTC))
        assert tranches.get_tranche("dak-dicht").released_at == RELEASED_AT

    def test_idempotent_release_returns_tranche_unchanged(
        self, state: ProjectState, milestones: MilestoneEngine
    ) -> None:
        tranches = TrancheEngine(state, milestones, idempotent_release=True)
        _finish_roof(milestones)
        tranches.evaluate_tranche("dak-dicht")
        tranches.release_tranche("dak-dicht", RELEASED_AT)
        again = tranches.release_tranche("dak-dicht", datetime(2026, 3, 1, tzinfo=UTC))
        assert again.status == TrancheStatus.RELEASED
        assert again.released_at == RELEASED_AT

    def test_locked_tranche_lists_open_tasks(
        self, tranches: TrancheEngine, milestones: MilestoneEngine
    ) -> None:
        milestones.advance("spanten")
        with pytest.raises(TrancheNotReady, match="waiting for pannen"):
            tranches.release_tranche("dak-dicht", RELEASED_AT)

    def test_unevaluated_tranche_is_not_released(
        self, tranches: TrancheEngine, milestones: MilestoneEngine
    ) -> None:
        _finish_roof(milestones)
        with pytest.raises(TrancheNotReady, match="evaluate it before releasing"):
            tranches.release_tranche("dak-dicht", RELEASED_AT)
        assert tranches.get_tranche("dak-dicht").status == TrancheStatus.LOCKED

    def test_refusal_is_logged(
        self, tranches: TrancheEngine, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="bouwplan"), pytest.raises(
            TrancheNotReady
        ):
            tranches.release_tranche("dak-dicht", RELEASED_AT)
        assert "release refused" in caplog.text


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------


class TestTotals:
    def test_contract_total_defaults_to_tranche_sum(self, tranches: TrancheEngine) -> None:
        assert tranches.contract_total == pytest.approx(67_500.5)

    def test_partition_holds_through_lifecycle(
        self, tranches: TrancheEngine, milestones: MilestoneEngine
    ) -> None:
        _assert_partition(tranches)
        milestones.advance("spanten")
        tranches.evaluate_all()
        _assert_partition(tranches)
        tranches.release_tranche("spanten-klaar", RELEASED_AT)
        _assert_partition(tranches)
        milestones.apply_evidence("pannen", "inspection", "approved")
        milestones.advance("pannen")
        tranches.evaluate_all()
        _assert_partition(tranches)
        tranches.release_tranche("dak-dicht", RELEASED_AT)
        _assert_partition(tranches)
        assert tranches.total_released() == pytest.approx(tranches.contract_total)

    def test_budget_summary_fresh(self, tranches: TrancheEngine) -> None:
        summary = tranches.budget_summary()
        assert summary.released == 0
        assert summary.locked == pytest.approx(67_500.5)
        assert summary.percent_released == 0
        assert summary.next_tranche_id == "dak-dicht"

    def test_budget_summary_demo_project(self) -> None:
        state = create_default_project(seed_demo=True)
        tranches = TrancheEngine(state, MilestoneEngine(state))
        summary = tranches.budget_summary()
        assert summary.contract_total == 248_000
        assert summary.released == 49_500
        assert summary.pending == 0
        assert summary.locked == 198_500
        assert summary.percent_released == 20
        assert summary.next_tranche_id == "t3"

    def test_budget_summary_without_tranches(self) -> None:
        state = ProjectState(phases=[Phase(id="a", name="A", tasks=[Task(id="a1", name="A1")])])
        tranches = TrancheEngine(state, MilestoneEngine(state))
        summary = tranches.budget_summary()
        assert summary.contract_total == 0
        assert summary.percent_released == 0
        assert summary.next_tranche_id is None
