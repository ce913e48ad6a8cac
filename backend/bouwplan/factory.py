"""Factory functions for creating pre-configured projects and services."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bouwplan.data.catalog import (
    DEMO_COMPLETIONS,
    DEMO_RELEASES,
    build_default_phases,
    build_default_tranches,
)
from bouwplan.models.enums import EvidenceOutcome
from bouwplan.models.project import ProjectState
from bouwplan.service import ProjectService

if TYPE_CHECKING:
    from bouwplan.config import Settings


def create_default_project(
    name: str = "Nieuw project", *, seed_demo: bool = False
) -> ProjectState:
    """Create a project with the default phases and tranches.

    With ``seed_demo`` the project is advanced through the regular engine
    commands to the demo snapshot: the preparation phase and the first three
    foundation tasks completed with approved evidence, the first two
    tranches released.
    """
    state = ProjectState(
        name=name,
        phases=build_default_phases(),
        tranches=build_default_tranches(),
    )
    if seed_demo:
        _seed_demo_progress(ProjectService(state))
    return state


def _seed_demo_progress(service: ProjectService) -> None:
    milestones = service.milestones
    for task_id, (verifier, completed_at) in DEMO_COMPLETIONS.items():
        for kind in milestones.get_task(task_id).required_evidence:
            evidence = milestones.submit_evidence(task_id, kind, submitted_at=completed_at)
            milestones.review_evidence(
                evidence.id,
                EvidenceOutcome.APPROVED,
                reviewed_by=verifier,
                reviewed_at=completed_at,
            )
        service.advance(task_id, verified_by=verifier, completed_at=completed_at)
    for tranche_id, released_at in DEMO_RELEASES.items():
        service.release_tranche(tranche_id, released_at)


def create_project_service(
    state: ProjectState | None = None,
    *,
    settings: Settings | None = None,
    name: str = "Nieuw project",
) -> ProjectService:
    """Create a ProjectService, building a default project when none is given.

    This is the recommended way to get a working service; it applies the
    release policy and demo seeding from *settings*.

    Example::

        from bouwplan import create_project_service

        service = create_project_service()
        service.overall_progress()
    """
    idempotent = settings.idempotent_release if settings else False
    if state is None:
        seed = settings.seed_demo if settings else False
        state = create_default_project(name, seed_demo=seed)
    return ProjectService(state, idempotent_release=idempotent)
