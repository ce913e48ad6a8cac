"""FastAPI application: create_app factory with /api endpoints."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from bouwplan.config import Settings, configure_logging
from bouwplan.exceptions import (
    AlreadyReleased,
    BouwplanError,
    ConfigurationError,
    InvalidTransition,
    TrancheNotReady,
    UnknownEntity,
)
from bouwplan.models.configuration import BuildConfiguration
from bouwplan.models.enums import EvidenceKind, EvidenceOutcome  # noqa: TCH001 (FastAPI resolves at runtime)

if TYPE_CHECKING:
    from bouwplan.api.registry import ProjectRegistry
    from bouwplan.estimator import CostEstimator
    from bouwplan.service import ProjectService

logger = logging.getLogger(__name__)

VERSION = "0.1.0"

_STATUS_CODES: dict[type[BouwplanError], int] = {
    UnknownEntity: 404,
    InvalidTransition: 409,
    TrancheNotReady: 409,
    AlreadyReleased: 409,
    ConfigurationError: 422,
}


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class EstimateRequest(BaseModel):
    configuration: BuildConfiguration = Field(default_factory=BuildConfiguration)
    location: str = ""
    plot_size: str | None = None
    has_land: bool = False
    budget: int | None = None


class CreateProjectRequest(BaseModel):
    name: str = "Nieuw project"
    configuration: BuildConfiguration | None = None


class EvidenceRequest(BaseModel):
    kind: EvidenceKind
    outcome: EvidenceOutcome = EvidenceOutcome.PENDING
    reason: str | None = None
    reviewed_by: str | None = None


class ReviewRequest(BaseModel):
    outcome: EvidenceOutcome
    reason: str | None = None
    reviewed_by: str | None = None


class AdvanceRequest(BaseModel):
    verified_by: str | None = None


class ReleaseRequest(BaseModel):
    released_at: datetime | None = None


def _project_payload(service: ProjectService) -> dict[str, Any]:
    return {
        "project_id": service.project_id,
        "name": service.state.name,
        "progress": service.progress_summary().model_dump(mode="json"),
        "budget": service.budget_summary().model_dump(mode="json"),
        "configuration": (
            service.state.configuration.model_dump(mode="json")
            if service.state.configuration
            else None
        ),
    }


def create_app(
    *,
    registry: ProjectRegistry | None = None,
    estimator: CostEstimator | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    registry
        Optional pre-built project registry (e.g. tests). If not provided,
        an empty one is created on first use.
    estimator
        Optional cost estimator for /api/estimate. Defaults to the catalog
        prices.
    settings
        Optional settings. If not provided, they are read from the
        environment.
    """
    settings = settings or Settings()
    configure_logging(settings)
    app = FastAPI(title="Bouwplan", version=VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store on app state so tests can inject their own
    app.state.settings = settings
    app.state.registry = registry
    app.state.estimator = estimator

    def _get_registry() -> ProjectRegistry:
        reg: ProjectRegistry | None = app.state.registry
        if reg is not None:
            return reg
        from bouwplan.api.registry import ProjectRegistry

        reg = ProjectRegistry(app.state.settings)
        app.state.registry = reg
        return reg

    def _get_estimator() -> CostEstimator:
        est: CostEstimator | None = app.state.estimator
        if est is not None:
            return est
        from bouwplan.estimator import CostEstimator

        est = CostEstimator()
        app.state.estimator = est
        return est

    @app.exception_handler(BouwplanError)
    async def domain_error(request: Request, exc: BouwplanError) -> JSONResponse:
        status_code = next(
            (code for cls, code in _STATUS_CODES.items() if isinstance(exc, cls)),
            500,
        )
        logger.warning("%s %s refused (%d): %s", request.method, request.url.path, status_code, exc)
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    # ------------------------------------------------------------------
    # GET /api/health
    # ------------------------------------------------------------------

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": VERSION}

    # ------------------------------------------------------------------
    # POST /api/estimate
    # ------------------------------------------------------------------

    @app.post("/api/estimate")
    def estimate(body: EstimateRequest) -> dict[str, Any]:
        breakdown = _get_estimator().breakdown(
            body.configuration,
            body.location,
            body.plot_size,
            has_land=body.has_land,
            budget=body.budget,
        )
        return {
            **breakdown.model_dump(mode="json"),
            "summary_dict": breakdown.to_summary_dict(),
        }

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    @app.post("/api/projects", status_code=201)
    def create_project(body: CreateProjectRequest) -> dict[str, Any]:
        service = _get_registry().create(body.name, body.configuration)
        with _get_registry().locked(service.project_id):
            return _project_payload(service)

    @app.get("/api/projects/{project_id}")
    def get_project(project_id: str) -> dict[str, Any]:
        with _get_registry().locked(project_id) as service:
            return _project_payload(service)

    @app.get("/api/projects/{project_id}/phases")
    def list_phases(project_id: str) -> list[dict[str, Any]]:
        with _get_registry().locked(project_id) as service:
            return [
                {
                    "id": phase.id,
                    "name": phase.name,
                    "planned_budget": phase.planned_budget,
                    "progress": service.phase_summary(phase.id).model_dump(mode="json"),
                    "tasks": [
                        s.model_dump(mode="json")
                        for s in service.milestones.phase_snapshots(phase.id)
                    ],
                }
                for phase in service.list_phases()
            ]

    @app.get("/api/projects/{project_id}/compliance")
    def compliance(project_id: str) -> dict[str, Any]:
        with _get_registry().locked(project_id) as service:
            summary = service.compliance_summary()
            return {
                **summary.model_dump(mode="json"),
                "summary_dict": summary.to_summary_dict(),
            }

    # ------------------------------------------------------------------
    # Tasks and evidence
    # ------------------------------------------------------------------

    @app.get("/api/projects/{project_id}/tasks/{task_id}")
    def get_task(project_id: str, task_id: str) -> dict[str, Any]:
        with _get_registry().locked(project_id) as service:
            return service.snapshot(task_id).model_dump(mode="json")

    @app.post("/api/projects/{project_id}/tasks/{task_id}/evidence")
    def apply_evidence(project_id: str, task_id: str, body: EvidenceRequest) -> dict[str, Any]:
        with _get_registry().locked(project_id) as service:
            snapshot = service.apply_evidence(
                task_id,
                body.kind,
                body.outcome,
                reason=body.reason,
                reviewed_by=body.reviewed_by,
            )
            return snapshot.model_dump(mode="json")

    @app.post("/api/projects/{project_id}/evidence/{evidence_id}/review")
    def review_evidence(
        project_id: str, evidence_id: str, body: ReviewRequest
    ) -> dict[str, Any]:
        with _get_registry().locked(project_id) as service:
            evidence = service.review_evidence(
                evidence_id, body.outcome, reason=body.reason, reviewed_by=body.reviewed_by
            )
            return evidence.model_dump(mode="json")

    @app.post("/api/projects/{project_id}/tasks/{task_id}/advance")
    def advance(
        project_id: str, task_id: str, body: AdvanceRequest | None = None
    ) -> dict[str, Any]:
        body = body or AdvanceRequest()
        with _get_registry().locked(project_id) as service:
            snapshot = service.advance(task_id, verified_by=body.verified_by)
            return {
                "task": snapshot.model_dump(mode="json"),
                "progress": service.progress_summary().model_dump(mode="json"),
                "budget": service.budget_summary().model_dump(mode="json"),
            }

    # ------------------------------------------------------------------
    # Tranches
    # ------------------------------------------------------------------

    @app.get("/api/projects/{project_id}/tranches")
    def list_tranches(project_id: str) -> dict[str, Any]:
        with _get_registry().locked(project_id) as service:
            budget = service.budget_summary()
            return {
                "tranches": [t.model_dump(mode="json") for t in service.list_tranches()],
                "budget": budget.model_dump(mode="json"),
                "summary_dict": budget.to_summary_dict(),
            }

    @app.post("/api/projects/{project_id}/tranches/{tranche_id}/evaluate")
    def evaluate_tranche(project_id: str, tranche_id: str) -> dict[str, Any]:
        with _get_registry().locked(project_id) as service:
            return service.evaluate_tranche(tranche_id).model_dump(mode="json")

    @app.post("/api/projects/{project_id}/tranches/{tranche_id}/release")
    def release_tranche(
        project_id: str, tranche_id: str, body: ReleaseRequest | None = None
    ) -> dict[str, Any]:
        released_at = (body.released_at if body else None) or datetime.now(UTC)
        with _get_registry().locked(project_id) as service:
            return service.release_tranche(tranche_id, released_at).model_dump(mode="json")

    return app
