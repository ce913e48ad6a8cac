"""Build configuration chosen in the wizard."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from bouwplan.models.enums import EnergyLevel, MaterialType


class BuildConfiguration(BaseModel):
    """User-chosen attributes of the house to be built.

    Immutable once constructed; replace it wholesale to change a choice.
    ``material`` and ``energy_tier`` are plain strings so that values outside
    the catalog still reach the estimator, which prices them at the neutral
    default. Range checks (area, vibe) are done by the estimator and surface
    as ``ConfigurationError``.
    """

    model_config = ConfigDict(frozen=True)

    area_sqm: float = 150.0
    material: str = MaterialType.BRICK.value
    energy_tier: str = EnergyLevel.APLUS.value
    extras: frozenset[str] = Field(default_factory=frozenset)
    vibe: float = 50.0
