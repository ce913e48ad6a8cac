"""Enums for the bouwplan domain models.

Status vocabularies are closed: anything outside these members is rejected
by pydantic before it reaches the engines.
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """Lifecycle status of a construction task.

    Members are declared in lifecycle order; ``rank`` exposes that order.
    """

    LOCKED = "locked"
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"

    @property
    def rank(self) -> int:
        return list(TaskStatus).index(self)


class EvidenceKind(StrEnum):
    """Kind of artifact submitted to prove a task was done."""

    PHOTO = "photo"
    INSPECTION = "inspection"
    DOCUMENT = "document"


class EvidenceOutcome(StrEnum):
    """Review outcome of a single evidence record."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class TrancheStatus(StrEnum):
    """Payment tranche status. ``released`` is terminal."""

    LOCKED = "locked"
    PENDING = "pending"
    RELEASED = "released"


class MaterialType(StrEnum):
    """Primary construction material offered by the wizard."""

    WOOD = "wood"
    BRICK = "brick"
    CONCRETE = "concrete"
    MIXED = "mixed"


class EnergyLevel(StrEnum):
    """Energy performance tier."""

    STANDARD = "standard"
    APLUS = "aplus"
    NEUTRAL = "neutral"
    POSITIVE = "positive"


class ExtraFeature(StrEnum):
    """Optional extras with a fixed price."""

    GARAGE = "garage"
    CARPORT = "carport"
    SOLAR = "solar"
    EV_CHARGER = "ev_charger"
    HEAT_PUMP = "heat_pump"
    BATTERY_STORAGE = "battery_storage"
    OFFICE = "office"
    SEDUM_ROOF = "sedum_roof"
    RAINWATER = "rainwater"
    OUTDOOR_KITCHEN = "outdoor_kitchen"
    POOL = "pool"
    SAUNA = "sauna"


class SizeCategory(StrEnum):
    """House size bracket used to suggest a floor area."""

    COMPACT = "compact"
    FAMILY = "family"
    SPACIOUS = "spacious"
    VILLA = "villa"


class PlotSize(StrEnum):
    """Plot size bracket in square meters."""

    UNDER_300 = "<300"
    FROM_300_TO_500 = "300-500"
    FROM_500_TO_1000 = "500-1000"
    OVER_1000 = "1000+"
