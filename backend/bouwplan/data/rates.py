"""Price tables for the build-cost estimator.

Amounts are in euros and mirror the options offered in the configuration
wizard. Lookups with defaults live in ``RateRepository``.
"""

from bouwplan.models.enums import (
    EnergyLevel,
    ExtraFeature,
    MaterialType,
    PlotSize,
    SizeCategory,
)

BASE_BUILD_COST_PER_SQM: float = 2200.0

# Multiplier applied to the area cost
MATERIAL_COST_MULTIPLIERS: dict[str, float] = {
    MaterialType.WOOD: 1.10,
    MaterialType.BRICK: 1.00,
    MaterialType.CONCRETE: 1.15,
    MaterialType.MIXED: 1.20,
}

# Fixed addition per energy tier
ENERGY_TIER_ADDITIONS: dict[str, float] = {
    EnergyLevel.STANDARD: 0.0,
    EnergyLevel.APLUS: 15_000.0,
    EnergyLevel.NEUTRAL: 35_000.0,
    EnergyLevel.POSITIVE: 55_000.0,
}

EXTRA_COSTS: dict[str, float] = {
    ExtraFeature.GARAGE: 25_000.0,
    ExtraFeature.CARPORT: 8_000.0,
    ExtraFeature.SOLAR: 12_000.0,
    ExtraFeature.EV_CHARGER: 2_500.0,
    ExtraFeature.HEAT_PUMP: 15_000.0,
    ExtraFeature.BATTERY_STORAGE: 8_000.0,
    ExtraFeature.OFFICE: 8_000.0,
    ExtraFeature.SEDUM_ROOF: 15_000.0,
    ExtraFeature.RAINWATER: 6_000.0,
    ExtraFeature.OUTDOOR_KITCHEN: 12_000.0,
    ExtraFeature.POOL: 45_000.0,
    ExtraFeature.SAUNA: 15_000.0,
}

# Vibe 100 adds at most this fraction on top of the cost
VIBE_MAX_SURCHARGE: float = 0.10

ROUNDING_STEP: int = 5_000

# Average land price (EUR / m2) for popular municipalities
LAND_PRICE_PER_SQM: dict[str, float] = {
    "amsterdam": 800.0,
    "utrecht": 650.0,
    "den haag": 550.0,
    "amersfoort": 500.0,
    "haarlem": 600.0,
    "almere": 350.0,
    "groningen": 300.0,
    "eindhoven": 450.0,
}

DEFAULT_LAND_PRICE_PER_SQM: float = 400.0

# Representative plot area (m2) per plot size bracket
PLOT_SIZE_SQM: dict[str, float] = {
    PlotSize.UNDER_300: 250.0,
    PlotSize.FROM_300_TO_500: 400.0,
    PlotSize.FROM_500_TO_1000: 750.0,
    PlotSize.OVER_1000: 1200.0,
}

DEFAULT_PLOT_SQM: float = 400.0

# (min, max) floor area per size category
SIZE_SQM_RANGES: dict[str, tuple[int, int]] = {
    SizeCategory.COMPACT: (80, 120),
    SizeCategory.FAMILY: (120, 180),
    SizeCategory.SPACIOUS: (180, 250),
    SizeCategory.VILLA: (250, 400),
}

DEFAULT_SQM: int = 150

# Budget may fall short of the estimate by this much and still be feasible
BUDGET_TOLERANCE: int = 20_000
