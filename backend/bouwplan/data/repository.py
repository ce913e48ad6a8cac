"""Rate repository for looking up estimator prices."""

from __future__ import annotations

from bouwplan.data.rates import (
    BASE_BUILD_COST_PER_SQM,
    DEFAULT_LAND_PRICE_PER_SQM,
    DEFAULT_PLOT_SQM,
    DEFAULT_SQM,
    ENERGY_TIER_ADDITIONS,
    EXTRA_COSTS,
    LAND_PRICE_PER_SQM,
    MATERIAL_COST_MULTIPLIERS,
    PLOT_SIZE_SQM,
    SIZE_SQM_RANGES,
)


class RateRepository:
    """Repository for looking up estimator prices.

    Wraps in-memory price tables and provides lookups with neutral defaults
    for values that are not in the catalog: multiplier 1.0 for an unknown
    material, no addition for an unknown energy tier or extra.
    """

    def __init__(
        self,
        base_cost_per_sqm: float = BASE_BUILD_COST_PER_SQM,
        material_multipliers: dict[str, float] | None = None,
        energy_additions: dict[str, float] | None = None,
        extra_costs: dict[str, float] | None = None,
    ) -> None:
        self.base_cost_per_sqm = base_cost_per_sqm
        self._materials = dict(
            MATERIAL_COST_MULTIPLIERS if material_multipliers is None else material_multipliers
        )
        self._energy = dict(
            ENERGY_TIER_ADDITIONS if energy_additions is None else energy_additions
        )
        self._extras = dict(EXTRA_COSTS if extra_costs is None else extra_costs)

    def get_material_multiplier(self, material: str) -> float:
        return self._materials.get(material, 1.0)

    def get_energy_addition(self, energy_tier: str) -> float:
        return self._energy.get(energy_tier, 0.0)

    def get_extra_cost(self, extra: str) -> float:
        return self._extras.get(extra, 0.0)

    def get_land_price_per_sqm(self, location: str) -> float:
        """Get the average land price for a free-text location.

        Lookup order:
        1. First known municipality whose name occurs in the location
           (case-insensitive), e.g. 'Utrecht, Nederland' -> Utrecht
        2. National default
        """
        location_lower = location.lower()
        for name, price in LAND_PRICE_PER_SQM.items():
            if name in location_lower:
                return price
        return DEFAULT_LAND_PRICE_PER_SQM

    def get_plot_sqm(self, plot_size: str | None) -> float:
        if plot_size is None:
            return PLOT_SIZE_SQM["300-500"]
        return PLOT_SIZE_SQM.get(plot_size, DEFAULT_PLOT_SQM)

    def get_sqm_for_size(self, size: str) -> int:
        """Midpoint of the size category's floor area range, rounded half-up."""
        sqm_range = SIZE_SQM_RANGES.get(size)
        if sqm_range is None:
            return DEFAULT_SQM
        low, high = sqm_range
        return (low + high + 1) // 2


DEFAULT_RATES = RateRepository()
