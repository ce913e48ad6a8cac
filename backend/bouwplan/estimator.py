"""Deterministic build-cost estimator.

The estimate is derived from a ``BuildConfiguration`` in six steps:

1. **Area cost**: floor area times the base cost per m2.
2. **Material**: multiply by the material multiplier (unknown: 1.0).
3. **Energy tier**: add the tier's fixed amount (unknown: 0).
4. **Extras**: add the fixed price of each distinct extra (unknown: 0).
5. **Vibe**: scale up linearly, +10% at vibe 100.
6. **Rounding**: round half-up to the nearest multiple of 5000.

Everything here is a pure function of its inputs, so callers may memoise
results freely.
"""

from __future__ import annotations

import math

from bouwplan.data.rates import BUDGET_TOLERANCE, ROUNDING_STEP, VIBE_MAX_SURCHARGE
from bouwplan.data.repository import DEFAULT_RATES, RateRepository
from bouwplan.exceptions import ConfigurationError
from bouwplan.models.configuration import BuildConfiguration
from bouwplan.models.reports import CostBreakdown


def round_half_up(amount: float, step: int) -> int:
    """Round *amount* to the nearest multiple of *step*, halves going up."""
    return int(math.floor(amount / step + 0.5)) * step


def _validate(config: BuildConfiguration) -> None:
    if not math.isfinite(config.area_sqm) or config.area_sqm < 0:
        msg = f"area_sqm must be a non-negative number, got {config.area_sqm}"
        raise ConfigurationError(msg)
    if not math.isfinite(config.vibe) or not 0 <= config.vibe <= 100:
        msg = f"vibe must be between 0 and 100, got {config.vibe}"
        raise ConfigurationError(msg)


class CostEstimator:
    """Converts a BuildConfiguration into a build-cost estimate.

    Args:
        rates: Price lookups. Defaults to the catalog prices of the wizard.

    Example::

        estimator = CostEstimator()
        estimator.estimate(BuildConfiguration(area_sqm=150, material="brick",
                                              energy_tier="standard", vibe=0))
        # 330000
    """

    def __init__(self, rates: RateRepository | None = None) -> None:
        self._rates = rates or DEFAULT_RATES

    def estimate(self, config: BuildConfiguration) -> int:
        """Estimate the build cost of *config* in whole euros.

        Raises:
            ConfigurationError: If the area is negative or the vibe is
                outside [0, 100].
        """
        _validate(config)
        rates = self._rates

        cost = config.area_sqm * rates.base_cost_per_sqm
        cost *= rates.get_material_multiplier(config.material)
        cost += rates.get_energy_addition(config.energy_tier)
        for extra in sorted(config.extras):
            cost += rates.get_extra_cost(extra)
        cost *= 1 + (config.vibe / 100) * VIBE_MAX_SURCHARGE

        return round_half_up(cost, ROUNDING_STEP)

    def estimate_land_cost(
        self,
        location: str = "",
        plot_size: str | None = None,
        *,
        has_land: bool = False,
    ) -> int:
        """Estimate the land cost for a location and plot size bracket.

        Returns 0 when the buyer already owns the land.
        """
        if has_land:
            return 0
        price = self._rates.get_land_price_per_sqm(location)
        return round(price * self._rates.get_plot_sqm(plot_size))

    def sqm_for_size(self, size: str) -> int:
        return self._rates.get_sqm_for_size(size)

    def breakdown(
        self,
        config: BuildConfiguration,
        location: str = "",
        plot_size: str | None = None,
        *,
        has_land: bool = False,
        budget: int | None = None,
    ) -> CostBreakdown:
        """Combine build and land cost and check them against a budget.

        The upper bound is the total plus 10%, rounded to 5000; the
        indicative saving is 13% of the total, rounded to 1000. A budget is
        feasible when it falls short of the total by at most 20000.
        """
        build_cost = self.estimate(config)
        land_cost = self.estimate_land_cost(location, plot_size, has_land=has_land)
        total = build_cost + land_cost

        result = CostBreakdown(
            build_cost=build_cost,
            land_cost=land_cost,
            total=total,
            max_cost=round_half_up(total * 1.1, ROUNDING_STEP),
            indicative_saving=round_half_up(total * 0.13, 1_000),
        )
        if budget is not None:
            difference = budget - total
            result = result.model_copy(
                update={
                    "budget": budget,
                    "budget_difference": difference,
                    "is_feasible": difference >= -BUDGET_TOLERANCE,
                }
            )
        return result


def estimate_cost(
    config: BuildConfiguration, rates: RateRepository | None = None
) -> int:
    """Estimate the build cost of *config*; see ``CostEstimator.estimate``."""
    return CostEstimator(rates).estimate(config)
