"""Price tables and the default project catalog."""

from bouwplan.data.catalog import build_default_phases, build_default_tranches
from bouwplan.data.repository import DEFAULT_RATES, RateRepository

__all__ = [
    "DEFAULT_RATES",
    "RateRepository",
    "build_default_phases",
    "build_default_tranches",
]
