from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np


class Category(str, Enum):
    """Closed set of intervention categories."""
    ELECTRICITY = "Electricity"
    GAS_HEATING = "Gas/Heating"
    WATER = "Water"
    WASTE = "Waste"
    TRAVEL = "Travel"

    def __str__(self) -> str:
        return self.value


class EfficiencyScore(str, Enum):
    """Cost-effectiveness bucket for a £/tCO₂e figure."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Intervention:
    """
    A discrete, fundable carbon-reduction action.

    Attributes:
        id: Unique identifier within a catalog
        category: Category the intervention belongs to
        name: Display label
        cost_per_tonne: Cost per tonne of CO₂e abated (£/tCO₂e), strictly positive
        max_tonnes_per_year: Ceiling on annual abatement (tCO₂e/year), strictly positive
    """
    id: str
    category: Category
    name: str
    cost_per_tonne: float
    max_tonnes_per_year: float

    @property
    def saturation_spend(self) -> float:
        """Spend at which the abatement ceiling is reached."""
        return self.cost_per_tonne * self.max_tonnes_per_year


@dataclass(frozen=True)
class AllocationRow:
    """One funded intervention, as plotted on the MACC."""
    category: Category
    intervention_id: str
    spend: float
    abatement: float
    cost_per_tonne: float


@dataclass(frozen=True)
class PortfolioMetrics:
    """
    Aggregate KPIs for the current allocations.

    budget_utilisation_percent is not clamped: an overspent portfolio reports
    more than 100.
    """
    portfolio_spend: float
    portfolio_abatement: float
    portfolio_cost_per_tonne: float
    gap_to_target: float
    budget_utilisation_percent: float


@dataclass(frozen=True)
class CategoryBreakdown:
    category: Category
    spend: float
    percentage: float


@dataclass(frozen=True)
class CategorySummary:
    """Spend and abatement totals for a single category."""
    category: Category
    subtotal: float
    abatement: float
    percent_of_budget: float


@dataclass(frozen=True)
class Trajectory:
    """
    Five-year spend and abatement projection.

    Both arrays have one entry per year, year 1 first.
    """
    yearly_spend: np.ndarray
    projected_abatement: np.ndarray

    @property
    def years(self) -> Tuple[str, ...]:
        return tuple(f"Y{i + 1}" for i in range(len(self.yearly_spend)))
