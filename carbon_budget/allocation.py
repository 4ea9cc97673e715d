"""
Greedy "fill-by-ROI" auto-allocation.

The fill works one category at a time: it tops up the category's cheapest
abatement first until each intervention hits its ceiling or the budget runs
out. It is not a portfolio-wide optimiser. Calling it for several categories
from the same remaining-budget snapshot can overcommit the total budget, so
callers should re-read the remaining budget before each call.
"""

import logging
from typing import Dict, Mapping, Sequence

from ._validation import require_allocations, require_finite, require_non_negative
from .errors import InvalidInput
from .metrics import abatement, spend_of
from .types import Intervention

logger = logging.getLogger(__name__)


def remaining_budget(total_budget: float, allocations: Mapping[str, float]) -> float:
    """
    Budget not yet committed.

    Sums every stored allocation, including ids outside the catalog. Negative
    when the portfolio is overspent.
    """
    total_budget = require_non_negative(total_budget, "Total budget")
    require_allocations(allocations)
    return total_budget - sum(allocations.values())


def has_spare_capacity(intervention: Intervention, allocations: Mapping[str, float]) -> bool:
    current = abatement(intervention, spend_of(allocations, intervention.id))
    return current < intervention.max_tonnes_per_year


def can_distribute(
    category_interventions: Sequence[Intervention],
    allocations: Mapping[str, float],
    total_budget: float,
) -> bool:
    """
    Whether an ROI fill would do anything for this category.

    Requires uncommitted budget and at least one intervention below its
    abatement ceiling.
    """
    if remaining_budget(total_budget, allocations) <= 0:
        return False
    return any(has_spare_capacity(i, allocations) for i in category_interventions)


def distribute_by_roi(
    category_interventions: Sequence[Intervention],
    allocations: Mapping[str, float],
    remaining: float,
) -> Dict[str, float]:
    """
    Tops up a category's allocations in cost-effectiveness order.

    For each intervention, cheapest £/tCO₂e first, buys the abatement still
    available below its ceiling, limited by what is left of the budget.
    Existing spend is never reduced, and no intervention is pushed past its
    ceiling. The input mapping is left untouched.

    Args:
        category_interventions: Interventions of a single category
        allocations: Current intervention id -> spend (£)
        remaining: Budget available for the fill (£)

    Returns:
        Dict[str, float]: Intervention id -> new total spend, for the
        interventions that received money.

    Example:
        >>> a = Intervention("a", Category.WASTE, "A", 30, 100)
        >>> b = Intervention("b", Category.WASTE, "B", 80, 100)
        >>> distribute_by_roi([b, a], {}, 4000)
        {'a': 3000.0, 'b': 1000.0}
    """
    require_allocations(allocations)
    remaining = require_finite(remaining, "Remaining budget")
    for intervention in category_interventions:
        if not isinstance(intervention, Intervention):
            raise InvalidInput(f"Expected Intervention, got {intervention!r}")

    updates: Dict[str, float] = {}
    for intervention in sorted(category_interventions, key=lambda i: i.cost_per_tonne):
        if remaining <= 0:
            break

        current_spend = updates.get(intervention.id, spend_of(allocations, intervention.id))
        current_abatement = abatement(intervention, current_spend)
        remaining_capacity = intervention.max_tonnes_per_year - current_abatement
        if remaining_capacity <= 0:
            continue

        headroom = intervention.saturation_spend - current_spend
        if remaining >= headroom:
            updates[intervention.id] = float(intervention.saturation_spend)
            remaining -= headroom
        else:
            updates[intervention.id] = current_spend + remaining
            remaining = 0.0

    logger.debug("ROI fill updated %d interventions, %.2f left", len(updates), max(remaining, 0.0))
    return updates
