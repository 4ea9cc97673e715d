"""
Multi-year spend and abatement projection.

The default model is deliberately simple: the current intervention mix
(each intervention's share of this year's spend) is scaled to each year's
budget. Alternative models can be supplied anywhere a ProjectionStrategy is
accepted.
"""

from typing import Callable, Mapping, Sequence

import numpy as np

from ._validation import require_allocations, require_catalog, require_non_negative
from .errors import InvalidInput
from .metrics import abatement, spend_of
from .types import Intervention, Trajectory

FUTURE_YEARS = 4

ProjectionStrategy = Callable[[Sequence[Intervention], Mapping[str, float], Sequence[float]], Trajectory]


def current_mix(catalog: Sequence[Intervention], allocations: Mapping[str, float]) -> np.ndarray:
    """Share of current spend per catalog entry; all zeros when nothing is funded."""
    spends = np.array([spend_of(allocations, i.id) for i in catalog], dtype=float)
    total = spends.sum()
    if total <= 0:
        return np.zeros(len(catalog))
    return spends / total


def project_years(
    catalog: Sequence[Intervention],
    allocations: Mapping[str, float],
    future_budgets: Sequence[float],
) -> Trajectory:
    """
    Projects five years of spend and abatement from the current mix.

    Year 1 is the current portfolio spend; years 2-5 are the future budgets.
    Each year's budget is split using the current mix and converted to
    abatement per intervention, so abatement ceilings still apply.

    Args:
        catalog: Interventions available for funding
        allocations: This year's intervention id -> spend (£)
        future_budgets: Budgets for years 2-5 (£)

    Returns:
        Trajectory with five entries per series
    """
    require_catalog(catalog)
    require_allocations(allocations)
    if isinstance(future_budgets, (str, bytes)) or len(future_budgets) != FUTURE_YEARS:
        raise InvalidInput(f"Future budgets must be a sequence of exactly {FUTURE_YEARS} numbers")
    budgets = [require_non_negative(b, f"Future budget at index {k}") for k, b in enumerate(future_budgets)]

    mix = current_mix(catalog, allocations)
    current_spend = sum(spend_of(allocations, i.id) for i in catalog)
    yearly_spend = np.array([current_spend] + budgets, dtype=float)

    projected = np.zeros(len(yearly_spend))
    for year, budget in enumerate(yearly_spend):
        if budget == 0:
            continue
        projected[year] = sum(
            abatement(intervention, budget * share)
            for intervention, share in zip(catalog, mix)
        )

    return Trajectory(yearly_spend=yearly_spend, projected_abatement=projected)
