"""
Abatement and portfolio KPIs.

All functions here are pure and recompute from their arguments; nothing is
cached between calls.
"""

from typing import Mapping, Sequence

from ._validation import require_allocations, require_catalog, require_finite, require_non_negative
from .errors import InvalidInput
from .types import EfficiencyScore, Intervention, PortfolioMetrics

# Upper bounds (inclusive, £/tCO₂e) of the efficiency buckets
EXCELLENT_MAX_COST = 50.0
GOOD_MAX_COST = 100.0
FAIR_MAX_COST = 150.0


def spend_of(allocations: Mapping[str, float], intervention_id: str) -> float:
    """Committed spend for an intervention; an absent id means zero spend."""
    return require_non_negative(allocations.get(intervention_id, 0.0), f"Allocation for {intervention_id}")


def abatement(intervention: Intervention, spend: float) -> float:
    """
    Annual abatement bought by a given spend.

    Linear in spend at the intervention's unit cost, flat once the
    abatement ceiling is reached.

    Args:
        intervention: Catalog entry
        spend: Amount committed (£)

    Returns:
        float: Abatement in tCO₂e/year, in [0, max_tonnes_per_year]

    Raises:
        InvalidInput: If spend is not finite or the intervention has a
            non-positive cost or ceiling.
    """
    if intervention is None:
        raise InvalidInput("Intervention is required")
    spend = require_finite(spend, "Spend")
    if not intervention.cost_per_tonne > 0:
        raise InvalidInput("Intervention cost_per_tonne must be positive")
    if not intervention.max_tonnes_per_year > 0:
        raise InvalidInput("Intervention max_tonnes_per_year must be positive")

    if spend <= 0:
        return 0.0
    if spend >= intervention.saturation_spend:
        return float(intervention.max_tonnes_per_year)
    return min(intervention.max_tonnes_per_year, spend / intervention.cost_per_tonne)


def compute_metrics(
    catalog: Sequence[Intervention],
    allocations: Mapping[str, float],
    total_budget: float,
    target_tonnes: float,
) -> PortfolioMetrics:
    """
    Computes portfolio KPIs from the current allocations.

    Iterates the catalog (not the allocations), so the result does not depend
    on mapping order and allocation keys outside the catalog are ignored.

    Args:
        catalog: Interventions available for funding
        allocations: Intervention id -> spend (£)
        total_budget: Budget available this year (£), >= 0
        target_tonnes: Annual abatement target (tCO₂e), >= 0

    Returns:
        PortfolioMetrics

    Example:
        >>> m = compute_metrics(INTERVENTIONS_CATALOG, {"waste-001": 5000}, 500000, 3000)
        >>> m.portfolio_abatement
        200.0
    """
    require_catalog(catalog)
    require_allocations(allocations)
    total_budget = require_non_negative(total_budget, "Total budget")
    target_tonnes = require_non_negative(target_tonnes, "Target reduction")

    portfolio_spend = 0.0
    portfolio_abatement = 0.0
    for intervention in catalog:
        spend = spend_of(allocations, intervention.id)
        portfolio_spend += spend
        portfolio_abatement += abatement(intervention, spend)

    cost_per_tonne = portfolio_spend / portfolio_abatement if portfolio_abatement > 0 else 0.0
    gap = max(0.0, target_tonnes - portfolio_abatement)
    utilisation = (portfolio_spend / total_budget) * 100 if total_budget > 0 else 0.0

    return PortfolioMetrics(
        portfolio_spend=portfolio_spend,
        portfolio_abatement=portfolio_abatement,
        portfolio_cost_per_tonne=cost_per_tonne,
        gap_to_target=gap,
        budget_utilisation_percent=utilisation,
    )


def target_progress(abatement_tonnes: float, target_tonnes: float) -> float:
    """
    Progress towards the annual target as a percentage, capped at 100.

    A zero target reports 0 progress.
    """
    abatement_tonnes = require_non_negative(abatement_tonnes, "Abatement")
    target_tonnes = require_non_negative(target_tonnes, "Target")
    if target_tonnes == 0:
        return 0.0
    return min(100.0, (abatement_tonnes / target_tonnes) * 100)


def efficiency_score(cost_per_tonne: float) -> EfficiencyScore:
    """
    Buckets a cost per tonne into an efficiency rating.

    A cost of 0 (nothing funded, or free abatement) rates as excellent.
    """
    cost_per_tonne = require_non_negative(cost_per_tonne, "Cost per tonne")
    if cost_per_tonne <= EXCELLENT_MAX_COST:
        return EfficiencyScore.EXCELLENT
    if cost_per_tonne <= GOOD_MAX_COST:
        return EfficiencyScore.GOOD
    if cost_per_tonne <= FAIR_MAX_COST:
        return EfficiencyScore.FAIR
    return EfficiencyScore.POOR
