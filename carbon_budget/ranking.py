from typing import Dict, List, Mapping, Sequence

from ._validation import require_allocations, require_catalog, require_non_negative
from .metrics import abatement, spend_of
from .types import AllocationRow, Category, CategoryBreakdown, CategorySummary, Intervention


def rank_by_effectiveness(
    catalog: Sequence[Intervention],
    allocations: Mapping[str, float],
) -> List[AllocationRow]:
    """
    Funded interventions in MACC order, cheapest abatement first.

    Only interventions with spend > 0 appear. Ordering is by unit cost
    alone; equal costs keep catalog order.
    """
    require_catalog(catalog)
    require_allocations(allocations)

    rows: List[AllocationRow] = []
    for intervention in catalog:
        spend = spend_of(allocations, intervention.id)
        if spend > 0:
            rows.append(
                AllocationRow(
                    category=intervention.category,
                    intervention_id=intervention.id,
                    spend=spend,
                    abatement=abatement(intervention, spend),
                    cost_per_tonne=intervention.cost_per_tonne,
                )
            )
    # sorted() is stable
    return sorted(rows, key=lambda row: row.cost_per_tonne)


def group_by_category(
    catalog: Sequence[Intervention],
    allocations: Mapping[str, float],
) -> List[CategoryBreakdown]:
    """
    Spend per category with its share of total spend.

    Categories with zero spend are omitted. Largest category first.
    """
    require_catalog(catalog)
    require_allocations(allocations)

    category_spend: Dict[Category, float] = {}
    for intervention in catalog:
        spend = spend_of(allocations, intervention.id)
        category_spend[intervention.category] = category_spend.get(intervention.category, 0.0) + spend

    total_spend = sum(category_spend.values())
    breakdown = [
        CategoryBreakdown(
            category=category,
            spend=spend,
            percentage=(spend / total_spend) * 100 if total_spend > 0 else 0.0,
        )
        for category, spend in category_spend.items()
        if spend > 0
    ]
    return sorted(breakdown, key=lambda entry: entry.spend, reverse=True)


def summarise_category(
    catalog: Sequence[Intervention],
    allocations: Mapping[str, float],
    category: Category,
    total_budget: float,
) -> CategorySummary:
    """Subtotal spend and abatement for one category, and its share of the budget."""
    require_catalog(catalog)
    require_allocations(allocations)
    total_budget = require_non_negative(total_budget, "Total budget")

    subtotal = 0.0
    total_abatement = 0.0
    for intervention in catalog:
        if intervention.category != category:
            continue
        spend = spend_of(allocations, intervention.id)
        subtotal += spend
        total_abatement += abatement(intervention, spend)

    return CategorySummary(
        category=Category(category),
        subtotal=subtotal,
        abatement=total_abatement,
        percent_of_budget=(subtotal / total_budget) * 100 if total_budget > 0 else 0.0,
    )
