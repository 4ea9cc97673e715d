"""
Carbon Budget: allocation and metrics engine for carbon-reduction portfolios.

Maps per-intervention spend to abatement, portfolio KPIs, category
breakdowns and a marginal abatement cost curve (MACC) ordering, and offers a
greedy fill-by-ROI auto-allocation within a category.
"""

__version__ = "0.1.0"

try:
    from .types import (
        Category,
        EfficiencyScore,
        Intervention,
        AllocationRow,
        PortfolioMetrics,
        CategoryBreakdown,
        CategorySummary,
        Trajectory,
    )
    from .errors import InvalidInput, ValidationRejected, CatalogIntegrityError
    from .catalog import (
        INTERVENTIONS_CATALOG,
        load_catalog,
        read_catalog_csv,
        validate_intervention,
        interventions_by_category,
        get_intervention,
    )
    from .metrics import abatement, spend_of, compute_metrics, target_progress, efficiency_score
    from .ranking import rank_by_effectiveness, group_by_category, summarise_category
    from .allocation import remaining_budget, can_distribute, distribute_by_roi
    from .projection import project_years, ProjectionStrategy
    from .formatting import format_currency, format_currency_exact, format_percentage, format_tonnes
    from .state import (
        BudgetState,
        BudgetStore,
        SetTotalBudget,
        SetTarget,
        SetFutureBudgets,
        SetAllocation,
        ResetAllAllocations,
        reduce_state,
    )
except ImportError as e:
    print(f"Error importing carbon_budget components: {e}")
    print("Please ensure all dependencies are installed: pip install -e .")
    raise

__all__ = [
    "__version__",
    # Core types
    "Category",
    "EfficiencyScore",
    "Intervention",
    "AllocationRow",
    "PortfolioMetrics",
    "CategoryBreakdown",
    "CategorySummary",
    "Trajectory",
    # Errors
    "InvalidInput",
    "ValidationRejected",
    "CatalogIntegrityError",
    # Catalog
    "INTERVENTIONS_CATALOG",
    "load_catalog",
    "read_catalog_csv",
    "validate_intervention",
    "interventions_by_category",
    "get_intervention",
    # Engine
    "abatement",
    "spend_of",
    "compute_metrics",
    "target_progress",
    "efficiency_score",
    "rank_by_effectiveness",
    "group_by_category",
    "summarise_category",
    "remaining_budget",
    "can_distribute",
    "distribute_by_roi",
    "project_years",
    "ProjectionStrategy",
    # Formatting
    "format_currency",
    "format_currency_exact",
    "format_percentage",
    "format_tonnes",
    # State
    "BudgetState",
    "BudgetStore",
    "SetTotalBudget",
    "SetTarget",
    "SetFutureBudgets",
    "SetAllocation",
    "ResetAllAllocations",
    "reduce_state",
]
