import logging

import matplotlib.pyplot as plt
from carbon_budget import BudgetStore, Category, format_currency, format_percentage, format_tonnes
from carbon_budget.analysis import plot_macc, plot_trajectory


def run_demo():
    logging.basicConfig(level=logging.INFO, format="%(name)s %(levelname)s %(message)s")
    print("=== Running Carbon Budget Planner Demo ===")

    # 1. Session defaults
    store = BudgetStore()
    print(f"\n1. Budget {format_currency(store.state.total_budget)}, "
          f"target {format_tonnes(store.state.target_tonnes)}")

    # 2. Manual allocations
    print("\n2. Allocating manually...")
    store.set_allocation("elec-001", 9000)
    store.set_allocation("heat-003", 48000)
    store.set_allocation("travel-001", -10)  # rejected, state unchanged
    print(f"   Last rejection: {store.last_error}")

    # 3. ROI fill per category
    print("\n3. Filling by ROI...")
    for category in (Category.WASTE, Category.TRAVEL, Category.GAS_HEATING):
        updates = store.distribute_by_roi(category)
        print(f"   {category}: {len(updates)} interventions topped up")

    # 4. Portfolio metrics
    m = store.metrics()
    print("\n4. Portfolio")
    print(f"   Spend: {format_currency(m.portfolio_spend)} "
          f"({format_percentage(m.budget_utilisation_percent)} of budget)")
    print(f"   Abatement: {format_tonnes(m.portfolio_abatement)}, gap {format_tonnes(m.gap_to_target)}")
    print(f"   Cost per tonne: {format_currency(m.portfolio_cost_per_tonne)}")

    print("\n   MACC order:")
    for row in store.ranking():
        print(f"   {row.intervention_id:<11} £{row.cost_per_tonne:>4.0f}/t  {format_tonnes(row.abatement)}")

    # 5. Projection
    store.set_future_budgets([450000, 400000, 350000, 300000])
    trajectory = store.trajectory()
    print("\n5. Trajectory")
    for year, spend, tonnes in zip(trajectory.years, trajectory.yearly_spend, trajectory.projected_abatement):
        print(f"   {year}: {format_currency(spend)} -> {format_tonnes(tonnes)}")

    plot_macc(store.ranking())
    plot_trajectory(trajectory)
    plt.show()

    print("\n=== Demo Complete ===")


if __name__ == "__main__":
    run_demo()
