"""
Unit tests for the budget state reducer and store.
"""

import math
import unittest

from carbon_budget import (
    BudgetState,
    BudgetStore,
    Category,
    ResetAllAllocations,
    SetAllocation,
    SetFutureBudgets,
    SetTarget,
    SetTotalBudget,
    ValidationRejected,
    abatement,
    get_intervention,
    INTERVENTIONS_CATALOG,
    reduce_state,
)


class TestReduceState(unittest.TestCase):
    """Tests for the pure (state, operation) -> state contract."""

    def setUp(self):
        self.state = BudgetState()

    def test_defaults(self):
        self.assertEqual(self.state.total_budget, 500000)
        self.assertEqual(self.state.target_tonnes, 3000)
        self.assertEqual(self.state.future_budgets, (0.0, 0.0, 0.0, 0.0))
        self.assertEqual(dict(self.state.allocations), {})

    def test_returns_new_snapshot(self):
        new_state = reduce_state(self.state, SetTotalBudget(250000))
        self.assertEqual(new_state.total_budget, 250000)
        self.assertEqual(self.state.total_budget, 500000)

    def test_set_target_and_future_budgets(self):
        state = reduce_state(self.state, SetTarget(1200))
        state = reduce_state(state, SetFutureBudgets([450000, 400000, 350000, 300000]))
        self.assertEqual(state.target_tonnes, 1200)
        self.assertEqual(state.future_budgets, (450000.0, 400000.0, 350000.0, 300000.0))

    def test_set_allocation_strips_id(self):
        state = reduce_state(self.state, SetAllocation("  elec-001 ", 1000))
        self.assertEqual(dict(state.allocations), {"elec-001": 1000.0})

    def test_zero_spend_removes_entry(self):
        state = reduce_state(self.state, SetAllocation("elec-001", 1000))
        state = reduce_state(state, SetAllocation("elec-001", 0))
        self.assertNotIn("elec-001", state.allocations)
        self.assertEqual(state.spend_of("elec-001"), 0.0)

    def test_allocations_read_only(self):
        state = reduce_state(self.state, SetAllocation("elec-001", 1000))
        with self.assertRaises(TypeError):
            state.allocations["elec-001"] = 5

    def test_reset(self):
        state = reduce_state(self.state, SetAllocation("elec-001", 1000))
        state = reduce_state(state, SetAllocation("heat-001", 1000))
        state = reduce_state(state, ResetAllAllocations())
        self.assertEqual(len(state.allocations), 0)
        self.assertEqual(state.total_budget, 500000)

    def test_rejections(self):
        bad_ops = [
            SetTotalBudget(-1),
            SetTotalBudget(math.inf),
            SetTarget(math.nan),
            SetFutureBudgets([1, 2, 3]),
            SetFutureBudgets([1, 2, 3, -4]),
            SetFutureBudgets("1234"),
            SetAllocation("", 100),
            SetAllocation("   ", 100),
            SetAllocation(None, 100),
            SetAllocation("elec-001", -5),
            SetAllocation("elec-001", "100"),
        ]
        for op in bad_ops:
            with self.assertRaises(ValidationRejected):
                reduce_state(self.state, op)


class TestBudgetStore(unittest.TestCase):
    """Tests for the session store."""

    def setUp(self):
        self.store = BudgetStore()

    def test_scenario_no_allocations(self):
        m = self.store.metrics()
        self.assertEqual(m.portfolio_abatement, 0)
        self.assertEqual(m.gap_to_target, 3000)
        self.assertEqual(m.budget_utilisation_percent, 0)

    def test_rejected_mutation_keeps_state(self):
        self.store.set_allocation("elec-001", 4500)
        before = self.store.state
        with self.assertLogs("carbon_budget.state", level="WARNING"):
            ok = self.store.set_total_budget(-100)
        self.assertFalse(ok)
        self.assertIs(self.store.state, before)
        self.assertIn("non-negative", self.store.last_error)

    def test_accepted_mutation_clears_error(self):
        self.store.set_target(-1)
        self.assertTrue(self.store.set_target(10))
        self.assertIsNone(self.store.last_error)

    def test_listeners(self):
        seen = []
        unsubscribe = self.store.subscribe(seen.append)
        self.store.set_total_budget(100)
        self.store.set_total_budget(-100)
        unsubscribe()
        self.store.set_total_budget(200)
        self.assertEqual([s.total_budget for s in seen], [100])

    def test_derived_views_follow_state(self):
        self.store.set_allocation("waste-001", 5000)
        self.assertAlmostEqual(self.store.metrics().portfolio_abatement, 200)
        self.store.set_allocation("waste-001", 0)
        self.assertEqual(self.store.metrics().portfolio_abatement, 0)
        self.assertEqual(self.store.ranking(), [])
        self.assertEqual(self.store.breakdown(), [])

    def test_target_progress_and_remaining(self):
        self.store.set_allocation("waste-001", 7500)
        self.assertAlmostEqual(self.store.target_progress(), 10.0)
        self.assertAlmostEqual(self.store.remaining_budget(), 492500)

    def test_distribute_by_roi_fills_category(self):
        self.store.set_total_budget(10000)
        self.store.set_allocation("elec-001", 2000)
        updates = self.store.distribute_by_roi(Category.WASTE)
        # waste-001 saturates at 7500, the remaining 500 goes to waste-002
        self.assertAlmostEqual(updates["waste-001"], 7500)
        self.assertAlmostEqual(updates["waste-002"], 500)
        self.assertNotIn("waste-003", updates)
        self.assertEqual(self.store.state.spend_of("elec-001"), 2000)
        self.assertAlmostEqual(self.store.remaining_budget(), 0)
        self.assertFalse(self.store.can_distribute(Category.TRAVEL))

    def test_distribute_respects_ceilings(self):
        self.store.set_total_budget(10_000_000)
        self.store.distribute_by_roi(Category.TRAVEL)
        for intervention in self.store.catalog:
            if intervention.category == Category.TRAVEL:
                spend = self.store.state.spend_of(intervention.id)
                self.assertAlmostEqual(abatement(intervention, spend), intervention.max_tonnes_per_year)

    def test_distribute_nothing_to_do(self):
        self.store.set_total_budget(0)
        self.assertEqual(self.store.distribute_by_roi(Category.WATER), {})

    def test_category_summary(self):
        self.store.set_allocation("heat-002", 3500)
        summary = self.store.category_summary(Category.GAS_HEATING)
        self.assertAlmostEqual(summary.abatement, 100)
        self.assertAlmostEqual(summary.percent_of_budget, 0.7)

    def test_custom_catalog(self):
        led = get_intervention(INTERVENTIONS_CATALOG, "elec-001")
        store = BudgetStore(catalog=[led], initial_state=BudgetState(total_budget=1000, target_tonnes=10))
        store.set_allocation("elec-001", 450)
        self.assertAlmostEqual(store.metrics().portfolio_abatement, 10)
        self.assertEqual(store.metrics().gap_to_target, 0)

    def test_trajectory(self):
        self.store.set_allocation("waste-001", 5000)
        self.store.set_future_budgets([5000, 10000, 0, 2500])
        trajectory = self.store.trajectory()
        self.assertEqual(list(trajectory.yearly_spend), [5000, 5000, 10000, 0, 2500])
        self.assertAlmostEqual(trajectory.projected_abatement[0], self.store.metrics().portfolio_abatement)


if __name__ == "__main__":
    unittest.main()
