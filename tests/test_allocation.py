"""
Unit tests for the greedy ROI fill.
"""

import math
import unittest

from carbon_budget import (
    INTERVENTIONS_CATALOG,
    Category,
    Intervention,
    InvalidInput,
    abatement,
    can_distribute,
    distribute_by_roi,
    interventions_by_category,
    remaining_budget,
)


class TestDistributeByROI(unittest.TestCase):

    def setUp(self):
        self.a = Intervention("A", Category.WASTE, "Cheap", cost_per_tonne=30, max_tonnes_per_year=100)
        self.b = Intervention("B", Category.WASTE, "Dear", cost_per_tonne=80, max_tonnes_per_year=100)

    def test_cheapest_filled_first(self):
        updates = distribute_by_roi([self.b, self.a], {}, 4000)
        self.assertAlmostEqual(updates["A"], 3000)
        self.assertAlmostEqual(updates["B"], 1000)
        self.assertAlmostEqual(abatement(self.a, updates["A"]), 100)
        self.assertAlmostEqual(abatement(self.b, updates["B"]), 12.5)

    def test_tops_up_existing_spend(self):
        updates = distribute_by_roi([self.a, self.b], {"A": 1500}, 2000)
        # A needs 1500 more to saturate, the remaining 500 goes to B
        self.assertAlmostEqual(updates["A"], 3000)
        self.assertAlmostEqual(updates["B"], 500)

    def test_skips_saturated(self):
        updates = distribute_by_roi([self.a, self.b], {"A": 5000}, 800)
        self.assertNotIn("A", updates)
        self.assertAlmostEqual(updates["B"], 800)

    def test_never_reduces_or_exceeds_ceiling(self):
        allocations = {"A": 2999.5, "B": 100}
        updates = distribute_by_roi([self.a, self.b], allocations, 1e9)
        for intervention in (self.a, self.b):
            new_spend = updates.get(intervention.id, allocations[intervention.id])
            self.assertGreaterEqual(new_spend, allocations[intervention.id])
            self.assertLessEqual(abatement(intervention, new_spend), intervention.max_tonnes_per_year)

    def test_no_budget_no_updates(self):
        self.assertEqual(distribute_by_roi([self.a, self.b], {}, 0), {})
        self.assertEqual(distribute_by_roi([self.a, self.b], {}, -500), {})

    def test_does_not_mutate_input(self):
        allocations = {"A": 10}
        distribute_by_roi([self.a], allocations, 100)
        self.assertEqual(allocations, {"A": 10})

    def test_rejects_bad_budget(self):
        with self.assertRaises(InvalidInput):
            distribute_by_roi([self.a], {}, math.nan)

    def test_saturated_fractional_intervention_gets_nothing(self):
        tech = Intervention("x", Category.WATER, "Fractional", cost_per_tonne=228.92, max_tonnes_per_year=3.1)
        allocations = {"x": 228.92 * 3.1}
        self.assertFalse(can_distribute([tech], allocations, 1e9))
        self.assertEqual(distribute_by_roi([tech], allocations, 1e9), {})

    def test_fill_lands_exactly_on_ceiling(self):
        tech = Intervention("x", Category.WATER, "Fractional", cost_per_tonne=228.92, max_tonnes_per_year=3.1)
        updates = distribute_by_roi([tech], {"x": 100.37}, 1e9)
        self.assertEqual(abatement(tech, updates["x"]), 3.1)
        self.assertFalse(can_distribute([tech], updates, 1e9))

    def test_repeated_intervention_filled_once(self):
        updates = distribute_by_roi([self.a, self.a], {}, 4000)
        self.assertEqual(updates, {"A": 3000.0})
        updates = distribute_by_roi([self.a, self.b, self.a], {}, 4000)
        self.assertAlmostEqual(updates["A"], 3000)
        self.assertAlmostEqual(updates["B"], 1000)

    def test_rejects_invalid_allocation_values(self):
        for bad in ["1500", -1500, math.nan]:
            with self.assertRaises(InvalidInput):
                distribute_by_roi([self.a], {"A": bad}, 4000)
            with self.assertRaises(InvalidInput):
                can_distribute([self.a], {"A": bad}, 4000)
            with self.assertRaises(InvalidInput):
                remaining_budget(4000, {"A": bad})

    def test_only_touches_given_interventions(self):
        water = interventions_by_category(INTERVENTIONS_CATALOG, Category.WATER)
        updates = distribute_by_roi(water, {"elec-001": 100}, 1_000_000)
        self.assertEqual(set(updates), {"water-001", "water-002", "water-003"})


class TestCanDistribute(unittest.TestCase):

    def setUp(self):
        self.a = Intervention("A", Category.WASTE, "Cheap", cost_per_tonne=30, max_tonnes_per_year=100)

    def test_remaining_budget(self):
        self.assertEqual(remaining_budget(1000, {"A": 300, "x": 200}), 500)
        self.assertEqual(remaining_budget(100, {"A": 300}), -200)

    def test_needs_budget(self):
        self.assertFalse(can_distribute([self.a], {"A": 1000}, 1000))

    def test_needs_capacity(self):
        self.assertFalse(can_distribute([self.a], {"A": 3000}, 10000))

    def test_available(self):
        self.assertTrue(can_distribute([self.a], {"A": 1000}, 10000))


if __name__ == "__main__":
    unittest.main()
