"""
Smoke tests for the matplotlib figures.
"""

import unittest

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from carbon_budget import (
    INTERVENTIONS_CATALOG,
    group_by_category,
    project_years,
    rank_by_effectiveness,
)
from carbon_budget.analysis import (
    macc_bar_positions,
    plot_abatement_vs_target,
    plot_budget_by_category,
    plot_macc,
    plot_trajectory,
)


class TestAnalysis(unittest.TestCase):

    def setUp(self):
        self.allocations = {"waste-001": 5000, "elec-002": 8500, "travel-002": 14000}

    def tearDown(self):
        plt.close("all")

    def test_macc_positions(self):
        rows = rank_by_effectiveness(INTERVENTIONS_CATALOG, self.allocations)
        # 200 t, 100 t, 100 t in MACC order
        np.testing.assert_allclose(macc_bar_positions(rows), [0, 200, 300])
        self.assertEqual(len(macc_bar_positions([])), 0)

    def test_macc_figure(self):
        fig = plot_macc(rank_by_effectiveness(INTERVENTIONS_CATALOG, self.allocations))
        self.assertEqual(len(fig.axes[0].patches), 3)

    def test_empty_figures(self):
        self.assertIsNotNone(plot_macc([]))
        self.assertIsNotNone(plot_budget_by_category([]))

    def test_category_figure(self):
        fig = plot_budget_by_category(group_by_category(INTERVENTIONS_CATALOG, self.allocations))
        self.assertEqual(len(fig.axes[0].patches), 3)

    def test_target_and_trajectory(self):
        self.assertIsNotNone(plot_abatement_vs_target(400, 3000))
        trajectory = project_years(INTERVENTIONS_CATALOG, self.allocations, [10000, 20000, 0, 5000])
        fig = plot_trajectory(trajectory)
        self.assertEqual(len(fig.axes), 2)


if __name__ == "__main__":
    unittest.main()
