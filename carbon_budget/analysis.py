import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Patch
from matplotlib.ticker import FuncFormatter
from typing import List, Optional

from .formatting import format_currency, format_tonnes
from .types import AllocationRow, Category, CategoryBreakdown, Trajectory

CATEGORY_COLORS = {
    Category.ELECTRICITY: '#3b82f6',
    Category.GAS_HEATING: '#ef4444',
    Category.WATER: '#06b6d4',
    Category.WASTE: '#10b981',
    Category.TRAVEL: '#f59e0b',
}


def macc_bar_positions(rows: List[AllocationRow]) -> np.ndarray:
    """Left edge of each MACC bar: cumulative abatement of the cheaper bars."""
    widths = np.array([r.abatement for r in rows], dtype=float)
    return np.concatenate(([0.0], np.cumsum(widths)[:-1])) if len(widths) else widths


def plot_macc(rows: List[AllocationRow], title: str = "Marginal Abatement Cost Curve"):
    """
    Plots the MACC: bar width is abatement, bar height is £/tCO₂e.

    Rows are expected in MACC order (see rank_by_effectiveness).
    """
    fig, ax = plt.subplots(figsize=(10, 5))

    if not rows:
        ax.text(0.5, 0.5, 'No funded interventions', ha='center', va='center',
                transform=ax.transAxes, color='gray')
        ax.set_axis_off()
        return fig

    lefts = macc_bar_positions(rows)
    widths = [r.abatement for r in rows]
    heights = [r.cost_per_tonne for r in rows]
    colors = [CATEGORY_COLORS.get(r.category, 'gray') for r in rows]

    ax.bar(lefts, heights, width=widths, align='edge', color=colors,
           edgecolor='white', linewidth=1.0)

    present = list(dict.fromkeys(r.category for r in rows))
    ax.legend(handles=[Patch(color=CATEGORY_COLORS[c], label=c.value) for c in present],
              loc='upper left', fontsize=9)
    ax.set_xlabel('Cumulative Abatement (tCO₂e/year)', fontsize=11)
    ax.set_ylabel('Cost per Tonne (£/tCO₂e)', fontsize=11)
    ax.set_title(title, fontsize=12)
    ax.grid(True, axis='y', alpha=0.3)

    return fig


def plot_budget_by_category(breakdown: List[CategoryBreakdown], title: str = "Budget by Category"):
    """Donut chart of spend share per category."""
    fig, ax = plt.subplots(figsize=(6, 6))

    if not breakdown:
        ax.text(0.5, 0.5, 'No budget allocated', ha='center', va='center',
                transform=ax.transAxes, color='gray')
        ax.set_axis_off()
        return fig

    ax.pie(
        [b.spend for b in breakdown],
        labels=[f"{b.category.value}\n{b.percentage:.1f}%" for b in breakdown],
        colors=[CATEGORY_COLORS.get(b.category, 'gray') for b in breakdown],
        startangle=90,
        counterclock=False,
        wedgeprops={'width': 0.4, 'edgecolor': 'white'},
    )
    total = sum(b.spend for b in breakdown)
    ax.text(0, 0, f"Total\n{format_currency(total)}", ha='center', va='center', fontsize=11)
    ax.set_title(title, fontsize=12)
    ax.set_aspect('equal')

    return fig


def plot_abatement_vs_target(abatement: float, target: float, title: str = "Abatement vs Target"):
    """Horizontal progress bar of projected abatement against the target."""
    fig, ax = plt.subplots(figsize=(10, 2))

    # Minimum scale of 100 t keeps tiny values readable
    max_value = max(abatement, target, 100.0)
    ax.barh([0], [max_value], color='#f3f4f6', edgecolor='#e5e7eb', height=0.5)
    color = '#16a34a' if abatement >= target else '#3b82f6'
    ax.barh([0], [abatement], color=color, height=0.5)
    ax.axvline(target, color='#dc2626', linestyle='--', linewidth=2)
    ax.annotate(f"Target {format_tonnes(target)}", xy=(target, 0.3), ha='center', fontsize=9,
                color='#dc2626')

    ax.set_xlim(0, max_value * 1.05)
    ax.set_yticks([])
    ax.set_xlabel('Annual Abatement (tCO₂e)', fontsize=11)
    ax.set_title(f"{title}: {format_tonnes(abatement)}", fontsize=12)

    plt.tight_layout()
    return fig


def plot_trajectory(trajectory: Trajectory, title: str = "5-Year Trajectory",
                    placeholder: Optional[str] = "Enter Year 2–5 £ to see projection"):
    """
    Dual-axis chart: spend bars and projected abatement line per year.

    Shows a placeholder instead when every future budget is zero.
    """
    fig, ax1 = plt.subplots(figsize=(10, 5))
    years = list(trajectory.years)

    if placeholder and not np.any(trajectory.yearly_spend[1:] > 0):
        ax1.text(0.5, 0.5, placeholder, ha='center', va='center',
                 transform=ax1.transAxes, color='gray')
        ax1.set_axis_off()
        return fig

    ax1.bar(years, trajectory.yearly_spend, color='#10b981', alpha=0.7, label='Spend')
    ax1.set_ylabel('Annual Spend (£)', fontsize=11)
    ax1.yaxis.set_major_formatter(FuncFormatter(lambda v, _: format_currency(v)))

    ax2 = ax1.twinx()
    ax2.plot(years, trajectory.projected_abatement, 'o-', color='#ef4444', linewidth=2,
             label='Abatement')
    ax2.set_ylabel('Annual Abatement (tCO₂e)', fontsize=11)
    ax2.set_ylim(bottom=0)

    handles = ax1.get_legend_handles_labels()[0] + ax2.get_legend_handles_labels()[0]
    ax1.legend(handles=handles, loc='upper right', fontsize=9)
    ax1.set_title(title, fontsize=12)
    ax1.grid(True, axis='y', alpha=0.3)

    plt.tight_layout()
    return fig
