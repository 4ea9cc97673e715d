"""
Carbon Budget Planner: interactive allocation dashboard

Allocates this year's budget across the intervention catalog and shows:
- Portfolio KPIs (spend, abatement, cost per tonne, target progress)
- Marginal Abatement Cost Curve of funded interventions
- Budget split by category
- Abatement against the annual target
- 5-year spend and abatement trajectory
"""

import sys
import os

# Add the current directory to path for Streamlit Cloud deployment
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import logging

import streamlit as st
import pandas as pd
import matplotlib.pyplot as plt

from carbon_budget import (
    INTERVENTIONS_CATALOG,
    BudgetStore,
    CatalogIntegrityError,
    efficiency_score,
    format_currency,
    format_percentage,
    format_tonnes,
    interventions_by_category,
    read_catalog_csv,
)
from carbon_budget.catalog import catalog_categories, catalog_to_frame
from carbon_budget.analysis import (
    plot_macc,
    plot_budget_by_category,
    plot_abatement_vs_target,
    plot_trajectory,
)

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

st.set_page_config(page_title="Carbon Budget Planner", layout="wide")

st.title("Carbon Budget Planner")
st.markdown("""
Allocate this year's budget across carbon-reduction interventions. Abatement grows
linearly with spend at each intervention's £/tCO₂e until its annual ceiling is reached.
""")

# =============================================================================
# Sidebar Configuration
# =============================================================================
st.sidebar.header("Configuration")

data_source = st.sidebar.radio("Catalog", ["Reference Catalog", "Upload CSV"])

catalog = INTERVENTIONS_CATALOG
if data_source == "Upload CSV":
    uploaded_file = st.sidebar.file_uploader("Upload Intervention Catalog (CSV)", type=["csv"])
    if uploaded_file is not None:
        try:
            catalog = tuple(read_catalog_csv(uploaded_file))
        except (CatalogIntegrityError, ValueError) as e:
            st.sidebar.error(f"Catalog rejected: {e}")
            catalog = INTERVENTIONS_CATALOG

# One store per session and catalog
if "store" not in st.session_state or st.session_state.store.catalog != tuple(catalog):
    st.session_state.store = BudgetStore(catalog=catalog)
store: BudgetStore = st.session_state.store


def _apply(ok: bool) -> None:
    if not ok:
        st.sidebar.warning(f"Change not applied: {store.last_error}")


st.sidebar.subheader("This Year")
budget = st.sidebar.number_input("Total Budget (£)", value=float(store.state.total_budget), step=10000.0)
if budget != store.state.total_budget:
    _apply(store.set_total_budget(budget))

target = st.sidebar.number_input("Target Reduction (tCO₂e)", value=float(store.state.target_tonnes), step=100.0)
if target != store.state.target_tonnes:
    _apply(store.set_target(target))

with st.sidebar.expander("Future Budgets (Years 2–5)"):
    future = [
        st.number_input(f"Year {k + 2} (£)", value=float(b), step=10000.0, key=f"future_{k}")
        for k, b in enumerate(store.state.future_budgets)
    ]
    if tuple(future) != store.state.future_budgets:
        _apply(store.set_future_budgets(future))


def _alloc_key(intervention_id: str) -> str:
    return f"alloc_{intervention_id}"


def _reset_allocations() -> None:
    store.reset_all_allocations()
    for intervention in store.catalog:
        st.session_state[_alloc_key(intervention.id)] = 0.0


def _fill_roi(category) -> None:
    updates = store.distribute_by_roi(category)
    for intervention_id, spend in updates.items():
        st.session_state[_alloc_key(intervention_id)] = float(spend)


st.sidebar.button("Reset All Allocations", on_click=_reset_allocations)

# =============================================================================
# Allocation Inputs
# =============================================================================
st.write("### Allocations")
tabs = st.tabs([c.value for c in catalog_categories(store.catalog)])

for tab, category in zip(tabs, catalog_categories(store.catalog)):
    with tab:
        for intervention in interventions_by_category(store.catalog, category):
            current = store.state.spend_of(intervention.id)
            key = _alloc_key(intervention.id)
            if key not in st.session_state:
                st.session_state[key] = float(current)
            spend = st.number_input(
                f"{intervention.name} (£{intervention.cost_per_tonne:,.0f}/t, max "
                f"{format_tonnes(intervention.max_tonnes_per_year)})",
                min_value=0.0,
                step=1000.0,
                key=key,
            )
            if spend != current:
                _apply(store.set_allocation(intervention.id, float(spend)))

        summary = store.category_summary(category)
        col1, col2, col3 = st.columns(3)
        col1.metric("Subtotal", format_currency(summary.subtotal))
        col2.metric("Abatement", format_tonnes(summary.abatement))
        col3.metric("Share of Budget", format_percentage(summary.percent_of_budget))

        st.button(
            "Fill ROI",
            key=f"fill_{category.name}",
            disabled=not store.can_distribute(category),
            on_click=_fill_roi,
            args=(category,),
        )

# =============================================================================
# KPIs
# =============================================================================
metrics = store.metrics()
remaining = store.remaining_budget()

st.write("### Portfolio")
k1, k2, k3, k4, k5 = st.columns(5)
k1.metric("Portfolio Spend", format_currency(metrics.portfolio_spend),
          f"{format_currency(abs(remaining))} {'over budget' if remaining < 0 else 'remaining'}")
k2.metric("Abatement", format_tonnes(metrics.portfolio_abatement),
          f"{store.target_progress():.0f}% of target")
k3.metric("Cost per Tonne",
          format_currency(metrics.portfolio_cost_per_tonne) if metrics.portfolio_abatement > 0 else "–",
          efficiency_score(metrics.portfolio_cost_per_tonne).value)
k4.metric("Gap to Target", format_tonnes(metrics.gap_to_target))
k5.metric("Budget Utilisation", format_percentage(metrics.budget_utilisation_percent))

# =============================================================================
# Charts
# =============================================================================
col_left, col_right = st.columns([2, 1])

with col_left:
    fig = plot_macc(store.ranking())
    st.pyplot(fig)
    plt.close(fig)

with col_right:
    fig = plot_budget_by_category(store.breakdown())
    st.pyplot(fig)
    plt.close(fig)

fig = plot_abatement_vs_target(metrics.portfolio_abatement, store.state.target_tonnes)
st.pyplot(fig)
plt.close(fig)

fig = plot_trajectory(store.trajectory())
st.pyplot(fig)
plt.close(fig)

with st.expander("Funded Interventions (MACC order)"):
    rows = store.ranking()
    if rows:
        st.dataframe(pd.DataFrame([
            {
                "Intervention": r.intervention_id,
                "Category": r.category.value,
                "Spend": format_currency(r.spend),
                "Abatement": format_tonnes(r.abatement),
                "£/tCO₂e": r.cost_per_tonne,
            }
            for r in rows
        ]), use_container_width=True)
    else:
        st.info("No interventions funded yet.")

with st.expander("View Catalog"):
    st.dataframe(catalog_to_frame(store.catalog), use_container_width=True)
