"""
Session state for budget planning.

BudgetState is an immutable snapshot. It changes only through the operation
types below: ``reduce_state(state, op)`` returns a new snapshot, and
BudgetStore holds the current one for the presentation layer.
"""

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional, Sequence, Tuple, Union

from ._validation import is_finite_number, require_identifier
from .allocation import can_distribute, distribute_by_roi, remaining_budget
from .catalog import INTERVENTIONS_CATALOG, interventions_by_category
from .errors import InvalidInput, ValidationRejected
from .metrics import compute_metrics, spend_of, target_progress
from .projection import FUTURE_YEARS, ProjectionStrategy, project_years
from .ranking import group_by_category, rank_by_effectiveness, summarise_category
from .types import (
    AllocationRow,
    Category,
    CategoryBreakdown,
    CategorySummary,
    Intervention,
    PortfolioMetrics,
    Trajectory,
)

logger = logging.getLogger(__name__)

DEFAULT_TOTAL_BUDGET = 500_000.0
DEFAULT_TARGET_TONNES = 3_000.0
DEFAULT_FUTURE_BUDGETS = (0.0,) * FUTURE_YEARS


def _frozen_allocations(allocations: Mapping[str, float]) -> Mapping[str, float]:
    return MappingProxyType(dict(allocations))


@dataclass(frozen=True)
class BudgetState:
    """
    Snapshot of the planning session.

    Attributes:
        total_budget: Budget available this year (£)
        target_tonnes: Annual abatement target (tCO₂e)
        future_budgets: Budgets for years 2-5 (£), used by the projection
        allocations: Read-only intervention id -> spend (£). Zero spend is
            never stored; read through ``spend_of``.
    """
    total_budget: float = DEFAULT_TOTAL_BUDGET
    target_tonnes: float = DEFAULT_TARGET_TONNES
    future_budgets: Tuple[float, ...] = DEFAULT_FUTURE_BUDGETS
    allocations: Mapping[str, float] = field(default_factory=lambda: _frozen_allocations({}))

    def spend_of(self, intervention_id: str) -> float:
        return spend_of(self.allocations, intervention_id)

    @property
    def allocated_total(self) -> float:
        return sum(self.allocations.values())


# Operations

@dataclass(frozen=True)
class SetTotalBudget:
    amount: float


@dataclass(frozen=True)
class SetTarget:
    tonnes: float


@dataclass(frozen=True)
class SetFutureBudgets:
    budgets: Sequence[float]


@dataclass(frozen=True)
class SetAllocation:
    intervention_id: str
    spend: float


@dataclass(frozen=True)
class ResetAllAllocations:
    pass


Operation = Union[SetTotalBudget, SetTarget, SetFutureBudgets, SetAllocation, ResetAllAllocations]


def _non_negative_error(value, label: str) -> Optional[str]:
    if not is_finite_number(value) or value < 0:
        return f"{label} must be a non-negative finite number"
    return None


def validate_operation(op: Operation) -> Optional[str]:
    """Returns the reason an operation would be rejected, or None if it is valid."""
    if isinstance(op, SetTotalBudget):
        return _non_negative_error(op.amount, "Total budget")
    if isinstance(op, SetTarget):
        return _non_negative_error(op.tonnes, "Target reduction")
    if isinstance(op, SetFutureBudgets):
        budgets = op.budgets
        if isinstance(budgets, (str, bytes)) or not isinstance(budgets, Sequence) or len(budgets) != FUTURE_YEARS:
            return f"Future budgets must be a sequence of exactly {FUTURE_YEARS} numbers"
        for index, budget in enumerate(budgets):
            error = _non_negative_error(budget, f"Future budget at index {index}")
            if error:
                return error
        return None
    if isinstance(op, SetAllocation):
        try:
            intervention_id = require_identifier(op.intervention_id)
        except InvalidInput as exc:
            return str(exc)
        return _non_negative_error(op.spend, f"Allocation for {intervention_id}")
    if isinstance(op, ResetAllAllocations):
        return None
    return f"Unknown operation {op!r}"


def reduce_state(state: BudgetState, op: Operation) -> BudgetState:
    """
    Applies one operation and returns the new snapshot.

    Raises:
        ValidationRejected: If the operation fails its precondition. The
            input state is never modified.
    """
    error = validate_operation(op)
    if error:
        raise ValidationRejected(op, error)

    if isinstance(op, SetTotalBudget):
        return replace(state, total_budget=float(op.amount))
    if isinstance(op, SetTarget):
        return replace(state, target_tonnes=float(op.tonnes))
    if isinstance(op, SetFutureBudgets):
        return replace(state, future_budgets=tuple(float(b) for b in op.budgets))
    if isinstance(op, SetAllocation):
        intervention_id = require_identifier(op.intervention_id)
        allocations = dict(state.allocations)
        if op.spend == 0:
            allocations.pop(intervention_id, None)
        else:
            allocations[intervention_id] = float(op.spend)
        return replace(state, allocations=_frozen_allocations(allocations))
    # ResetAllAllocations
    return replace(state, allocations=_frozen_allocations({}))


Listener = Callable[[BudgetState], None]


class BudgetStore:
    """
    Holds the current BudgetState and applies operations to it.

    Rejected operations are logged and leave the state unchanged; they are
    never raised to the caller. Metrics, rankings and breakdowns are
    recomputed from the current snapshot on every read.

    Example:
        >>> store = BudgetStore()
        >>> store.set_allocation("waste-001", 5000)
        True
        >>> store.metrics().portfolio_abatement
        200.0
        >>> store.set_total_budget(-1)
        False
    """

    def __init__(
        self,
        catalog: Sequence[Intervention] = INTERVENTIONS_CATALOG,
        initial_state: Optional[BudgetState] = None,
    ):
        self.catalog = tuple(catalog)
        self._state = initial_state if initial_state is not None else BudgetState()
        self._listeners: List[Listener] = []
        self.last_error: Optional[str] = None

    @property
    def state(self) -> BudgetState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers a callback run after each accepted change; returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def dispatch(self, op: Operation) -> bool:
        """
        Applies an operation to the current state.

        Returns:
            bool: True if the state was updated, False if the operation was
            rejected (the reason is kept in ``last_error``).
        """
        try:
            new_state = reduce_state(self._state, op)
        except ValidationRejected as e:
            logger.warning("Rejected %s: %s", type(op).__name__, e.reason)
            self.last_error = e.reason
            return False

        self._state = new_state
        self.last_error = None
        for listener in list(self._listeners):
            listener(new_state)
        return True

    # Mutators

    def set_total_budget(self, amount: float) -> bool:
        return self.dispatch(SetTotalBudget(amount))

    def set_target(self, tonnes: float) -> bool:
        return self.dispatch(SetTarget(tonnes))

    def set_future_budgets(self, budgets: Sequence[float]) -> bool:
        return self.dispatch(SetFutureBudgets(budgets))

    def set_allocation(self, intervention_id: str, spend: float) -> bool:
        """Sets one intervention's spend; a spend of 0 clears the entry."""
        return self.dispatch(SetAllocation(intervention_id, spend))

    def reset_all_allocations(self) -> bool:
        return self.dispatch(ResetAllAllocations())

    def distribute_by_roi(self, category: Category) -> dict:
        """
        Runs the ROI fill for one category against the latest state.

        Returns:
            dict: The applied updates, intervention id -> new spend. Empty
            when there is nothing to fill.
        """
        interventions = interventions_by_category(self.catalog, category)
        state = self._state
        if not can_distribute(interventions, state.allocations, state.total_budget):
            logger.info("Nothing to distribute for %s", category)
            return {}

        remaining = remaining_budget(state.total_budget, state.allocations)
        updates = distribute_by_roi(interventions, state.allocations, remaining)
        for intervention_id, spend in updates.items():
            self.set_allocation(intervention_id, spend)
        logger.info(
            "Distributed %.2f across %d %s interventions",
            sum(spend - state.spend_of(i) for i, spend in updates.items()),
            len(updates),
            category,
        )
        return updates

    # Derived views

    def metrics(self) -> PortfolioMetrics:
        s = self._state
        return compute_metrics(self.catalog, s.allocations, s.total_budget, s.target_tonnes)

    def ranking(self) -> List[AllocationRow]:
        return rank_by_effectiveness(self.catalog, self._state.allocations)

    def breakdown(self) -> List[CategoryBreakdown]:
        return group_by_category(self.catalog, self._state.allocations)

    def category_summary(self, category: Category) -> CategorySummary:
        return summarise_category(self.catalog, self._state.allocations, category, self._state.total_budget)

    def remaining_budget(self) -> float:
        return remaining_budget(self._state.total_budget, self._state.allocations)

    def can_distribute(self, category: Category) -> bool:
        interventions = interventions_by_category(self.catalog, category)
        return can_distribute(interventions, self._state.allocations, self._state.total_budget)

    def target_progress(self) -> float:
        return target_progress(self.metrics().portfolio_abatement, self._state.target_tonnes)

    def trajectory(self, strategy: ProjectionStrategy = project_years) -> Trajectory:
        s = self._state
        return strategy(self.catalog, s.allocations, s.future_budgets)
