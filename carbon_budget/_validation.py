"""Shared argument checks for the pure core functions."""

import math
from collections.abc import Mapping, Sequence
from numbers import Real

from .errors import InvalidInput
from .types import Intervention


def is_finite_number(value) -> bool:
    """True for real, finite, non-boolean numbers (numpy scalars included)."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value)


def require_finite(value, name: str) -> float:
    if not is_finite_number(value):
        raise InvalidInput(f"{name} must be a finite number, got {value!r}")
    return float(value)


def require_non_negative(value, name: str) -> float:
    value = require_finite(value, name)
    if value < 0:
        raise InvalidInput(f"{name} must be non-negative, got {value!r}")
    return value


def require_identifier(value, name: str = "Intervention id") -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f"{name} must be a non-empty string, got {value!r}")
    return value.strip()


def require_catalog(catalog) -> None:
    if isinstance(catalog, (str, bytes)) or not isinstance(catalog, Sequence):
        raise InvalidInput("Catalog must be a sequence of interventions")
    for entry in catalog:
        if not isinstance(entry, Intervention):
            raise InvalidInput(f"Catalog entries must be Intervention objects, got {entry!r}")


def require_allocations(allocations) -> None:
    if not isinstance(allocations, Mapping):
        raise InvalidInput("Allocations must be a mapping of intervention id to spend")
    for intervention_id, spend in allocations.items():
        if not is_finite_number(spend) or spend < 0:
            raise InvalidInput(
                f"Allocation for {intervention_id!r} must be a non-negative finite number, got {spend!r}"
            )
