"""
Intervention catalog: reference data, validation and loading.

The reference catalog holds 15 interventions, three per category. Custom
catalogs can be built from records, a pandas DataFrame or a CSV file with
columns ``id, category, name, cost_per_tonne, max_tonnes_per_year``.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd

from ._validation import is_finite_number
from .errors import CatalogIntegrityError, InvalidInput
from .types import Category, Intervention

logger = logging.getLogger(__name__)

CATALOG_COLUMNS = ["id", "category", "name", "cost_per_tonne", "max_tonnes_per_year"]


def _coerce_category(value: Any) -> Optional[Category]:
    if isinstance(value, Category):
        return value
    try:
        return Category(value)
    except ValueError:
        return None


def validate_intervention(entry: Union[Intervention, Mapping[str, Any]]) -> List[str]:
    """
    Checks a catalog entry against the catalog invariants.

    Args:
        entry: An Intervention or a mapping with the catalog column names

    Returns:
        List of problems; empty when the entry is valid.
    """
    if isinstance(entry, Intervention):
        fields = {col: getattr(entry, col) for col in CATALOG_COLUMNS}
    elif isinstance(entry, Mapping):
        fields = dict(entry)
    else:
        return ["Intervention must be a mapping or Intervention"]

    errors = []
    ident = fields.get("id")
    if not isinstance(ident, str) or not ident.strip():
        errors.append("Intervention must have a non-empty string id")

    name = fields.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append("Intervention must have a non-empty string name")

    if _coerce_category(fields.get("category")) is None:
        errors.append("Intervention must have a valid category")

    cost = fields.get("cost_per_tonne")
    if not is_finite_number(cost) or cost <= 0:
        errors.append("Intervention cost_per_tonne must be a positive finite number")

    ceiling = fields.get("max_tonnes_per_year")
    if not is_finite_number(ceiling) or ceiling <= 0:
        errors.append("Intervention max_tonnes_per_year must be a positive finite number")

    return errors


def make_intervention(entry: Union[Intervention, Mapping[str, Any]]) -> Intervention:
    """
    Builds a validated Intervention.

    Raises:
        CatalogIntegrityError: If the entry violates any catalog invariant.
    """
    problems = validate_intervention(entry)
    if problems:
        ident = entry.id if isinstance(entry, Intervention) else (
            entry.get("id") if isinstance(entry, Mapping) else None
        )
        raise CatalogIntegrityError(ident if isinstance(ident, str) else None, problems)
    if isinstance(entry, Intervention):
        return entry
    return Intervention(
        id=entry["id"].strip(),
        category=_coerce_category(entry["category"]),
        name=entry["name"].strip(),
        cost_per_tonne=float(entry["cost_per_tonne"]),
        max_tonnes_per_year=float(entry["max_tonnes_per_year"]),
    )


def load_catalog(
    entries: Iterable[Union[Intervention, Mapping[str, Any]]],
    strict: bool = True,
) -> List[Intervention]:
    """
    Validates entries and returns them as a catalog, preserving order.

    Args:
        entries: Interventions or records with the catalog columns
        strict: If True, the first invalid or duplicate entry rejects the whole
            load. If False, offending entries are dropped with a warning.

    Returns:
        List[Intervention]: The loaded catalog
    """
    catalog: List[Intervention] = []
    seen = set()
    for entry in entries:
        try:
            intervention = make_intervention(entry)
            if intervention.id in seen:
                raise CatalogIntegrityError(intervention.id, ["Duplicate intervention id"])
        except CatalogIntegrityError as e:
            if strict:
                raise
            logger.warning("Dropping catalog entry: %s", e)
            continue
        seen.add(intervention.id)
        catalog.append(intervention)

    logger.info("Loaded catalog with %d interventions", len(catalog))
    return catalog


def catalog_from_frame(df: pd.DataFrame, strict: bool = True) -> List[Intervention]:
    """Loads a catalog from a DataFrame with the catalog columns."""
    missing = [col for col in CATALOG_COLUMNS if col not in df.columns]
    if missing:
        raise InvalidInput(f"Catalog data is missing columns: {', '.join(missing)}")
    records = df[CATALOG_COLUMNS].to_dict(orient="records")
    return load_catalog(records, strict=strict)


def read_catalog_csv(path, strict: bool = True) -> List[Intervention]:
    """Loads a catalog from a CSV file (path or file-like object)."""
    df = pd.read_csv(path, dtype={"id": str, "category": str, "name": str})
    return catalog_from_frame(df, strict=strict)


def catalog_to_frame(catalog: Sequence[Intervention]) -> pd.DataFrame:
    """Tabular view of a catalog, one row per intervention."""
    return pd.DataFrame(
        [
            {
                "id": i.id,
                "category": i.category.value,
                "name": i.name,
                "cost_per_tonne": i.cost_per_tonne,
                "max_tonnes_per_year": i.max_tonnes_per_year,
            }
            for i in catalog
        ],
        columns=CATALOG_COLUMNS,
    )


def interventions_by_category(catalog: Sequence[Intervention], category: Category) -> List[Intervention]:
    return [i for i in catalog if i.category == category]


def get_intervention(catalog: Sequence[Intervention], intervention_id: str) -> Optional[Intervention]:
    for intervention in catalog:
        if intervention.id == intervention_id:
            return intervention
    return None


def catalog_categories(catalog: Sequence[Intervention]) -> List[Category]:
    """Categories present in the catalog, in first-seen order."""
    seen: Dict[Category, None] = {}
    for intervention in catalog:
        seen.setdefault(intervention.category, None)
    return list(seen)


def total_max_reduction(catalog: Sequence[Intervention]) -> float:
    """Sum of abatement ceilings across the catalog (tCO₂e/year)."""
    return sum(i.max_tonnes_per_year for i in catalog)


def average_cost_per_tonne(catalog: Sequence[Intervention]) -> float:
    """
    Ceiling-weighted average cost per tonne.

    Equivalent to the cost of saturating every intervention divided by the
    total reachable abatement. Returns 0 for an empty catalog.
    """
    total = total_max_reduction(catalog)
    if total <= 0:
        return 0.0
    return sum(i.saturation_spend for i in catalog) / total


_REFERENCE_DATA = [
    # Electricity
    ("elec-001", Category.ELECTRICITY, "LED Lighting Retrofit", 45, 250),
    ("elec-002", Category.ELECTRICITY, "Building Management System (BMS)", 85, 420),
    ("elec-003", Category.ELECTRICITY, "Solar PV Installation", 120, 650),
    # Gas & heating
    ("heat-001", Category.GAS_HEATING, "Building Fabric Improvements", 65, 380),
    ("heat-002", Category.GAS_HEATING, "Heating Controls Upgrade", 35, 180),
    ("heat-003", Category.GAS_HEATING, "Heat Pump Pilot Project", 160, 900),
    # Water
    ("water-001", Category.WATER, "Low-Flow Fixtures", 55, 150),
    ("water-002", Category.WATER, "Rainwater Harvesting", 95, 220),
    ("water-003", Category.WATER, "Smart Water Meters", 70, 180),
    # Waste
    ("waste-001", Category.WASTE, "Waste Segregation Program", 25, 300),
    ("waste-002", Category.WASTE, "Food Waste Reduction", 40, 200),
    ("waste-003", Category.WASTE, "Circular Economy Initiative", 80, 350),
    # Travel
    ("travel-001", Category.TRAVEL, "Video Conferencing Systems", 50, 450),
    ("travel-002", Category.TRAVEL, "Electric Vehicle Fleet", 140, 600),
    ("travel-003", Category.TRAVEL, "Public Transport Incentives", 30, 280),
]

INTERVENTIONS_CATALOG = tuple(
    load_catalog(
        dict(zip(CATALOG_COLUMNS, row)) for row in _REFERENCE_DATA
    )
)
