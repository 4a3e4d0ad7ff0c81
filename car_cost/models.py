"""
Data models for car cost of ownership calculations.
"""

import json
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, NamedTuple, Optional, Sequence

import numpy as np
import pandas as pd

from .exceptions import CurveParseError

logger = logging.getLogger(__name__)


class ControlPoint(NamedTuple):
    """Known cost at a specific year of ownership."""

    year: int
    cost: float


CostCurve = Sequence[ControlPoint]


def parse_curve(text: str) -> List[ControlPoint]:
    """
    Parse a serialized cost curve.

    Args:
        text: JSON list of [year, cost] pairs, e.g. "[[0, 14000], [10, 8000]]"

    Returns:
        List of ControlPoint in the order they were written

    Raises:
        CurveParseError: if the text is not a list of numeric pairs,
            or a year is negative or fractional
    """
    try:
        raw = json.loads(text)
    except (TypeError, json.JSONDecodeError) as e:
        raise CurveParseError(f"Invalid cost curve JSON: {e}") from e

    if not isinstance(raw, list):
        raise CurveParseError("Cost curve must be a JSON array of [year, cost] pairs")

    points = []
    for pair in raw:
        if (not isinstance(pair, list) or len(pair) != 2
                or not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in pair)):
            raise CurveParseError(f"Invalid control point {pair!r}, expected [year, cost]")
        year, cost = pair
        if year < 0 or (isinstance(year, float) and not year.is_integer()):
            raise CurveParseError(f"Invalid year {year!r}, expected a non-negative whole number")
        points.append(ControlPoint(int(year), cost))
    return points


def dump_curve(points: Optional[CostCurve]) -> Optional[str]:
    """Serialize a cost curve to the JSON form stored in the catalog."""
    if points is None:
        return None
    return json.dumps([[p.year, p.cost] for p in points])


@dataclass(frozen=True)
class OwnershipSettings:
    """
    Complete input to one cost projection.

    Unset fields (None) are filled with defaults by
    calculator.resolve_settings before the projection runs.
    """

    cost: float = 0.0
    down_payment: Optional[float] = None
    loan_rate: Optional[float] = None  # decimal fraction, 0.03 = 3%
    loan_years: Optional[int] = None
    expected_life: Optional[int] = None
    yearly_permit_cost: Optional[float] = None
    insurance_points: Optional[CostCurve] = None
    maintenance_points: Optional[CostCurve] = None

    # Descriptive only, not used by the projection
    name: str = "Custom Car"
    model_id: Optional[int] = None

    def with_overrides(self, **overrides) -> "OwnershipSettings":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


@dataclass
class YearlyBreakdown:
    """Year-by-year result of a cost projection."""

    settings: OwnershipSettings  # resolved settings used for the run
    yearly_costs: List[float] = field(default_factory=list)
    loan_payments: List[float] = field(default_factory=list)
    insurance_costs: List[float] = field(default_factory=list)
    maintenance_costs: List[float] = field(default_factory=list)
    permit_costs: List[float] = field(default_factory=list)
    upfront_cost: float = 0.0
    total: float = 0.0

    @property
    def years(self) -> int:
        return len(self.yearly_costs)

    @property
    def average_yearly_cost(self) -> float:
        """Total lifetime cost (upfront included) spread over the years owned."""
        return self.total / self.years

    @property
    def average_monthly_cost(self) -> float:
        return self.average_yearly_cost / 12

    @property
    def monthly_costs(self) -> List[float]:
        return [cost / 12 for cost in self.yearly_costs]

    @property
    def cumulative_costs(self) -> List[float]:
        """Running total at the end of each year, upfront cost included."""
        return (np.cumsum(self.yearly_costs) + self.upfront_cost).tolist()

    def to_dataframe(self) -> pd.DataFrame:
        """Convert breakdown to pandas DataFrame, one row per year."""
        return pd.DataFrame({
            'Year': range(1, self.years + 1),
            'Loan Payment': self.loan_payments,
            'Insurance': self.insurance_costs,
            'Maintenance': self.maintenance_costs,
            'Permit': self.permit_costs,
            'Total Cost': self.yearly_costs,
            'Monthly Cost': self.monthly_costs,
            'Cumulative Cost': self.cumulative_costs,
        })

    def summary(self) -> Dict:
        """Return summary of the projection."""
        return {
            'Name': self.settings.name,
            'Upfront Cost': self.upfront_cost,
            'Average Yearly Cost': self.average_yearly_cost,
            'Average Monthly Cost': self.average_monthly_cost,
            'Total Cost': self.total,
        }


@dataclass
class CarModel:
    """Vehicle record stored in the catalog."""

    brand: str
    name: str
    trim: str
    cost: float
    yearly_permit_cost: Optional[float] = None
    insurance_points: Optional[str] = None  # JSON, see parse_curve
    maintenance_points: Optional[str] = None
    id: Optional[int] = None

    @property
    def display_name(self) -> str:
        return f"{self.brand} {self.name} {self.trim}"

    def to_settings(self) -> OwnershipSettings:
        """
        Build ownership settings from the stored model data.

        A stored curve that cannot be parsed is left unset so the
        projection falls back to its default curve.
        """
        curves = {}
        for attr, label in (('insurance_points', 'insurance'),
                            ('maintenance_points', 'maintenance')):
            text = getattr(self, attr)
            if not text:
                continue
            try:
                curves[attr] = parse_curve(text)
            except CurveParseError as e:
                logger.warning(
                    "Could not parse %s points from model (ID: %s), using defaults: %s",
                    label, self.id, e,
                )

        return OwnershipSettings(
            cost=self.cost,
            yearly_permit_cost=self.yearly_permit_cost or None,
            name=self.display_name,
            model_id=self.id,
            **curves,
        )
