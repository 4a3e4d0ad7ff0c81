"""
Car Cost Calculator - Core projection engine.
Combines loan financing, insurance, maintenance and registration costs
into a year-by-year cost of ownership.
"""

import logging
from dataclasses import replace

from .exceptions import (
    InvalidLifetimeError,
    InvalidLoanTermError,
    InvalidRateError,
    ModelNotFoundError,
)
from .interpolation import interpolate
from .models import ControlPoint, OwnershipSettings, YearlyBreakdown

logger = logging.getLogger(__name__)

DEFAULT_DOWN_PAYMENT = 0.0
DEFAULT_LOAN_RATE = 0.03
DEFAULT_LOAN_YEARS = 4
DEFAULT_EXPECTED_LIFE = 20
DEFAULT_YEARLY_PERMIT_COST = 2643.0
DEFAULT_INSURANCE_START = 14000.0
DEFAULT_INSURANCE_END = 6500.0
DEFAULT_MAINTENANCE_POINTS = (
    ControlPoint(0, 1000.0),
    ControlPoint(5, 2000.0),
    ControlPoint(10, 3500.0),
    ControlPoint(15, 5000.0),
)


def calculate_monthly_payment(principal: float, annual_rate: float, years: int) -> float:
    """Calculate monthly loan payment using PMT formula.

    PMT = PV × r × (1+r)^n / ((1+r)^n - 1)
    where:
        PV = principal (loan amount)
        r = monthly interest rate
        n = number of monthly payments

    A zero rate repays the principal in equal instalments.
    """
    num_payments = years * 12
    if annual_rate == 0:
        return principal / num_payments

    monthly_rate = annual_rate / 12
    growth = (1 + monthly_rate) ** num_payments

    return principal * monthly_rate * growth / (growth - 1)


def calculate_loan_payments(principal: float, annual_rate: float, years: int) -> float:
    """Total amount paid over the loan term."""
    if years == 0:
        return 0.0
    if annual_rate == 0:
        return principal
    return calculate_monthly_payment(principal, annual_rate, years) * 12 * years


def default_insurance_points(expected_life: int):
    """Insurance falling linearly from first to last year of ownership."""
    return (
        ControlPoint(0, DEFAULT_INSURANCE_START),
        ControlPoint(expected_life - 1, DEFAULT_INSURANCE_END),
    )


def resolve_settings(settings: OwnershipSettings) -> OwnershipSettings:
    """
    Fill unset fields with defaults.

    Scalars are resolved first, the default insurance curve depends on
    the resolved expected life.
    """
    scalars = replace(
        settings,
        down_payment=_default(settings.down_payment, DEFAULT_DOWN_PAYMENT),
        loan_rate=_default(settings.loan_rate, DEFAULT_LOAN_RATE),
        loan_years=_default(settings.loan_years, DEFAULT_LOAN_YEARS),
        expected_life=_default(settings.expected_life, DEFAULT_EXPECTED_LIFE),
        yearly_permit_cost=_default(settings.yearly_permit_cost, DEFAULT_YEARLY_PERMIT_COST),
    )

    return replace(
        scalars,
        insurance_points=_default(
            scalars.insurance_points, default_insurance_points(scalars.expected_life)
        ),
        maintenance_points=_default(scalars.maintenance_points, DEFAULT_MAINTENANCE_POINTS),
    )


def _default(value, default):
    return default if value is None else value


def validate_settings(settings: OwnershipSettings) -> None:
    """
    Reject settings that cannot produce a meaningful projection.

    Raises:
        InvalidLifetimeError: expected_life <= 0
        InvalidLoanTermError: loan_years < 0
        InvalidRateError: loan_rate < 0
    """
    if settings.expected_life <= 0:
        raise InvalidLifetimeError(
            f"Expected lifetime must be positive, got {settings.expected_life}"
        )
    if settings.loan_years < 0:
        raise InvalidLoanTermError(
            f"Loan term cannot be negative, got {settings.loan_years}"
        )
    if settings.loan_rate < 0:
        raise InvalidRateError(
            f"Loan rate cannot be negative, got {settings.loan_rate}"
        )


def project(settings: OwnershipSettings) -> YearlyBreakdown:
    """
    Project the cost of owning a vehicle over its expected lifetime.

    Args:
        settings: OwnershipSettings, unset fields take their defaults

    Returns:
        YearlyBreakdown with one entry per year of ownership
    """
    s = resolve_settings(settings)
    validate_settings(s)

    principal = s.cost - s.down_payment
    upfront_cost = s.down_payment

    if s.loan_years == 0:
        # No loan term, no loan payments are charged
        yearly_loan_payment = 0.0
    else:
        total_loan_payment = calculate_loan_payments(principal, s.loan_rate, s.loan_years)
        yearly_loan_payment = total_loan_payment / s.loan_years

    logger.debug(
        "Projecting %s: principal=%.2f yearly_loan_payment=%.2f over %d years",
        s.name, principal, yearly_loan_payment, s.expected_life,
    )

    insurance_costs = interpolate(s.insurance_points, s.expected_life)
    maintenance_costs = interpolate(s.maintenance_points, s.expected_life)

    breakdown = YearlyBreakdown(settings=s, upfront_cost=upfront_cost)
    for year in range(s.expected_life):
        loan_payment = yearly_loan_payment if year < s.loan_years else 0.0

        year_cost = insurance_costs[year] + s.yearly_permit_cost + maintenance_costs[year]
        year_cost += loan_payment

        breakdown.loan_payments.append(loan_payment)
        breakdown.insurance_costs.append(insurance_costs[year])
        breakdown.maintenance_costs.append(maintenance_costs[year])
        breakdown.permit_costs.append(s.yearly_permit_cost)
        breakdown.yearly_costs.append(year_cost)

    breakdown.total = sum(breakdown.yearly_costs) + upfront_cost
    return breakdown


class CostCalculator:
    """Calculate cost of ownership for ad hoc or catalog vehicles."""

    def __init__(self, catalog=None):
        """
        Initialize calculator.

        Args:
            catalog: Open VehicleCatalog, needed only for simulate_model
        """
        self.catalog = catalog

    def simulate(self, settings: OwnershipSettings) -> YearlyBreakdown:
        return project(settings)

    def simulate_model(self, model_id: int, **overrides) -> YearlyBreakdown:
        """
        Project costs for a stored vehicle.

        Args:
            model_id: Catalog id of the vehicle
            **overrides: OwnershipSettings fields that replace model data

        Returns:
            YearlyBreakdown for the vehicle

        Raises:
            ModelNotFoundError: if no model is stored under model_id
        """
        return project(self.model_settings(model_id, **overrides))

    def model_settings(self, model_id: int, **overrides) -> OwnershipSettings:
        """Load model data and apply caller overrides on top of it."""
        if self.catalog is None:
            raise RuntimeError("No vehicle catalog attached to calculator")

        model = self.catalog.get_model(model_id)
        if model is None:
            raise ModelNotFoundError(model_id)

        return model.to_settings().with_overrides(**overrides)

