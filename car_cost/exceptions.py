"""
Exceptions raised by the car cost calculator.
"""


class CarCostError(Exception):
    """Base class for all car cost errors."""


class InvalidSettingsError(CarCostError, ValueError):
    """Ownership settings that cannot produce a meaningful projection."""


class InvalidLifetimeError(InvalidSettingsError):
    """Expected ownership lifetime is zero or negative."""


class InvalidLoanTermError(InvalidSettingsError):
    """Loan term is negative."""


class InvalidRateError(InvalidSettingsError):
    """Loan interest rate is negative."""


class CurveParseError(CarCostError, ValueError):
    """Serialized cost curve is not a JSON list of [year, cost] pairs."""


class ModelNotFoundError(CarCostError, LookupError):
    """No car model is stored under the requested id."""

    def __init__(self, model_id: int):
        super().__init__(f"No car model found with ID {model_id}")
        self.model_id = model_id
