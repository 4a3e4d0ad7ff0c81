"""
Car Cost - Total cost of owning a vehicle.

A Python package for projecting the multi-year cost of owning a car,
combining loan financing, insurance, registration and maintenance costs
that vary with vehicle age.
"""

from .calculator import CostCalculator, project
from .catalog import VehicleCatalog
from .interpolation import interpolate
from .models import CarModel, ControlPoint, OwnershipSettings, YearlyBreakdown

__version__ = "0.1.0"
__all__ = [
    "CostCalculator",
    "project",
    "interpolate",
    "VehicleCatalog",
    "CarModel",
    "ControlPoint",
    "OwnershipSettings",
    "YearlyBreakdown",
]
