import matplotlib

# Headless backend for chart tests
matplotlib.use("Agg")

import pytest

from car_cost.catalog import VehicleCatalog
from car_cost.models import CarModel


@pytest.fixture
def catalog(tmp_path):
    with VehicleCatalog(tmp_path / "car_costs.db") as cat:
        yield cat


@pytest.fixture
def rav4():
    return CarModel(
        brand="Toyota",
        name="RAV4",
        trim="XLE",
        cost=209990,
        yearly_permit_cost=2500,
        insurance_points="[[0, 14000], [5, 11000], [15, 6500]]",
        maintenance_points="[[0, 1000], [5, 2000], [10, 3500], [15, 5000]]",
    )
