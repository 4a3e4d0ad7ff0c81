"""Tests for models: curve serialization and catalog record conversion."""
import logging

import pytest

from car_cost.exceptions import CurveParseError
from car_cost.models import CarModel, ControlPoint, OwnershipSettings, dump_curve, parse_curve


def test_parse_curve():
    points = parse_curve("[[0, 14000], [5, 11000.5]]")
    assert points == [ControlPoint(0, 14000), ControlPoint(5, 11000.5)]
    assert points[1].year == 5
    assert points[1].cost == 11000.5


def test_parse_empty_curve():
    assert parse_curve("[]") == []


def test_parse_whole_float_year():
    assert parse_curve("[[5.0, 100]]") == [ControlPoint(5, 100)]
    assert type(parse_curve("[[5.0, 100]]")[0].year) is int


@pytest.mark.parametrize("text", [
    "not json",
    '{"0": 14000}',
    "[[0, 14000, 3]]",
    "[[0]]",
    "[[2.5, 100]]",
    "[[-1, 100]]",
    '[["0", 14000]]',
    "[[true, 14000]]",
    "[0, 14000]",
])
def test_parse_malformed_curve(text):
    with pytest.raises(CurveParseError):
        parse_curve(text)


def test_dump_curve():
    assert dump_curve([ControlPoint(0, 1000), ControlPoint(5, 2000)]) == "[[0, 1000], [5, 2000]]"
    assert dump_curve(None) is None
    assert parse_curve(dump_curve([ControlPoint(3, 42.5)])) == [ControlPoint(3, 42.5)]


def test_with_overrides_skips_unset():
    base = OwnershipSettings(cost=1000, loan_years=5, name="Test")
    updated = base.with_overrides(loan_years=None, expected_life=8)
    assert updated.loan_years == 5
    assert updated.expected_life == 8
    assert base.expected_life is None


def test_model_to_settings(rav4):
    rav4.id = 7
    settings = rav4.to_settings()
    assert settings.name == "Toyota RAV4 XLE"
    assert settings.model_id == 7
    assert settings.cost == 209990
    assert settings.yearly_permit_cost == 2500
    assert settings.insurance_points[1] == ControlPoint(5, 11000)
    assert len(settings.maintenance_points) == 4
    assert settings.down_payment is None


def test_model_without_curves_leaves_defaults():
    settings = CarModel(brand="Kia", name="Niro", trim="EX", cost=30000).to_settings()
    assert settings.insurance_points is None
    assert settings.maintenance_points is None
    assert settings.yearly_permit_cost is None


def test_malformed_stored_curve_falls_back_with_warning(caplog):
    model = CarModel(brand="Kia", name="Niro", trim="EX", cost=30000, id=3,
                     insurance_points="[[0, 14000",
                     maintenance_points="[[0, 500]]")
    with caplog.at_level(logging.WARNING, logger="car_cost.models"):
        settings = model.to_settings()

    assert settings.insurance_points is None
    assert settings.maintenance_points == [ControlPoint(0, 500)]
    assert "insurance" in caplog.text
    assert "ID: 3" in caplog.text
