"""Tests for the car-cost command line interface."""
import pandas as pd
import pytest
from click.testing import CliRunner

from car_cost.catalog import VehicleCatalog
from car_cost.cli import cli


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "car_costs.db")


@pytest.fixture
def run(db_path):
    runner = CliRunner()

    def _run(*args):
        return runner.invoke(cli, ["--db", db_path, *args])

    return _run


def _add_rav4(run):
    return run("add", "--brand", "Toyota", "--name", "RAV4", "--trim", "XLE", "--cost", "209990",
               "--permit-cost", "2500", "--insurance", "[[0, 14000], [5, 11000], [15, 6500]]")


def test_add_and_search(run, db_path):
    result = _add_rav4(run)
    assert result.exit_code == 0, result.output
    assert "Car model added with ID: 1" in result.output

    with VehicleCatalog(db_path) as catalog:
        assert catalog.get_model(1).insurance_points == "[[0, 14000], [5, 11000], [15, 6500]]"

    result = run("search", "rav4")
    assert result.exit_code == 0, result.output
    assert "Found 1 matching car models" in result.output
    assert "Toyota" in result.output


def test_search_verbose(run):
    _add_rav4(run)
    result = run("search", "Toyota", "--verbose")
    assert result.exit_code == 0, result.output
    assert "Insurance Points" in result.output
    assert "Year 5:" in result.output


def test_search_query_option_takes_precedence(run):
    _add_rav4(run)
    result = run("search", "Volvo", "--query", "RAV")
    assert result.exit_code == 0, result.output
    assert "Found 1 matching car models" in result.output


def test_search_needs_query(run):
    result = run("search")
    assert result.exit_code == 1
    assert "Missing search query" in result.output


def test_search_no_results(run):
    result = run("search", "Volvo")
    assert result.exit_code == 0
    assert "No car models found" in result.output


def test_add_rejects_bad_curve(run):
    result = run("add", "--brand", "Kia", "--name", "Niro", "--trim", "EX", "--cost", "30000",
                 "--maintenance", "[[0, 1000")
    assert result.exit_code == 1
    assert "Example:" in result.output


def test_simulate_ad_hoc(run):
    result = run("simulate", "--cost", "209990", "--name", "Toyota RAV4", "--down-payment", "50000",
                 "--expected-life", "15")
    assert result.exit_code == 0, result.output
    assert "Yearly Breakdown" in result.output
    assert "Total lifetime cost:" in result.output
    assert "Average yearly cost:" in result.output


def test_simulate_model(run):
    _add_rav4(run)
    result = run("simulate", "--id", "1", "--expected-life", "10")
    assert result.exit_code == 0, result.output
    assert "from model" in result.output
    assert "using defaults" in result.output


def test_simulate_missing_model(run):
    result = run("simulate", "--id", "5")
    assert result.exit_code == 1
    assert "No car model found with ID 5" in result.output


def test_simulate_needs_id_or_cost(run):
    result = run("simulate")
    assert result.exit_code == 1


def test_simulate_invalid_settings(run):
    result = run("simulate", "--cost", "1000", "--expected-life", "0")
    assert result.exit_code == 1
    assert "Expected lifetime" in result.output


def test_simulate_bad_curve(run):
    result = run("simulate", "--cost", "1000", "--insurance", "nope")
    assert result.exit_code == 1


def test_simulate_export_and_plot(run, tmp_path):
    export_path = tmp_path / "breakdown.xlsx"
    plot_path = tmp_path / "overview.png"
    result = run("simulate", "--cost", "100000", "--expected-life", "8",
                 "--export", str(export_path), "--plot", str(plot_path))
    assert result.exit_code == 0, result.output

    df = pd.read_excel(export_path)
    assert len(df) == 8
    assert "Total Cost" in df.columns
    assert plot_path.stat().st_size > 0


def test_simulate_plot_yearly(run, tmp_path):
    plot_path = tmp_path / "yearly.png"
    result = run("simulate", "--cost", "100000", "--expected-life", "6",
                 "--plot-yearly", str(plot_path))
    assert result.exit_code == 0, result.output
    assert plot_path.stat().st_size > 0


def test_import(run, db_path, tmp_path):
    path = tmp_path / "models.xlsx"
    pd.DataFrame({
        "brand": ["Toyota", "Tesla"],
        "name": ["RAV4", "Model 3"],
        "trim": ["XLE", "LR"],
        "cost": [209990, 489990],
    }).to_excel(path, index=False, sheet_name="Models")

    result = run("import", str(path), "--sheet", "Models")
    assert result.exit_code == 0, result.output
    assert "Imported 2 car models" in result.output

    with VehicleCatalog(db_path) as catalog:
        assert len(catalog.list_models()) == 2


def test_import_bad_sheet(run, tmp_path):
    path = tmp_path / "models.xlsx"
    pd.DataFrame({"brand": ["Toyota"]}).to_excel(path, index=False)
    result = run("import", str(path))
    assert result.exit_code == 1
