from dataclasses import replace

import pandas as pd
import pytest

from etruck_tco.calculator import TCOCalculator, compute_tco
from etruck_tco.constants import USAGE_PROFILES, VEHICLE_DATA
from etruck_tco.exceptions import UnknownReferenceKeyError
from etruck_tco.loader import VEHICLE_SHEET, PROFILE_SHEET, DataLoader, export_reference_workbook
from etruck_tco.session import CalculatorSession


@pytest.fixture
def workbook(tmp_path):
    return export_reference_workbook(tmp_path / "reference.xlsx")


def test_exported_tables_load_unchanged(workbook):
    loader = DataLoader(workbook)
    assert dict(loader.vehicles) == dict(VEHICLE_DATA)
    assert dict(loader.usage_profiles) == dict(USAGE_PROFILES)
    assert loader.list_vehicle_classes() == ["N1", "N2", "N3"]


def test_calculator_from_workbook(workbook, default_inputs):
    calculator = TCOCalculator.from_excel(workbook)
    assert calculator.calculate(default_inputs) == compute_tco(default_inputs)


def test_unknown_class_in_loaded_table(workbook):
    with pytest.raises(UnknownReferenceKeyError):
        DataLoader(workbook).get_vehicle("N7")


def test_missing_workbook(tmp_path):
    with pytest.raises(FileNotFoundError):
        DataLoader(tmp_path / "missing.xlsx")


def test_missing_columns(tmp_path):
    path = tmp_path / "broken.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame({"Vehicle Class": ["N1"], "Diesel Purchase": [45000]}).to_excel(
            writer, sheet_name=VEHICLE_SHEET, index=False)
        pd.DataFrame({"Profile": ["kep"]}).to_excel(writer, sheet_name=PROFILE_SHEET, index=False)
    with pytest.raises(ValueError, match="Missing columns"):
        DataLoader(path)


def test_workbook_only_class_through_session(tmp_path):
    vehicles = {**VEHICLE_DATA, "N3X": replace(VEHICLE_DATA["N3"], diesel_tax=2000, name="N3 - Heavy tractor")}
    path = export_reference_workbook(tmp_path / "extended.xlsx", vehicles=vehicles)

    session = CalculatorSession(calculator=TCOCalculator.from_excel(path))
    session.set_input("vehicle_class", "N3X")
    assert session.results.diesel.tax == 2000
    # 1681 -> 2000 raises the diesel annual total by 319
    assert session.results.diesel.annual_total == pytest.approx(116769 + 319)
