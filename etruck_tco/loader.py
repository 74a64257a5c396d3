"""
Data loader for TCO reference tables.
Loads vehicle and usage profile tables from an Excel workbook.
"""

import logging
from dataclasses import asdict, fields
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping

import pandas as pd

from .constants import (
    USAGE_PROFILES,
    VEHICLE_DATA,
    UsageProfile,
    VehicleProfile,
    get_usage_profile,
    get_vehicle_profile,
)

logger = logging.getLogger(__name__)

VEHICLE_SHEET = 'Vehicle data'
PROFILE_SHEET = 'Usage profiles'

# Workbook column -> VehicleProfile field
VEHICLE_COLUMNS = {
    'diesel consumption (l/100km)': 'diesel_consumption',
    'electric consumption (kwh/100km)': 'electric_consumption',
    'diesel purchase': 'diesel_purchase',
    'electric purchase': 'electric_purchase',
    'thg quote': 'thg_quote',
    'maintenance diesel (eur/km)': 'maintenance_diesel',
    'maintenance electric (eur/km)': 'maintenance_electric',
    'insurance diesel': 'insurance_diesel',
    'insurance electric': 'insurance_electric',
    'diesel tax': 'diesel_tax',
    'name': 'name',
    'specs': 'specs',
}

PROFILE_COLUMNS = {
    'name': 'name',
    'annual mileage': 'annual_mileage',
    'highway share': 'highway_share',
    'depot charging share': 'depot_charging_share',
    'description': 'description',
}

_TEXT_FIELDS = {'name', 'specs', 'description'}


class DataLoader:
    """Load and manage reference tables from an Excel workbook."""

    def __init__(self, excel_path: str):
        """
        Initialize data loader with Excel file.

        Args:
            excel_path: Path to reference data workbook
        """
        self.excel_path = Path(excel_path)
        if not self.excel_path.exists():
            raise FileNotFoundError(f"Excel file not found: {excel_path}")

        self._load_all_data()

    def _load_all_data(self):
        """Load all required sheets from Excel."""
        vehicle_df = pd.read_excel(self.excel_path, sheet_name=VEHICLE_SHEET)
        profile_df = pd.read_excel(self.excel_path, sheet_name=PROFILE_SHEET)

        self._clean_column_names(vehicle_df, profile_df)

        self.vehicles = MappingProxyType(
            self._build_table(vehicle_df, 'vehicle class', VEHICLE_COLUMNS, VehicleProfile)
        )
        self.usage_profiles = MappingProxyType(
            self._build_table(profile_df, 'profile', PROFILE_COLUMNS, UsageProfile)
        )
        logger.info(
            "Loaded %d vehicle classes and %d usage profiles from %s",
            len(self.vehicles), len(self.usage_profiles), self.excel_path,
        )

    @staticmethod
    def _clean_column_names(*dfs):
        """Standardize column names across dataframes."""
        for df in dfs:
            df.columns = df.columns.str.strip().str.lower()

    def _build_table(self, df: pd.DataFrame, key_column: str,
                     columns: Mapping[str, str], record_type) -> Dict:
        required = [key_column] + [c for c, f in columns.items() if f not in _TEXT_FIELDS]
        missing = [c for c in required if c not in df.columns]
        if missing:
            raise ValueError(f"Missing columns in {self.excel_path.name}: {', '.join(missing)}")

        table = {}
        for _, row in df.dropna(subset=[key_column]).iterrows():
            values = {}
            for column, field_name in columns.items():
                value = row.get(column)
                if field_name in _TEXT_FIELDS:
                    values[field_name] = "" if pd.isna(value) else str(value)
                else:
                    values[field_name] = float(value)
            table[str(row[key_column]).strip()] = record_type(**values)
        return table

    def get_vehicle(self, vehicle_class: str) -> VehicleProfile:
        return get_vehicle_profile(vehicle_class, self.vehicles)

    def get_usage_profile(self, profile: str) -> UsageProfile:
        return get_usage_profile(profile, self.usage_profiles)

    def list_vehicle_classes(self) -> list:
        """Get list of available vehicle classes."""
        return list(self.vehicles)


def export_reference_workbook(excel_path: str,
                              vehicles: Mapping[str, VehicleProfile] = VEHICLE_DATA,
                              usage_profiles: Mapping[str, UsageProfile] = USAGE_PROFILES) -> Path:
    """
    Write reference tables in the layout DataLoader reads.

    Args:
        excel_path: Destination workbook
        vehicles: Vehicle table, defaults to the bundled one
        usage_profiles: Usage profile table, defaults to the bundled one

    Returns:
        Path of the written workbook
    """
    path = Path(excel_path)
    vehicle_names = {f: c for c, f in VEHICLE_COLUMNS.items()}
    profile_names = {f: c for c, f in PROFILE_COLUMNS.items()}

    vehicle_rows = [
        {'Vehicle Class': key, **{vehicle_names[f.name].title(): asdict(v)[f.name]
                                  for f in fields(VehicleProfile)}}
        for key, v in vehicles.items()
    ]
    profile_rows = [
        {'Profile': key, **{profile_names[f.name].title(): asdict(p)[f.name]
                            for f in fields(UsageProfile)}}
        for key, p in usage_profiles.items()
    ]

    with pd.ExcelWriter(path, engine='openpyxl') as writer:
        pd.DataFrame(vehicle_rows).to_excel(writer, sheet_name=VEHICLE_SHEET, index=False)
        pd.DataFrame(profile_rows).to_excel(writer, sheet_name=PROFILE_SHEET, index=False)

    logger.info("Wrote reference workbook %s", path)
    return path
