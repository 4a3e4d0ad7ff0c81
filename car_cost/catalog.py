"""
Vehicle catalog for cost calculations.
Stores car models in a SQLite database and bulk loads them from Excel.
"""

import logging
import sqlite3
from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd

from .models import CarModel, parse_curve

logger = logging.getLogger(__name__)

COLUMNS = ('id', 'brand', 'name', 'trim', 'cost',
           'yearly_permit_cost', 'insurance_points', 'maintenance_points')

# Columns added after the first release of the table
MIGRATED_COLUMNS = {
    'yearly_permit_cost': 'INTEGER',
    'insurance_points': 'TEXT',
    'maintenance_points': 'TEXT',
}


class VehicleCatalog:
    """Keyed store of car models, unique by brand, name and trim."""

    def __init__(self, db_path):
        """
        Initialize catalog handle. The database is not touched until open().

        Args:
            db_path: Path to SQLite database, ":memory:" for a scratch store
        """
        self.db_path = str(db_path)
        self._conn: Optional[sqlite3.Connection] = None

    def open(self) -> "VehicleCatalog":
        if self._conn is not None:
            return self
        if self.db_path != ':memory:':
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self._conn = sqlite3.connect(self.db_path)
        self._conn.row_factory = sqlite3.Row
        self._initialize()
        logger.info("Vehicle catalog opened at %s", self.db_path)
        return self

    def close(self):
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.info("Vehicle catalog closed")

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Vehicle catalog is not open")
        return self._conn

    def _initialize(self):
        """Create the table, and add columns missing from older databases."""
        with self.conn:
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS car_models (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    brand TEXT NOT NULL,
                    name TEXT NOT NULL,
                    trim TEXT NOT NULL,
                    cost INTEGER NOT NULL,
                    yearly_permit_cost INTEGER,
                    insurance_points TEXT,
                    maintenance_points TEXT,
                    UNIQUE(brand, name, trim)
                )
            """)

            existing = {row['name'] for row in self.conn.execute("PRAGMA table_info(car_models)")}
            for column, column_type in MIGRATED_COLUMNS.items():
                if column not in existing:
                    logger.info("Adding column %s to car_models", column)
                    self.conn.execute(f"ALTER TABLE car_models ADD COLUMN {column} {column_type}")

    def add_model(self, car: CarModel) -> int:
        """
        Insert a car model, or update the one with the same brand, name and trim.

        Returns:
            Id of the stored model
        """
        with self.conn:
            self.conn.execute(
                """
                INSERT INTO car_models (brand, name, trim, cost, yearly_permit_cost,
                                        insurance_points, maintenance_points)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(brand, name, trim) DO UPDATE SET
                    cost = excluded.cost,
                    yearly_permit_cost = excluded.yearly_permit_cost,
                    insurance_points = excluded.insurance_points,
                    maintenance_points = excluded.maintenance_points
                """,
                (car.brand, car.name, car.trim, car.cost, car.yearly_permit_cost,
                 car.insurance_points, car.maintenance_points),
            )
            # lastrowid is unreliable for the update branch of an upsert
            row = self.conn.execute(
                "SELECT id FROM car_models WHERE brand = ? AND name = ? AND trim = ?",
                (car.brand, car.name, car.trim),
            ).fetchone()

        logger.debug("Stored car model %s as ID %d", car.display_name, row['id'])
        return row['id']

    def get_model(self, model_id: int) -> Optional[CarModel]:
        """
        Get car model by id.

        Returns:
            CarModel, or None if not found
        """
        row = self.conn.execute("SELECT * FROM car_models WHERE id = ?", (model_id,)).fetchone()
        if row is None:
            return None
        return _to_model(row)

    def find_models(self, query: str) -> List[CarModel]:
        """
        Find car models whose brand, name or trim contains the query.

        Args:
            query: Search text, matched case-insensitively

        Returns:
            Matching models ordered by id
        """
        term = f"%{query}%"
        rows = self.conn.execute(
            "SELECT * FROM car_models WHERE brand LIKE ? OR name LIKE ? OR trim LIKE ? ORDER BY id",
            (term, term, term),
        ).fetchall()
        return [_to_model(row) for row in rows]

    def list_models(self) -> List[CarModel]:
        """Get all stored car models."""
        rows = self.conn.execute("SELECT * FROM car_models ORDER BY id").fetchall()
        return [_to_model(row) for row in rows]

    def to_dataframe(self) -> pd.DataFrame:
        """All stored models as a pandas DataFrame."""
        return pd.read_sql_query("SELECT * FROM car_models ORDER BY id", self.conn)

    def import_excel(self, excel_path, sheet_name=0) -> List[int]:
        """
        Bulk load car models from an Excel sheet.

        The sheet needs brand, name, trim and cost columns;
        yearly_permit_cost, insurance_points and maintenance_points
        are optional. Column names are matched case-insensitively.

        Args:
            excel_path: Path to Excel workbook
            sheet_name: Sheet name or index

        Returns:
            Ids of the stored models, in sheet order
        """
        excel_path = Path(excel_path)
        if not excel_path.exists():
            raise FileNotFoundError(f"Excel file not found: {excel_path}")

        df = pd.read_excel(excel_path, sheet_name=sheet_name)
        df.columns = df.columns.str.strip().str.lower()

        missing = {'brand', 'name', 'trim', 'cost'} - set(df.columns)
        if missing:
            raise ValueError(f"Sheet is missing required columns: {', '.join(sorted(missing))}")

        ids = []
        for record in df.to_dict(orient='records'):
            record = {k: _cell(v) for k, v in record.items()}
            car = CarModel(
                brand=str(record['brand']),
                name=str(record['name']),
                trim=str(record['trim']),
                cost=record['cost'],
                yearly_permit_cost=record.get('yearly_permit_cost'),
                insurance_points=_curve_cell(record.get('insurance_points')),
                maintenance_points=_curve_cell(record.get('maintenance_points')),
            )
            ids.append(self.add_model(car))

        logger.info("Imported %d car models from %s", len(ids), excel_path)
        return ids


def _cell(value):
    """Convert a pandas cell to a plain Python value, None for blanks."""
    if pd.isna(value):
        return None
    if isinstance(value, np.generic):
        return value.item()
    return value


def _curve_cell(value) -> Optional[str]:
    """Validate a curve cell from a sheet, keeping the JSON text."""
    if value is None:
        return None
    text = str(value)
    parse_curve(text)
    return text


def _to_model(row: sqlite3.Row) -> CarModel:
    return CarModel(**{column: row[column] for column in COLUMNS})
