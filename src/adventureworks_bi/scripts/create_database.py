"""
Database Creation Script for AdventureWorks BI
Loads the AdventureWorks snapshot (one CSV per table) into SQLite

Usage:
    aw-create-database --csv-dir data/snapshot --db data/database/adventureworks.db
"""

import argparse
import logging
import sqlite3
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import numpy as np
import pandas as pd

from adventureworks_bi import config
from adventureworks_bi.exceptions import AnalyticsError, SnapshotError

logger = logging.getLogger(__name__)

# ============================================
# SNAPSHOT SCHEMA
# ============================================

TABLE_DDL = {
    "ProductSubcategory": """
        CREATE TABLE ProductSubcategory (
            ProductSubcategoryID INTEGER PRIMARY KEY,
            Name TEXT NOT NULL
        )
    """,
    "Product": """
        CREATE TABLE Product (
            ProductID INTEGER PRIMARY KEY,
            Name TEXT NOT NULL,
            ProductSubcategoryID INTEGER
        )
    """,
    "SpecialOffer": """
        CREATE TABLE SpecialOffer (
            SpecialOfferID INTEGER PRIMARY KEY,
            Type TEXT,
            DiscountPct REAL
        )
    """,
    "SalesOrderHeader": """
        CREATE TABLE SalesOrderHeader (
            SalesOrderID INTEGER PRIMARY KEY,
            CustomerID INTEGER,
            TerritoryID INTEGER,
            Status INTEGER,
            ModifiedDate TEXT
        )
    """,
    "SalesOrderDetail": """
        CREATE TABLE SalesOrderDetail (
            SalesOrderID INTEGER NOT NULL,
            SalesOrderDetailID INTEGER,
            ProductID INTEGER,
            SpecialOfferID INTEGER,
            OrderQty INTEGER,
            UnitPrice REAL,
            LineTotal REAL,
            ModifiedDate TEXT
        )
    """,
    "WorkOrder": """
        CREATE TABLE WorkOrder (
            WorkOrderID INTEGER,
            ProductID INTEGER,
            StockedQty INTEGER,
            ModifiedDate TEXT
        )
    """,
    "PurchaseOrderHeader": """
        CREATE TABLE PurchaseOrderHeader (
            PurchaseOrderID INTEGER PRIMARY KEY,
            Status INTEGER,
            TotalDue REAL,
            ModifiedDate TEXT
        )
    """,
}

# Column order of each table, dimensions first
TABLE_COLUMNS = {
    "ProductSubcategory": ["ProductSubcategoryID", "Name"],
    "Product": ["ProductID", "Name", "ProductSubcategoryID"],
    "SpecialOffer": ["SpecialOfferID", "Type", "DiscountPct"],
    "SalesOrderHeader": ["SalesOrderID", "CustomerID", "TerritoryID", "Status", "ModifiedDate"],
    "SalesOrderDetail": [
        "SalesOrderID", "SalesOrderDetailID", "ProductID", "SpecialOfferID",
        "OrderQty", "UnitPrice", "LineTotal", "ModifiedDate",
    ],
    "WorkOrder": ["WorkOrderID", "ProductID", "StockedQty", "ModifiedDate"],
    "PurchaseOrderHeader": ["PurchaseOrderID", "Status", "TotalDue", "ModifiedDate"],
}

# Columns that may be absent from a snapshot file (filled with NULL)
OPTIONAL_COLUMNS = {"SalesOrderDetailID", "WorkOrderID"}

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# ============================================
# NORMALIZATION
# ============================================

def parse_subcategory_id(raw) -> Optional[int]:
    """
    Parse a product's subcategory key, stored upstream as text.

    Returns the integer key, or None when the value is unresolved
    (null, blank, non-numeric or fractional).
    """
    if raw is None or (not isinstance(raw, str) and pd.isna(raw)):
        return None
    if isinstance(raw, (bool, np.bool_)):
        return None
    if isinstance(raw, (int, np.integer)):
        return int(raw)
    if isinstance(raw, (float, np.floating)):
        return int(raw) if float(raw).is_integer() else None

    text = str(raw).strip()
    if text == "":
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        return None
    return int(value) if value.is_integer() else None


def _format_dates(series: pd.Series, table_name: str) -> pd.Series:
    try:
        parsed = pd.to_datetime(series, format="ISO8601")
    except (ValueError, TypeError) as e:
        raise SnapshotError(f"{table_name}.ModifiedDate contains unparsable dates: {e}") from e
    return parsed.dt.strftime(DATE_FORMAT)


def prepare_table(table_name: str, df: pd.DataFrame) -> pd.DataFrame:
    """
    Validate one snapshot table and shape it for loading.

    Raises:
        SnapshotError: unknown table or a required column is missing
    """
    if table_name not in TABLE_COLUMNS:
        raise SnapshotError(f"Unknown snapshot table: {table_name}")

    columns = TABLE_COLUMNS[table_name]
    missing = [c for c in columns if c not in df.columns and c not in OPTIONAL_COLUMNS]
    if missing:
        raise SnapshotError(f"{table_name} is missing required column(s): {', '.join(missing)}")

    out = df.copy()
    for col in columns:
        if col not in out.columns:
            out[col] = None
    out = out[columns]

    if "ModifiedDate" in columns:
        out["ModifiedDate"] = _format_dates(out["ModifiedDate"], table_name)

    if table_name == "Product":
        raw = out["ProductSubcategoryID"]
        parsed = pd.array([parse_subcategory_id(v) for v in raw], dtype="Int64")
        unresolved = int(parsed.isna().sum())
        if unresolved:
            logger.warning("Product: %d product(s) with unresolved subcategory", unresolved)
        out["ProductSubcategoryID"] = parsed

    return out


# ============================================
# LOADING
# ============================================

def read_snapshot_csvs(csv_dir: Union[str, Path]) -> Dict[str, pd.DataFrame]:
    """Read <Table>.csv for every snapshot table from csv_dir"""
    csv_dir = Path(csv_dir)
    frames = {}
    for table_name in TABLE_COLUMNS:
        path = csv_dir / f"{table_name}.csv"
        if not path.exists():
            raise SnapshotError(f"Snapshot file not found: {path}")
        dtype = {"ProductSubcategoryID": str} if table_name == "Product" else None
        try:
            frames[table_name] = pd.read_csv(path, dtype=dtype)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise SnapshotError(f"Could not read {path}: {e}") from e
        logger.info("Read %s: %s rows", path.name, f"{len(frames[table_name]):,}")
    return frames


def load_frames(db_path: Union[str, Path], frames: Mapping[str, pd.DataFrame]) -> Dict[str, int]:
    """
    Rebuild the SQLite snapshot at db_path from in-memory tables.

    Args:
        db_path: Target SQLite file (created or replaced table by table)
        frames: One DataFrame per snapshot table

    Returns:
        Row count per loaded table
    """
    missing = [t for t in TABLE_COLUMNS if t not in frames]
    if missing:
        raise SnapshotError(f"Snapshot is missing table(s): {', '.join(missing)}")

    prepared = {name: prepare_table(name, frames[name]) for name in TABLE_COLUMNS}

    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    counts = {}
    conn = sqlite3.connect(str(db_path))
    try:
        cursor = conn.cursor()
        for table_name in TABLE_COLUMNS:
            cursor.execute(f"DROP TABLE IF EXISTS {table_name}")
            cursor.execute(TABLE_DDL[table_name])
        conn.commit()

        # Dimensions first, facts last
        for table_name, df in prepared.items():
            df.to_sql(table_name, conn, if_exists="append", index=False)
            counts[table_name] = len(df)
            logger.info("Loaded %s: %s rows", table_name, f"{len(df):,}")
        conn.commit()

        dangling = cursor.execute(
            """
            SELECT COUNT(*)
            FROM Product AS p
            LEFT JOIN ProductSubcategory AS sc
                ON p.ProductSubcategoryID = sc.ProductSubcategoryID
            WHERE p.ProductSubcategoryID IS NOT NULL
              AND sc.ProductSubcategoryID IS NULL
            """
        ).fetchone()[0]
        if dangling:
            logger.warning("Product: %d product(s) reference a missing subcategory", dangling)
    except sqlite3.Error as e:
        raise SnapshotError(f"Failed to build snapshot database {db_path}: {e}") from e
    finally:
        conn.close()

    return counts


def load_snapshot(csv_dir: Union[str, Path], db_path: Union[str, Path]) -> Dict[str, int]:
    """Read the CSV snapshot in csv_dir and load it into db_path"""
    return load_frames(db_path, read_snapshot_csvs(csv_dir))


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Build the AdventureWorks SQLite snapshot")
    parser.add_argument("--csv-dir", default=str(config.CSV_DIR), help="Directory of <Table>.csv files")
    parser.add_argument("--db", default=str(config.DATABASE_PATH), help="SQLite database to create")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    args = parser.parse_args(argv)

    config.setup_logging(log_file=args.log_file)

    logger.info("=" * 60)
    logger.info("ADVENTUREWORKS SNAPSHOT - DATABASE CREATION")
    logger.info("=" * 60)

    try:
        counts = load_snapshot(args.csv_dir, args.db)
    except AnalyticsError as e:
        logger.error("Snapshot load failed: %s", e)
        return 1

    summary = pd.DataFrame({"Table": list(counts), "Rows": list(counts.values())})
    logger.info("Database File: %s\n%s", args.db, summary.to_string(index=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
