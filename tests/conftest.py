"""
Pytest configuration for AdventureWorks BI tests
Snapshots are built in a temporary directory through the real loader
"""

import pandas as pd
import pytest

from adventureworks_bi.scripts.create_database import TABLE_COLUMNS, load_frames
from adventureworks_bi.utils.database_connector import DatabaseConnector


# ------------------------------------------------------------------------------
# Row builders
# ------------------------------------------------------------------------------

def line(order_id, product_id, qty, date, unit_price=10.0, offer_id=1):
    """One SalesOrderDetail row; LineTotal = UnitPrice * OrderQty"""
    return {
        "SalesOrderID": order_id,
        "ProductID": product_id,
        "SpecialOfferID": offer_id,
        "OrderQty": qty,
        "UnitPrice": unit_price,
        "LineTotal": unit_price * qty,
        "ModifiedDate": date,
    }


def header(order_id, customer_id, date, status=5, territory_id=1):
    return {
        "SalesOrderID": order_id,
        "CustomerID": customer_id,
        "TerritoryID": territory_id,
        "Status": status,
        "ModifiedDate": date,
    }


def product(product_id, name, subcategory_id=None):
    return {"ProductID": product_id, "Name": name, "ProductSubcategoryID": subcategory_id}


def work_order(product_id, qty, date, work_order_id=None):
    return {"WorkOrderID": work_order_id, "ProductID": product_id, "StockedQty": qty, "ModifiedDate": date}


def purchase_order(po_id, status, total_due, date):
    return {"PurchaseOrderID": po_id, "Status": status, "TotalDue": total_due, "ModifiedDate": date}


# ------------------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------------------

@pytest.fixture
def make_db(tmp_path):
    """
    Factory building a snapshot from row lists, keyed by table name.
    Tables not given are created empty.
    """
    connectors = []

    def _make(**tables):
        frames = {
            name: pd.DataFrame(tables.get(name, []), columns=columns)
            for name, columns in TABLE_COLUMNS.items()
        }
        db_path = tmp_path / f"snapshot_{len(connectors)}.db"
        load_frames(db_path, frames)
        db = DatabaseConnector(db_path)
        connectors.append(db)
        return db

    yield _make

    for db in connectors:
        db.close()


@pytest.fixture
def sample_db(make_db):
    """Small snapshot touching every table and every metric"""
    return make_db(
        ProductSubcategory=[
            {"ProductSubcategoryID": 1, "Name": "Road Bikes"},
            {"ProductSubcategoryID": 2, "Name": "Helmets"},
        ],
        Product=[
            product(1, "Road-150 Red", "1"),
            product(2, "Sport-100 Helmet", "2"),
            product(3, "Adjustable Race", None),
        ],
        SpecialOffer=[
            {"SpecialOfferID": 1, "Type": "No Discount", "DiscountPct": 0.0},
            {"SpecialOfferID": 2, "Type": "Seasonal Discount", "DiscountPct": 0.5},
        ],
        SalesOrderHeader=[
            header(1, 100, "2011-06-01", territory_id=1),
            header(2, 101, "2012-06-01", territory_id=2),
            header(3, 100, "2014-03-01", territory_id=1),
            header(4, 100, "2014-05-01", territory_id=3),
        ],
        SalesOrderDetail=[
            line(1, 1, 2, "2011-06-01", 100.0),
            line(1, 2, 1, "2011-06-01", 20.0, offer_id=2),
            line(2, 1, 4, "2012-06-01", 100.0),
            line(2, 2, 1, "2012-06-01", 20.0),
            line(3, 3, 5, "2014-03-01", 5.0),
            line(4, 1, 1, "2014-05-01", 100.0, offer_id=2),
        ],
        WorkOrder=[
            work_order(1, 10, "2011-06-15", 1),
            work_order(1, 12, "2011-07-15", 2),
            work_order(3, 8, "2011-07-20", 3),
        ],
        PurchaseOrderHeader=[
            purchase_order(1, 1, 120.0, "2014-02-01"),
            purchase_order(2, 1, 80.0, "2014-04-01"),
            purchase_order(3, 4, 50.0, "2014-04-01"),
        ],
    )
