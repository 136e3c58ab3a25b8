"""Metric registry, idempotence and query check script tests"""

import sqlite3

import pandas as pd
import pytest

from adventureworks_bi import metrics
from adventureworks_bi.scripts import check_queries
from adventureworks_bi.utils.database_connector import DatabaseConnector

EXPECTED_METRICS = [
    "rolling_category_sales",
    "yoy_growth_top_subcategories",
    "top_territories_by_year",
    "seasonal_discount_cost",
    "cohort_retention",
    "monthly_stock_trend",
    "stock_to_sales_ratio",
    "pending_purchase_orders",
]


def test_registry_lists_every_metric():
    assert list(metrics.METRICS) == EXPECTED_METRICS
    for metric in metrics.METRICS.values():
        assert metric.title
        assert callable(metric.func)


def test_run_all(sample_db):
    results = metrics.run_all(sample_db)

    assert list(results) == EXPECTED_METRICS
    assert all(isinstance(df, pd.DataFrame) for df in results.values())

    pending = results["pending_purchase_orders"]
    assert pending.loc[0, "order_count"] == 2
    assert pending.loc[0, "total_value"] == pytest.approx(200.0)

    growth = results["yoy_growth_top_subcategories"]
    assert growth[["subcategory_name", "yr", "yoy_growth_percent"]].values.tolist() == [
        ["Road Bikes", 2012, 100.0],
        ["Helmets", 2012, 0.0],
        ["Road Bikes", 2014, -75.0],
    ]


@pytest.mark.parametrize("name", EXPECTED_METRICS)
def test_rerun_is_identical(sample_db, name):
    func = metrics.METRICS[name].func
    pd.testing.assert_frame_equal(func(sample_db), func(sample_db))


def test_check_queries_writes_results(sample_db, tmp_path):
    summary = check_queries.check_queries(sample_db, output_dir=tmp_path / "out")

    assert summary["Query"].tolist() == EXPECTED_METRICS
    assert (summary["Status"] == "PASS").all()
    for name in EXPECTED_METRICS:
        assert (tmp_path / "out" / f"{name}.csv").exists()


def test_check_queries_reports_failures(tmp_path):
    db_path = tmp_path / "empty.db"
    sqlite3.connect(str(db_path)).close()

    with DatabaseConnector(db_path) as db:
        summary = check_queries.check_queries(db)

    assert (summary["Status"] == "FAIL").all()
    assert check_queries.main(["--db", str(db_path)]) == 1


def test_check_queries_main(sample_db, tmp_path):
    assert check_queries.main(["--db", str(sample_db.db_path)]) == 0
    assert check_queries.main(["--db", str(tmp_path / "missing.db")]) == 1
