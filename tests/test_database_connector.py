"""DatabaseConnector tests"""

import threading

import pytest

from adventureworks_bi.exceptions import QueryExecutionError, SnapshotError
from adventureworks_bi.scripts.create_database import TABLE_COLUMNS
from adventureworks_bi.utils.database_connector import DatabaseConnector, get_db_connection


def test_missing_database(tmp_path):
    with pytest.raises(SnapshotError):
        DatabaseConnector(tmp_path / "missing.db")


def test_table_introspection(sample_db):
    assert sample_db.get_table_list() == sorted(TABLE_COLUMNS)
    assert sample_db.get_row_count("SalesOrderDetail") == 6
    assert sample_db.get_distinct_years("SalesOrderHeader") == [2014, 2012, 2011]

    with pytest.raises(SnapshotError):
        sample_db.get_row_count("Customer")


def test_named_parameters(sample_db):
    df = sample_db.execute_query(
        "SELECT COUNT(*) AS n FROM PurchaseOrderHeader WHERE Status = :status", {"status": 1}
    )
    assert df["n"].iloc[0] == 2


def test_bad_sql_is_wrapped(sample_db):
    with pytest.raises(QueryExecutionError) as excinfo:
        sample_db.execute_query("SELECT * FROM NoSuchTable")
    assert "NoSuchTable" in excinfo.value.query
    assert "NoSuchTable" in str(excinfo.value)


def test_connection_is_read_only(sample_db):
    with pytest.raises(QueryExecutionError):
        sample_db.execute_query("DELETE FROM Product")
    assert sample_db.get_row_count("Product") == 3


def test_one_connection_per_thread(sample_db):
    main_conn = sample_db.connect()
    seen = {}

    def worker():
        seen["conn"] = sample_db.connect()
        seen["rows"] = sample_db.get_row_count("WorkOrder")
        sample_db.close()

    thread = threading.Thread(target=worker)
    thread.start()
    thread.join()

    assert seen["conn"] is not main_conn
    assert seen["rows"] == 3
    assert sample_db.connect() is main_conn


def test_context_manager_closes(sample_db):
    db = get_db_connection(sample_db.db_path)
    with db:
        assert db.get_row_count("Product") == 3
    assert db._local.connection is None
