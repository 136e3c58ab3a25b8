"""Cohort retention tests"""

import pytest

from adventureworks_bi import metrics
from conftest import header


@pytest.fixture
def db(make_db):
    return make_db(SalesOrderHeader=[
        header(1, 1, "2014-03-10"),
        header(2, 1, "2014-05-02"),
        header(3, 2, "2014-03-20"),
        header(4, 3, "2014-04-01"),
        header(5, 3, "2014-04-15"),
        header(6, 3, "2014-05-01"),
        header(7, 4, "2013-12-01"),
        header(8, 4, "2014-05-05"),
        header(9, 5, "2014-01-01", status=4),
        header(10, 5, "2014-06-01"),
    ])


def test_cohort_month_is_first_purchase(db):
    df = metrics.cohort_retention(db)

    assert list(df.columns) == ["cohort_month", "month_offset", "month_diff", "customer_cnt"]
    assert df.values.tolist() == [
        [3, 0, "M0", 2],
        [3, 2, "M2", 1],
        [4, 0, "M0", 1],
        [4, 1, "M1", 1],
        [5, 0, "M0", 1],
        [6, 0, "M0", 1],
    ]


def test_second_order_lands_in_offset_bucket(db):
    df = metrics.cohort_retention(db)
    march = df[df["cohort_month"] == 3].set_index("month_diff")["customer_cnt"]
    assert march["M2"] == 1


def test_year_and_status_are_parameters(db):
    df = metrics.cohort_retention(db, year=2013)
    assert df.values.tolist() == [[12, 0, "M0", 1]]

    df = metrics.cohort_retention(db, year=2014, status=4)
    assert df.values.tolist() == [[1, 0, "M0", 1]]


def test_no_matching_orders(db):
    assert metrics.cohort_retention(db, year=2020).empty


def test_offsets_sort_numerically(make_db):
    db = make_db(SalesOrderHeader=[
        header(1, 1, "2014-01-05"),
        header(2, 1, "2014-11-05"),
        header(3, 2, "2014-01-06"),
        header(4, 2, "2014-03-01"),
    ])
    df = metrics.cohort_retention(db)
    assert df["month_diff"].tolist() == ["M0", "M2", "M10"]
    assert df["customer_cnt"].tolist() == [2, 1, 1]


class TestCohortRetentionMatrix:

    def test_counts(self, db):
        matrix = metrics.cohort_retention_matrix(metrics.cohort_retention(db))

        assert list(matrix.columns) == ["M0", "M1", "M2"]
        assert list(matrix.index) == [3, 4, 5, 6]
        assert matrix.loc[3].tolist() == [2, 0, 1]
        assert matrix.loc[4].tolist() == [1, 1, 0]

    def test_rates(self, db):
        matrix = metrics.cohort_retention_matrix(metrics.cohort_retention(db), as_rate=True)

        assert matrix.loc[3].tolist() == pytest.approx([100.0, 0.0, 50.0])
        assert matrix.loc[6].tolist() == pytest.approx([100.0, 0.0, 0.0])

    def test_empty(self, db):
        matrix = metrics.cohort_retention_matrix(metrics.cohort_retention(db, year=2020))
        assert matrix.empty
