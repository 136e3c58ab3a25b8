"""Chart builders and KPI formatting tests"""

import numpy as np
import plotly.graph_objects as go
import pytest

from adventureworks_bi import metrics
from adventureworks_bi.dashboard.components import charts
from adventureworks_bi.dashboard.components.filters import DashboardFilters
from adventureworks_bi.dashboard.components.kpi_cards import format_number


def test_sales_trend_chart_one_line_per_subcategory(sample_db):
    df = metrics.rolling_category_sales(sample_db, months=48)
    fig = charts.create_sales_trend_chart(df, x_col="period_label")

    assert isinstance(fig, go.Figure)
    names = sorted(trace.name for trace in fig.data)
    assert names == sorted(df["subcategory_name"].fillna("Unassigned").unique())
    assert "Unassigned" in names


def test_grouped_bar_chart(sample_db):
    df = metrics.top_territories_by_year(sample_db)
    fig = charts.create_grouped_bar_chart(df, x_col="yr", y_col="order_qty", group_col="TerritoryID")

    assert len(fig.data) == df["TerritoryID"].nunique()
    assert fig.layout.barmode == "group"


def test_growth_bar_chart_splits_by_sign(sample_db):
    df = metrics.yoy_growth_top_subcategories(sample_db)
    fig = charts.create_growth_bar_chart(df)

    bars = {trace.name: list(trace.y) for trace in fig.data}
    assert all(trace.orientation == "h" for trace in fig.data)
    assert sorted(bars["Growth"]) == ["Helmets 2012", "Road Bikes 2012"]
    assert bars["Decline"] == ["Road Bikes 2014"]


def test_cohort_heatmap(sample_db):
    matrix = metrics.cohort_retention_matrix(metrics.cohort_retention(sample_db))
    fig = charts.create_cohort_heatmap(matrix)

    heatmap = fig.data[0]
    assert list(heatmap.x) == ["M0", "M1", "M2"]
    assert list(heatmap.y) == ["Month 3"]
    assert np.array(heatmap.z).tolist() == [[1, 0, 1]]


def test_stock_trend_chart_filters_products(sample_db):
    df = metrics.monthly_stock_trend(sample_db)
    fig = charts.create_stock_trend_chart(df, products=["Road-150 Red"])

    assert [trace.name for trace in fig.data] == ["Road-150 Red"]
    assert list(fig.data[0].y) == [10, 12]


def test_scatter_plot_tolerates_nulls(sample_db):
    df = metrics.stock_to_sales_ratio(sample_db)
    assert df["sales_qty"].isna().any()

    fig = charts.create_scatter_plot(df, x_col="sales_qty", y_col="stock_qty", color_col="ratio")
    assert not np.isnan(np.array(fig.data[0].x, dtype=float)).any()


@pytest.mark.parametrize("value, kwargs, expected", [
    (1234.4, {}, "1,234"),
    (56, {}, "56"),
    (1234.567, {"decimals": 2, "prefix": "$"}, "$1,234.57"),
    (12.34, {"decimals": 1, "suffix": "%"}, "12.3%"),
    (None, {}, "—"),
    (float("nan"), {}, "—"),
])
def test_format_number(value, kwargs, expected):
    assert format_number(value, **kwargs) == expected


def test_filter_summary():
    summary = DashboardFilters.get_filter_summary({
        "months": 12, "top_n": 3, "cohort_year": 2014, "cohort_status": 5,
        "stock_year": 2011, "purchase_year": 2014, "purchase_status": 1,
    })
    assert "last 12 month(s)" in summary
    assert "cohorts 2014 (status 5)" in summary
    assert "purchases 2014 (status 1)" in summary
    assert DashboardFilters.get_filter_summary({}) == "Default parameters"
