"""
Metric routines for AdventureWorks BI

Each routine runs one query from scripts/sql_queries.py against a
DatabaseConnector and returns a fully ordered DataFrame. Routines are
read-only and independent of each other.
"""

import logging
from collections import OrderedDict
from typing import Callable, Dict, NamedTuple, Optional, Tuple

import numpy as np
import pandas as pd

from adventureworks_bi import config
from adventureworks_bi.scripts import sql_queries
from adventureworks_bi.utils.database_connector import DatabaseConnector

logger = logging.getLogger(__name__)


def _run(db: DatabaseConnector, name: str, query: str, params: dict) -> pd.DataFrame:
    df = db.execute_query(query, params)
    logger.debug("%s %s -> %d rows", name, params, len(df))
    return df


# ============================================
# SALES
# ============================================

def rolling_window_bounds(db: DatabaseConnector, months: int) -> Tuple[Optional[str], Optional[str]]:
    """
    Inclusive (start, end) ISO dates of the trailing window of `months`
    calendar months ending at the latest order line date.

    Month arithmetic clamps to month end (2013-03-31 minus one month is
    2013-02-28, so the window starts 2013-03-01). Both bounds are None when there are no order lines.
    """
    max_date = db.execute_query(sql_queries.QUERY_MAX_ORDER_LINE_DATE)["max_date"].iloc[0]
    if max_date is None or pd.isna(max_date):
        return None, None

    end = pd.Timestamp(max_date)
    start = end - pd.DateOffset(months=int(months)) + pd.Timedelta(days=1)
    return start.strftime("%Y-%m-%d"), end.strftime("%Y-%m-%d")


def rolling_category_sales(db: DatabaseConnector,
                           months: int = config.DEFAULT_ROLLING_MONTHS) -> pd.DataFrame:
    """
    Quantity, sales value and order count per subcategory and month over the
    trailing window ending at the latest order line in the snapshot.

    Args:
        db: Snapshot connector
        months: Window length in calendar months

    Returns:
        Columns period, period_label, subcategory_name, qty_item,
        total_sales, order_cnt; ordered by subcategory then period
    """
    if months < 1:
        raise ValueError("months must be at least 1")

    start_date, end_date = rolling_window_bounds(db, months)
    df = _run(db, "rolling_category_sales", sql_queries.QUERY_ROLLING_CATEGORY_SALES,
              {"start_date": start_date, "end_date": end_date})

    labels = pd.to_datetime(df["period"], format="%Y-%m").dt.strftime("%b %Y")
    df.insert(1, "period_label", labels)
    return df


def window_order_count(db: DatabaseConnector,
                       months: int = config.DEFAULT_ROLLING_MONTHS) -> int:
    """
    Distinct sales orders with at least one line in the rolling window.

    An order spanning several subcategories or months counts once, unlike
    summing order_cnt over rolling_category_sales.
    """
    if months < 1:
        raise ValueError("months must be at least 1")

    start_date, end_date = rolling_window_bounds(db, months)
    df = _run(db, "window_order_count", sql_queries.QUERY_WINDOW_ORDER_COUNT,
              {"start_date": start_date, "end_date": end_date})
    return int(df["order_cnt"].iloc[0])


def yoy_growth_top_subcategories(db: DatabaseConnector,
                                 top_n: int = config.DEFAULT_TOP_N) -> pd.DataFrame:
    """
    Subcategories with the top_n distinct year-over-year quantity growth values.

    Growth is null when the previous year's quantity is zero. Ties share a
    dense rank, so more than top_n rows can be returned.
    """
    return _run(db, "yoy_growth_top_subcategories",
                sql_queries.QUERY_YOY_GROWTH_TOP_SUBCATEGORIES, {"top_n": int(top_n)})


def top_territories_by_year(db: DatabaseConnector,
                            top_n: int = config.DEFAULT_TOP_N) -> pd.DataFrame:
    """Top territories by ordered quantity in each year (dense rank, ties kept)"""
    return _run(db, "top_territories_by_year",
                sql_queries.QUERY_TOP_TERRITORIES_BY_YEAR, {"top_n": int(top_n)})


def seasonal_discount_cost(db: DatabaseConnector,
                           offer_type: str = config.SEASONAL_OFFER_TYPE) -> pd.DataFrame:
    """Discount cost (DiscountPct x UnitPrice x OrderQty) per year and subcategory"""
    return _run(db, "seasonal_discount_cost",
                sql_queries.QUERY_SEASONAL_DISCOUNT_COST, {"offer_type": offer_type})


# ============================================
# CUSTOMERS
# ============================================

def cohort_retention(db: DatabaseConnector,
                     year: int = config.DEFAULT_COHORT_YEAR,
                     status: int = config.DEFAULT_COHORT_STATUS) -> pd.DataFrame:
    """
    Distinct customers per first-purchase month and months since it.

    Only orders with the given status placed in the given year are considered;
    the cohort month is each customer's first order month within that set.
    """
    return _run(db, "cohort_retention", sql_queries.QUERY_COHORT_RETENTION,
                {"year": int(year), "status": int(status)})


def cohort_retention_matrix(cohorts: pd.DataFrame, as_rate: bool = False) -> pd.DataFrame:
    """
    Pivot a cohort_retention result into a cohort x period matrix.

    Args:
        cohorts: Output of cohort_retention
        as_rate: Express each cell as a percentage of the cohort's M0 size

    Returns:
        DataFrame indexed by cohort_month with one column per M<n> label
    """
    if cohorts.empty:
        return pd.DataFrame(index=pd.Index([], name="cohort_month"))

    matrix = cohorts.pivot(index="cohort_month", columns="month_offset", values="customer_cnt")
    matrix = matrix.reindex(columns=range(int(matrix.columns.max()) + 1)).fillna(0)

    if as_rate:
        base = matrix[0].replace(0, np.nan)
        matrix = matrix.div(base, axis=0).mul(100).round(1).fillna(0)
    else:
        matrix = matrix.astype(int)

    matrix.columns = [f"M{offset}" for offset in matrix.columns]
    return matrix


# ============================================
# INVENTORY
# ============================================

def monthly_stock_trend(db: DatabaseConnector,
                        year: int = config.DEFAULT_STOCK_YEAR) -> pd.DataFrame:
    """
    Monthly stocked quantity per product with month-over-month change.

    mom_diff_percent is 0 when there is no previous month or it stocked zero.
    """
    return _run(db, "monthly_stock_trend", sql_queries.QUERY_MONTHLY_STOCK_TREND,
                {"year": int(year)})


def stock_to_sales_ratio(db: DatabaseConnector,
                         year: int = config.DEFAULT_STOCK_YEAR) -> pd.DataFrame:
    """
    Stock / sales ratio per product and month.

    Product-months with only stock or only sales are kept; ratio is 0 when
    sales are zero or absent.
    """
    return _run(db, "stock_to_sales_ratio", sql_queries.QUERY_STOCK_TO_SALES_RATIO,
                {"year": int(year)})


# ============================================
# PURCHASING
# ============================================

def pending_purchase_orders(db: DatabaseConnector,
                            year: int = config.DEFAULT_PURCHASE_YEAR,
                            status: int = config.DEFAULT_PENDING_STATUS) -> pd.DataFrame:
    """Count and total due of purchase orders in one status for one year"""
    return _run(db, "pending_purchase_orders", sql_queries.QUERY_PENDING_PURCHASE_ORDERS,
                {"year": int(year), "status": int(status)})


# ============================================
# REGISTRY
# ============================================

class MetricDefinition(NamedTuple):
    title: str
    func: Callable[..., pd.DataFrame]
    description: str


METRICS: "OrderedDict[str, MetricDefinition]" = OrderedDict([
    ("rolling_category_sales", MetricDefinition(
        "Rolling 12-Month Sales by Subcategory", rolling_category_sales,
        "Quantity, sales and orders per subcategory and month, last 12 months")),
    ("yoy_growth_top_subcategories", MetricDefinition(
        "Top Subcategories by YoY Growth", yoy_growth_top_subcategories,
        "Top 3 distinct year-over-year quantity growth rates")),
    ("top_territories_by_year", MetricDefinition(
        "Top Territories by Year", top_territories_by_year,
        "Top 3 territories by ordered quantity per year")),
    ("seasonal_discount_cost", MetricDefinition(
        "Seasonal Discount Cost", seasonal_discount_cost,
        "Seasonal discount cost per year and subcategory")),
    ("cohort_retention", MetricDefinition(
        "Customer Cohort Retention", cohort_retention,
        "Distinct customers per first-purchase month and month offset")),
    ("monthly_stock_trend", MetricDefinition(
        "Monthly Stock Trend", monthly_stock_trend,
        "Stocked quantity per product and month with MoM change")),
    ("stock_to_sales_ratio", MetricDefinition(
        "Stock / Sales Ratio", stock_to_sales_ratio,
        "Stock to sales ratio per product and month")),
    ("pending_purchase_orders", MetricDefinition(
        "Pending Purchase Orders", pending_purchase_orders,
        "Number and value of pending purchase orders")),
])


def run_all(db: DatabaseConnector) -> Dict[str, pd.DataFrame]:
    """Run every registered metric with its default parameters"""
    return {name: metric.func(db) for name, metric in METRICS.items()}
