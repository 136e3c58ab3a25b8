"""
Dashboard Business Intelligence - AdventureWorks
Streamlit application rendering every metric routine

Run with:
    streamlit run src/adventureworks_bi/dashboard/dashboard_app.py
"""

import logging

import pandas as pd
import streamlit as st

from adventureworks_bi import config, metrics
from adventureworks_bi.dashboard.components import charts, kpi_cards
from adventureworks_bi.dashboard.components.filters import DashboardFilters
from adventureworks_bi.exceptions import AnalyticsError
from adventureworks_bi.utils.database_connector import get_db_connection

config.setup_logging()
logger = logging.getLogger(__name__)

# ====================================================================
# PAGE CONFIGURATION
# ====================================================================

st.set_page_config(
    page_title="AdventureWorks BI Dashboard",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .stMetric {
        background-color: #f0f2f6;
        padding: 15px;
        border-radius: 10px;
    }
    h1 {
        color: #1f77b4;
        padding-bottom: 10px;
        border-bottom: 3px solid #1f77b4;
    }
</style>
""", unsafe_allow_html=True)

# ====================================================================
# DATA ACCESS
# ====================================================================

DB_PATH = str(config.DATABASE_PATH)


@st.cache_data(ttl=300)
def load_metric(name: str, **params) -> pd.DataFrame:
    """Run one registered metric with the given parameters (cached)"""
    db = get_db_connection(DB_PATH)
    try:
        return metrics.METRICS[name].func(db, **params)
    finally:
        db.close()


@st.cache_data(ttl=300)
def load_window_order_count(months: int) -> int:
    db = get_db_connection(DB_PATH)
    try:
        return metrics.window_order_count(db, months)
    finally:
        db.close()


try:
    db = get_db_connection(DB_PATH)
except AnalyticsError as e:
    st.error(f"❌ {e}")
    st.info("Build the snapshot first: aw-create-database --csv-dir <dir> --db <path>")
    st.stop()

# ====================================================================
# HEADER & SIDEBAR
# ====================================================================

st.title("📊 AdventureWorks - Business Intelligence Dashboard")
st.markdown("**Sales, customer, inventory and purchasing metrics**")

filters = DashboardFilters(db).render_sidebar_filters()
st.caption(DashboardFilters.get_filter_summary(filters))
st.markdown("---")

try:
    rolling = load_metric("rolling_category_sales", months=filters['months'])
    order_count = load_window_order_count(filters['months'])
    growth = load_metric("yoy_growth_top_subcategories", top_n=filters['top_n'])
    territories = load_metric("top_territories_by_year", top_n=filters['top_n'])
    discount = load_metric("seasonal_discount_cost")
    cohorts = load_metric("cohort_retention",
                          year=filters['cohort_year'], status=filters['cohort_status'])
    stock = load_metric("monthly_stock_trend", year=filters['stock_year'])
    ratio = load_metric("stock_to_sales_ratio", year=filters['stock_year'])
    pending = load_metric("pending_purchase_orders",
                          year=filters['purchase_year'], status=filters['purchase_status'])
except AnalyticsError as e:
    logger.error("Metric load failed: %s", e)
    st.error(f"❌ {e}")
    st.stop()
finally:
    db.close()

# ====================================================================
# KPIs
# ====================================================================

st.header("📈 Key Indicators")

col1, col2, col3 = st.columns(3)
with col1:
    kpi_cards.create_metric_card(
        f"Sales, last {filters['months']} months",
        kpi_cards.format_number(rolling['total_sales'].sum(), 2, prefix="$"), icon="💵")
with col2:
    kpi_cards.create_metric_card(
        "Orders in window", kpi_cards.format_number(order_count), icon="🛒")
with col3:
    first_cohort = cohorts[cohorts['month_offset'] == 0]['customer_cnt'].sum()
    kpi_cards.create_metric_card(
        f"New customers {filters['cohort_year']}", kpi_cards.format_number(first_cohort), icon="👥")

kpi_cards.create_pending_orders_cards(pending)

st.markdown("---")

# ====================================================================
# SALES
# ====================================================================

st.header("🛍️ Sales")

st.subheader(metrics.METRICS['rolling_category_sales'].title)
if rolling.empty:
    st.info("No order lines in the snapshot.")
else:
    st.plotly_chart(charts.create_sales_trend_chart(rolling, x_col='period_label'),
                    use_container_width=True)

col_left, col_right = st.columns(2)

with col_left:
    st.subheader(metrics.METRICS['yoy_growth_top_subcategories'].title)
    if growth.empty:
        st.info("No subcategory has two consecutive years of sales.")
    else:
        st.plotly_chart(charts.create_growth_bar_chart(growth), use_container_width=True)
        for row in growth.itertuples():
            kpi_cards.create_growth_indicator(f"{row.subcategory_name} {row.yr}", row.yoy_growth_percent)

with col_right:
    st.subheader(metrics.METRICS['top_territories_by_year'].title)
    if territories.empty:
        st.info("No orders with a known territory.")
    else:
        st.plotly_chart(charts.create_grouped_bar_chart(
            territories, x_col='yr', y_col='order_qty', group_col='TerritoryID',
            title='Ordered quantity by territory'), use_container_width=True)

st.subheader(metrics.METRICS['seasonal_discount_cost'].title)
if discount.empty:
    st.info("No seasonal discount lines.")
else:
    st.plotly_chart(charts.create_grouped_bar_chart(
        discount, x_col='yr', y_col='total_discount_cost', group_col='subcategory_name',
        title='Seasonal discount cost'), use_container_width=True)

st.markdown("---")

# ====================================================================
# CUSTOMERS
# ====================================================================

st.header("👥 Customer Cohorts")

if cohorts.empty:
    st.info("No orders match the selected year and status.")
else:
    show_rate = st.toggle("Show as % of cohort size", value=False)
    matrix = metrics.cohort_retention_matrix(cohorts, as_rate=show_rate)
    st.plotly_chart(charts.create_cohort_heatmap(
        matrix, title=f"Cohort retention {filters['cohort_year']}",
        value_format='.1f' if show_rate else ',.0f'), use_container_width=True)
    with st.expander("Retention matrix"):
        st.dataframe(matrix, use_container_width=True)

st.markdown("---")

# ====================================================================
# INVENTORY
# ====================================================================

st.header("📦 Inventory")

if stock.empty:
    st.info("No work orders in the selected year.")
else:
    products = sorted(stock['product_name'].unique())
    selected = st.multiselect("Products", options=products, default=products[:5])
    st.plotly_chart(charts.create_stock_trend_chart(stock, products=selected),
                    use_container_width=True)

st.subheader(metrics.METRICS['stock_to_sales_ratio'].title)
if ratio.empty:
    st.info("No stock or sales in the selected year.")
else:
    st.plotly_chart(charts.create_scatter_plot(
        ratio, x_col='sales_qty', y_col='stock_qty', color_col='ratio',
        title='Stock vs sales per product-month', hover_data=['product_name', 'mth']),
        use_container_width=True)
    st.dataframe(ratio, use_container_width=True)
