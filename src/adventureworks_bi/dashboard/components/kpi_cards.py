"""
Reusable KPI card components
"""

import math

import streamlit as st


def format_number(value, decimals=0, prefix="", suffix=""):
    """
    Format a KPI value for display, "—" for missing values

    Args:
        value (float): Value to display
        decimals (int): Decimal places
        prefix (str): e.g. currency symbol
        suffix (str): e.g. "%"
    """
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "—"
    return f"{prefix}{value:,.{decimals}f}{suffix}"


def create_metric_card(title, value, delta=None, delta_color="normal", icon=""):
    """
    Render a KPI card

    Args:
        title (str): KPI title
        value (str/float): Value to display
        delta (str): Optional variation
        delta_color (str): normal/inverse/off
        icon (str): Emoji or icon
    """
    st.metric(
        label=f"{icon} {title}".strip(),
        value=value,
        delta=delta,
        delta_color=delta_color
    )


def create_pending_orders_cards(pending_df):
    """Render count and value cards from a pending_purchase_orders result"""
    col1, col2 = st.columns(2)

    if pending_df.empty:
        count, value = 0, 0.0
    else:
        count = int(pending_df["order_count"].sum())
        value = float(pending_df["total_value"].sum())

    with col1:
        create_metric_card("Pending Purchase Orders", format_number(count), icon="🧾")
    with col2:
        create_metric_card("Pending Value", format_number(value, 2, prefix="$"), icon="💰")


def create_growth_indicator(subcategory, growth_pct):
    """Show a trend message for one year-over-year growth value"""
    if growth_pct is None or (isinstance(growth_pct, float) and math.isnan(growth_pct)):
        st.info(f"➡️ {subcategory}: no comparable previous year")
    elif growth_pct > 0:
        st.success(f"📈 {subcategory} up {growth_pct:.1f}%")
    elif growth_pct < 0:
        st.error(f"📉 {subcategory} down {abs(growth_pct):.1f}%")
    else:
        st.info(f"➡️ {subcategory} stable")
