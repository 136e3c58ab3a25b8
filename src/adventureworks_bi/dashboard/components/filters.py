"""
Sidebar filters for the metric parameters
Years and statuses are read from the snapshot
"""

from typing import Any, Dict, List

import streamlit as st

from adventureworks_bi import config


class DashboardFilters:
    """Manages the metric parameter widgets and their state"""

    def __init__(self, db_connector):
        """
        Initialize filter manager

        Args:
            db_connector: DatabaseConnector instance
        """
        self.db = db_connector

    def render_sidebar_filters(self) -> Dict[str, Any]:
        """
        Render all parameter widgets in the Streamlit sidebar

        Returns:
            Dictionary of selected parameter values
        """
        st.sidebar.header("🔍 Parameters")
        st.sidebar.markdown("---")

        filters = {}

        st.sidebar.subheader("📈 Sales")
        filters['months'] = st.sidebar.slider(
            "Rolling window (months)", min_value=1, max_value=36,
            value=config.DEFAULT_ROLLING_MONTHS, key="months_filter"
        )
        filters['top_n'] = st.sidebar.slider(
            "Top N (dense rank)", min_value=1, max_value=10,
            value=config.DEFAULT_TOP_N, key="top_n_filter"
        )

        st.sidebar.markdown("---")
        st.sidebar.subheader("👥 Cohorts")
        filters['cohort_year'] = self._render_year_select(
            "Cohort year", "SalesOrderHeader", config.DEFAULT_COHORT_YEAR, "cohort_year_filter")
        filters['cohort_status'] = self._render_status_select(
            "Order status", "SalesOrderHeader", config.DEFAULT_COHORT_STATUS, "cohort_status_filter")

        st.sidebar.markdown("---")
        st.sidebar.subheader("📦 Inventory")
        filters['stock_year'] = self._render_year_select(
            "Stock year", "WorkOrder", config.DEFAULT_STOCK_YEAR, "stock_year_filter")

        st.sidebar.markdown("---")
        st.sidebar.subheader("🧾 Purchasing")
        filters['purchase_year'] = self._render_year_select(
            "Purchase year", "PurchaseOrderHeader", config.DEFAULT_PURCHASE_YEAR, "purchase_year_filter")
        filters['purchase_status'] = self._render_status_select(
            "Purchase status", "PurchaseOrderHeader", config.DEFAULT_PENDING_STATUS, "purchase_status_filter")

        return filters

    def _render_year_select(self, label: str, table: str, default: int, key: str) -> int:
        years = self.db.get_distinct_years(table) or [default]
        index = years.index(default) if default in years else 0
        return st.sidebar.selectbox(label, options=years, index=index, key=key)

    def _render_status_select(self, label: str, table: str, default: int, key: str) -> int:
        statuses = self._get_statuses(table) or [default]
        index = statuses.index(default) if default in statuses else 0
        return st.sidebar.selectbox(label, options=statuses, index=index, key=key)

    def _get_statuses(self, table: str) -> List[int]:
        query = f"SELECT DISTINCT Status FROM {table} WHERE Status IS NOT NULL ORDER BY Status"
        result = self.db.execute_query(query)
        return [int(s) for s in result['Status']]

    @staticmethod
    def get_filter_summary(filters: Dict[str, Any]) -> str:
        """
        Generate human-readable parameter summary

        Args:
            filters: Dictionary of parameter values

        Returns:
            Summary string
        """
        summary_parts = []

        if filters.get('months'):
            summary_parts.append(f"📅 last {filters['months']} month(s)")
        if filters.get('top_n'):
            summary_parts.append(f"🏆 top {filters['top_n']}")
        if filters.get('cohort_year'):
            summary_parts.append(f"👥 cohorts {filters['cohort_year']} (status {filters.get('cohort_status')})")
        if filters.get('stock_year'):
            summary_parts.append(f"📦 stock {filters['stock_year']}")
        if filters.get('purchase_year'):
            summary_parts.append(
                f"🧾 purchases {filters['purchase_year']} (status {filters.get('purchase_status')})")

        return " | ".join(summary_parts) if summary_parts else "Default parameters"
