"""
Chart Generation Functions
Reusable plotly charts for the metric results
"""

from typing import Optional

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

# Color schemes
COLOR_SCHEMES = {
    'sales': ['#3498db', '#2ecc71', '#e74c3c', '#f39c12', '#9b59b6'],
    'growth': ['#27ae60', '#16a085', '#2ecc71', '#27ae60', '#1e8449'],
    'default': px.colors.qualitative.Set3
}


def _style_axes(fig: go.Figure) -> go.Figure:
    fig.update_xaxes(showgrid=True, gridwidth=1, gridcolor='lightgray')
    fig.update_yaxes(showgrid=True, gridwidth=1, gridcolor='lightgray')
    return fig


def create_sales_trend_chart(df: pd.DataFrame,
                             x_col: str = 'period',
                             y_col: str = 'total_sales',
                             color_col: str = 'subcategory_name',
                             title: str = 'Sales by Subcategory') -> go.Figure:
    """
    Create time series line chart, one line per subcategory

    Args:
        df: rolling_category_sales result
        x_col: Column name for x-axis (periods)
        y_col: Column name for y-axis
        color_col: Column splitting the lines
        title: Chart title

    Returns:
        Plotly Figure object
    """
    plot_df = df.copy()
    plot_df[color_col] = plot_df[color_col].fillna('Unassigned')
    plot_df = plot_df.sort_values([x_col, color_col])

    fig = px.line(
        plot_df,
        x=x_col,
        y=y_col,
        color=color_col,
        title=title,
        markers=True,
        color_discrete_sequence=COLOR_SCHEMES['default']
    )

    fig.update_layout(
        hovermode='x unified',
        xaxis_title=None,
        yaxis_title='Sales',
        legend_title_text=None,
        font=dict(size=12),
        plot_bgcolor='rgba(0,0,0,0)',
        paper_bgcolor='rgba(0,0,0,0)'
    )

    return _style_axes(fig)


def create_growth_bar_chart(df: pd.DataFrame,
                            value_col: str = 'yoy_growth_percent',
                            label_cols: tuple = ('subcategory_name', 'yr'),
                            title: str = 'YoY Growth (%)') -> go.Figure:
    """
    Create horizontal bar chart of growth rates, one bar per row

    Bars are labelled by joining label_cols ("Road Bikes 2012") and colored
    by sign. Rows with a null growth value are skipped.

    Args:
        df: yoy_growth_top_subcategories result
        value_col: Column holding the growth percentage
        label_cols: Columns joined into the bar label
        title: Chart title
    """
    plot_df = df.dropna(subset=[value_col]).copy()
    plot_df['label'] = plot_df[list(label_cols)].astype(str).agg(' '.join, axis=1)
    plot_df['direction'] = np.where(plot_df[value_col] < 0, 'Decline', 'Growth')

    fig = px.bar(
        plot_df,
        x=value_col,
        y='label',
        orientation='h',
        title=title,
        color='direction',
        color_discrete_map={'Growth': COLOR_SCHEMES['growth'][0], 'Decline': COLOR_SCHEMES['sales'][2]},
        text=value_col
    )

    fig.update_traces(texttemplate='%{text:.1f}%', textposition='outside')
    fig.update_layout(
        yaxis={'categoryorder': 'total ascending'},
        xaxis_title=None,
        yaxis_title=None,
        showlegend=False,
        font=dict(size=11)
    )

    return _style_axes(fig)


def create_grouped_bar_chart(df: pd.DataFrame,
                             x_col: str,
                             y_col: str,
                             group_col: str,
                             title: str = 'Grouped Comparison') -> go.Figure:
    """Create grouped bar chart, e.g. territories side by side within each year"""
    plot_df = df.copy()
    plot_df[group_col] = plot_df[group_col].astype(str)
    plot_df[x_col] = plot_df[x_col].astype(str)

    fig = px.bar(
        plot_df,
        x=x_col,
        y=y_col,
        color=group_col,
        barmode='group',
        title=title,
        color_discrete_sequence=COLOR_SCHEMES['sales']
    )

    fig.update_layout(
        xaxis_title=None,
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        font=dict(size=12),
        plot_bgcolor='rgba(0,0,0,0)'
    )

    fig.update_xaxes(showgrid=False)
    fig.update_yaxes(showgrid=True, gridwidth=1, gridcolor='lightgray')

    return fig


def create_cohort_heatmap(matrix: pd.DataFrame,
                          title: str = 'Cohort Retention',
                          color_scale: str = 'Blues',
                          value_format: str = ',.0f') -> go.Figure:
    """
    Create heatmap for a cohort x period matrix

    Args:
        matrix: Output of metrics.cohort_retention_matrix
        title: Chart title
        color_scale: Plotly color scale name
        value_format: d3 format for hover values

    Returns:
        Plotly Figure object
    """
    fig = go.Figure(data=go.Heatmap(
        z=matrix.values,
        x=list(matrix.columns),
        y=[f"Month {m}" for m in matrix.index],
        colorscale=color_scale,
        hovertemplate='%{y}<br>%{x}<br>Value: %{z:' + value_format + '}<extra></extra>'
    ))

    fig.update_layout(
        title=title,
        xaxis_title='Months since first purchase',
        yaxis_title=None,
        yaxis={'autorange': 'reversed'},
        font=dict(size=11)
    )

    return fig


def create_stock_trend_chart(df: pd.DataFrame,
                             products: Optional[list] = None,
                             title: str = 'Monthly Stock Level') -> go.Figure:
    """
    Create multi-line chart of stocked quantity per product

    Args:
        df: monthly_stock_trend result
        products: Optional subset of product names to plot
        title: Chart title
    """
    plot_df = df if not products else df[df['product_name'].isin(products)]
    plot_df = plot_df.sort_values(['product_name', 'mth'])

    fig = px.line(
        plot_df,
        x='mth',
        y='stock_qty',
        color='product_name',
        title=title,
        markers=True,
        hover_data=['mom_diff_percent']
    )

    fig.update_layout(
        hovermode='x unified',
        xaxis_title='Month',
        yaxis_title='Stocked quantity',
        legend_title_text=None,
        font=dict(size=12),
        plot_bgcolor='rgba(0,0,0,0)'
    )
    fig.update_xaxes(dtick=1)

    return _style_axes(fig)


def create_scatter_plot(df: pd.DataFrame,
                        x_col: str,
                        y_col: str,
                        size_col: Optional[str] = None,
                        color_col: Optional[str] = None,
                        title: str = 'Scatter Analysis',
                        hover_data: Optional[list] = None) -> go.Figure:
    """
    Create scatter plot for correlation analysis

    Null values in the plotted columns are drawn as 0.
    """
    plot_cols = [c for c in (x_col, y_col, size_col) if c]
    plot_df = df.copy()
    plot_df[plot_cols] = plot_df[plot_cols].fillna(0)

    fig = px.scatter(
        plot_df,
        x=x_col,
        y=y_col,
        size=size_col,
        color=color_col,
        title=title,
        hover_data=hover_data,
        color_continuous_scale='Viridis'
    )

    fig.update_traces(marker=dict(line=dict(width=0.5, color='white')))

    fig.update_layout(
        font=dict(size=12),
        plot_bgcolor='rgba(0,0,0,0)'
    )

    return _style_axes(fig)
