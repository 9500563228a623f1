# dashboard.py: figures and cards for the monthly view

import streamlit as st
import plotly.express as px
import plotly.graph_objects as go
import pandas as pd
from typing import Sequence

from currency import format_currency
from models import CategorySlice, ChartPoint, MonthlySummary, Transaction, TransactionKind

INCOME_COLOR = "#10b981"
EXPENSE_COLOR = "#f43f5e"


def month_label(year: int, month: int) -> str:
    return pd.Timestamp(year=year, month=month, day=1).strftime("%B %Y")


def daily_trend_chart(points: Sequence[ChartPoint]):
    """
    Area chart of daily income vs expense for the month.
    """
    days = [p.day_label for p in points]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=days, y=[p.income for p in points], name="Income",
        mode="lines", line=dict(color=INCOME_COLOR, width=2, shape="spline"),
        fill="tozeroy", fillcolor="rgba(16, 185, 129, 0.15)",
    ))
    fig.add_trace(go.Scatter(
        x=days, y=[p.expense for p in points], name="Expense",
        mode="lines", line=dict(color=EXPENSE_COLOR, width=2, shape="spline"),
        fill="tozeroy", fillcolor="rgba(244, 63, 94, 0.15)",
    ))

    fig.update_layout(title="Income & Expense Trend", height=350, hovermode="x unified")
    fig.update_xaxes(title_text="Day")
    return fig


def category_chart(slices: Sequence[CategorySlice]):
    """
    Donut chart of spending by title.
    """
    by_cat = pd.DataFrame([{"Category": s.name, "Amount": s.amount} for s in slices], columns=["Category", "Amount"])

    fig = px.pie(by_cat, values="Amount", names="Category", hole=0.4, title="Spending by Category")
    fig.update_traces(textposition="inside", textinfo="percent+label", sort=False)
    return fig


def category_table(slices: Sequence[CategorySlice]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"Category": s.name, "Amount": s.amount, "Share": s.percentage} for s in slices],
        columns=["Category", "Amount", "Share"],
    )


def transactions_table(transactions: Sequence[Transaction]) -> pd.DataFrame:
    """Newest entries first, amounts signed by kind."""
    rows = [{
        "Date": t.date,
        "Title": t.title,
        "Type": TransactionKind(t.kind).value.title(),
        "Amount": -t.amount if t.kind == TransactionKind.EXPENSE else t.amount,
        "CreatedAt": t.created_at,
        "ID": t.id,
    } for t in transactions]

    df = pd.DataFrame(rows, columns=["Date", "Title", "Type", "Amount", "CreatedAt", "ID"])
    return df.sort_values("CreatedAt", ascending=False, kind="stable").reset_index(drop=True)


def _kpis(summary: MonthlySummary, monthly_budget: float):
    """
    Hero card plus income/expense/budget metrics.

    The current month is about what is left to spend per day; any other
    month shows how it ended against the budget.
    """
    stats = summary.stats

    if summary.is_current_month:
        st.caption("Available today (daily average)")
        st.markdown(f"## {format_currency(stats.daily_available)}")
        col1, col2 = st.columns(2)
        col1.metric("Budget left this month", format_currency(stats.remaining_budget))
        col2.metric("Days until month end", f"{stats.days_remaining} days")
    else:
        st.caption("Final balance for the month")
        st.markdown(f"## {format_currency(stats.remaining_budget)}")
        col1, col2 = st.columns(2)
        col1.metric("Monthly budget", format_currency(monthly_budget))
        col2.metric("Status", "History")

    col1, col2, col3 = st.columns(3)
    col1.metric("💸 Spent", format_currency(stats.total_expense))
    col2.metric("💰 Income", format_currency(stats.total_income))
    col3.metric("🎯 Monthly Budget", format_currency(monthly_budget))

    if monthly_budget > 0:
        st.caption("Budget used")
        st.progress(min(1.0, max(0.0, stats.total_expense / monthly_budget)))
        if stats.remaining_budget < 0:
            st.warning(f"Over budget by {format_currency(abs(stats.remaining_budget))}.")
