"""Monthly aggregation: stats, daily trend series and category breakdown.

Everything here is a pure function of the transaction list, the month being
viewed, the monthly budget and "today". Nothing touches the database or the
advice service.
"""

from __future__ import annotations

import calendar
from datetime import date
from typing import Iterable, List, Sequence, Tuple

import pandas as pd

from models import (
    CategorySlice,
    ChartPoint,
    DerivedStats,
    MonthlySummary,
    Transaction,
    TransactionKind,
)

COLUMNS = ["id", "title", "amount", "kind", "date", "created_at"]
KIND_COLUMNS = [TransactionKind.INCOME.value, TransactionKind.EXPENSE.value]


def transactions_to_df(transactions: Iterable[Transaction]) -> pd.DataFrame:
    rows = [
        {
            "id": t.id,
            "title": t.title,
            "amount": float(t.amount),
            "kind": TransactionKind(t.kind).value,
            "date": t.date,
            "created_at": t.created_at,
        }
        for t in transactions
    ]
    if not rows:
        return pd.DataFrame(columns=COLUMNS)
    return pd.DataFrame(rows, columns=COLUMNS)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def is_current_month(year: int, month: int, today: date) -> bool:
    return year == today.year and month == today.month


def is_future_month(year: int, month: int, today: date) -> bool:
    return (year, month) > (today.year, today.month)


def shift_month(year: int, month: int, offset: int) -> Tuple[int, int]:
    """Move (year, month) by offset months, e.g. (2025, 1, -1) -> (2024, 12)."""
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def filter_by_month(transactions: Iterable[Transaction], year: int, month: int) -> List[Transaction]:
    return [t for t in transactions if t.date.year == year and t.date.month == month]


def _totals(df: pd.DataFrame) -> Tuple[float, float]:
    if df.empty:
        return 0.0, 0.0
    by_kind = df.groupby("kind")["amount"].sum()
    return (
        float(by_kind.get(TransactionKind.EXPENSE.value, 0.0)),
        float(by_kind.get(TransactionKind.INCOME.value, 0.0)),
    )


def compute_stats(
    subset: Sequence[Transaction],
    budget: float,
    is_current: bool,
    today: date,
) -> DerivedStats:
    total_expense, total_income = _totals(transactions_to_df(subset))
    remaining_budget = budget - total_expense

    days_remaining = 0
    daily_available = 0.0
    if is_current:
        last_day = days_in_month(today.year, today.month)
        days_remaining = max(1, last_day - today.day + 1)
        # Over-budget months report no daily allowance rather than a negative one
        daily_available = max(0.0, remaining_budget / days_remaining)

    return DerivedStats(
        days_remaining=days_remaining,
        daily_available=daily_available,
        total_expense=total_expense,
        total_income=total_income,
        remaining_budget=remaining_budget,
    )


def build_chart_series(
    subset: Sequence[Transaction],
    year: int,
    month: int,
    is_current: bool,
    today: date,
) -> List[ChartPoint]:
    last_day = days_in_month(year, month)
    if is_current:
        show_until = today.day
    elif is_future_month(year, month, today):
        show_until = 0
    else:
        show_until = last_day

    if show_until == 0:
        return []

    index = pd.RangeIndex(1, last_day + 1, name="day")
    df = transactions_to_df(filter_by_month(subset, year, month))
    if df.empty:
        daily = pd.DataFrame(0.0, index=index, columns=KIND_COLUMNS)
    else:
        df["day"] = [d.day for d in df["date"]]
        daily = (
            df.groupby(["day", "kind"])["amount"]
            .sum()
            .unstack("kind")
            .reindex(index=index, columns=KIND_COLUMNS)
            .fillna(0.0)
        )

    return [
        ChartPoint(
            day=int(day),
            day_label=str(day),
            income=float(row[TransactionKind.INCOME.value]),
            expense=float(row[TransactionKind.EXPENSE.value]),
        )
        for day, row in daily.head(show_until).iterrows()
    ]


def build_category_breakdown(subset: Sequence[Transaction]) -> List[CategorySlice]:
    """Group expenses by title, largest first.

    Titles double as categories; ties keep the order in which the title was
    first seen.
    """
    df = transactions_to_df(subset)
    expenses = df[df["kind"] == TransactionKind.EXPENSE.value]
    total_expense = float(expenses["amount"].sum()) if not expenses.empty else 0.0
    if total_expense == 0:
        return []

    by_title = (
        expenses.groupby("title", sort=False)["amount"]
        .sum()
        .sort_values(key=lambda amounts: -amounts, kind="stable")
    )
    return [
        CategorySlice(
            name=str(name),
            amount=float(amount),
            percentage=float(amount) / total_expense * 100,
        )
        for name, amount in by_title.items()
    ]


def summarize_month(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
    budget: float,
    today: date,
) -> MonthlySummary:
    subset = filter_by_month(transactions, year, month)
    current = is_current_month(year, month, today)
    return MonthlySummary(
        year=year,
        month=month,
        is_current_month=current,
        transactions=tuple(subset),
        stats=compute_stats(subset, budget, current, today),
        chart=tuple(build_chart_series(subset, year, month, current, today)),
        categories=tuple(build_category_breakdown(subset)),
    )
