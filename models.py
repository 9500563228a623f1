from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Tuple


class TransactionKind(str, Enum):
    EXPENSE = "EXPENSE"
    INCOME = "INCOME"


@dataclass(frozen=True)
class Transaction:
    id: str
    title: str
    amount: float
    kind: TransactionKind
    date: date
    created_at: int = 0  # epoch milliseconds


@dataclass(frozen=True)
class BudgetConfig:
    monthly_limit: float


@dataclass(frozen=True)
class DerivedStats:
    days_remaining: int = 0
    daily_available: float = 0.0
    total_expense: float = 0.0
    total_income: float = 0.0
    remaining_budget: float = 0.0


@dataclass(frozen=True)
class ChartPoint:
    day: int
    day_label: str
    income: float = 0.0
    expense: float = 0.0


@dataclass(frozen=True)
class CategorySlice:
    name: str
    amount: float
    percentage: float


@dataclass(frozen=True)
class MonthlySummary:
    """Everything the dashboard needs to render one month."""

    year: int
    month: int
    is_current_month: bool
    transactions: Tuple[Transaction, ...]
    stats: DerivedStats
    chart: Tuple[ChartPoint, ...] = field(default_factory=tuple)
    categories: Tuple[CategorySlice, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Snapshot:
    transactions: Tuple[Transaction, ...]
    budget: BudgetConfig
