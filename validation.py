"""Input checks for the add-transaction and budget forms.

The aggregator assumes well-formed records; everything typed by a user or
posted to the API goes through here first. Failures raise ``ValueError``
with a message fit to show next to the form.
"""

from __future__ import annotations

import math
import time
import uuid
from datetime import date
from typing import Optional, Union

from models import BudgetConfig, Transaction, TransactionKind

Number = Union[str, int, float]


def _parse_positive(raw: Number, label: str) -> float:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ValueError(f"{label} is required.")
    try:
        value = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError):
        raise ValueError(f"{label} must be a number.") from None
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{label} must be greater than zero.")
    return value


def parse_amount(raw: Number) -> float:
    return _parse_positive(raw, "Amount")


def parse_title(raw: Optional[str]) -> str:
    title = (raw or "").strip()
    if not title:
        raise ValueError("Title is required.")
    return title


def parse_kind(raw: Union[str, TransactionKind]) -> TransactionKind:
    if isinstance(raw, TransactionKind):
        return raw
    try:
        return TransactionKind(str(raw).strip().upper())
    except ValueError:
        raise ValueError("Type must be EXPENSE or INCOME.") from None


def parse_budget(raw: Number) -> BudgetConfig:
    return BudgetConfig(monthly_limit=_parse_positive(raw, "Monthly budget"))


def new_transaction(
    title: Optional[str],
    amount: Number,
    kind: Union[str, TransactionKind] = TransactionKind.EXPENSE,
    on: Optional[date] = None,
    now: Optional[int] = None,
) -> Transaction:
    """Build a validated transaction, dated today unless ``on`` is given."""
    return Transaction(
        id=str(uuid.uuid4()),
        title=parse_title(title),
        amount=parse_amount(amount),
        kind=parse_kind(kind),
        date=on or date.today(),
        created_at=now if now is not None else time.time_ns() // 1_000_000,
    )
