"""Transaction store backed by SQLAlchemy.

Every operation opens its own session and hands back a fresh immutable
``Snapshot``; callers never share mutable state with the store.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv
from sqlalchemy.orm import Session, sessionmaker

from database import SessionLocal, Setting, TransactionRecord
from models import BudgetConfig, Snapshot, Transaction, TransactionKind

load_dotenv()

BUDGET_KEY = "monthly_budget"
DEFAULT_MONTHLY_BUDGET = float(os.getenv("DEFAULT_MONTHLY_BUDGET", "5000"))


def _to_model(row: TransactionRecord) -> Transaction:
    return Transaction(
        id=row.transaction_id,
        title=row.title,
        amount=row.amount,
        kind=TransactionKind(row.kind),
        date=row.date,
        created_at=row.created_at or 0,
    )


class TransactionStore:
    def __init__(self, session_factory: sessionmaker = SessionLocal, default_budget: float = DEFAULT_MONTHLY_BUDGET):
        self._session_factory = session_factory
        self._default_budget = default_budget

    def _snapshot(self, db: Session) -> Snapshot:
        rows = db.query(TransactionRecord).order_by(TransactionRecord.id).all()
        setting = db.get(Setting, BUDGET_KEY)
        limit = float(setting.value) if setting is not None else self._default_budget
        return Snapshot(
            transactions=tuple(_to_model(r) for r in rows),
            budget=BudgetConfig(monthly_limit=limit),
        )

    def get(self) -> Snapshot:
        with self._session_factory() as db:
            return self._snapshot(db)

    def append(self, transaction: Transaction) -> Snapshot:
        with self._session_factory() as db:
            exists = db.query(TransactionRecord).filter(
                TransactionRecord.transaction_id == transaction.id
            ).first()
            if exists:
                raise ValueError(f"Transaction {transaction.id} already exists")

            db.add(TransactionRecord(
                transaction_id=transaction.id,
                title=transaction.title,
                amount=float(transaction.amount),
                kind=TransactionKind(transaction.kind).value,
                date=transaction.date,
                created_at=transaction.created_at,
            ))
            db.commit()
            return self._snapshot(db)

    def remove(self, transaction_id: str) -> Snapshot:
        """Delete by id; unknown ids leave the store unchanged."""
        with self._session_factory() as db:
            db.query(TransactionRecord).filter(
                TransactionRecord.transaction_id == transaction_id
            ).delete()
            db.commit()
            return self._snapshot(db)

    def set_budget(self, value: float) -> Snapshot:
        with self._session_factory() as db:
            setting = db.get(Setting, BUDGET_KEY)
            if setting is None:
                db.add(Setting(key=BUDGET_KEY, value=repr(float(value))))
            else:
                setting.value = repr(float(value))
            db.commit()
            return self._snapshot(db)
