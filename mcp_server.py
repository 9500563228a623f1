"""Lightweight MCP-aligned server exposing the tracker's tools over FastAPI."""

import datetime
from dataclasses import asdict
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from aggregator import summarize_month
from insights import get_financial_advice
from models import Snapshot, Transaction, TransactionKind
from store import TransactionStore
from validation import new_transaction

app = FastAPI(title="FreshFin MCP Server", version="0.1.0")


def get_store() -> TransactionStore:
    return TransactionStore()


def get_today() -> datetime.date:
    return datetime.date.today()


class TransactionOut(BaseModel):
    id: str
    title: str
    amount: float
    kind: TransactionKind
    date: datetime.date
    created_at: int


class SnapshotResponse(BaseModel):
    transactions: List[TransactionOut]
    monthly_budget: float


class StatsOut(BaseModel):
    days_remaining: int
    daily_available: float
    total_expense: float
    total_income: float
    remaining_budget: float


class ChartPointOut(BaseModel):
    day: int
    day_label: str
    income: float
    expense: float


class CategorySliceOut(BaseModel):
    name: str
    amount: float
    percentage: float


def _transaction_out(t: Transaction) -> TransactionOut:
    return TransactionOut(id=t.id, title=t.title, amount=t.amount, kind=t.kind, date=t.date, created_at=t.created_at)


def _snapshot_response(snapshot: Snapshot) -> SnapshotResponse:
    return SnapshotResponse(
        transactions=[_transaction_out(t) for t in snapshot.transactions],
        monthly_budget=snapshot.budget.monthly_limit,
    )


@app.get("/tools/get_snapshot", response_model=SnapshotResponse)
async def get_snapshot(store: TransactionStore = Depends(get_store)):
    return _snapshot_response(store.get())


class MonthSummaryRequest(BaseModel):
    year: int = Field(..., ge=1, le=9999)
    month: int = Field(..., ge=1, le=12)


class MonthSummaryResponse(BaseModel):
    year: int
    month: int
    is_current_month: bool
    monthly_budget: float
    stats: StatsOut
    chart: List[ChartPointOut]
    categories: List[CategorySliceOut]
    transactions: List[TransactionOut]


@app.post("/tools/get_month_summary", response_model=MonthSummaryResponse)
async def get_month_summary(
    req: MonthSummaryRequest,
    store: TransactionStore = Depends(get_store),
    today: datetime.date = Depends(get_today),
):
    snapshot = store.get()
    budget = snapshot.budget.monthly_limit
    summary = summarize_month(snapshot.transactions, req.year, req.month, budget, today)

    return MonthSummaryResponse(
        year=summary.year,
        month=summary.month,
        is_current_month=summary.is_current_month,
        monthly_budget=budget,
        stats=StatsOut(**asdict(summary.stats)),
        chart=[ChartPointOut(**asdict(p)) for p in summary.chart],
        categories=[CategorySliceOut(**asdict(c)) for c in summary.categories],
        transactions=[_transaction_out(t) for t in summary.transactions],
    )


class AddTransactionRequest(BaseModel):
    title: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    kind: TransactionKind = TransactionKind.EXPENSE
    date: Optional[datetime.date] = Field(None, description="Defaults to today")


@app.post("/tools/add_transaction", response_model=SnapshotResponse)
async def add_transaction(
    req: AddTransactionRequest,
    store: TransactionStore = Depends(get_store),
    today: datetime.date = Depends(get_today),
):
    try:
        txn = new_transaction(req.title, req.amount, req.kind, on=req.date or today)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _snapshot_response(store.append(txn))


class DeleteTransactionRequest(BaseModel):
    id: str


@app.post("/tools/delete_transaction", response_model=SnapshotResponse)
async def delete_transaction(req: DeleteTransactionRequest, store: TransactionStore = Depends(get_store)):
    return _snapshot_response(store.remove(req.id))


class SetBudgetRequest(BaseModel):
    monthly_limit: float = Field(..., gt=0)


@app.post("/tools/set_budget", response_model=SnapshotResponse)
async def set_budget(req: SetBudgetRequest, store: TransactionStore = Depends(get_store)):
    return _snapshot_response(store.set_budget(req.monthly_limit))


class AdviceResponse(BaseModel):
    advice: str


@app.post("/tools/get_financial_advice", response_model=AdviceResponse)
def get_advice(store: TransactionStore = Depends(get_store), today: datetime.date = Depends(get_today)):
    snapshot = store.get()
    advice = get_financial_advice(snapshot.transactions, snapshot.budget.monthly_limit, today)
    return AdviceResponse(advice=advice)


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("mcp_server:app", host="0.0.0.0", port=8001, reload=True)
