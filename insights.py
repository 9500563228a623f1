"""AI budget advice for the current month.

Builds a short prompt from this month's totals and top spending titles and
asks Gemini for a friendly two-or-three sentence insight. The dashboard
never waits on this: stats and charts come from ``aggregator`` alone.
"""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import date
from typing import Callable, Optional, Sequence

import google.generativeai as genai
from dotenv import load_dotenv

from aggregator import build_category_breakdown, compute_stats, filter_by_month
from currency import format_currency
from models import Transaction

load_dotenv()

logger = logging.getLogger(__name__)

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
ADVICE_TIMEOUT_SECONDS = float(os.getenv("ADVICE_TIMEOUT_SECONDS", "30"))

MISSING_KEY_MESSAGE = "API Key is missing. Please check your configuration."
EMPTY_RESPONSE_MESSAGE = "No insight available at the moment."
FAILURE_MESSAGE = "Could not generate advice at this time. Please try again later."

TOP_N = 3


def compute_highlights(transactions: Sequence[Transaction], budget: float, today: Optional[date] = None) -> dict:
    """Summarize the month containing ``today`` for the advice prompt."""

    today = today or date.today()
    month_txns = filter_by_month(transactions, today.year, today.month)
    stats = compute_stats(month_txns, budget, True, today)
    top = build_category_breakdown(month_txns)[:TOP_N]

    return {
        "month": f"{today.year}-{today.month:02d}",
        "budget": float(budget),
        "spend": stats.total_expense,
        "income": stats.total_income,
        "remaining": stats.remaining_budget,
        "top_spending": [(s.name, s.amount) for s in top],
    }


def build_advice_prompt(highlights: dict) -> str:
    top = ", ".join(f"{name}: {format_currency(amount)}" for name, amount in highlights["top_spending"])

    return f"""
You are a helpful, encouraging financial assistant for a daily expense tracker app.

Current Month Context ({highlights['month']}):
- Monthly Budget: {format_currency(highlights['budget'])}
- Total Spent: {format_currency(highlights['spend'])}
- Total Income: {format_currency(highlights['income'])}
- Top Expenses: {top or 'None'}
- Remaining Budget: {format_currency(highlights['remaining'])}

Please provide a brief, friendly, and actionable financial insight or advice (max 3 sentences).
If they are over budget, be gentle but firm. If they are saving well, congratulate them.
Use emojis to make it lively.
""".strip()


def _build_model(api_key: str):
    genai.configure(api_key=api_key)
    return genai.GenerativeModel(GEMINI_MODEL)


def get_financial_advice(
    transactions: Sequence[Transaction],
    budget: float,
    today: Optional[date] = None,
    model=None,
    api_key: Optional[str] = None,
) -> str:
    """Ask Gemini for advice on this month; always returns displayable text."""

    if model is None:
        api_key = api_key if api_key is not None else GEMINI_API_KEY
        if not api_key:
            return MISSING_KEY_MESSAGE
        model = _build_model(api_key)

    prompt = build_advice_prompt(compute_highlights(transactions, budget, today))

    try:
        response = model.generate_content(prompt)
        text = response.text
    except Exception as e:
        logger.error("Gemini API error: %s", e)
        return FAILURE_MESSAGE

    return text.strip() if text and text.strip() else EMPTY_RESPONSE_MESSAGE


class AdviceRequester:
    """Runs advice requests off the UI thread, at most one that matters at a time.

    ``submit`` supersedes whatever was in flight; a superseded or cancelled
    request's answer is never returned by ``result``.
    """

    def __init__(self, fetch: Callable[..., str] = get_financial_advice, executor: Optional[ThreadPoolExecutor] = None):
        self._fetch = fetch
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="advice")
        self._lock = threading.Lock()
        self._future: Optional[Future] = None

    def submit(self, *args, **kwargs) -> Future:
        with self._lock:
            if self._future is not None:
                self._future.cancel()
            self._future = self._executor.submit(self._fetch, *args, **kwargs)
            return self._future

    def cancel(self) -> None:
        with self._lock:
            if self._future is not None:
                self._future.cancel()
            self._future = None

    @property
    def in_flight(self) -> bool:
        with self._lock:
            return self._future is not None and not self._future.done()

    def result(self, timeout: Optional[float] = ADVICE_TIMEOUT_SECONDS) -> Optional[str]:
        """Wait for the latest request; None if there is none or it was dropped."""
        with self._lock:
            future = self._future
        if future is None:
            return None
        try:
            text = future.result(timeout=timeout)
        except CancelledError:
            return None
        except FutureTimeoutError:
            logger.warning("Advice request timed out after %ss", timeout)
            with self._lock:
                if self._future is future:
                    future.cancel()
                    self._future = None
            return None
        with self._lock:
            if future is not self._future:
                return None
        return text

    def shutdown(self) -> None:
        self.cancel()
        self._executor.shutdown(wait=False)
