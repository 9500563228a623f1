import threading
import unittest
from datetime import date
from types import SimpleNamespace

from insights import (
    EMPTY_RESPONSE_MESSAGE,
    FAILURE_MESSAGE,
    MISSING_KEY_MESSAGE,
    AdviceRequester,
    build_advice_prompt,
    compute_highlights,
    get_financial_advice,
)
from models import Transaction, TransactionKind

TODAY = date(2025, 6, 15)


def txn(title, amount, kind=TransactionKind.EXPENSE, on=TODAY):
    return Transaction(id=f"{title}-{amount}-{on}", title=title, amount=amount, kind=kind, date=on)


class FakeModel:
    def __init__(self, text="Nice work! 🎉", error=None):
        self.text = text
        self.error = error
        self.prompts = []

    def generate_content(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


class TestHighlights(unittest.TestCase):
    def test_only_current_month_counts(self):
        transactions = [
            txn("Rent", 900),
            txn("Coffee", 30),
            txn("Coffee", 20),
            txn("Salary", 3000, TransactionKind.INCOME),
            txn("Old", 500, on=date(2025, 5, 20)),
        ]
        highlights = compute_highlights(transactions, 2000, TODAY)

        self.assertEqual(highlights["month"], "2025-06")
        self.assertEqual(highlights["spend"], 950)
        self.assertEqual(highlights["income"], 3000)
        self.assertEqual(highlights["remaining"], 1050)
        self.assertEqual(highlights["top_spending"], [("Rent", 900), ("Coffee", 50)])

    def test_top_three_only(self):
        transactions = [txn(name, amount) for name, amount in [("A", 40), ("B", 30), ("C", 20), ("D", 10)]]
        highlights = compute_highlights(transactions, 1000, TODAY)
        self.assertEqual([name for name, _ in highlights["top_spending"]], ["A", "B", "C"])

    def test_prompt_mentions_context(self):
        highlights = compute_highlights([txn("Groceries", 120)], 1000, TODAY)
        prompt = build_advice_prompt(highlights)

        self.assertIn("Groceries", prompt)
        self.assertIn("120.00", prompt)
        self.assertIn("880.00", prompt)
        self.assertIn("max 3 sentences", prompt)

    def test_prompt_without_expenses(self):
        prompt = build_advice_prompt(compute_highlights([], 1000, TODAY))
        self.assertIn("Top Expenses: None", prompt)


class TestGetFinancialAdvice(unittest.TestCase):
    def test_missing_key(self):
        self.assertEqual(get_financial_advice([], 1000, TODAY, api_key=""), MISSING_KEY_MESSAGE)

    def test_returns_model_text(self):
        model = FakeModel(text="  Keep it up! 💪 ")
        advice = get_financial_advice([txn("Tea", 10)], 1000, TODAY, model=model)

        self.assertEqual(advice, "Keep it up! 💪")
        self.assertEqual(len(model.prompts), 1)
        self.assertIn("Tea", model.prompts[0])

    def test_empty_response(self):
        self.assertEqual(get_financial_advice([], 1000, TODAY, model=FakeModel(text="")), EMPTY_RESPONSE_MESSAGE)
        self.assertEqual(get_financial_advice([], 1000, TODAY, model=FakeModel(text=None)), EMPTY_RESPONSE_MESSAGE)

    def test_api_error_falls_back(self):
        model = FakeModel(error=RuntimeError("quota exceeded"))
        with self.assertLogs("insights", level="ERROR"):
            advice = get_financial_advice([], 1000, TODAY, model=model)
        self.assertEqual(advice, FAILURE_MESSAGE)


class TestAdviceRequester(unittest.TestCase):
    def setUp(self):
        self.gate = threading.Event()

    def tearDown(self):
        self.gate.set()
        self.requester.shutdown()

    def test_result_of_single_request(self):
        self.requester = AdviceRequester(fetch=lambda n: f"advice {n}")
        self.requester.submit(1)
        self.assertEqual(self.requester.result(timeout=5), "advice 1")

    def test_no_request_yields_none(self):
        self.requester = AdviceRequester(fetch=lambda: "x")
        self.assertIsNone(self.requester.result(timeout=1))
        self.assertFalse(self.requester.in_flight)

    def test_newer_request_supersedes_older(self):
        started = threading.Event()

        def fetch(n):
            if n == 1:
                started.set()
                self.gate.wait(5)
            return f"advice {n}"

        self.requester = AdviceRequester(fetch=fetch)
        first = self.requester.submit(1)
        started.wait(5)
        self.requester.submit(2)
        self.assertTrue(self.requester.in_flight)

        self.gate.set()
        self.assertEqual(self.requester.result(timeout=5), "advice 2")
        self.assertEqual(first.result(timeout=5), "advice 1")

    def test_cancel_discards_answer(self):
        def fetch():
            self.gate.wait(5)
            return "late"

        self.requester = AdviceRequester(fetch=fetch)
        self.requester.submit()
        self.requester.cancel()
        self.gate.set()

        self.assertIsNone(self.requester.result(timeout=5))
        self.assertFalse(self.requester.in_flight)

    def test_timeout_drops_request(self):
        def fetch():
            self.gate.wait(5)
            return "too slow"

        self.requester = AdviceRequester(fetch=fetch)
        self.requester.submit()
        with self.assertLogs("insights", level="WARNING"):
            self.assertIsNone(self.requester.result(timeout=0.05))
        self.assertFalse(self.requester.in_flight)


if __name__ == "__main__":
    unittest.main()
