import unittest
from datetime import date

from database import build_engine, build_session_factory, init_db
from models import BudgetConfig, Transaction, TransactionKind
from seed_db import DEMO_ENTRIES, seed_transactions
from store import TransactionStore


def make_store(default_budget=5000.0):
    engine = build_engine("sqlite://")
    init_db(engine)
    return TransactionStore(build_session_factory(engine), default_budget=default_budget)


def sample(tid, title="Coffee", amount=12.5, kind=TransactionKind.EXPENSE, on=date(2025, 6, 1)):
    return Transaction(id=tid, title=title, amount=amount, kind=kind, date=on, created_at=1)


class TestTransactionStore(unittest.TestCase):
    def setUp(self):
        """Fresh in-memory database for every test"""
        self.store = make_store()

    def test_empty_store_uses_default_budget(self):
        snapshot = self.store.get()
        self.assertEqual(snapshot.transactions, ())
        self.assertEqual(snapshot.budget, BudgetConfig(monthly_limit=5000.0))

    def test_append_returns_new_snapshot_in_insertion_order(self):
        first = self.store.append(sample("a", title="Rent", amount=900))
        second = self.store.append(sample("b", kind=TransactionKind.INCOME, on=date(2025, 5, 2)))

        self.assertEqual([t.id for t in first.transactions], ["a"])
        self.assertEqual([t.id for t in second.transactions], ["a", "b"])
        self.assertEqual(second.transactions[1].kind, TransactionKind.INCOME)
        self.assertEqual(second.transactions[1].date, date(2025, 5, 2))
        self.assertEqual(second.transactions[0].amount, 900)

    def test_round_trip_preserves_fields(self):
        txn = Transaction(id="x1", title="Salary", amount=8000.25, kind=TransactionKind.INCOME,
                          date=date(2024, 12, 31), created_at=1735600000000)
        self.store.append(txn)
        self.assertEqual(self.store.get().transactions, (txn,))

    def test_duplicate_id_rejected(self):
        self.store.append(sample("dup"))
        with self.assertRaises(ValueError):
            self.store.append(sample("dup", title="Other"))
        self.assertEqual(len(self.store.get().transactions), 1)

    def test_remove(self):
        self.store.append(sample("a"))
        self.store.append(sample("b"))

        snapshot = self.store.remove("a")
        self.assertEqual([t.id for t in snapshot.transactions], ["b"])

    def test_remove_unknown_id_is_noop(self):
        self.store.append(sample("a"))
        snapshot = self.store.remove("missing")
        self.assertEqual([t.id for t in snapshot.transactions], ["a"])

    def test_set_budget_replaces_value(self):
        self.assertEqual(self.store.set_budget(1200).budget.monthly_limit, 1200)
        self.assertEqual(self.store.set_budget(3000.5).budget.monthly_limit, 3000.5)
        self.assertEqual(self.store.get().budget.monthly_limit, 3000.5)

    def test_snapshots_are_independent(self):
        before = self.store.get()
        self.store.append(sample("a"))
        self.store.set_budget(10)

        self.assertEqual(before.transactions, ())
        self.assertEqual(before.budget.monthly_limit, 5000.0)

    def test_stores_do_not_share_state(self):
        other = make_store(default_budget=100.0)
        self.store.append(sample("a"))
        self.assertEqual(other.get().transactions, ())
        self.assertEqual(other.get().budget.monthly_limit, 100.0)


class TestSeed(unittest.TestCase):
    def test_seed_once(self):
        store = make_store()
        today = date(2025, 6, 2)

        self.assertEqual(seed_transactions(store, today), len(DEMO_ENTRIES))
        snapshot = store.get()
        self.assertTrue(all(t.date.month == 6 and t.date.day <= 2 for t in snapshot.transactions))

        # Second run leaves existing data alone
        self.assertEqual(seed_transactions(store, today), 0)
        self.assertEqual(len(store.get().transactions), len(DEMO_ENTRIES))


if __name__ == "__main__":
    unittest.main()
