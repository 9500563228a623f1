from datetime import date

from database import init_db
from store import TransactionStore
from validation import new_transaction

DEMO_ENTRIES = [
    # (day offset from the 1st, title, amount, kind)
    (0, "Salary", 8000.0, "INCOME"),
    (0, "Rent", 2500.0, "EXPENSE"),
    (1, "Groceries", 320.5, "EXPENSE"),
    (2, "Coffee", 28.0, "EXPENSE"),
    (3, "Coffee", 32.0, "EXPENSE"),
    (4, "Metro Card", 100.0, "EXPENSE"),
]


def seed_transactions(store: TransactionStore | None = None, today: date | None = None) -> int:
    if store is None:
        init_db()
        store = TransactionStore()
    today = today or date.today()

    # Check if transactions exist
    if store.get().transactions:
        print("Transactions already exist. Skipping seed.")
        return 0

    count = 0
    for offset, title, amount, kind in DEMO_ENTRIES:
        day = min(1 + offset, today.day)
        store.append(new_transaction(title, amount, kind, on=today.replace(day=day)))
        count += 1

    print(f"Database seeded with {count} demo transactions for {today:%Y-%m}.")
    return count

if __name__ == "__main__":
    seed_transactions()
