import streamlit as st
from pathlib import Path
import sys
from datetime import date

# Add current directory to path
sys.path.append(str(Path(__file__).parent))

from database import init_db
from store import TransactionStore
from aggregator import summarize_month, shift_month, is_current_month
from dashboard import _kpis, daily_trend_chart, category_chart, category_table, transactions_table, month_label
from insights import AdviceRequester
from validation import new_transaction, parse_budget
from currency import format_currency, format_signed
from models import TransactionKind

# --- Configuration ---
st.set_page_config(page_title="FreshFin", layout="centered", page_icon="💰")

# --- Database / Store ---
init_db()


@st.cache_resource
def get_store() -> TransactionStore:
    return TransactionStore()


def get_requester() -> AdviceRequester:
    if "advice_requester" not in st.session_state:
        st.session_state["advice_requester"] = AdviceRequester()
    return st.session_state["advice_requester"]


def reset_advice():
    get_requester().cancel()
    st.session_state["advice"] = None


def change_month(offset: int):
    year, month = shift_month(st.session_state["view_year"], st.session_state["view_month"], offset)
    st.session_state["view_year"] = year
    st.session_state["view_month"] = month
    # Advice belongs to the month it was asked about
    reset_advice()


today = date.today()
if "view_year" not in st.session_state:
    st.session_state["view_year"] = today.year
    st.session_state["view_month"] = today.month
    st.session_state["advice"] = None

store = get_store()
snapshot = store.get()
monthly_budget = snapshot.budget.monthly_limit

view_year = st.session_state["view_year"]
view_month = st.session_state["view_month"]
viewing_current = is_current_month(view_year, view_month, today)

summary = summarize_month(snapshot.transactions, view_year, view_month, monthly_budget, today)

# Sidebar
with st.sidebar:
    st.header("💰 FreshFin")

    st.subheader("Monthly Budget")
    with st.form("budget_form"):
        budget_input = st.text_input("Monthly limit", value=f"{monthly_budget:g}")
        if st.form_submit_button("Save Budget"):
            try:
                config = parse_budget(budget_input)
            except ValueError as e:
                st.error(str(e))
            else:
                store.set_budget(config.monthly_limit)
                st.success(f"Budget set to {format_currency(config.monthly_limit)}.")
                st.rerun()

    st.divider()
    st.caption("Budget applies to every month.")

# Month Navigator
nav_prev, nav_title, nav_next = st.columns([1, 4, 1])
nav_prev.button("◀", on_click=change_month, args=(-1,), key="prev_month")
nav_title.markdown(f"<h3 style='text-align:center'>{month_label(view_year, view_month)}</h3>", unsafe_allow_html=True)
# No browsing past the current month
nav_next.button("▶", on_click=change_month, args=(1,), key="next_month", disabled=viewing_current)

# 1. Dashboard Cards
_kpis(summary, monthly_budget)

# 2. Add Transaction (only for the current month; entries are always dated today)
if viewing_current:
    st.subheader("➕ Add an entry (today)")
    with st.form("add_transaction", clear_on_submit=True):
        kind_label = st.radio("Type", ["Expense", "Income"], horizontal=True)
        col1, col2 = st.columns([2, 1])
        title = col1.text_input("Title")
        amount = col2.text_input("Amount")

        if st.form_submit_button("Add"):
            try:
                txn = new_transaction(title, amount, TransactionKind(kind_label.upper()))
            except ValueError as e:
                st.error(str(e))
            else:
                store.append(txn)
                st.rerun()
else:
    if st.button("Back to this month"):
        st.session_state["view_year"] = today.year
        st.session_state["view_month"] = today.month
        reset_advice()
        st.rerun()

# 3. AI Insights
if summary.transactions:
    st.subheader(f"✨ AI Advisor ({month_label(view_year, view_month)})")
    requester = get_requester()

    if st.session_state.get("advice"):
        st.info(st.session_state["advice"])
        if st.button("Dismiss"):
            reset_advice()
            st.rerun()
    else:
        st.caption("Let the assistant review this month's spending habits.")
        if st.button("Analyze spending", disabled=requester.in_flight):
            requester.submit(list(snapshot.transactions), monthly_budget, today)
            with st.spinner("Analyzing..."):
                advice = requester.result()
            if advice is None:
                st.warning("The advisor did not answer in time. Please try again.")
            else:
                st.session_state["advice"] = advice
                st.rerun()

# 4. Spending Breakdown
if summary.categories:
    st.subheader("🏷️ Spending by Category")
    col1, col2 = st.columns(2)
    with col1:
        st.dataframe(
            category_table(summary.categories),
            hide_index=True,
            use_container_width=True,
            column_config={
                "Amount": st.column_config.NumberColumn(format="%.2f"),
                "Share": st.column_config.ProgressColumn(format="%.1f%%", min_value=0, max_value=100),
            },
        )
    with col2:
        st.plotly_chart(category_chart(summary.categories), use_container_width=True)

# 5. Charts
if summary.chart:
    st.plotly_chart(daily_trend_chart(summary.chart), use_container_width=True)
else:
    st.info("No data for this month yet.")

# 6. Transaction List
st.subheader(f"🧾 {month_label(view_year, view_month)} Details")
history = transactions_table(summary.transactions)
if history.empty:
    st.info("No income or expenses recorded this month.")
else:
    for row in history.itertuples(index=False):
        c1, c2, c3 = st.columns([4, 2, 1])
        c1.markdown(f"**{row.Title}**  \n{row.Date:%Y-%m-%d}")
        c2.markdown(f"`{format_signed(row.Amount)}`")
        if c3.button("🗑️", key=f"delete_{row.ID}", help="Delete"):
            store.remove(row.ID)
            st.rerun()
