"""FreshFin personal finance tracker.

Log income and expenses, set a monthly budget and review each month's
stats, daily trend and category breakdown. See ``app.py`` for the
Streamlit page and ``mcp_server.py`` for the tool API.
"""
