"""
SmartSpend - Source Package

A personal finance tracker: record income and expense transactions,
keep the running balance honest against the real bank balance, and
derive the breakdowns and weekly series the dashboard displays.

DESIGN PRINCIPLES:
1. The ledger is the single source of truth for a session
2. Derived figures are recomputed on every read, never cached
3. One corrupt record degrades a figure, it never breaks a view
4. AI is optional - every assistant call degrades gracefully
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "SmartSpend Team"
