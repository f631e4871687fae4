"""
Utility functions for Share Expenses
"""
from __future__ import annotations
import os
import uuid
from datetime import date, datetime, timezone
from typing import Optional


def now_iso() -> str:
    """Current UTC time as ISO string with millisecond precision"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_date(s: str) -> date:
    """
    Parse the calendar date of an ISO date or datetime string.
    Accepts "2024-05-01", "2024-05-01T10:30:00" and "2024-05-01T10:30:00.000Z".
    """
    s = s.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s).date()
    except ValueError:
        return datetime.strptime(s[:10], "%Y-%m-%d").date()


def new_id() -> str:
    """Fresh identifier for an expense or participant"""
    return uuid.uuid4().hex


def format_currency(amount: float, symbol: str = "฿") -> str:
    """Format amount as whole baht, e.g. 1234.5 -> '฿1,235'"""
    # round half away from zero, the way Intl.NumberFormat does
    rounded = int(abs(amount) + 0.5)
    sign = "-" if amount < 0 and rounded else ""
    return f"{sign}{symbol}{rounded:,}"


def app_dir(base: Optional[str] = None) -> str:
    """
    Get application data directory.
    Order: explicit base, $SHARE_EXPENSES_HOME, ~/.share-expenses.
    Creates directory if it doesn't exist.
    """
    path = base or os.environ.get("SHARE_EXPENSES_HOME") or os.path.join(
        os.path.expanduser("~"), ".share-expenses"
    )
    os.makedirs(path, exist_ok=True)
    return path
