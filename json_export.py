"""
JSON report export for Share Expenses.
Each expense is annotated with resolved names, labels and split amounts.
"""
from __future__ import annotations
import json
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Sequence

from models import Expense, Participant, STATUS_SETTLED
from config import CATEGORIES, DEFAULT_CATEGORY, participant_to_dict
from computations import calculate_splits, expense_date, filter_expenses_by_date
from csv_handler import STATUS_LABELS, user_name


def filter_recent(expenses: Sequence[Expense], days: int, now: datetime) -> List[Expense]:
    """Expenses dated within the last `days` days"""
    cutoff = (now - timedelta(days=days)).date()
    return [e for e in expenses if (expense_date(e) or date.min) >= cutoff]


def expense_entry(e: Expense, users: Sequence[Participant]) -> dict:
    """Report entry for one expense with names, labels and resolved splits"""
    entry = {
        "id": e.id,
        "date": e.date,
        "description": e.description,
        "amount": e.amount,
        "paidBy": e.paid_by,
        "paidByName": user_name(users, e.paid_by),
        "category": e.category,
        "categoryLabel": CATEGORIES.get(e.category, CATEGORIES[DEFAULT_CATEGORY]),
        "status": e.status,
        "statusLabel": STATUS_LABELS.get(e.status, e.status),
        "splitType": e.split.kind,
        "participants": list(e.participants),
        "participantNames": [user_name(users, pid) for pid in e.participants],
        "splits": calculate_splits(e, users),
    }
    if e.split.kind == "custom":
        entry["customSplits"] = dict(e.split.shares)
    return entry


def build_report(
    expenses: Sequence[Expense],
    users: Sequence[Participant],
    days: Optional[int] = None,
    now: Optional[datetime] = None,
    start: Optional[date] = None,
    end: Optional[date] = None
) -> dict:
    """
    Report document: exportDate, dateRange, summary totals, users and expenses.
    Expenses are limited to the start..end range (inclusive) and,
    with `days`, to the last `days` days.
    """
    now = now or datetime.now(timezone.utc)
    selected = filter_expenses_by_date(expenses, start, end)
    if days is not None:
        selected = filter_recent(selected, days, now)

    return {
        "exportDate": now.isoformat(),
        "dateRange": f"last {days} days" if days is not None else "all",
        "summary": {
            "totalExpenses": len(selected),
            "totalAmount": sum(e.amount for e in selected),
            "pendingAmount": sum(e.amount for e in selected if e.status != STATUS_SETTLED),
            "users": len(users),
        },
        "users": [participant_to_dict(u) for u in users],
        "expenses": [expense_entry(e, users) for e in selected],
    }


def export_report(
    expenses: Sequence[Expense],
    users: Sequence[Participant],
    filepath: str,
    days: Optional[int] = None,
    now: Optional[datetime] = None,
    start: Optional[date] = None,
    end: Optional[date] = None
) -> dict:
    """Write build_report() to filepath and return the document"""
    report = build_report(expenses, users, days, now, start, end)
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(report, f, ensure_ascii=False, indent=2)
    return report
