"""
CSV export and import functionality for Share Expenses
"""
from __future__ import annotations
import csv
from datetime import date
from typing import Dict, List, Optional, Sequence

from models import CustomSplit, EqualSplit, Expense, Participant, STATUS_PENDING, STATUS_SETTLED
from config import CATEGORIES, DEFAULT_CATEGORY
from computations import calculate_splits, expense_date, filter_expenses_by_date
from utils import format_currency, new_id

RAW_COLUMNS = [
    'id', 'date', 'description', 'amount', 'paid_by', 'participants',
    'split_type', 'custom_splits', 'status', 'category',
]

STATUS_LABELS = {STATUS_PENDING: 'Pending', STATUS_SETTLED: 'Settled'}
SPLIT_LABELS = {'equal': 'Equal', 'custom': 'Custom'}


def user_name(users: Sequence[Participant], user_id: str) -> str:
    """Display name for an id, 'Unknown' when it is not in the roster"""
    for u in users:
        if u.id == user_id:
            return u.name
    return 'Unknown'


def split_details(expense: Expense, users: Sequence[Participant]) -> str:
    """'Name: amount' pairs for every share of the expense"""
    splits = calculate_splits(expense, users)
    return ', '.join(f"{user_name(users, pid)}: {format_currency(amt)}" for pid, amt in splits.items())


def export_expenses_to_csv(
    expenses: List[Expense],
    users: Sequence[Participant],
    filepath: str,
    start: Optional[date] = None,
    end: Optional[date] = None
) -> None:
    """
    Export a readable expense report (UTF-8 with BOM so Excel picks the encoding).
    Only expenses dated start..end (inclusive) are written when a range is given.
    CSV columns: date, description, amount, paid_by, category, status, split_type, split_details
    """
    with open(filepath, 'w', newline='', encoding='utf-8-sig') as f:
        writer = csv.writer(f, quoting=csv.QUOTE_ALL)
        writer.writerow(['date', 'description', 'amount', 'paid_by', 'category',
                         'status', 'split_type', 'split_details'])
        for e in filter_expenses_by_date(expenses, start, end):
            ed = expense_date(e)
            writer.writerow([
                ed.isoformat() if ed else '',
                e.description,
                format_currency(e.amount),
                user_name(users, e.paid_by),
                CATEGORIES.get(e.category, CATEGORIES[DEFAULT_CATEGORY]),
                STATUS_LABELS.get(e.status, e.status),
                SPLIT_LABELS[e.split.kind],
                split_details(e, users),
            ])


# ids containing ";" or ":" cannot be stored in these columns; validate_roster rejects them
def _format_shares(shares: Dict[str, float]) -> str:
    return ';'.join(f"{k}:{v}" for k, v in shares.items())


def _parse_shares(s: str) -> Dict[str, float]:
    shares = {}
    for pair in s.split(';'):
        if ':' in pair:
            k, v = pair.split(':', 1)
            shares[k.strip()] = float(v.strip())
    return shares


def export_expenses_raw_csv(expenses: List[Expense], filepath: str) -> None:
    """Export expenses in the machine columns read back by import_expenses_from_csv"""
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(RAW_COLUMNS)
        for e in expenses:
            shares = e.split.shares if isinstance(e.split, CustomSplit) else {}
            writer.writerow([
                e.id,
                e.date,
                e.description,
                e.amount,
                e.paid_by,
                ';'.join(e.participants),
                e.split.kind,
                _format_shares(shares),
                e.status,
                e.category,
            ])


def import_expenses_from_csv(filepath: str) -> List[Expense]:
    """
    Import expenses list from CSV file
    Raises ValueError naming the line of the first bad row.
    """
    expenses = []

    with open(filepath, 'r', encoding='utf-8-sig', newline='') as f:
        reader = csv.DictReader(f)
        missing = [c for c in ('id', 'amount', 'paid_by') if c not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"CSV is missing columns: {', '.join(missing)}")

        for row in reader:
            try:
                if row.get('split_type', 'equal') == 'custom':
                    split = CustomSplit(_parse_shares(row.get('custom_splits') or ''))
                else:
                    split = EqualSplit()
                participants = [p.strip() for p in (row.get('participants') or '').split(';') if p.strip()]
                expense = Expense(
                    id=row['id'] or new_id(),
                    description=row.get('description') or '',
                    amount=float(row['amount']),
                    paid_by=row['paid_by'],
                    participants=participants,
                    split=split,
                    date=row.get('date') or '',
                    status=row.get('status') or STATUS_PENDING,
                    category=row.get('category') or DEFAULT_CATEGORY,
                )
            except ValueError as ex:
                raise ValueError(f"Invalid expense on line {reader.line_num}: {ex}") from ex
            expenses.append(expense)

    return expenses
