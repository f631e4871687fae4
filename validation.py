"""
Input checks for expenses and rosters.
The computations never reject data; callers accepting user input run these first.
"""
from __future__ import annotations
from typing import List, Sequence

from models import CustomSplit, Expense, Participant, STATUSES
from config import EPSILON, MIN_PARTICIPANTS
from computations import effective_participants

# separators of the raw CSV columns
RESERVED_ID_CHARS = (";", ":")


def validate_roster(roster: Sequence[Participant]) -> List[str]:
    """Return a list of roster problems; empty when the roster is usable"""
    errors = []
    if len(roster) < MIN_PARTICIPANTS:
        errors.append(f"At least {MIN_PARTICIPANTS} users are required")
    seen = set()
    for p in roster:
        if not p.name.strip():
            errors.append(f"User {p.id!r} has no name")
        if any(c in p.id for c in RESERVED_ID_CHARS):
            errors.append(f"User id {p.id!r} cannot contain ';' or ':'")
        if p.id in seen:
            errors.append(f"Duplicate user id {p.id!r}")
        seen.add(p.id)
    return errors


def validate_expense(expense: Expense, roster: Sequence[Participant]) -> List[str]:
    """Return a list of problems; empty when the expense is acceptable"""
    errors = []
    known = {p.id for p in roster}

    if not expense.description.strip():
        errors.append("Description is required")
    if not expense.amount > 0:
        errors.append("Amount must be greater than 0")
    if not expense.paid_by:
        errors.append("Payer is required")
    elif expense.paid_by not in known:
        errors.append(f"Unknown payer {expense.paid_by!r}")
    if expense.status not in STATUSES:
        errors.append(f"Unknown status {expense.status!r}")

    unknown = [pid for pid in expense.participants if pid not in known]
    if unknown:
        errors.append(f"Unknown participants: {', '.join(unknown)}")

    if isinstance(expense.split, CustomSplit):
        ids = effective_participants(expense, roster)
        shares = [expense.split.shares.get(pid, 0.0) for pid in ids]
        if any(s < 0 for s in shares):
            errors.append("Split amounts cannot be negative")
        total = sum(shares)
        if abs(total - expense.amount) > EPSILON:
            errors.append(f"Split total {total:.2f} does not match amount {expense.amount:.2f}")

    return errors


def ensure_valid_expense(expense: Expense, roster: Sequence[Participant]) -> None:
    """Raise ValueError listing every problem found by validate_expense"""
    errors = validate_expense(expense, roster)
    if errors:
        raise ValueError("; ".join(errors))
