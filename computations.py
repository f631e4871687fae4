"""
Business logic and computations for Share Expenses:
splits, balances, settlement planning and period summaries.

Every function here is pure. Nothing raises on malformed split data;
input checks live in validation.py.
"""
from __future__ import annotations
import logging
from dataclasses import replace
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from models import CustomSplit, EqualSplit, Expense, Participant, Settlement, Summary, STATUSES
from config import EPSILON
from utils import parse_date

logger = logging.getLogger(__name__)

PERIODS = ("daily", "weekly", "monthly")


def roster_ids(roster: Iterable[Participant]) -> List[str]:
    """Participant ids in roster order"""
    return [p.id for p in roster]


def effective_participants(expense: Expense, roster: Sequence[Participant] = ()) -> List[str]:
    """
    Ids that share the expense.
    An expense without participants is shared by the whole roster.
    """
    ids = expense.participants or roster_ids(roster)
    return list(dict.fromkeys(ids))


def calculate_splits(expense: Expense, roster: Sequence[Participant] = ()) -> Dict[str, float]:
    """Owed share per participant id for a single expense"""
    ids = effective_participants(expense, roster)
    split = expense.split
    if isinstance(split, EqualSplit):
        if not ids:
            return {}
        share = float(expense.amount) / len(ids)
        return {pid: share for pid in ids}
    if isinstance(split, CustomSplit):
        return {pid: float(split.shares.get(pid, 0.0)) for pid in ids}
    raise TypeError(f"Unsupported split mode: {split!r}")


def filter_pending(expenses: Iterable[Expense]) -> List[Expense]:
    """Drop settled expenses"""
    return [e for e in expenses if e.is_pending]


def calculate_balances(expenses: Iterable[Expense], roster: Sequence[Participant]) -> Dict[str, float]:
    """
    Net balance per participant over pending expenses.
    Positive -> is owed money; negative -> owes money.

    Ids missing from the roster (e.g. a deleted user) get their own entry
    so the balances still sum to zero.
    """
    balances = {p.id: 0.0 for p in roster}

    def _add(pid: str, value: float) -> None:
        if pid not in balances:
            logger.warning("Expense references unknown participant %r; tracking it separately", pid)
            balances[pid] = 0.0
        balances[pid] += value

    for e in filter_pending(expenses):
        _add(e.paid_by, float(e.amount))
        for pid, share in calculate_splits(e, roster).items():
            _add(pid, -share)

    return balances


def calculate_settlements(balances: Dict[str, float], eps: float = EPSILON) -> List[Settlement]:
    """
    Greedy settlement: largest debtor pays largest creditor until one side
    is cleared, then move on. Returns the transfers in the order made.
    Balances within eps of zero count as settled; residuals are dropped.
    """
    creditors = [[pid, v] for pid, v in balances.items() if v > eps]
    debtors = [[pid, v] for pid, v in balances.items() if v < -eps]
    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1])

    settlements = []
    i = j = 0
    while i < len(creditors) and j < len(debtors):
        creditor = creditors[i]
        debtor = debtors[j]
        amount = min(creditor[1], -debtor[1])
        if amount > eps:
            settlements.append(Settlement(from_id=debtor[0], to_id=creditor[0], amount=amount))
        creditor[1] -= amount
        debtor[1] += amount
        if creditor[1] <= eps:
            i += 1
        if debtor[1] >= -eps:
            j += 1
        if amount <= eps:
            # no progress possible
            break

    if i < len(creditors) or j < len(debtors):
        logger.debug("Unmatched balances left after settlement: creditors=%s debtors=%s",
                     creditors[i:], debtors[j:])
    return settlements


def apply_settlements(balances: Dict[str, float], settlements: Iterable[Settlement]) -> Dict[str, float]:
    """Balances after every settlement has been paid"""
    out = dict(balances)
    for s in settlements:
        out[s.from_id] = out.get(s.from_id, 0.0) + s.amount
        out[s.to_id] = out.get(s.to_id, 0.0) - s.amount
    return out


def expense_date(expense: Expense) -> Optional[date]:
    """Calendar date of the expense, None when it has no date"""
    if not expense.date or not expense.date.strip():
        return None
    return parse_date(expense.date)


def filter_expenses_by_date(
    expenses: Iterable[Expense],
    start: Optional[date],
    end: Optional[date]
) -> List[Expense]:
    """
    Filter expenses by date range (inclusive).
    With no bounds every expense is kept; an undated expense is outside any bounded range.
    """
    if start is None and end is None:
        return list(expenses)
    out = []
    for e in expenses:
        ed = expense_date(e)
        if ed is None:
            continue
        if start and ed < start:
            continue
        if end and ed > end:
            continue
        out.append(e)
    return out


def user_totals(expenses: Iterable[Expense], roster: Sequence[Participant]) -> Dict[str, float]:
    """Amount each roster member paid over pending expenses"""
    totals = {p.id: 0.0 for p in roster}
    for e in filter_pending(expenses):
        if e.paid_by in totals:
            totals[e.paid_by] += float(e.amount)
    return totals


def user_spending(expenses: Iterable[Expense], roster: Sequence[Participant]) -> Dict[str, dict]:
    """
    Per roster member over pending expenses.
    Returns dict mapping id -> {spent, paid_out, net}
    """
    spent = {p.id: 0.0 for p in roster}
    paid_out = {p.id: 0.0 for p in roster}

    for e in filter_pending(expenses):
        for pid, share in calculate_splits(e, roster).items():
            if pid in spent:
                spent[pid] += share
        if e.paid_by in paid_out:
            paid_out[e.paid_by] += float(e.amount)

    return {
        pid: {
            "spent": spent[pid],
            "paid_out": paid_out[pid],
            "net": paid_out[pid] - spent[pid],
        } for pid in spent
    }


def generate_summary(
    expenses: Iterable[Expense],
    roster: Sequence[Participant],
    period: str,
    start: date,
    end: date
) -> Summary:
    """Totals, per-user payments and settlements for a date range"""
    if period not in PERIODS:
        raise ValueError(f"Unknown period {period!r}; expected one of {', '.join(PERIODS)}")

    pending = filter_pending(filter_expenses_by_date(expenses, start, end))
    balances = calculate_balances(pending, roster)

    return Summary(
        total_expenses=sum(float(e.amount) for e in pending),
        user_totals=user_totals(pending, roster),
        settlements=calculate_settlements(balances),
        period=period,
        start_date=start.isoformat(),
        end_date=end.isoformat(),
    )


def _index_of(expenses: Sequence[Expense], expense_id: str) -> int:
    for i, e in enumerate(expenses):
        if e.id == expense_id:
            return i
    raise ValueError(f"No expense with id {expense_id!r}")


def add_expense(expenses: Sequence[Expense], expense: Expense) -> List[Expense]:
    """New list with the expense appended; ids must be unique"""
    if any(e.id == expense.id for e in expenses):
        raise ValueError(f"Expense id {expense.id!r} already exists")
    return list(expenses) + [expense]


def replace_expense(expenses: Sequence[Expense], expense: Expense) -> List[Expense]:
    """New list where the expense with the same id is swapped for `expense` (edit)"""
    out = list(expenses)
    out[_index_of(out, expense.id)] = expense
    return out


def delete_expense(expenses: Sequence[Expense], expense_id: str) -> List[Expense]:
    """New list without the expense; an unknown id leaves the list unchanged"""
    return [e for e in expenses if e.id != expense_id]


def set_expense_status(expenses: Sequence[Expense], expense_id: str, status: str) -> List[Expense]:
    """New list with one expense marked pending or settled"""
    if status not in STATUSES:
        raise ValueError(f"Unknown status {status!r}; expected one of {', '.join(STATUSES)}")
    out = list(expenses)
    i = _index_of(out, expense_id)
    out[i] = replace(out[i], status=status)
    return out
