"""
Data models for Share Expenses
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Union


STATUS_PENDING = "pending"
STATUS_SETTLED = "settled"
STATUSES = (STATUS_PENDING, STATUS_SETTLED)


@dataclass
class Participant:
    """Person who can pay for or owe a share of an expense"""
    id: str
    name: str
    color: str = "#6b7280"


@dataclass(frozen=True)
class EqualSplit:
    """Everyone in the expense owes the same share"""
    kind = "equal"


@dataclass(frozen=True)
class CustomSplit:
    """Explicit owed amount per participant id"""
    shares: Dict[str, float] = field(default_factory=dict)
    kind = "custom"


SplitMode = Union[EqualSplit, CustomSplit]


@dataclass
class Expense:
    """Single shared cost"""
    id: str
    description: str
    amount: float
    paid_by: str  # participant id
    participants: List[str] = field(default_factory=list)  # empty -> whole roster
    split: SplitMode = field(default_factory=EqualSplit)
    date: str = ""  # ISO date or datetime
    status: str = STATUS_PENDING
    category: str = "other"

    @property
    def is_pending(self) -> bool:
        return self.status == STATUS_PENDING


@dataclass(frozen=True)
class Settlement:
    """Suggested payment: from_id pays to_id"""
    from_id: str
    to_id: str
    amount: float


@dataclass
class Summary:
    """Totals and settlements for a period"""
    total_expenses: float
    user_totals: Dict[str, float]
    settlements: List[Settlement]
    period: str  # daily | weekly | monthly
    start_date: str
    end_date: str
