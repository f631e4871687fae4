import pytest

from models import CustomSplit, EqualSplit, Expense, Participant


@pytest.fixture
def pair():
    return [Participant("a", "Alice", "#3b82f6"), Participant("b", "Bob", "#ef4444")]


@pytest.fixture
def trio():
    return [
        Participant("x", "Xavier"),
        Participant("y", "Yuki"),
        Participant("z", "Zara"),
    ]


@pytest.fixture
def make_expense():
    counter = {"n": 0}

    def _make(amount, paid_by, participants=None, split=None, status="pending", date="2024-05-01"):
        counter["n"] += 1
        return Expense(
            id=f"e{counter['n']}",
            description=f"Expense {counter['n']}",
            amount=amount,
            paid_by=paid_by,
            participants=list(participants or []),
            split=split or EqualSplit(),
            date=date,
            status=status,
        )

    return _make


@pytest.fixture
def mixed_expenses(make_expense):
    """Pending and settled, equal and custom"""
    return [
        make_expense(300.0, "x", ["x", "y", "z"], date="2024-05-01"),
        make_expense(150.0, "y", date="2024-05-03"),
        make_expense(90.0, "z", ["x", "z"], CustomSplit({"x": 60.0, "z": 30.0}), date="2024-05-10"),
        make_expense(1000.0, "x", status="settled", date="2024-05-04"),
    ]
