"""
Configuration and data loading/saving for Share Expenses
"""
from __future__ import annotations
import json
import logging
import os
from dataclasses import asdict
from typing import List, Optional, Tuple

from models import CustomSplit, EqualSplit, Expense, Participant, STATUS_PENDING
from utils import app_dir, now_iso

logger = logging.getLogger(__name__)

EPSILON = 0.01  # one minor currency unit; balances within it count as settled
MIN_PARTICIPANTS = 2
DATA_VERSION = "1.0"

EXPENSES_FILE = "share-expenses-data.json"
USERS_FILE = "share-expenses-users.json"

DEFAULT_CATEGORY = "other"
CATEGORIES = {
    "food": "Food",
    "transport": "Transport",
    "shopping": "Shopping",
    "entertainment": "Entertainment",
    "utilities": "Utilities",
    "other": "Other",
}


def default_users() -> List[Participant]:
    """Roster used when nothing usable is stored"""
    return [
        Participant("1", "BEAT", "#3b82f6"),
        Participant("2", "NART", "#ef4444"),
    ]


def configure_logging(level: int = logging.INFO) -> None:
    """Basic logging setup for applications embedding the engine"""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def participant_to_dict(p: Participant) -> dict:
    """Convert Participant to the stored JSON shape"""
    return asdict(p)


def dict_to_participant(d: dict) -> Participant:
    """Convert stored JSON to Participant; color falls back to grey"""
    return Participant(
        id=str(d["id"]),
        name=str(d.get("name", "")),
        color=d.get("color") or "#6b7280",
    )


def expense_to_dict(e: Expense) -> dict:
    """Convert Expense to the stored JSON shape"""
    d = {
        "id": e.id,
        "description": e.description,
        "amount": e.amount,
        "paidBy": e.paid_by,
        "participants": list(e.participants),
        "splitType": e.split.kind,
        "date": e.date,
        "status": e.status,
        "category": e.category,
    }
    if isinstance(e.split, CustomSplit):
        d["customSplits"] = dict(e.split.shares)
    return d


def dict_to_expense(d: dict) -> Expense:
    """
    Convert stored JSON to Expense.
    Records saved before statuses existed are migrated to pending.
    """
    if d.get("splitType", "equal") == "custom":
        raw = d.get("customSplits") or {}
        if not isinstance(raw, dict):
            raise ValueError(f"customSplits must be an object, got {type(raw).__name__}")
        shares = {str(k): float(v) for k, v in raw.items()}
        split = CustomSplit(shares)
    else:
        split = EqualSplit()

    return Expense(
        id=str(d["id"]),
        description=str(d.get("description", "")),
        amount=float(d["amount"]),
        paid_by=str(d["paidBy"]),
        participants=[str(p) for p in d.get("participants") or []],
        split=split,
        date=d.get("date", ""),
        status=d.get("status") or STATUS_PENDING,
        category=d.get("category") or DEFAULT_CATEGORY,
    )


def _read_json(path: str):
    """Parse a UTF-8 JSON file"""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _write_json(path: str, data) -> None:
    """Write data as indented UTF-8 JSON"""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def load_expenses(base: Optional[str] = None) -> List[Expense]:
    """Load stored expenses; empty list when missing or unreadable"""
    path = os.path.join(app_dir(base), EXPENSES_FILE)
    try:
        data = _read_json(path)
        if isinstance(data, list):
            return [dict_to_expense(d) for d in data]
        logger.warning("Ignoring %s: expected a list of expenses", path)
    except FileNotFoundError:
        pass
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as ex:
        logger.warning("Failed to load expenses from %s: %s", path, ex)
    return []


def save_expenses(expenses: List[Expense], base: Optional[str] = None) -> None:
    """Store expenses in the data directory"""
    path = os.path.join(app_dir(base), EXPENSES_FILE)
    _write_json(path, [expense_to_dict(e) for e in expenses])


def load_users(base: Optional[str] = None) -> List[Participant]:
    """Load stored roster; default users when missing, unreadable or too small"""
    path = os.path.join(app_dir(base), USERS_FILE)
    try:
        data = _read_json(path)
        if isinstance(data, list) and len(data) >= MIN_PARTICIPANTS:
            return [dict_to_participant(d) for d in data]
        logger.warning("Ignoring %s: need at least %d users", path, MIN_PARTICIPANTS)
    except FileNotFoundError:
        pass
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as ex:
        logger.warning("Failed to load users from %s: %s", path, ex)
    return default_users()


def save_users(users: List[Participant], base: Optional[str] = None) -> None:
    """Store the roster in the data directory"""
    path = os.path.join(app_dir(base), USERS_FILE)
    _write_json(path, [participant_to_dict(u) for u in users])


def clear_data(base: Optional[str] = None) -> None:
    """Remove stored expenses and users"""
    d = app_dir(base)
    for name in (EXPENSES_FILE, USERS_FILE):
        try:
            os.remove(os.path.join(d, name))
        except FileNotFoundError:
            pass


def export_data(expenses: List[Expense], users: List[Participant], path: str) -> None:
    """Write a full backup file: {exportDate, version, users, expenses}"""
    _write_json(path, {
        "exportDate": now_iso(),
        "version": DATA_VERSION,
        "users": [participant_to_dict(u) for u in users],
        "expenses": [expense_to_dict(e) for e in expenses],
    })


def import_data(path: str) -> Tuple[List[Participant], List[Expense]]:
    """
    Read a backup file written by export_data.
    Raises ValueError when the file is not usable.
    """
    try:
        data = _read_json(path)
    except json.JSONDecodeError as ex:
        raise ValueError(f"Invalid JSON file: {ex}") from ex

    if (
        not isinstance(data, dict)
        or not isinstance(data.get("users"), list)
        or not isinstance(data.get("expenses"), list)
    ):
        raise ValueError("Invalid data file: missing users or expenses")
    if len(data["users"]) < MIN_PARTICIPANTS:
        raise ValueError(f"Data file must contain at least {MIN_PARTICIPANTS} users")

    try:
        users = [dict_to_participant(u) for u in data["users"]]
        expenses = [dict_to_expense(e) for e in data["expenses"]]
    except (KeyError, TypeError, ValueError, AttributeError) as ex:
        raise ValueError(f"Invalid record in data file: {ex}") from ex

    logger.info("Imported %d users and %d expenses from %s", len(users), len(expenses), path)
    return users, expenses
