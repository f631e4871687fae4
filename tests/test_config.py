import json
import logging
import os

import pytest

from models import CustomSplit, EqualSplit, Participant
from config import (
    EXPENSES_FILE,
    USERS_FILE,
    clear_data,
    configure_logging,
    default_users,
    dict_to_expense,
    expense_to_dict,
    export_data,
    import_data,
    load_expenses,
    load_users,
    save_expenses,
    save_users,
)


def test_expense_dict_uses_stored_field_names(make_expense):
    e = make_expense(90.0, "a", ["a", "b"], CustomSplit({"a": 60.0, "b": 30.0}))
    d = expense_to_dict(e)
    assert d["paidBy"] == "a"
    assert d["splitType"] == "custom"
    assert d["customSplits"] == {"a": 60.0, "b": 30.0}
    assert dict_to_expense(d) == e


def test_equal_expense_has_no_custom_splits(make_expense):
    d = expense_to_dict(make_expense(10.0, "a"))
    assert d["splitType"] == "equal"
    assert "customSplits" not in d


def test_missing_status_migrates_to_pending():
    e = dict_to_expense({"id": "1", "description": "Lunch", "amount": 120, "paidBy": "1"})
    assert e.status == "pending"
    assert e.participants == []
    assert e.split == EqualSplit()
    assert e.category == "other"


def test_save_and_load(tmp_path, pair, make_expense):
    base = str(tmp_path)
    expenses = [make_expense(10.0, "a"), make_expense(5.0, "b", status="settled")]
    save_expenses(expenses, base)
    save_users(pair, base)
    assert load_expenses(base) == expenses
    assert load_users(base) == pair


def test_load_missing_files_falls_back(tmp_path):
    base = str(tmp_path)
    assert load_expenses(base) == []
    assert load_users(base) == default_users()


def test_load_corrupt_files_falls_back(tmp_path, caplog):
    base = str(tmp_path)
    (tmp_path / EXPENSES_FILE).write_text("{not json", encoding="utf-8")
    (tmp_path / USERS_FILE).write_text("[]", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="config"):
        assert load_expenses(base) == []
        assert load_users(base) == default_users()
    assert "Failed to load expenses" in caplog.text


def test_custom_splits_must_be_an_object():
    with pytest.raises(ValueError, match="customSplits must be an object"):
        dict_to_expense({"id": "1", "amount": 10, "paidBy": "a", "splitType": "custom",
                         "customSplits": [["a", 10]]})


def test_load_expenses_with_list_custom_splits_falls_back(tmp_path, caplog):
    record = {"id": "1", "amount": 10, "paidBy": "a", "splitType": "custom", "customSplits": ["a", "b"]}
    (tmp_path / EXPENSES_FILE).write_text(json.dumps([record]), encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="config"):
        assert load_expenses(str(tmp_path)) == []
    assert "customSplits must be an object" in caplog.text


def test_single_stored_user_falls_back_to_defaults(tmp_path):
    save_users([Participant("1", "Solo")], str(tmp_path))
    assert load_users(str(tmp_path)) == default_users()


def test_app_dir_from_environment(tmp_path, monkeypatch, make_expense):
    monkeypatch.setenv("SHARE_EXPENSES_HOME", str(tmp_path / "home"))
    save_expenses([make_expense(1.0, "a")], None)
    assert os.path.exists(tmp_path / "home" / EXPENSES_FILE)


def test_clear_data(tmp_path, pair):
    base = str(tmp_path)
    save_users(pair, base)
    clear_data(base)
    clear_data(base)
    assert not os.path.exists(tmp_path / USERS_FILE)


def test_export_and_import(tmp_path, trio, mixed_expenses):
    path = str(tmp_path / "backup.json")
    export_data(mixed_expenses, trio, path)
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    assert raw["version"] == "1.0"
    assert "exportDate" in raw

    users, expenses = import_data(path)
    assert users == trio
    assert expenses == mixed_expenses


def test_import_rejects_bad_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("nope", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid JSON"):
        import_data(str(path))


def test_import_rejects_missing_lists(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"users": []}), encoding="utf-8")
    with pytest.raises(ValueError, match="missing users or expenses"):
        import_data(str(path))


def test_import_requires_two_users(tmp_path):
    path = tmp_path / "one.json"
    path.write_text(json.dumps({"users": [{"id": "1", "name": "A"}], "expenses": []}), encoding="utf-8")
    with pytest.raises(ValueError, match="at least 2 users"):
        import_data(str(path))


def test_import_migrates_status(tmp_path):
    path = tmp_path / "old.json"
    path.write_text(json.dumps({
        "users": [{"id": "1", "name": "A"}, {"id": "2", "name": "B"}],
        "expenses": [{"id": "e", "description": "Taxi", "amount": 80, "paidBy": "2",
                      "participants": ["1", "2"], "splitType": "equal", "date": "2024-01-02"}],
    }), encoding="utf-8")
    users, expenses = import_data(str(path))
    assert users[0].color == "#6b7280"
    assert expenses[0].status == "pending"


def test_configure_logging(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
    configure_logging(logging.DEBUG)
    assert calls["level"] == logging.DEBUG
