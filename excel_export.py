"""
Excel export functionality for Share Expenses
"""
from __future__ import annotations
from datetime import date
from typing import List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from models import Expense, Participant
from computations import (
    calculate_balances,
    calculate_settlements,
    calculate_splits,
    filter_expenses_by_date,
    user_spending,
)
from csv_handler import STATUS_LABELS, user_name

MONEY_FORMAT = "#,##0.00"


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="10B981")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = 0
        for cell in ws[letter]:
            if cell.value is not None:
                max_len = max(max_len, len(str(cell.value)))
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def _money_columns(ws, first_col: int, last_col: int) -> None:
    for r in range(2, ws.max_row + 1):
        for c in range(first_col, last_col + 1):
            ws.cell(r, c).number_format = MONEY_FORMAT


def export_excel(
    expenses: List[Expense],
    users: Sequence[Participant],
    filepath: str,
    start: Optional[date] = None,
    end: Optional[date] = None
) -> None:
    """
    Export expenses to Excel file with sheets:
    - Expenses: one row per expense with each user's share
    - Balances: paid, spent and net per user (pending only)
    - Settlements: suggested transfers
    """
    wb = Workbook()
    wb.remove(wb.active)

    exps = sorted(filter_expenses_by_date(expenses, start, end), key=lambda e: e.date)
    names = [u.name for u in users]

    ws = wb.create_sheet("Expenses")
    ws.append(["Date", "Description", "Paid By", "Amount", "Status"] + names)
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for e in exps:
        splits = calculate_splits(e, users)
        ws.append(
            [e.date[:10], e.description, user_name(users, e.paid_by), e.amount,
             STATUS_LABELS.get(e.status, e.status)]
            + [splits.get(u.id, 0.0) for u in users]
        )
    if exps:
        ws.append(["TOTAL", "", "", f"=SUM(D2:D{ws.max_row})", ""] + [""] * len(users))
        ws.cell(ws.max_row, 1).font = Font(bold=True)
    _money_columns(ws, 4, 4)
    _money_columns(ws, 6, 5 + len(users))
    _autosize_columns(ws)

    ws = wb.create_sheet("Balances")
    ws.append(["Person", "Paid", "Spent", "Net"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    spending = user_spending(exps, users)
    for u in users:
        s = spending[u.id]
        ws.append([u.name, s["paid_out"], s["spent"], s["net"]])
    _money_columns(ws, 2, 4)
    _autosize_columns(ws)

    ws = wb.create_sheet("Settlements")
    ws.append(["From (Debtor)", "To (Creditor)", "Amount"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for s in calculate_settlements(calculate_balances(exps, users)):
        ws.append([user_name(users, s.from_id), user_name(users, s.to_id), s.amount])
    _money_columns(ws, 3, 3)
    _autosize_columns(ws)

    wb.save(filepath)
