"""
Excel export functionality for Cost Splits
"""
from __future__ import annotations

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from models import Pool
from computations import (
    compute_summary,
    compute_transfers,
    item_shares,
    items_scale,
    transaction_shares,
)

MONEY_FORMAT = "0.00"


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _bold_row(ws, row):
    for cell in ws[row]:
        cell.font = Font(bold=True)


def _money_columns(ws, first_col, last_col, first_row=2):
    for r in range(first_row, ws.max_row + 1):
        for c in range(first_col, last_col + 1):
            ws.cell(r, c).number_format = MONEY_FORMAT


def _autosize_columns(ws, min_width=10, max_width=45):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = 0
        for cell in ws[letter]:
            v = cell.value
            if v is None:
                continue
            max_len = max(max_len, len(str(v)))
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def _transaction_label(t, ti: int) -> str:
    return t.name or f"Transaction {ti + 1}"


def _write_transactions(wb, pool: Pool):
    ws = wb.create_sheet("Transactions")
    ws.append(["Name", "Paid By", "Cost", "Itemized"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    total = 0.0
    for ti, t in enumerate(pool.transactions):
        payer = pool.people[t.payer] if 0 <= t.payer < len(pool.people) else ""
        ws.append([_transaction_label(t, ti), payer, t.cost, "yes" if t.is_itemized else None])
        total += t.cost
    ws.append(["Total", None, total, None])
    _bold_row(ws, ws.max_row)
    _money_columns(ws, 3, 3)
    _autosize_columns(ws)


def _write_split_details(wb, pool: Pool):
    """One row per transaction with each person's portion, item rows indented below"""
    people = pool.people
    n = len(people)
    ws = wb.create_sheet("Split Details")
    ws.append(["Transaction"] + people)
    _style_header(ws, 1)
    ws.freeze_panes = "B2"

    totals = [0.0] * n
    for ti, t in enumerate(pool.transactions):
        shares = transaction_shares(t, n)
        ws.append([f"{_transaction_label(t, ti)} - ${t.cost:.2f}"] + shares)
        for i, amt in enumerate(shares):
            totals[i] += amt
        if t.is_itemized:
            scale = items_scale(t)
            for ii, it in enumerate(t.items):
                label = it.item or f"Item {ii + 1}"
                ws.append([f"{label} - ${it.cost * scale:.2f}"] + item_shares(it, scale, n))
                ws.cell(ws.max_row, 1).alignment = Alignment(indent=2)

    ws.append(["Total"] + totals)
    _bold_row(ws, ws.max_row)
    _money_columns(ws, 2, 1 + n)
    _autosize_columns(ws)


def _write_summary(wb, pool: Pool, summary):
    ws = wb.create_sheet("Summary")
    ws.append(["Person", "Total Paid", "Total Cost", "Total Owed"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for i, p in enumerate(pool.people):
        ws.append([p, summary.paid[i], summary.owed[i], summary.net[i]])
        net = summary.net[i]
        if net > 0:
            ws.cell(ws.max_row, 4).fill = PatternFill("solid", fgColor="C6EFCE")
        elif net < 0:
            ws.cell(ws.max_row, 4).fill = PatternFill("solid", fgColor="FFC7CE")
    ws.append(["Total", sum(summary.paid), sum(summary.owed), sum(summary.net)])
    _bold_row(ws, ws.max_row)
    _money_columns(ws, 2, 4)
    _autosize_columns(ws)


def _write_settlements(wb, pool: Pool, summary):
    ws = wb.create_sheet("Settlements")
    ws.append(["From", "To", "Amount"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for s in compute_transfers(summary.net):
        ws.append([pool.people[s.from_index], pool.people[s.to_index], s.amount])
    _money_columns(ws, 3, 3)
    _autosize_columns(ws)


def export_excel(pool: Pool, filepath: str) -> None:
    """
    Export pool to Excel file with sheets:
    - Transactions
    - Split Details (per-person portions, item rows under itemized transactions)
    - Summary
    - Settlements
    """
    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    summary = compute_summary(pool.people, pool.transactions)
    _write_transactions(wb, pool)
    _write_split_details(wb, pool)
    _write_summary(wb, pool, summary)
    _write_settlements(wb, pool, summary)

    wb.save(filepath)
