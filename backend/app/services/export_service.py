"""
Export service for Excel downloads.
"""
from io import BytesIO
from typing import List
import openpyxl
from app.models.income import Income
from app.models.expense import Expense

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def build_workbook(sheet_title: str, headers: List[str], rows: List[list]) -> bytes:
    """Write a single-sheet workbook to memory and return its bytes."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_title
    ws.append(headers)
    for row in rows:
        ws.append(row)

    bio = BytesIO()
    wb.save(bio)
    return bio.getvalue()


def incomes_to_xlsx(incomes: List[Income]) -> bytes:
    """Incomes sheet: Source, Icon, Amount, Description, Date."""
    if not incomes:
        raise ValueError("No incomes found")
    rows = [
        [i.source, i.icon or "", i.amount, i.description or "", i.date.date().isoformat()]
        for i in incomes
    ]
    return build_workbook("Incomes", ["Source", "Icon", "Amount", "Description", "Date"], rows)


def expenses_to_xlsx(expenses: List[Expense]) -> bytes:
    """Expenses sheet: Category, Icon, Amount, Description, Date."""
    if not expenses:
        raise ValueError("No expenses found")
    rows = [
        [e.category, e.icon or "", e.amount, e.description or "", e.date.date().isoformat()]
        for e in expenses
    ]
    return build_workbook("Expenses", ["Category", "Icon", "Amount", "Description", "Date"], rows)
