"""
Pydantic schemas for the dashboard summary.
"""
from pydantic import Field
from typing import List
from app.schemas.common import APIModel
from app.schemas.transaction import IncomeItem, ExpenseItem, TransactionItem


class IncomeWindow(APIModel):
    """Windowed income sum and its records, newest first."""
    total: float
    transactions: List[IncomeItem]


class ExpenseWindow(APIModel):
    """Windowed expense sum and its records, newest first."""
    total: float
    transactions: List[ExpenseItem]


class DashboardResponse(APIModel):
    """Schema for dashboard response."""
    total_balance: float
    total_income: float
    total_expense: float
    last_30_days_expenses: ExpenseWindow = Field(alias="last30DaysExpenses")
    last_60_days_income: IncomeWindow = Field(alias="last60DaysIncome")
    recent_transactions: List[TransactionItem]
