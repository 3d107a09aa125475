"""
Dashboard service: totals, windowed sums and the merged recent-activity feed.
"""
import logging
from datetime import datetime, timedelta
from typing import List
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.core.config import settings
from app.models.income import Income
from app.models.expense import Expense
from app.schemas.dashboard import DashboardResponse, IncomeWindow, ExpenseWindow
from app.schemas.transaction import IncomeItem, ExpenseItem, TransactionKind

logger = logging.getLogger(__name__)

INCOME_WINDOW = timedelta(days=60)
EXPENSE_WINDOW = timedelta(days=30)

# Equal dates fall back to creation time, then id, then income before expense
_KIND_ORDER = {TransactionKind.INCOME: 1, TransactionKind.EXPENSE: 0}


def _total(model, user_id: int, db: Session) -> float:
    """Sum of amount over all of a user's rows, computed by the database."""
    total = db.query(func.coalesce(func.sum(model.amount), 0)).filter(
        model.user_id == user_id
    ).scalar()
    return float(total or 0)


def _newest_first(query, model):
    return query.order_by(model.date.desc(), model.id.desc())


def merge_recent(incomes: List[IncomeItem], expenses: List[ExpenseItem]) -> list:
    """Merge tagged records into one list, newest first, with a deterministic tie-break."""
    return sorted(
        [*incomes, *expenses],
        key=lambda item: (item.date, item.created_at, item.id, _KIND_ORDER[item.type]),
        reverse=True,
    )


def get_dashboard_data(user_id: int, db: Session, now: datetime = None) -> DashboardResponse:
    """
    Build the dashboard summary for a user.

    Raises ValueError for a malformed user id before any query is made.
    Database errors propagate to the caller unchanged.
    """
    if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id <= 0:
        raise ValueError("Invalid user ID")

    now = now or datetime.now()

    total_income = _total(Income, user_id, db)
    total_expense = _total(Expense, user_id, db)

    incomes_60d = _newest_first(
        db.query(Income).filter(Income.user_id == user_id, Income.date >= now - INCOME_WINDOW),
        Income,
    ).all()
    expenses_30d = _newest_first(
        db.query(Expense).filter(Expense.user_id == user_id, Expense.date >= now - EXPENSE_WINDOW),
        Expense,
    ).all()

    limit = settings.RECENT_TRANSACTIONS_LIMIT
    recent_incomes = _newest_first(db.query(Income).filter(Income.user_id == user_id), Income).limit(limit).all()
    recent_expenses = _newest_first(db.query(Expense).filter(Expense.user_id == user_id), Expense).limit(limit).all()

    income_items = [IncomeItem.model_validate(i) for i in incomes_60d]
    expense_items = [ExpenseItem.model_validate(e) for e in expenses_30d]

    logger.debug(
        f"Dashboard for user {user_id}: income={total_income}, expense={total_expense}, "
        f"60d incomes={len(income_items)}, 30d expenses={len(expense_items)}"
    )

    return DashboardResponse(
        total_balance=total_income - total_expense,
        total_income=total_income,
        total_expense=total_expense,
        last_30_days_expenses=ExpenseWindow(
            total=sum(e.amount for e in expense_items),
            transactions=expense_items,
        ),
        last_60_days_income=IncomeWindow(
            total=sum(i.amount for i in income_items),
            transactions=income_items,
        ),
        recent_transactions=merge_recent(
            [IncomeItem.model_validate(i) for i in recent_incomes],
            [ExpenseItem.model_validate(e) for e in recent_expenses],
        ),
    )
