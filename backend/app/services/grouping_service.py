"""
Grouping service: transactions bucketed by calendar day, paginated by day.
"""
from collections import defaultdict
from datetime import date
from typing import Optional, Type
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.core.utils import day_bounds
from app.models.income import Income
from app.models.expense import Expense
from app.schemas.transaction import (
    DayGroup, GroupedTransactionsResponse, IncomeItem, ExpenseItem, TransactionItemBase
)


def _as_iso(value) -> str:
    """DATE() comes back as a string on SQLite and as a date on MySQL."""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def group_by_day(
    model,
    item_schema: Type[TransactionItemBase],
    user_id: int,
    db: Session,
    day: Optional[date] = None,
    trip_id: Optional[int] = None,
    page: int = 1,
    limit: int = 1,
) -> GroupedTransactionsResponse:
    """
    Group a user's transactions by calendar day, newest day first.

    Pagination slices the list of day groups, not individual transactions.
    total_pages is the number of groups, never less than 1.
    """
    filters = [model.user_id == user_id]
    if trip_id is not None:
        filters.append(model.trip_id == trip_id)
    if day is not None:
        start, end = day_bounds(day)
        filters.extend([model.date >= start, model.date <= end])

    day_column = func.date(model.date)
    days = [
        _as_iso(row[0])
        for row in db.query(day_column).filter(*filters).distinct().order_by(day_column.desc()).all()
    ]

    total_pages = len(days) or 1
    page_days = days[(page - 1) * limit:page * limit]

    groups = []
    if page_days:
        # Days are sorted descending, so the page spans last..first
        range_start, _ = day_bounds(date.fromisoformat(page_days[-1]))
        _, range_end = day_bounds(date.fromisoformat(page_days[0]))
        rows = db.query(model).filter(
            *filters,
            model.date >= range_start,
            model.date <= range_end,
        ).order_by(model.date.desc(), model.id.desc()).all()

        buckets = defaultdict(list)
        for row in rows:
            buckets[row.date.date().isoformat()].append(item_schema.model_validate(row))
        groups = [DayGroup(date=d, transactions=buckets[d]) for d in page_days]

    return GroupedTransactionsResponse(
        data=groups,
        total_pages=total_pages,
        current_page=page,
    )


def group_incomes(
    user_id: int,
    db: Session,
    day: Optional[date] = None,
    page: int = 1,
    limit: int = 1,
) -> GroupedTransactionsResponse:
    """Incomes for one day, today unless a date is given."""
    return group_by_day(Income, IncomeItem, user_id, db, day=day or date.today(), page=page, limit=limit)


def group_expenses(
    user_id: int,
    db: Session,
    day: Optional[date] = None,
    trip_id: Optional[int] = None,
    page: int = 1,
    limit: int = 1,
) -> GroupedTransactionsResponse:
    """Expenses across all dates unless a date is given, optionally scoped to a trip."""
    return group_by_day(Expense, ExpenseItem, user_id, db, day=day, trip_id=trip_id, page=page, limit=limit)
