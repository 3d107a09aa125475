"""
Expense routes: add, grouped listing, delete and Excel download.
"""
import logging
from datetime import date, datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.models.expense import Expense
from app.schemas.transaction import ExpenseCreate, ExpenseItem, GroupedTransactionsResponse
from app.api.dependencies import get_current_user
from app.api.routes.trips import check_trip_access
from app.core.utils import format_response
from app.services.grouping_service import group_expenses
from app.services.export_service import expenses_to_xlsx, XLSX_MEDIA_TYPE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/expense", tags=["expenses"])


@router.post("/add", status_code=status.HTTP_201_CREATED)
async def add_expense(
    expense_data: ExpenseCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record a new expense, optionally against a trip."""
    if expense_data.trip_id is not None:
        check_trip_access(expense_data.trip_id, current_user.id, db)

    expense = Expense(
        user_id=current_user.id,
        trip_id=expense_data.trip_id,
        category=expense_data.category,
        icon=expense_data.icon,
        amount=expense_data.amount,
        date=expense_data.date or datetime.now(),
        description=expense_data.description
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)

    logger.info(f"User {current_user.id} added expense {expense.id}")
    return format_response(ExpenseItem.model_validate(expense), "Expense added successfully")


@router.get("/get", response_model=GroupedTransactionsResponse)
async def get_expenses_by_date(
    page: int = Query(1, ge=1),
    limit: int = Query(1, ge=1),
    day: Optional[date] = Query(None, alias="date"),
    trip_id: Optional[int] = Query(None, alias="tripId"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get expenses grouped by day; all dates unless a date is given."""
    return group_expenses(current_user.id, db, day=day, trip_id=trip_id, page=page, limit=limit)


@router.get("/download")
async def download_expense_excel(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Download all expenses as an Excel workbook."""
    expenses = db.query(Expense).filter(
        Expense.user_id == current_user.id
    ).order_by(Expense.date.desc(), Expense.id.desc()).all()

    try:
        content = expenses_to_xlsx(expenses)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="Expenses.xlsx"'}
    )


@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete an expense owned by the current user."""
    expense = db.query(Expense).filter(
        Expense.id == expense_id,
        Expense.user_id == current_user.id
    ).first()

    if not expense:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Expense not found"
        )

    db.delete(expense)
    db.commit()

    return format_response(message="Expense deleted successfully")
