"""
Income routes: add, grouped listing, delete and Excel download.
"""
import logging
from datetime import date, datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.models.income import Income
from app.schemas.transaction import IncomeCreate, IncomeItem, GroupedTransactionsResponse
from app.api.dependencies import get_current_user
from app.core.utils import format_response
from app.services.grouping_service import group_incomes
from app.services.export_service import incomes_to_xlsx, XLSX_MEDIA_TYPE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/income", tags=["income"])


@router.post("/add", status_code=status.HTTP_201_CREATED)
async def add_income(
    income_data: IncomeCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record a new income."""
    income = Income(
        user_id=current_user.id,
        source=income_data.source,
        icon=income_data.icon,
        amount=income_data.amount,
        date=income_data.date or datetime.now(),
        description=income_data.description
    )
    db.add(income)
    db.commit()
    db.refresh(income)

    logger.info(f"User {current_user.id} added income {income.id}")
    return format_response(IncomeItem.model_validate(income), "Income added successfully")


@router.get("/get", response_model=GroupedTransactionsResponse)
async def get_incomes_by_date(
    page: int = Query(1, ge=1),
    limit: int = Query(1, ge=1),
    day: Optional[date] = Query(None, alias="date"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get incomes grouped by day (defaults to today)."""
    return group_incomes(current_user.id, db, day=day, page=page, limit=limit)


@router.get("/download")
async def download_income_excel(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Download all incomes as an Excel workbook."""
    incomes = db.query(Income).filter(
        Income.user_id == current_user.id
    ).order_by(Income.date.desc(), Income.id.desc()).all()

    try:
        content = incomes_to_xlsx(incomes)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="Incomes.xlsx"'}
    )


@router.delete("/{income_id}")
async def delete_income(
    income_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete an income owned by the current user."""
    income = db.query(Income).filter(
        Income.id == income_id,
        Income.user_id == current_user.id
    ).first()

    if not income:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Income not found"
        )

    db.delete(income)
    db.commit()

    return format_response(message="Income deleted successfully")
