"""
Pydantic schemas for Income and Expense transactions.

Both kinds share the same fields; responses carry a ``type`` discriminant so
merged lists can be told apart.
"""
from pydantic import AfterValidator, Field
from typing import Annotated, List, Literal, Optional, Union
import datetime as dt
import enum
import math
from app.schemas.common import APIModel

# Largest value a DECIMAL(15, 2) column holds
MAX_AMOUNT = 9999999999999.99


class TransactionKind(str, enum.Enum):
    """Discriminant for tagged transaction records."""
    INCOME = "income"
    EXPENSE = "expense"


def _require_text(v: str) -> str:
    if not v.strip():
        raise ValueError("Please fill all required fields")
    return v.strip()


def _require_positive(v: float) -> float:
    """Amounts are stored as DECIMAL(15, 2): round to cents, then bound."""
    if not math.isfinite(v):
        raise ValueError("Amount must be a finite number")
    v = round(v, 2)
    if v <= 0:
        raise ValueError("Amount must be greater than 0")
    if v > MAX_AMOUNT:
        raise ValueError("Amount is too large")
    return v


def _to_local_time(v: dt.datetime) -> dt.datetime:
    # Columns hold naive server-local time
    if v.tzinfo is not None:
        return v.astimezone().replace(tzinfo=None)
    return v

RequiredText = Annotated[str, AfterValidator(_require_text)]
Amount = Annotated[float, AfterValidator(_require_positive)]
LocalDateTime = Annotated[dt.datetime, AfterValidator(_to_local_time)]


class IncomeCreate(APIModel):
    """Schema for income creation."""
    source: RequiredText
    amount: Amount
    date: Optional[LocalDateTime] = None  # Defaults to now
    icon: Optional[str] = None
    description: Optional[str] = None


class ExpenseCreate(APIModel):
    """Schema for expense creation."""
    icon: RequiredText
    category: RequiredText
    description: RequiredText
    amount: Amount
    date: Optional[LocalDateTime] = None  # Defaults to now
    trip_id: Optional[int] = None


class TransactionItemBase(APIModel):
    """Fields shared by both transaction kinds."""
    id: int
    user_id: int
    amount: float
    date: dt.datetime
    icon: Optional[str] = None
    description: Optional[str] = None
    created_at: dt.datetime


class IncomeItem(TransactionItemBase):
    """Income record tagged with its kind."""
    type: Literal[TransactionKind.INCOME] = TransactionKind.INCOME
    source: str


class ExpenseItem(TransactionItemBase):
    """Expense record tagged with its kind."""
    type: Literal[TransactionKind.EXPENSE] = TransactionKind.EXPENSE
    category: str
    trip_id: Optional[int] = None


TransactionItem = Annotated[Union[IncomeItem, ExpenseItem], Field(discriminator="type")]


class DayGroup(APIModel):
    """Transactions that fall on one calendar day."""
    date: str  # ISO calendar date, YYYY-MM-DD
    transactions: List[TransactionItem]


class GroupedTransactionsResponse(APIModel):
    """Paginated list of day groups."""
    success: bool = True
    data: List[DayGroup]
    total_pages: int
    current_page: int
