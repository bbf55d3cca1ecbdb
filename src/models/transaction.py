from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import date
from decimal import Decimal

from src.db.core import TransactionType


# ===== TRANSACTION PYDANTIC MODELS =====

class TransactionCreate(BaseModel):
    transaction_date: date = Field(..., description="Date of the transaction")
    description: Optional[str] = Field(None, max_length=255, description="Transaction description")
    amount: Decimal = Field(..., description="Signed amount; totals take the sign from transaction_type")
    transaction_type: TransactionType = Field(..., description="Income or Expense")
    category: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, description="Free-form notes")

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        return round(v, 2)

    @field_validator('description', 'category', 'notes')
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v else v


class TransactionUpdate(TransactionCreate):
    """PUT replaces every field, so the shape is the same as on create"""


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    transaction_id: int
    user_id: int
    transaction_date: date
    description: Optional[str]
    amount: float
    transaction_type: TransactionType
    category: Optional[str]
    notes: Optional[str]


class TransactionFilter(BaseModel):
    """Query-string filters for the transaction list; all optional, AND-combined"""
    search: Optional[str] = None
    transaction_type: Optional[TransactionType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    transaction_id: Optional[int] = None


class TransactionTotals(BaseModel):
    total_sales: float = 0
    total_expenses: float = 0
    net_profit: float = 0
