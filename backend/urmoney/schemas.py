"""
Pydantic schemas for API request/response validation.
Separate from models to control what data is exposed via API.
"""

from pydantic import BaseModel, Field
from datetime import datetime, date
from typing import Optional

from .models import TransactionType


HEX_COLOR_PATTERN = r"^#(?:[0-9A-Fa-f]{3}){1,2}$"


class HealthResponse(BaseModel):
    status: str
    message: str


class Message(BaseModel):
    message: str


# ============================================
# Category Schemas
# ============================================

class CategoryBase(BaseModel):
    """Fields a client may submit for a category."""
    name: str = Field(min_length=1, max_length=100)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)

    class Config:
        str_strip_whitespace = True


class CategoryCreate(CategoryBase):
    """Schema for creating a category; color falls back to the default."""
    pass


class CategoryUpdate(CategoryBase):
    """Schema for updating a category; an omitted color is left unchanged."""
    pass


class CategoryWritten(CategoryBase):
    """Echo of a created or updated category."""
    id: int


class CategoryResponse(BaseModel):
    id: int
    name: str
    color: str
    created_at: datetime

    class Config:
        from_attributes = True


# ============================================
# Transaction Schemas
# ============================================

class TransactionBase(BaseModel):
    """Base transaction schema."""
    description: str = Field(min_length=1, max_length=500)
    amount: float = Field(ge=0, allow_inf_nan=False, description="Amount must be a finite, non-negative number")
    type: TransactionType
    category_id: Optional[int] = None
    date: date

    class Config:
        str_strip_whitespace = True


class TransactionCreate(TransactionBase):
    """Schema for creating a transaction."""
    pass


class TransactionUpdate(TransactionBase):
    """Schema for updating a transaction; every mutable field is replaced."""
    pass


class TransactionWritten(TransactionBase):
    """Echo of a created or updated transaction."""
    id: int


class TransactionResponse(TransactionBase):
    """Transaction joined with its category's display fields."""
    id: int
    created_at: datetime
    category_name: Optional[str] = None
    category_color: Optional[str] = None

    class Config:
        from_attributes = True


# ============================================
# Aggregate Schemas
# ============================================

class Statistics(BaseModel):
    """Schema for transaction statistics."""
    total_income: float
    total_expenses: float
    total_transactions: int
    balance: float


class CategorySpending(BaseModel):
    """Expense total for one category."""
    name: str
    color: str
    total: float
    count: int
