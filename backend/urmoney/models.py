from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from datetime import datetime, date, timezone
from typing import Optional
from enum import Enum

DEFAULT_CATEGORY_COLOR = "#3B82F6"

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class TransactionType(str, Enum):
    income = "income"
    expense = "expense"

class Category(SQLModel, table=True):
    __tablename__ = "categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True)
    color: str = Field(default=DEFAULT_CATEGORY_COLOR)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

class Transaction(SQLModel, table=True):
    __tablename__ = "transactions"

    id: Optional[int] = Field(default=None, primary_key=True)
    description: str
    amount: float = Field(ge=0)
    type: TransactionType
    # Weak reference: no FK constraint, deleting a category leaves rows dangling
    category_id: Optional[int] = Field(default=None, index=True)
    date: date
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
