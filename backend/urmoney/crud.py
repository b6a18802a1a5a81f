"""
CRUD and aggregate operations for categories and transactions.
Every function takes an open session; SQLAlchemy failures surface as StorageFault.
"""

import logging
from functools import wraps
from typing import List, Optional

from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from .errors import StorageFault, ValidationError
from .models import DEFAULT_CATEGORY_COLOR, Category, Transaction, TransactionType
from .schemas import CategoryCreate, CategoryUpdate, TransactionCreate, TransactionUpdate

logger = logging.getLogger(__name__)


def storage_operation(func):
    """Roll back and re-raise engine errors as StorageFault."""
    @wraps(func)
    def wrapper(session: Session, *args, **kwargs):
        try:
            return func(session, *args, **kwargs)
        except SQLAlchemyError as exc:
            session.rollback()
            message = str(getattr(exc, "orig", None) or exc)
            logger.error("%s failed: %s", func.__name__, message)
            raise StorageFault(message) from exc
    return wrapper


# ============================================
# Transaction CRUD Operations
# ============================================

def _enriched_transactions():
    # Left join: a missing or deleted category yields null name/color
    return select(Transaction, Category.name, Category.color).join(
        Category, Transaction.category_id == Category.id, isouter=True
    )


def _enrich(row) -> dict:
    transaction, category_name, category_color = row
    data = transaction.model_dump()
    data["category_name"] = category_name
    data["category_color"] = category_color
    return data


@storage_operation
def list_transactions(session: Session) -> List[dict]:
    """Get all transactions, newest date first."""
    statement = _enriched_transactions().order_by(
        Transaction.date.desc(),
        Transaction.created_at.desc(),
        Transaction.id.desc(),
    )
    return [_enrich(row) for row in session.exec(statement).all()]


@storage_operation
def get_transaction(session: Session, transaction_id: int) -> Optional[dict]:
    """Get a specific transaction."""
    statement = _enriched_transactions().where(Transaction.id == transaction_id)
    row = session.exec(statement).first()
    return _enrich(row) if row is not None else None


@storage_operation
def create_transaction(session: Session, data: TransactionCreate) -> Transaction:
    """Create a new transaction."""
    transaction = Transaction(
        description=data.description,
        amount=data.amount,
        type=data.type,
        category_id=data.category_id,
        date=data.date,
    )
    session.add(transaction)
    session.commit()
    session.refresh(transaction)
    logger.info("Created %s transaction %d", transaction.type.value, transaction.id)
    return transaction


@storage_operation
def update_transaction(session: Session, transaction_id: int, data: TransactionUpdate) -> int:
    """Replace every mutable field of a transaction. Returns rows affected."""
    transaction = session.get(Transaction, transaction_id)
    if transaction is None:
        return 0

    transaction.description = data.description
    transaction.amount = data.amount
    transaction.type = data.type
    transaction.category_id = data.category_id
    transaction.date = data.date

    session.add(transaction)
    session.commit()
    return 1


@storage_operation
def delete_transaction(session: Session, transaction_id: int) -> int:
    """Permanently delete a transaction. Returns rows affected."""
    transaction = session.get(Transaction, transaction_id)
    if transaction is None:
        return 0
    session.delete(transaction)
    session.commit()
    logger.info("Deleted transaction %d", transaction_id)
    return 1


# ============================================
# Category CRUD Operations
# ============================================

def _commit_category(session: Session) -> None:
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise ValidationError("Category name already exists", fields=["name"]) from exc


@storage_operation
def list_categories(session: Session) -> List[Category]:
    return list(session.exec(select(Category).order_by(Category.name)).all())


@storage_operation
def get_category(session: Session, category_id: int) -> Optional[Category]:
    return session.get(Category, category_id)


@storage_operation
def create_category(
    session: Session,
    data: CategoryCreate,
    default_color: str = DEFAULT_CATEGORY_COLOR,
) -> Category:
    """Create a new category, falling back to the default color."""
    category = Category(name=data.name, color=data.color or default_color)
    session.add(category)
    _commit_category(session)
    session.refresh(category)
    logger.info("Created category %d (%s)", category.id, category.name)
    return category


@storage_operation
def update_category(session: Session, category_id: int, data: CategoryUpdate) -> int:
    """Rename and recolor a category. An omitted color is kept. Returns rows affected."""
    category = session.get(Category, category_id)
    if category is None:
        return 0

    category.name = data.name
    if data.color is not None:
        category.color = data.color

    session.add(category)
    _commit_category(session)
    return 1


@storage_operation
def delete_category(session: Session, category_id: int) -> int:
    """Delete a category. Transactions keep their now-dangling category_id."""
    category = session.get(Category, category_id)
    if category is None:
        return 0
    session.delete(category)
    session.commit()
    logger.info("Deleted category %d", category_id)
    return 1


# ============================================
# Aggregates
# ============================================

@storage_operation
def compute_statistics(session: Session) -> dict:
    """Income and expense totals plus the row count across all transactions."""
    statement = select(
        func.coalesce(
            func.sum(case((Transaction.type == TransactionType.income, Transaction.amount), else_=0)), 0
        ),
        func.coalesce(
            func.sum(case((Transaction.type == TransactionType.expense, Transaction.amount), else_=0)), 0
        ),
        func.count(Transaction.id),
    )
    total_income, total_expenses, total_transactions = session.exec(statement).one()

    # Some drivers still hand back None for an empty aggregate
    total_income = float(total_income or 0)
    total_expenses = float(total_expenses or 0)
    return {
        "total_income": total_income,
        "total_expenses": total_expenses,
        "total_transactions": int(total_transactions or 0),
        "balance": total_income - total_expenses,
    }


@storage_operation
def compute_spending_by_category(session: Session) -> List[dict]:
    """Expense totals per category, largest first. Income is never counted."""
    total = func.sum(Transaction.amount).label("total")
    count = func.count(Transaction.id).label("count")
    statement = (
        select(Category.name, Category.color, total, count)
        .select_from(Transaction)
        .join(Category, Transaction.category_id == Category.id)
        .where(Transaction.type == TransactionType.expense)
        .group_by(Category.id, Category.name, Category.color)
        .order_by(total.desc(), Category.name)
    )
    return [
        {"name": name, "color": color, "total": float(row_total), "count": int(row_count)}
        for name, color, row_total, row_count in session.exec(statement).all()
    ]
