"""Default categories inserted into an empty store."""

from sqlalchemy import func
from sqlmodel import Session, select

from .crud import storage_operation
from .models import Category

DEFAULT_CATEGORIES = [
    ("Food & Dining", "#EF4444"),
    ("Transportation", "#F59E0B"),
    ("Shopping", "#EC4899"),
    ("Entertainment", "#8B5CF6"),
    ("Bills & Utilities", "#3B82F6"),
    ("Healthcare", "#10B981"),
    ("Salary", "#22C55E"),
    ("Other", "#6B7280"),
]


@storage_operation
def seed_default_categories(session: Session) -> int:
    """Insert the default categories when the table is empty. Returns rows inserted."""
    existing = session.exec(select(func.count(Category.id))).one()
    if existing:
        return 0

    for name, color in DEFAULT_CATEGORIES:
        session.add(Category(name=name, color=color))
    session.commit()
    return len(DEFAULT_CATEGORIES)
