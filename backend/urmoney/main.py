"""
FastAPI application entry point.
"""

import logging
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from sqlmodel import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import crud
from .config import Settings, settings as default_settings
from .database import Database, get_session
from .errors import FinanceTrackerError, NotFoundError
from .schemas import (
    CategoryCreate,
    CategoryResponse,
    CategorySpending,
    CategoryUpdate,
    CategoryWritten,
    HealthResponse,
    Message,
    Statistics,
    TransactionCreate,
    TransactionResponse,
    TransactionUpdate,
    TransactionWritten,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")
shell_router = APIRouter()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# Health check endpoint
@router.get("/health", response_model=HealthResponse, tags=["Root"])
def health_check(app_settings: Settings = Depends(get_settings)):
    """Health check endpoint."""
    return {"status": "ok", "message": f"{app_settings.APP_NAME} API is running"}


# ============================================
# Transaction Endpoints
# ============================================

@router.get("/transactions", response_model=List[TransactionResponse], tags=["Transactions"])
def read_transactions(session: Session = Depends(get_session)):
    """Get all transactions, newest first, with their category's name and color."""
    return crud.list_transactions(session)


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse, tags=["Transactions"])
def read_transaction(transaction_id: int, session: Session = Depends(get_session)):
    """Get a specific transaction by ID."""
    transaction = crud.get_transaction(session, transaction_id)
    if transaction is None:
        raise NotFoundError("Transaction not found")
    return transaction


@router.post(
    "/transactions",
    response_model=TransactionWritten,
    status_code=status.HTTP_201_CREATED,
    tags=["Transactions"],
)
def create_transaction(transaction_data: TransactionCreate, session: Session = Depends(get_session)):
    """Create a new transaction."""
    transaction = crud.create_transaction(session, transaction_data)
    return TransactionWritten(id=transaction.id, **transaction_data.model_dump())


@router.put("/transactions/{transaction_id}", response_model=TransactionWritten, tags=["Transactions"])
def update_transaction(
    transaction_id: int,
    transaction_data: TransactionUpdate,
    session: Session = Depends(get_session),
):
    """Replace every field of a transaction."""
    if crud.update_transaction(session, transaction_id, transaction_data) == 0:
        raise NotFoundError("Transaction not found")
    return TransactionWritten(id=transaction_id, **transaction_data.model_dump())


@router.delete("/transactions/{transaction_id}", response_model=Message, tags=["Transactions"])
def delete_transaction(transaction_id: int, session: Session = Depends(get_session)):
    """Permanently delete a transaction."""
    if crud.delete_transaction(session, transaction_id) == 0:
        raise NotFoundError("Transaction not found")
    return {"message": "Transaction deleted successfully"}


# ============================================
# Category Endpoints
# ============================================

@router.get("/categories", response_model=List[CategoryResponse], tags=["Categories"])
def read_categories(session: Session = Depends(get_session)):
    """Get all categories ordered by name."""
    return crud.list_categories(session)


@router.get("/categories/{category_id}", response_model=CategoryResponse, tags=["Categories"])
def read_category(category_id: int, session: Session = Depends(get_session)):
    category = crud.get_category(session, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


@router.post(
    "/categories",
    response_model=CategoryWritten,
    status_code=status.HTTP_201_CREATED,
    tags=["Categories"],
)
def create_category(
    category_data: CategoryCreate,
    session: Session = Depends(get_session),
    app_settings: Settings = Depends(get_settings),
):
    """Create a new category. The color defaults when omitted."""
    category = crud.create_category(session, category_data, default_color=app_settings.DEFAULT_CATEGORY_COLOR)
    return CategoryWritten(id=category.id, name=category.name, color=category.color)


@router.put("/categories/{category_id}", response_model=CategoryWritten, tags=["Categories"])
def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    session: Session = Depends(get_session),
):
    if crud.update_category(session, category_id, category_data) == 0:
        raise NotFoundError("Category not found")
    return CategoryWritten(id=category_id, **category_data.model_dump())


@router.delete("/categories/{category_id}", response_model=Message, tags=["Categories"])
def delete_category(category_id: int, session: Session = Depends(get_session)):
    """Delete a category. Its transactions are kept and lose their category details."""
    if crud.delete_category(session, category_id) == 0:
        raise NotFoundError("Category not found")
    return {"message": "Category deleted successfully"}


# ============================================
# Statistics Endpoints
# ============================================

@router.get("/statistics", response_model=Statistics, tags=["Statistics"])
def get_statistics(session: Session = Depends(get_session)):
    """Get income/expense totals across all transactions."""
    return crud.compute_statistics(session)


@router.get("/spending-by-category", response_model=List[CategorySpending], tags=["Statistics"])
def get_spending_by_category(session: Session = Depends(get_session)):
    """Get expense totals grouped by category, largest first."""
    return crud.compute_spending_by_category(session)


# ============================================
# Client Shell
# ============================================

@shell_router.get("/{full_path:path}", include_in_schema=False)
def serve_client(full_path: str, app_settings: Settings = Depends(get_settings)):
    """Serve the built browser client, or a status message when it is absent."""
    static_dir = Path(app_settings.STATIC_DIR).resolve()
    if full_path:
        candidate = (static_dir / full_path).resolve()
        if static_dir in candidate.parents and candidate.is_file():
            return FileResponse(candidate)

    index = static_dir / "index.html"
    if index.is_file():
        return FileResponse(index)

    return {
        "message": f"{app_settings.APP_NAME} API is running. Build the client app to see the UI.",
        "api_docs": "/api/health",
    }


@shell_router.api_route(
    "/{full_path:path}", methods=["POST", "PUT", "PATCH", "DELETE"], include_in_schema=False
)
def unmatched_route(full_path: str):
    raise NotFoundError("Not found")


# ============================================
# Error Handlers
# ============================================

def _error_response(status_code: int, message: str, fields: Optional[List[str]] = None) -> JSONResponse:
    content = {"error": message}
    if fields:
        content["fields"] = fields
    return JSONResponse(status_code=status_code, content=content)


async def handle_finance_error(request: Request, exc: FinanceTrackerError):
    return _error_response(exc.status_code, exc.message, getattr(exc, "fields", None))


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    # An id that cannot be parsed matches no row
    if any((error.get("loc") or ("",))[0] == "path" for error in exc.errors()):
        if request.url.path.startswith("/api/categories"):
            return _error_response(status.HTTP_404_NOT_FOUND, "Category not found")
        return _error_response(status.HTTP_404_NOT_FOUND, "Transaction not found")

    fields = []
    missing = False
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = location[-1] if location else "body"
        if field not in fields:
            fields.append(field)
        if error.get("type") in ("missing", "string_too_short"):
            missing = True

    if request.url.path.startswith("/api/categories") and "name" in fields:
        message = "Category name is required"
    elif missing:
        message = "Missing required fields"
    else:
        message = "Invalid request"
    return _error_response(status.HTTP_400_BAD_REQUEST, message, fields)


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


def create_app(app_settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the API around a single database handle shared by every request."""
    app_settings = app_settings or default_settings
    logging.basicConfig(level=app_settings.LOG_LEVEL.upper())

    app = FastAPI(
        title=app_settings.APP_NAME,
        version=app_settings.APP_VERSION,
        description="Personal Finance Tracker API - Track income and expenses",
    )
    app.state.settings = app_settings
    app.state.database = database or Database(app_settings.DATABASE_URL, echo=app_settings.DEBUG)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(FinanceTrackerError, handle_finance_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)

    app.include_router(router)
    # Catch-all, must stay last
    app.include_router(shell_router)

    @app.on_event("startup")
    def on_startup():
        """Create database tables and default categories on application startup."""
        app.state.database.init(seed_defaults=app_settings.SEED_DEFAULT_CATEGORIES)
        logger.info("%s %s ready", app_settings.APP_NAME, app_settings.APP_VERSION)

    return app


app = create_app()
