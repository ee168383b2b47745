from fastapi import FastAPI, Depends, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional, List, Dict
import os
import time
from loguru import logger

from . import database
from .main import configure_logging
from .models.transaction import TransactionCreate, TransactionOut, parse_iso_date

app = FastAPI(title="Finance Tracker API")

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class InvalidDateFilter(ValueError):
    """A listing filter that is not a YYYY-MM-DD date."""

    def __init__(self, field: str):
        super().__init__(f"{field} must be a valid date in YYYY-MM-DD format")
        self.field = field


def _parse_date_filter(field: str, value: Optional[str]):
    if value is None or value == "":
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise InvalidDateFilter(field) from None


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = int((time.perf_counter() - started) * 1000)
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms} ms)")
    return response


@app.exception_handler(InvalidDateFilter)
async def invalid_date_filter_handler(request: Request, exc: InvalidDateFilter):
    logger.warning(f"Rejected listing filter {exc.field}: {request.query_params.get(exc.field)!r}")
    return JSONResponse(status_code=400, content={"message": str(exc)})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"message": "Database error"})


@app.on_event("startup")
async def startup_event():
    """Initialize the application."""
    configure_logging()
    database.init_db()
    logger.info("Database initialized")


@app.get("/")
async def root():
    return {"hello": "world"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


@app.get("/transactions", response_model=List[TransactionOut])
def get_transactions(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    session=Depends(database.get_db),
):
    start = _parse_date_filter("startDate", start_date)
    end = _parse_date_filter("endDate", end_date)
    return database.list_transactions(session, start, end)


@app.post("/transactions", response_model=TransactionOut, status_code=201)
def create_transaction(payload: TransactionCreate, session=Depends(database.get_db)):
    transaction = database.add_transaction(session, **payload.model_dump())
    logger.info(f"Added transaction {transaction.id}: {transaction.amount} {transaction.currency} ({transaction.category})")
    return transaction


@app.get("/balances", response_model=Dict[str, float])
def get_balances(session=Depends(database.get_db)):
    return database.get_balances(session)
