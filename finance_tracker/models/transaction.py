import re
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

TWO_PLACES = Decimal('0.01')
DATE_FORMAT = '%Y-%m-%d'
DESCRIPTION_MAX_LENGTH = 255
# NUMERIC(14, 2) leaves 12 integer digits
AMOUNT_LIMIT = Decimal(10) ** 12
_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def parse_iso_date(value: str) -> date:
    """Parse a strict YYYY-MM-DD string into a date, raising ValueError otherwise."""
    if not isinstance(value, str) or not _DATE_PATTERN.match(value):
        raise ValueError('must be a valid date in YYYY-MM-DD format')
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise ValueError('must be a valid date in YYYY-MM-DD format') from None


class TransactionCreate(BaseModel):
    """
    Candidate transaction submitted by a client.

    Normalizes on validation: currency is trimmed and uppercased,
    category trimmed, amount rounded to two decimal places and a
    missing description becomes an empty string.
    """
    amount: Decimal = Field(allow_inf_nan=False)
    currency: str = Field(min_length=3, max_length=3)
    date: date
    description: Optional[str] = ''
    category: str = Field(min_length=1, max_length=64)

    @field_validator('amount', mode='before')
    @classmethod
    def reject_booleans(cls, value):
        if isinstance(value, bool):
            raise ValueError('must be a number')
        return value

    @field_validator('amount')
    @classmethod
    def round_amount(cls, value: Decimal) -> Decimal:
        try:
            rounded = value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise ValueError("is too large") from None
        if abs(rounded) >= AMOUNT_LIMIT:
            raise ValueError("must have at most 12 digits before the decimal point")
        return rounded

    @field_validator('currency', mode='before')
    @classmethod
    def normalize_currency(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, value):
        if isinstance(value, date):
            return value
        return parse_iso_date(value)

    @field_validator('description')
    @classmethod
    def default_description(cls, value: Optional[str]) -> str:
        if value is None:
            return ''
        if len(value) > DESCRIPTION_MAX_LENGTH:
            raise ValueError(f'must be at most {DESCRIPTION_MAX_LENGTH} characters')
        return value

    @field_validator('category', mode='before')
    @classmethod
    def strip_category(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value


class TransactionOut(BaseModel):
    """A persisted transaction as returned to clients."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    amount: Decimal
    currency: str
    date: date
    description: str
    category: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator('created_at', 'updated_at')
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # SQLite drops the offset on storage; timestamps are always written in UTC
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_serializer('amount')
    def format_amount(self, value: Decimal) -> str:
        return str(Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))
