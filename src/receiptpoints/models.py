from __future__ import annotations

from datetime import date
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^(?:[01]\d|2[0-3]):[0-5]\d$"
# Up to 15 integer digits, a decimal point and exactly two fractional digits; no sign.
# Keeps every accepted amount well inside the default 28-digit Decimal context.
MONEY_PATTERN = r"^\d{1,15}\.\d{2}$"

Money = Annotated[StrictStr, Field(pattern=MONEY_PATTERN)]


class Item(BaseModel):
    model_config = ConfigDict(frozen=True)

    shortDescription: StrictStr = Field(min_length=1)
    price: Money


class Receipt(BaseModel):
    model_config = ConfigDict(frozen=True)

    retailer: StrictStr = Field(min_length=1)
    purchaseDate: StrictStr = Field(pattern=DATE_PATTERN)
    purchaseTime: StrictStr = Field(pattern=TIME_PATTERN)
    items: list[Item] = Field(min_length=1)
    total: Money

    @field_validator("purchaseDate")
    @classmethod
    def _check_calendar_date(cls, value: str) -> str:
        date.fromisoformat(value)
        return value


class ScoredReceipt(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    points: int = Field(ge=0)


class ReceiptIdResponse(BaseModel):
    id: str


class PointsResponse(BaseModel):
    points: int


class ErrorResponse(BaseModel):
    error: str
