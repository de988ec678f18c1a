from pydantic import BaseModel
from datetime import date, datetime
from decimal import Decimal
from typing import Literal


class LedgerRowOut(BaseModel):
    id: str | None
    type: str | None
    date: date | None
    created_at: datetime | None
    description: str | None
    total_amount: Decimal
    paid_amount: Decimal
    debit: Decimal
    credit: Decimal
    balance: Decimal

    book: str
    display_description: str
    display_debit: str
    display_credit: str
    display_balance: str


class LedgerWindowOut(BaseModel):
    kind: Literal["receivable", "payable"]
    account_id: str
    account_name: str
    date_from: date | None
    date_to: date | None
    opening_balance: Decimal
    closing_balance: Decimal
    total_debit: Decimal
    total_credit: Decimal
    display_opening_balance: str
    display_closing_balance: str
    rows: list[LedgerRowOut]
