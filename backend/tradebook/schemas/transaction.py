from pydantic import BaseModel, field_validator, model_validator
from datetime import date as Date, datetime
from decimal import Decimal
from typing import Literal

TxType = Literal[
    "deposit",
    "transfer",
    "purchase",
    "purchase_return",
    "sale",
    "sale_return",
    "advance_purchase_inventory",
    "advance_sale_payment",
    "advance_purchase_payment",
    "advance_sale_inventory",
    "advance_account_receivable_payment",
    "advance_account_payable_payment",
    "asset_purchase",
    "loan",
    "loan_return",
    "other_expense",
    "lost_and_damage",
    "pay_able",
    "receive_able",
    "payable_advance",
    "receivable_advance",
    "pay_able_client",
    "receive_able_vendor",
    "payroll",
    "fixed_utility",
    "fixed_expense",
    "miscellaneous",
]

ModeOfPayment = Literal["check", "cash", "bank_transfer", "pay_order"]

# the counterparty balance may legitimately go negative for these
SIGNED_TOTAL_TYPES = ("pay_able_client", "receive_able_vendor")


def _finite_money(v: Decimal | None, label: str):
    if v is None:
        return None
    if not v.is_finite():
        raise ValueError(f"{label} must be finite")
    if v.as_tuple().exponent < -2:
        raise ValueError(f"{label} allows at most 2 decimal places")
    return v


class TxCreate(BaseModel):
    type: TxType
    date: Date | None = None
    total_amount: Decimal | None = None
    paid_amount: Decimal | None = None
    remaining_payment: Decimal | None = None
    mode_of_payment: ModeOfPayment | None = None
    description: str | None = None
    account_receivable_id: str | None = None
    account_payable_id: str | None = None

    @field_validator("total_amount")
    @classmethod
    def total_amount_finite(cls, v: Decimal | None):
        return _finite_money(v, "total_amount")

    @field_validator("paid_amount")
    @classmethod
    def paid_amount_finite(cls, v: Decimal | None):
        return _finite_money(v, "paid_amount")

    @field_validator("remaining_payment")
    @classmethod
    def remaining_payment_finite(cls, v: Decimal | None):
        return _finite_money(v, "remaining_payment")

    @field_validator("description")
    @classmethod
    def description_trim(cls, v: str | None):
        if v is None:
            return None
        v = v.strip()
        return v or None

    @model_validator(mode="after")
    def total_amount_sign(self):
        if self.total_amount is not None and self.total_amount < 0 and self.type not in SIGNED_TOTAL_TYPES:
            raise ValueError("total_amount must not be negative")
        return self


class TxUpdate(BaseModel):
    type: TxType | None = None
    date: Date | None = None
    total_amount: Decimal | None = None
    paid_amount: Decimal | None = None
    remaining_payment: Decimal | None = None
    mode_of_payment: ModeOfPayment | None = None
    description: str | None = None
    account_receivable_id: str | None = None
    account_payable_id: str | None = None

    @field_validator("total_amount")
    @classmethod
    def total_amount_finite(cls, v: Decimal | None):
        return _finite_money(v, "total_amount")

    @field_validator("paid_amount")
    @classmethod
    def paid_amount_finite(cls, v: Decimal | None):
        return _finite_money(v, "paid_amount")

    @field_validator("remaining_payment")
    @classmethod
    def remaining_payment_finite(cls, v: Decimal | None):
        return _finite_money(v, "remaining_payment")


class TxOut(BaseModel):
    id: str
    type: str
    date: Date | None
    total_amount: Decimal | None
    paid_amount: Decimal | None
    remaining_payment: Decimal | None
    mode_of_payment: str | None
    description: str | None
    account_receivable_id: str | None
    account_payable_id: str | None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
