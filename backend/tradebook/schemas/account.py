from pydantic import BaseModel, field_validator
from datetime import datetime
from decimal import Decimal
from typing import Literal

AccountStatus = Literal["active", "inactive"]


def _trim_or_none(v: str | None, max_len: int, label: str):
    if v is None:
        return None
    v = v.strip()
    if len(v) > max_len:
        raise ValueError(f"{label} must be {max_len} characters or less")
    return v or None


class _AccountFields(BaseModel):
    number: str | None = None
    city: str | None = None
    address: str | None = None

    @field_validator("number")
    @classmethod
    def number_trim(cls, v: str | None):
        return _trim_or_none(v, 30, "number")

    @field_validator("city")
    @classmethod
    def city_trim(cls, v: str | None):
        return _trim_or_none(v, 100, "city")

    @field_validator("address")
    @classmethod
    def address_trim(cls, v: str | None):
        if v is None:
            return None
        return v.strip() or None


class AccountCreate(_AccountFields):
    name: str
    status: AccountStatus = "active"
    initial_balance: Decimal | None = None

    @field_validator("name")
    @classmethod
    def name_trim(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        if len(v) > 150:
            raise ValueError("name must be 150 characters or less")
        return v


class AccountUpdate(_AccountFields):
    name: str | None = None
    status: AccountStatus | None = None
    initial_balance: Decimal | None = None

    @field_validator("name")
    @classmethod
    def name_trim(cls, v: str | None):
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        if len(v) > 150:
            raise ValueError("name must be 150 characters or less")
        return v


class AccountReceivableCreate(AccountCreate):
    cnic: str | None = None

    @field_validator("cnic")
    @classmethod
    def cnic_trim(cls, v: str | None):
        return _trim_or_none(v, 25, "cnic")


class AccountReceivableUpdate(AccountUpdate):
    cnic: str | None = None

    @field_validator("cnic")
    @classmethod
    def cnic_trim(cls, v: str | None):
        return _trim_or_none(v, 25, "cnic")


class AccountPayableCreate(AccountCreate):
    pass


class AccountPayableUpdate(AccountUpdate):
    pass


class AccountReceivableOut(BaseModel):
    id: str
    ar_id: str
    name: str
    number: str | None
    cnic: str | None
    city: str | None
    address: str | None
    status: str
    initial_balance: Decimal | None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class AccountPayableOut(BaseModel):
    id: str
    ap_id: str
    name: str
    number: str | None
    city: str | None
    address: str | None
    status: str
    initial_balance: Decimal | None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
