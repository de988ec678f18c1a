from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Any, Iterable, Mapping

log = logging.getLogger(__name__)

ZERO = Decimal("0")
Q2 = Decimal("0.01")

EPOCH_DAY = date(1970, 1, 1)
EPOCH_TS = datetime(1970, 1, 1)


class LedgerKind(str, Enum):
    RECEIVABLE = "receivable"
    PAYABLE = "payable"


# Accounts Receivable (asset): debit raises the balance, credit lowers it.
AR_INVOICE_TYPES = frozenset({"sale", "receivable_advance", "advance_sale_inventory"})
AR_ADVANCE_RECEIPT_TYPES = frozenset({"advance_sale_payment"})
AR_RECEIPT_TYPES = frozenset({"receive_able", "advance_account_receivable_payment"})
AR_REFUND_TYPES = frozenset({"pay_able_client"})
AR_RETURN_TYPES = frozenset({"sale_return"})

# Accounts Payable (liability): credit raises the balance, debit lowers it.
AP_INVOICE_TYPES = frozenset({"purchase", "advance_purchase_inventory", "payable_advance"})
AP_ADVANCE_PAYMENT_TYPES = frozenset({"advance_purchase_payment"})
AP_PAYMENT_TYPES = frozenset({"pay_able"})
AP_VENDOR_RECEIPT_TYPES = frozenset({"receive_able_vendor"})
AP_RETURN_TYPES = frozenset({"purchase_return"})

KNOWN_TYPES = {
    LedgerKind.RECEIVABLE: AR_INVOICE_TYPES
    | AR_ADVANCE_RECEIPT_TYPES
    | AR_RECEIPT_TYPES
    | AR_REFUND_TYPES
    | AR_RETURN_TYPES,
    LedgerKind.PAYABLE: AP_INVOICE_TYPES
    | AP_ADVANCE_PAYMENT_TYPES
    | AP_PAYMENT_TYPES
    | AP_VENDOR_RECEIPT_TYPES
    | AP_RETURN_TYPES,
}


def d2(x: Decimal) -> Decimal:
    return x.quantize(Q2, rounding=ROUND_HALF_UP)


def to_decimal(v: Any) -> Decimal:
    """Coerce an amount field to ``Decimal``; anything unusable becomes zero."""
    if v is None or isinstance(v, bool):
        return ZERO
    if isinstance(v, Decimal):
        out = v
    elif isinstance(v, (int, float)):
        try:
            out = Decimal(str(v))
        except InvalidOperation:
            return ZERO
    elif isinstance(v, str):
        s = v.strip()
        if not s:
            return ZERO
        try:
            out = Decimal(s)
        except InvalidOperation:
            return ZERO
    else:
        return ZERO

    if not out.is_finite():
        return ZERO
    return out


def _get(tx: Any, name: str, default: Any = None) -> Any:
    if isinstance(tx, Mapping):
        return tx.get(name, default)
    return getattr(tx, name, default)


def as_day(v: Any) -> date | None:
    """Calendar date of a date/datetime/ISO string; time of day is dropped."""
    if v is None:
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, str):
        s = v.strip()
        if not s:
            return None
        try:
            return datetime.fromisoformat(s).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(s[:10])
        except ValueError:
            return None
    return None


def _as_instant(v: Any) -> datetime | None:
    if v is None:
        return None
    if isinstance(v, datetime):
        ts = v
    elif isinstance(v, date):
        ts = datetime(v.year, v.month, v.day)
    elif isinstance(v, str):
        try:
            ts = datetime.fromisoformat(v.strip())
        except ValueError:
            return None
    else:
        return None
    # naive and aware timestamps must compare; naive ones are taken as UTC
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts


def sort_key(tx: Any) -> tuple[date, datetime]:
    return (
        as_day(_get(tx, "date")) or EPOCH_DAY,
        _as_instant(_get(tx, "created_at")) or EPOCH_TS,
    )


def sort_transactions(transactions: Iterable[Any]) -> list[Any]:
    return sorted(transactions, key=sort_key)


def _type_tag(tx: Any) -> str:
    return str(_get(tx, "type") or "").strip().lower()


def _fallback_amount(tx: Any) -> Decimal:
    raw = _get(tx, "total_amount")
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raw = _get(tx, "paid_amount")
    return to_decimal(raw)


def classify_receivable(tx: Any) -> tuple[Decimal, Decimal]:
    t = _type_tag(tx)
    total = to_decimal(_get(tx, "total_amount"))
    paid = to_decimal(_get(tx, "paid_amount"))

    if t in AR_INVOICE_TYPES:
        return total, paid
    if t in AR_ADVANCE_RECEIPT_TYPES or t in AR_RECEIPT_TYPES:
        return ZERO, paid
    if t in AR_REFUND_TYPES:
        return paid, ZERO
    if t in AR_RETURN_TYPES:
        return -total, -paid

    amt = _fallback_amount(tx)
    if amt > 0:
        return amt, ZERO
    if amt < 0:
        return ZERO, -amt
    return ZERO, ZERO


def classify_payable(tx: Any) -> tuple[Decimal, Decimal]:
    t = _type_tag(tx)
    total = to_decimal(_get(tx, "total_amount"))
    paid = to_decimal(_get(tx, "paid_amount"))

    if t in AP_INVOICE_TYPES:
        return paid, total
    if t in AP_ADVANCE_PAYMENT_TYPES or t in AP_PAYMENT_TYPES:
        return paid, ZERO
    if t in AP_VENDOR_RECEIPT_TYPES:
        return -paid, ZERO
    if t in AP_RETURN_TYPES:
        return -paid, -total

    amt = _fallback_amount(tx)
    if amt > 0:
        return ZERO, amt
    if amt < 0:
        return -amt, ZERO
    return ZERO, ZERO


def classify(kind: LedgerKind | str, tx: Any) -> tuple[Decimal, Decimal]:
    """Debit/credit pair of one transaction for the given ledger kind."""
    kind = LedgerKind(kind)
    if log.isEnabledFor(logging.DEBUG) and _type_tag(tx) not in KNOWN_TYPES[kind]:
        log.debug("%s ledger: type %r of tx %s uses the default branch", kind.value, _get(tx, "type"), _get(tx, "id"))
    if kind is LedgerKind.RECEIVABLE:
        return classify_receivable(tx)
    return classify_payable(tx)


def apply_entry(kind: LedgerKind, balance: Decimal, debit: Decimal, credit: Decimal) -> Decimal:
    if kind is LedgerKind.RECEIVABLE:
        return balance + debit - credit
    return balance + credit - debit


@dataclass(frozen=True)
class LedgerRow:
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


@dataclass(frozen=True)
class LedgerWindow:
    kind: LedgerKind
    opening_balance: Decimal
    rows: list[LedgerRow] = field(default_factory=list)

    @property
    def closing_balance(self) -> Decimal:
        if not self.rows:
            return self.opening_balance
        return self.rows[-1].balance

    @property
    def total_debit(self) -> Decimal:
        return sum((r.debit for r in self.rows), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((r.credit for r in self.rows), ZERO)


def compute_ledger(kind: LedgerKind | str, opening_balance: Any, transactions: Iterable[Any]) -> list[LedgerRow]:
    """Sort, classify and fold ``transactions`` into running-balance rows.

    The input is neither mutated nor retained; the same inputs always give the
    same rows.
    """
    kind = LedgerKind(kind)
    running = to_decimal(opening_balance)

    rows: list[LedgerRow] = []
    for tx in sort_transactions(transactions):
        debit, credit = classify(kind, tx)
        running = apply_entry(kind, running, debit, credit)
        created = _get(tx, "created_at")
        rows.append(
            LedgerRow(
                id=None if _get(tx, "id") is None else str(_get(tx, "id")),
                type=_get(tx, "type"),
                date=as_day(_get(tx, "date")),
                created_at=created if isinstance(created, datetime) else _as_instant(created),
                description=_get(tx, "description"),
                total_amount=to_decimal(_get(tx, "total_amount")),
                paid_amount=to_decimal(_get(tx, "paid_amount")),
                debit=debit,
                credit=credit,
                balance=running,
            )
        )
    return rows


def fold_balance(kind: LedgerKind | str, opening_balance: Any, transactions: Iterable[Any]) -> Decimal:
    kind = LedgerKind(kind)
    running = to_decimal(opening_balance)
    for tx in sort_transactions(transactions):
        debit, credit = classify(kind, tx)
        running = apply_entry(kind, running, debit, credit)
    return running


def _before(tx: Any, day_from: date) -> bool:
    d = as_day(_get(tx, "date"))
    return d is not None and d < day_from


def _within(tx: Any, day_from: date | None, day_to: date | None) -> bool:
    d = as_day(_get(tx, "date"))
    if d is None:
        return day_from is None
    if day_from is not None and d < day_from:
        return False
    if day_to is not None and d > day_to:
        return False
    return True


def opening_balance(
    kind: LedgerKind | str,
    initial_balance: Any,
    transactions: Iterable[Any],
    date_from: date | datetime | str | None,
) -> Decimal:
    """Balance just before ``date_from``: ``initial_balance`` plus every dated
    transaction strictly before that calendar day."""
    day_from = as_day(date_from)
    if day_from is None:
        return to_decimal(initial_balance)
    prior = [tx for tx in transactions if _before(tx, day_from)]
    return fold_balance(kind, initial_balance, prior)


def build_window(
    kind: LedgerKind | str,
    initial_balance: Any,
    transactions: Iterable[Any],
    date_from: date | datetime | str | None = None,
    date_to: date | datetime | str | None = None,
) -> LedgerWindow:
    kind = LedgerKind(kind)
    history = list(transactions)
    day_from = as_day(date_from)
    day_to = as_day(date_to)

    opening = opening_balance(kind, initial_balance, history, day_from)
    in_window = [tx for tx in history if _within(tx, day_from, day_to)]
    return LedgerWindow(kind=kind, opening_balance=opening, rows=compute_ledger(kind, opening, in_window))
