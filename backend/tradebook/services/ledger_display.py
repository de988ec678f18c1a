from __future__ import annotations

from decimal import Decimal

from tradebook.services.ledger import LedgerKind, LedgerRow, ZERO, d2

PLACEHOLDER = "-"

_AR_REFS = (
    (frozenset({"sale", "receivable_advance", "advance_sale_inventory"}), "S# ", 6),
    (frozenset({"receive_able", "advance_sale_payment", "advance_account_receivable_payment"}), "RV", 5),
    (frozenset({"pay_able_client"}), "PY", 5),
    (frozenset({"sale_return"}), "CN", 4),
)

_AP_REFS = (
    (frozenset({"purchase", "payable_advance", "advance_purchase_inventory"}), "P# ", 6),
    (frozenset({"pay_able", "advance_purchase_payment", "advance_account_payable_payment"}), "B#", 5),
    (frozenset({"receive_able_vendor"}), "RC", 5),
    (frozenset({"purchase_return"}), "PR", 4),
)

_AR_DESCRIPTIONS = {
    "sale": "Sold goods",
    "advance_sale_inventory": "Sold goods",
    "receivable_advance": "Advance Receivable",
    "advance_sale_payment": "Advance Payment from Client",
    "receive_able": "Client paid",
    "advance_account_receivable_payment": "Client paid",
    "pay_able_client": "Paid client",
    "sale_return": "Client returned goods",
}

_AP_DESCRIPTIONS = {
    "purchase": "Purchase Invoice",
    "payable_advance": "Advance Payable",
    "advance_purchase_inventory": "Advance Purchase",
    "advance_purchase_payment": "Advance Payment to Vendor",
    "pay_able": "Paid vendor",
    "advance_account_payable_payment": "Paid vendor",
    "receive_able_vendor": "Received from vendor",
    "purchase_return": "Purchase Return",
}


def _tag(row: LedgerRow) -> str:
    return str(row.type or "").strip().lower()


def format_amount(x: Decimal) -> str:
    return f"{d2(abs(x)):,.2f}"


def format_balance(x: Decimal) -> str:
    if x == 0:
        return "0.00"
    s = format_amount(x)
    return f"({s})" if x < 0 else s


def _signed_or_placeholder(value: Decimal, source: Decimal) -> str:
    # a reversal shows as an explicit negative, but only if there was something to reverse
    if source == 0:
        return PLACEHOLDER
    return f"-{format_amount(value)}"


def _plain(value: Decimal) -> str:
    return format_amount(value) if value > ZERO else PLACEHOLDER


def display_debit(kind: LedgerKind | str, row: LedgerRow) -> str:
    kind = LedgerKind(kind)
    t = _tag(row)
    if kind is LedgerKind.RECEIVABLE:
        if t == "sale_return":
            return _signed_or_placeholder(row.debit, row.total_amount)
    else:
        if t in ("purchase_return", "receive_able_vendor"):
            return _signed_or_placeholder(row.debit, row.paid_amount)
    return _plain(row.debit)


def display_credit(kind: LedgerKind | str, row: LedgerRow) -> str:
    kind = LedgerKind(kind)
    t = _tag(row)
    if kind is LedgerKind.RECEIVABLE:
        if t == "sale_return":
            return _signed_or_placeholder(row.credit, row.paid_amount)
    else:
        if t == "purchase_return":
            return _signed_or_placeholder(row.credit, row.total_amount)
    return _plain(row.credit)


def book_reference(kind: LedgerKind | str, row: LedgerRow) -> str:
    refs = _AR_REFS if LedgerKind(kind) is LedgerKind.RECEIVABLE else _AP_REFS
    ident = str(row.id or "")
    t = _tag(row)
    for types, prefix, width in refs:
        if t in types:
            return f"{prefix}{ident[:width].upper()}"
    return ident[:8].upper()


def default_description(kind: LedgerKind | str, row: LedgerRow) -> str:
    if row.description:
        return row.description
    table = _AR_DESCRIPTIONS if LedgerKind(kind) is LedgerKind.RECEIVABLE else _AP_DESCRIPTIONS
    return table.get(_tag(row), PLACEHOLDER)


def format_day(row: LedgerRow) -> str:
    if row.date is None:
        return PLACEHOLDER
    return row.date.strftime("%d/%m/%Y")


def render_row(kind: LedgerKind | str, row: LedgerRow) -> dict:
    """Display strings shared by the interactive table and the print view."""
    return {
        "date": format_day(row),
        "book": book_reference(kind, row),
        "description": default_description(kind, row),
        "debit": display_debit(kind, row),
        "credit": display_credit(kind, row),
        "balance": format_balance(row.balance),
    }
