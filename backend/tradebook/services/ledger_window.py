from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from tradebook.models.account_payable import AccountPayable
from tradebook.models.account_receivable import AccountReceivable
from tradebook.models.transaction import Transaction
from tradebook.services.ledger import LedgerKind, LedgerWindow, build_window


def account_model(kind: LedgerKind | str):
    if LedgerKind(kind) is LedgerKind.RECEIVABLE:
        return AccountReceivable
    return AccountPayable


def account_column(kind: LedgerKind | str):
    if LedgerKind(kind) is LedgerKind.RECEIVABLE:
        return Transaction.account_receivable_id
    return Transaction.account_payable_id


def get_account(s: Session, kind: LedgerKind | str, account_id: str):
    model = account_model(kind)
    return s.execute(select(model).where(model.id == account_id)).scalar_one_or_none()


def account_history(s: Session, kind: LedgerKind | str, account_id: str) -> list[Transaction]:
    # created_at carries microseconds; id only settles rows stamped identically
    q = (
        select(Transaction)
        .where(account_column(kind) == account_id)
        .order_by(Transaction.date.asc(), Transaction.created_at.asc(), Transaction.id.asc())
    )
    return list(s.execute(q).scalars().all())


def load_ledger_window(
    s: Session,
    kind: LedgerKind | str,
    account_id: str,
    start: date | None,
    end: date | None,
) -> LedgerWindow | None:
    """Opening balance and rows of one account over ``[start, end]``.

    The whole history is loaded: everything before ``start`` feeds the opening
    balance. Returns ``None`` when the account does not exist.
    """
    kind = LedgerKind(kind)
    account = get_account(s, kind, account_id)
    if account is None:
        return None
    return account_window(s, kind, account, start, end)


def account_window(
    s: Session,
    kind: LedgerKind | str,
    account: AccountReceivable | AccountPayable,
    start: date | None,
    end: date | None,
) -> LedgerWindow:
    kind = LedgerKind(kind)
    history = account_history(s, kind, account.id)
    return build_window(kind, account.initial_balance, history, start, end)
