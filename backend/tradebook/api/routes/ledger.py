from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from tradebook.api.deps import db, current_user
from tradebook.schemas.ledger import LedgerRowOut, LedgerWindowOut
from tradebook.services.ledger import LedgerKind
from tradebook.services.ledger_display import format_balance, render_row
from tradebook.services.ledger_window import account_window, get_account
from tradebook.utils.timezone import today_business

router = APIRouter(tags=["ledger"])


def _ledger_out(
    s: Session,
    kind: LedgerKind,
    account_id: str,
    date_from: date | None,
    date_to: date | None,
) -> LedgerWindowOut:
    if date_to is None:
        date_to = today_business()
    if date_from is not None and date_from > date_to:
        raise HTTPException(status_code=400, detail="invalid_date_range")

    account = get_account(s, kind, account_id)
    if account is None:
        raise HTTPException(status_code=404, detail="account_not_found")
    window = account_window(s, kind, account, date_from, date_to)

    rows = []
    for r in window.rows:
        shown = render_row(kind, r)
        rows.append(
            LedgerRowOut(
                id=r.id,
                type=r.type,
                date=r.date,
                created_at=r.created_at,
                description=r.description,
                total_amount=r.total_amount,
                paid_amount=r.paid_amount,
                debit=r.debit,
                credit=r.credit,
                balance=r.balance,
                book=shown["book"],
                display_description=shown["description"],
                display_debit=shown["debit"],
                display_credit=shown["credit"],
                display_balance=shown["balance"],
            )
        )

    return LedgerWindowOut(
        kind=kind.value,
        account_id=account_id,
        account_name=account.name,
        date_from=date_from,
        date_to=date_to,
        opening_balance=window.opening_balance,
        closing_balance=window.closing_balance,
        total_debit=window.total_debit,
        total_credit=window.total_credit,
        display_opening_balance=format_balance(window.opening_balance),
        display_closing_balance=format_balance(window.closing_balance),
        rows=rows,
    )


@router.get("/account-receivables/{account_id}/ledger", response_model=LedgerWindowOut)
def receivable_ledger(
    account_id: str,
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    s: Session = Depends(db),
    u=Depends(current_user),
):
    return _ledger_out(s, LedgerKind.RECEIVABLE, account_id, date_from, date_to)


@router.get("/account-payables/{account_id}/ledger", response_model=LedgerWindowOut)
def payable_ledger(
    account_id: str,
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    s: Session = Depends(db),
    u=Depends(current_user),
):
    return _ledger_out(s, LedgerKind.PAYABLE, account_id, date_from, date_to)
