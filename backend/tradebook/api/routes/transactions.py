from fastapi import APIRouter, Depends, Query, HTTPException
from datetime import date
from sqlalchemy.orm import Session
from sqlalchemy import select
from pydantic import ValidationError

from tradebook.api.deps import db, current_user, require_admin
from tradebook.schemas.transaction import TxCreate, TxOut, TxUpdate
from tradebook.models.transaction import Transaction
from tradebook.models.account_payable import AccountPayable
from tradebook.models.account_receivable import AccountReceivable
from tradebook.services.audit import log_event
from tradebook.services.ledger import LedgerKind, KNOWN_TYPES

router = APIRouter(prefix="/transactions", tags=["transactions"])

AR_ONLY_TYPES = KNOWN_TYPES[LedgerKind.RECEIVABLE] - KNOWN_TYPES[LedgerKind.PAYABLE]
AP_ONLY_TYPES = KNOWN_TYPES[LedgerKind.PAYABLE] - KNOWN_TYPES[LedgerKind.RECEIVABLE]


def _check_links(s: Session, body: TxCreate) -> None:
    if body.type in AR_ONLY_TYPES and not body.account_receivable_id:
        raise HTTPException(status_code=400, detail="account_link_required")
    if body.type in AP_ONLY_TYPES and not body.account_payable_id:
        raise HTTPException(status_code=400, detail="account_link_required")

    if body.account_receivable_id:
        ar = s.get(AccountReceivable, body.account_receivable_id)
        if ar is None:
            raise HTTPException(status_code=404, detail="account_not_found")
    if body.account_payable_id:
        ap = s.get(AccountPayable, body.account_payable_id)
        if ap is None:
            raise HTTPException(status_code=404, detail="account_not_found")


def _tx_details(t: Transaction) -> dict:
    return {
        "type": t.type,
        "date": str(t.date) if t.date is not None else None,
        "total_amount": str(t.total_amount) if t.total_amount is not None else None,
        "paid_amount": str(t.paid_amount) if t.paid_amount is not None else None,
        "account_receivable_id": t.account_receivable_id,
        "account_payable_id": t.account_payable_id,
    }


@router.get("", response_model=list[TxOut])
def list_transactions(
    account_receivable_id: str | None = Query(None),
    account_payable_id: str | None = Query(None),
    type: str | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    s: Session = Depends(db),
    u=Depends(current_user),
):
    if date_from is not None and date_to is not None and date_from > date_to:
        raise HTTPException(status_code=400, detail="invalid_date_range")

    q = select(Transaction)
    if account_receivable_id:
        q = q.where(Transaction.account_receivable_id == account_receivable_id)
    if account_payable_id:
        q = q.where(Transaction.account_payable_id == account_payable_id)
    if type:
        q = q.where(Transaction.type == type)
    if date_from is not None:
        q = q.where(Transaction.date >= date_from)
    if date_to is not None:
        q = q.where(Transaction.date <= date_to)
    q = q.order_by(Transaction.date.desc(), Transaction.created_at.desc(), Transaction.id.desc())
    return s.execute(q).scalars().all()


@router.get("/{tx_id}", response_model=TxOut)
def get_transaction(tx_id: str, s: Session = Depends(db), u=Depends(current_user)):
    t = s.get(Transaction, tx_id)
    if t is None:
        raise HTTPException(status_code=404, detail="tx_not_found")
    return t


@router.post("", response_model=TxOut)
def add_tx(body: TxCreate, s: Session = Depends(db), u=Depends(require_admin)):
    _check_links(s, body)

    t = Transaction(**body.model_dump())
    s.add(t)
    s.commit()
    s.refresh(t)

    log_event(
        s,
        username=u.get("sub"),
        action="tx.create",
        entity_type="transaction",
        entity_id=t.id,
        details=_tx_details(t),
    )
    return t


@router.delete("/{tx_id}")
def delete_tx(tx_id: str, s: Session = Depends(db), u=Depends(require_admin)):
    t = s.get(Transaction, tx_id)
    if t is None:
        raise HTTPException(status_code=404, detail="tx_not_found")
    details = _tx_details(t)
    s.delete(t)
    s.commit()
    log_event(
        s,
        username=u.get("sub"),
        action="tx.delete",
        entity_type="transaction",
        entity_id=tx_id,
        details=details,
    )
    return {"ok": True}


@router.patch("/{tx_id}", response_model=TxOut)
def update_tx(tx_id: str, body: TxUpdate, s: Session = Depends(db), u=Depends(require_admin)):
    t = s.get(Transaction, tx_id)
    if t is None:
        raise HTTPException(status_code=404, detail="tx_not_found")

    changes = body.model_dump(exclude_unset=True)
    merged = {name: getattr(t, name) for name in TxCreate.model_fields}
    merged.update(changes)
    try:
        checked = TxCreate.model_validate(merged)
    except ValidationError:
        raise HTTPException(status_code=422, detail="invalid_transaction")
    _check_links(s, checked)

    before = _tx_details(t)
    for k in changes:
        setattr(t, k, getattr(checked, k))
    s.add(t)
    s.commit()
    s.refresh(t)

    log_event(
        s,
        username=u.get("sub"),
        action="tx.update",
        entity_type="transaction",
        entity_id=t.id,
        details={"before": before, "after": _tx_details(t)},
    )
    return t
