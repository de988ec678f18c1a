from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from sqlalchemy import select

from tradebook.api.deps import db, current_user, require_admin
from tradebook.models.account_receivable import AccountReceivable
from tradebook.models.transaction import Transaction
from tradebook.schemas.account import AccountReceivableCreate, AccountReceivableUpdate, AccountReceivableOut
from tradebook.services.accounts import next_ar_code, unlink_transactions
from tradebook.services.audit import log_event

router = APIRouter(prefix="/account-receivables", tags=["account-receivables"])


def _require_ar(s: Session, account_id: str) -> AccountReceivable:
    a = s.execute(select(AccountReceivable).where(AccountReceivable.id == account_id)).scalar_one_or_none()
    if a is None:
        raise HTTPException(status_code=404, detail="account_not_found")
    return a


@router.get("", response_model=list[AccountReceivableOut])
def list_account_receivables(
    status: str | None = Query(None),
    s: Session = Depends(db),
    u=Depends(current_user),
):
    q = select(AccountReceivable)
    if status:
        q = q.where(AccountReceivable.status == status)
    return s.execute(q.order_by(AccountReceivable.name.asc())).scalars().all()


@router.get("/{account_id}", response_model=AccountReceivableOut)
def get_account_receivable(account_id: str, s: Session = Depends(db), u=Depends(current_user)):
    return _require_ar(s, account_id)


@router.post("", response_model=AccountReceivableOut)
def create_account_receivable(body: AccountReceivableCreate, s: Session = Depends(db), u=Depends(require_admin)):
    a = AccountReceivable(ar_id=next_ar_code(s), **body.model_dump())
    s.add(a)
    s.commit()
    s.refresh(a)

    log_event(
        s,
        username=u.get("sub"),
        action="account_receivable.create",
        entity_type="account_receivable",
        entity_id=a.id,
        details={
            "ar_id": a.ar_id,
            "name": a.name,
            "initial_balance": str(a.initial_balance) if a.initial_balance is not None else None,
        },
    )
    return a


@router.patch("/{account_id}", response_model=AccountReceivableOut)
def update_account_receivable(
    account_id: str,
    body: AccountReceivableUpdate,
    s: Session = Depends(db),
    u=Depends(require_admin),
):
    a = _require_ar(s, account_id)
    changes = body.model_dump(exclude_unset=True)
    for k, v in changes.items():
        setattr(a, k, v)
    s.add(a)
    s.commit()
    s.refresh(a)

    log_event(
        s,
        username=u.get("sub"),
        action="account_receivable.update",
        entity_type="account_receivable",
        entity_id=a.id,
        details={k: str(v) if v is not None else None for k, v in changes.items()},
    )
    return a


@router.delete("/{account_id}")
def delete_account_receivable(account_id: str, s: Session = Depends(db), u=Depends(require_admin)):
    a = _require_ar(s, account_id)
    details = {"ar_id": a.ar_id, "name": a.name}
    details["unlinked_transactions"] = unlink_transactions(s, Transaction.account_receivable_id, a.id)
    s.delete(a)
    s.commit()

    log_event(
        s,
        username=u.get("sub"),
        action="account_receivable.delete",
        entity_type="account_receivable",
        entity_id=account_id,
        details=details,
    )
    return {"ok": True}
