from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from sqlalchemy import select

from tradebook.api.deps import db, current_user, require_admin
from tradebook.models.account_payable import AccountPayable
from tradebook.models.transaction import Transaction
from tradebook.schemas.account import AccountPayableCreate, AccountPayableUpdate, AccountPayableOut
from tradebook.services.accounts import next_ap_code, unlink_transactions
from tradebook.services.audit import log_event

router = APIRouter(prefix="/account-payables", tags=["account-payables"])


def _require_ap(s: Session, account_id: str) -> AccountPayable:
    a = s.execute(select(AccountPayable).where(AccountPayable.id == account_id)).scalar_one_or_none()
    if a is None:
        raise HTTPException(status_code=404, detail="account_not_found")
    return a


@router.get("", response_model=list[AccountPayableOut])
def list_account_payables(
    status: str | None = Query(None),
    s: Session = Depends(db),
    u=Depends(current_user),
):
    q = select(AccountPayable)
    if status:
        q = q.where(AccountPayable.status == status)
    return s.execute(q.order_by(AccountPayable.name.asc())).scalars().all()


@router.get("/{account_id}", response_model=AccountPayableOut)
def get_account_payable(account_id: str, s: Session = Depends(db), u=Depends(current_user)):
    return _require_ap(s, account_id)


@router.post("", response_model=AccountPayableOut)
def create_account_payable(body: AccountPayableCreate, s: Session = Depends(db), u=Depends(require_admin)):
    a = AccountPayable(ap_id=next_ap_code(s), **body.model_dump())
    s.add(a)
    s.commit()
    s.refresh(a)

    log_event(
        s,
        username=u.get("sub"),
        action="account_payable.create",
        entity_type="account_payable",
        entity_id=a.id,
        details={
            "ap_id": a.ap_id,
            "name": a.name,
            "initial_balance": str(a.initial_balance) if a.initial_balance is not None else None,
        },
    )
    return a


@router.patch("/{account_id}", response_model=AccountPayableOut)
def update_account_payable(
    account_id: str,
    body: AccountPayableUpdate,
    s: Session = Depends(db),
    u=Depends(require_admin),
):
    a = _require_ap(s, account_id)
    changes = body.model_dump(exclude_unset=True)
    for k, v in changes.items():
        setattr(a, k, v)
    s.add(a)
    s.commit()
    s.refresh(a)

    log_event(
        s,
        username=u.get("sub"),
        action="account_payable.update",
        entity_type="account_payable",
        entity_id=a.id,
        details={k: str(v) if v is not None else None for k, v in changes.items()},
    )
    return a


@router.delete("/{account_id}")
def delete_account_payable(account_id: str, s: Session = Depends(db), u=Depends(require_admin)):
    a = _require_ap(s, account_id)
    details = {"ap_id": a.ap_id, "name": a.name}
    details["unlinked_transactions"] = unlink_transactions(s, Transaction.account_payable_id, a.id)
    s.delete(a)
    s.commit()

    log_event(
        s,
        username=u.get("sub"),
        action="account_payable.delete",
        entity_type="account_payable",
        entity_id=account_id,
        details=details,
    )
    return {"ok": True}
