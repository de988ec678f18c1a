from __future__ import annotations

import re

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from tradebook.models.account_payable import AccountPayable
from tradebook.models.account_receivable import AccountReceivable
from tradebook.models.transaction import Transaction

_CODE_RE = re.compile(r"^[A-Z]+-(\d+)$")


def _next_code(s: Session, column, prefix: str) -> str:
    codes = s.execute(select(column).where(column.like(f"{prefix}-%"))).scalars().all()
    highest = 0
    for c in codes:
        m = _CODE_RE.match(c or "")
        if m:
            highest = max(highest, int(m.group(1)))
    return f"{prefix}-{highest + 1:04d}"


def next_ar_code(s: Session) -> str:
    return _next_code(s, AccountReceivable.ar_id, "AR")


def next_ap_code(s: Session) -> str:
    return _next_code(s, AccountPayable.ap_id, "AP")


def unlink_transactions(s: Session, column, account_id: str) -> int:
    """Detach an account's transactions before the account row goes away.

    The foreign keys are ``ON DELETE SET NULL``; doing it here keeps SQLite,
    which does not enforce them by default, in line with PostgreSQL.
    """
    res = s.execute(
        update(Transaction)
        .where(column == account_id)
        .values({column.key: None})
    )
    return res.rowcount or 0
