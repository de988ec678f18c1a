from sqlalchemy import Date, DateTime, func, ForeignKey, Numeric, String, Text, Index
from sqlalchemy.orm import Mapped, mapped_column
from tradebook.db.base import Base
from tradebook.models._ids import new_id
from tradebook.utils.timezone import utcnow_naive

class Transaction(Base):
    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    type: Mapped[str] = mapped_column(String(48), index=True)
    date: Mapped[Date | None] = mapped_column(Date, nullable=True, index=True)

    total_amount: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)
    paid_amount: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)
    remaining_payment: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)
    mode_of_payment: Mapped[str | None] = mapped_column(String(16), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    account_receivable_id: Mapped[str | None] = mapped_column(
        ForeignKey("account_receivables.id", ondelete="SET NULL"), nullable=True, index=True
    )
    account_payable_id: Mapped[str | None] = mapped_column(
        ForeignKey("account_payables.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # microsecond stamp from the app so same-day rows keep insertion order
    created_at: Mapped[DateTime] = mapped_column(DateTime, default=utcnow_naive, server_default=func.now())
    updated_at: Mapped[DateTime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())


Index("ix_transactions_date_created", Transaction.date, Transaction.created_at)
