from sqlalchemy import String, Text, DateTime, func, Numeric
from sqlalchemy.orm import Mapped, mapped_column
from tradebook.db.base import Base
from tradebook.models._ids import new_id

class AccountPayable(Base):
    __tablename__ = "account_payables"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    ap_id: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(150), index=True)
    number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="active")
    initial_balance: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)

    created_at: Mapped[DateTime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[DateTime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())
