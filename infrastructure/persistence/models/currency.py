from datetime import datetime

from sqlalchemy import DateTime, Float, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
	pass


class RateHistoryDB(Base):
	__tablename__ = 'rate_history'

	id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
	base_currency: Mapped[str] = mapped_column(String(10), nullable=False)
	quote_currency: Mapped[str] = mapped_column(String(10), nullable=False)
	rate: Mapped[float] = mapped_column(Float, nullable=False)
	observed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)

	__table_args__ = (Index('idx_rate_pair', 'base_currency', 'quote_currency'),)


class ConversionHistoryDB(Base):
	__tablename__ = 'conversion_history'

	id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
	base_currency: Mapped[str] = mapped_column(String(10), nullable=False)
	quote_currency: Mapped[str] = mapped_column(String(10), nullable=False)
	requested_amount: Mapped[float] = mapped_column(Float, nullable=False)
	converted_amount: Mapped[float] = mapped_column(Float, nullable=False)
	rate: Mapped[float] = mapped_column(Float, nullable=False)
	timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
