from decimal import Decimal

from sqlalchemy import DECIMAL, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
	pass


class RateDB(Base):
	__tablename__ = 'rates'

	id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
	# ISO 'YYYY-MM-DD'; lexicographic order is calendar order
	date: Mapped[str] = mapped_column(String(10), nullable=False)
	currency_code: Mapped[str] = mapped_column(String(3), nullable=False)
	country: Mapped[str] = mapped_column(String(100), nullable=False)
	currency_name: Mapped[str] = mapped_column(String(100), nullable=False)
	amount: Mapped[int] = mapped_column(Integer, nullable=False)
	rate: Mapped[Decimal] = mapped_column(DECIMAL(precision=18, scale=6), nullable=False)

	__table_args__ = (
		Index('idx_date', 'date'),
		Index('idx_currency_code', 'currency_code'),
		Index('idx_date_currency', 'date', 'currency_code'),
		UniqueConstraint('date', 'currency_code', name='unique_date_currency'),
	)
