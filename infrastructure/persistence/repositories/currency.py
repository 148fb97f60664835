from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.future import select

from domain.exceptions.currency import CacheError
from domain.models.currency import ConversionRecord, ExchangeRate
from infrastructure.persistence.database import Database
from infrastructure.persistence.models.currency import (
	ConversionHistoryDB,
	RateHistoryDB,
)


def as_utc(value: datetime) -> datetime:
	# SQLite drops tzinfo on the way back out
	if value.tzinfo is None:
		return value.replace(tzinfo=UTC)
	return value.astimezone(UTC)


class SQLRateStore:
	"""Rate store over the ``rate_history`` table. Old rows are kept; the newest wins."""

	def __init__(self, database: Database):
		self.database = database

	async def find_latest(self, base_currency: str, quote_currency: str) -> ExchangeRate | None:
		stmt = (
			select(RateHistoryDB)
			.filter(
				RateHistoryDB.base_currency == base_currency,
				RateHistoryDB.quote_currency == quote_currency,
			)
			.order_by(RateHistoryDB.observed_at.desc(), RateHistoryDB.id.desc())
			.limit(1)
		)
		try:
			async with self.database.session() as session:
				row = (await session.execute(stmt)).scalars().first()
		except SQLAlchemyError as e:
			raise CacheError(f'Failed to read rate {base_currency}/{quote_currency}: {e}') from e

		if row is None:
			return None
		return ExchangeRate(
			base_currency=row.base_currency,
			quote_currency=row.quote_currency,
			rate=row.rate,
			observed_at=as_utc(row.observed_at),
		)

	async def insert(self, entry: ExchangeRate) -> None:
		try:
			async with self.database.session() as session:
				session.add(
					RateHistoryDB(
						base_currency=entry.base_currency,
						quote_currency=entry.quote_currency,
						rate=entry.rate,
						observed_at=as_utc(entry.observed_at),
					)
				)
		except SQLAlchemyError as e:
			raise CacheError(
				f'Failed to store rate {entry.base_currency}/{entry.quote_currency}: {e}'
			) from e


class SQLConversionHistory:
	def __init__(self, database: Database):
		self.database = database

	async def add(self, record: ConversionRecord) -> None:
		async with self.database.session() as session:
			session.add(
				ConversionHistoryDB(
					base_currency=record.base_currency,
					quote_currency=record.quote_currency,
					requested_amount=record.requested_amount,
					converted_amount=record.converted_amount,
					rate=record.rate,
					timestamp=as_utc(record.timestamp),
				)
			)

	async def list_recent(self, limit: int = 50) -> list[ConversionRecord]:
		stmt = (
			select(ConversionHistoryDB)
			.order_by(ConversionHistoryDB.timestamp.desc(), ConversionHistoryDB.id.desc())
			.limit(limit)
		)
		async with self.database.session() as session:
			rows = (await session.execute(stmt)).scalars().all()

		return [
			ConversionRecord(
				base_currency=r.base_currency,
				quote_currency=r.quote_currency,
				requested_amount=r.requested_amount,
				converted_amount=r.converted_amount,
				rate=r.rate,
				timestamp=as_utc(r.timestamp),
			)
			for r in rows
		]
