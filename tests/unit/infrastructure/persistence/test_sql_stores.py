# nosec B101

from datetime import UTC, datetime, timedelta, timezone

import pytest
import pytest_asyncio

from domain.exceptions.currency import CacheError
from domain.models.currency import ConversionRecord, ExchangeRate
from infrastructure.persistence.database import Database
from infrastructure.persistence.repositories.currency import SQLConversionHistory, SQLRateStore

T0 = datetime(2025, 11, 5, 10, 0, 0, tzinfo=UTC)


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_tables()
    yield db
    await db.drop_tables()
    await db.close()


@pytest.mark.asyncio
async def test_find_latest_empty_returns_none(database):
    store = SQLRateStore(database)

    assert await store.find_latest('USD', 'EUR') is None


@pytest.mark.asyncio
async def test_insert_then_find_latest(database):
    store = SQLRateStore(database)
    entry = ExchangeRate('USD', 'EUR', 0.9, T0)

    await store.insert(entry)

    assert await store.find_latest('USD', 'EUR') == entry


@pytest.mark.asyncio
async def test_find_latest_picks_most_recent_observation(database):
    store = SQLRateStore(database)
    await store.insert(ExchangeRate('USD', 'EUR', 0.91, T0 + timedelta(hours=2)))
    await store.insert(ExchangeRate('USD', 'EUR', 0.80, T0))
    await store.insert(ExchangeRate('USD', 'EUR', 0.85, T0 + timedelta(hours=1)))

    latest = await store.find_latest('USD', 'EUR')

    assert latest.rate == 0.91
    assert latest.observed_at == T0 + timedelta(hours=2)


@pytest.mark.asyncio
async def test_pairs_are_directional(database):
    store = SQLRateStore(database)
    await store.insert(ExchangeRate('EUR', 'USD', 1.1, T0))

    assert await store.find_latest('USD', 'EUR') is None
    assert (await store.find_latest('EUR', 'USD')).rate == 1.1


@pytest.mark.asyncio
async def test_timestamps_come_back_as_utc(database):
    store = SQLRateStore(database)
    plus_three = timezone(timedelta(hours=3))
    await store.insert(ExchangeRate('USD', 'RUB', 81.5, datetime(2025, 11, 5, 13, 0, tzinfo=plus_three)))

    latest = await store.find_latest('USD', 'RUB')

    assert latest.observed_at.tzinfo is not None
    assert latest.observed_at == datetime(2025, 11, 5, 10, 0, tzinfo=UTC)


@pytest.mark.asyncio
async def test_storage_failure_raises_cache_error(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    store = SQLRateStore(db)
    try:
        with pytest.raises(CacheError):
            await store.find_latest('USD', 'EUR')
        with pytest.raises(CacheError):
            await store.insert(ExchangeRate('USD', 'EUR', 0.9, T0))
    finally:
        await db.close()


@pytest.mark.asyncio
async def test_dropped_tables_raise_cache_error(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'dropped.db'}")
    store = SQLRateStore(db)
    try:
        await db.create_tables()
        await store.insert(ExchangeRate('USD', 'EUR', 0.9, T0))
        await db.drop_tables()

        with pytest.raises(CacheError):
            await store.find_latest('USD', 'EUR')
    finally:
        await db.close()


@pytest.mark.asyncio
async def test_conversion_history_newest_first(database):
    history = SQLConversionHistory(database)
    for minutes, amount in [(0, 10.0), (5, 20.0), (2, 30.0)]:
        await history.add(
            ConversionRecord(
                base_currency='USD',
                quote_currency='EUR',
                requested_amount=amount,
                converted_amount=amount * 0.9,
                rate=0.9,
                timestamp=T0 + timedelta(minutes=minutes),
            )
        )

    records = await history.list_recent()

    assert [r.requested_amount for r in records] == [20.0, 30.0, 10.0]
    assert records[0].timestamp == T0 + timedelta(minutes=5)


@pytest.mark.asyncio
async def test_conversion_history_limit(database):
    history = SQLConversionHistory(database)
    for i in range(5):
        await history.add(
            ConversionRecord('USD', 'EUR', float(i), i * 0.9, 0.9, T0 + timedelta(minutes=i))
        )

    records = await history.list_recent(limit=2)

    assert len(records) == 2
    assert records[0].requested_amount == 4.0
