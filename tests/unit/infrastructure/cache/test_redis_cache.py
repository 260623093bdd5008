# nosec B101


import json
from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from domain.exceptions.rates import CacheError
from domain.models.rates import RateRecord
from infrastructure.cache.redis_cache import LATEST_DATE_KEY, RedisCacheService


def euro(day=date(2024, 12, 16), rate='25.115'):
    return RateRecord(
        date=day,
        currency_code='EUR',
        country='EMU',
        currency_name='euro',
        unit_amount=1,
        rate=Decimal(rate),
    )


@pytest.mark.asyncio
async def test_get_records_cache_hit_returns_rate_records():
    mock_redis = AsyncMock()
    mock_redis.get.return_value = json.dumps([{
        'date': '2024-12-16',
        'currency_code': 'JPY',
        'country': 'Japan',
        'currency_name': 'yen',
        'unit_amount': 100,
        'rate': '15.612',
    }])

    cache_service = RedisCacheService(redis_client=mock_redis)
    result = await cache_service.get_records(date(2024, 12, 16))

    assert result == [
        RateRecord(
            date=date(2024, 12, 16),
            currency_code='JPY',
            country='Japan',
            currency_name='yen',
            unit_amount=100,
            rate=Decimal('15.612'),
        )
    ]
    mock_redis.get.assert_called_once_with('rates:date:2024-12-16')


@pytest.mark.asyncio
async def test_get_records_cache_miss_returns_none():
    mock_redis = AsyncMock()
    mock_redis.get.return_value = None

    cache_service = RedisCacheService(redis_client=mock_redis)

    assert await cache_service.get_records(date(2024, 12, 16)) is None


@pytest.mark.asyncio
async def test_get_records_malformed_json_raises_cache_error():
    mock_redis = AsyncMock()
    mock_redis.get.return_value = '{ invalid json }'

    cache_service = RedisCacheService(redis_client=mock_redis)

    with pytest.raises(CacheError) as exc_info:
        await cache_service.get_records(date(2024, 12, 16))

    assert 'Invalid json data' in str(exc_info.value)


@pytest.mark.asyncio
async def test_set_records_serializes_with_ttl_and_keeps_decimal_precision():
    mock_redis = AsyncMock()
    cache_service = RedisCacheService(redis_client=mock_redis, records_ttl=timedelta(minutes=30))

    await cache_service.set_records(date(2024, 12, 16), [euro(rate='25.123456')])

    mock_redis.setex.assert_called_once()
    key, ttl, payload = mock_redis.setex.call_args[0]
    assert key == 'rates:date:2024-12-16'
    assert ttl == timedelta(minutes=30)

    stored = json.loads(payload)
    assert stored[0]['currency_code'] == 'EUR'
    assert stored[0]['rate'] == '25.123456'
    assert stored[0]['date'] == '2024-12-16'


@pytest.mark.asyncio
async def test_latest_date_round_trip():
    mock_redis = AsyncMock()
    cache_service = RedisCacheService(redis_client=mock_redis)

    await cache_service.set_latest_date(date(2024, 12, 16))
    key, ttl, value = mock_redis.setex.call_args[0]
    assert key == LATEST_DATE_KEY
    assert ttl == timedelta(minutes=5)

    mock_redis.get.return_value = value
    assert await cache_service.get_latest_date() == date(2024, 12, 16)


@pytest.mark.asyncio
async def test_get_latest_date_invalid_value_raises_cache_error():
    mock_redis = AsyncMock()
    mock_redis.get.return_value = 'yesterday'

    cache_service = RedisCacheService(redis_client=mock_redis)

    with pytest.raises(CacheError):
        await cache_service.get_latest_date()


@pytest.mark.asyncio
async def test_invalidate_deletes_latest_date_and_day_keys():
    mock_redis = AsyncMock()
    cache_service = RedisCacheService(redis_client=mock_redis)

    await cache_service.invalidate({date(2024, 12, 16), date(2024, 12, 13)})

    mock_redis.delete.assert_called_once_with(
        LATEST_DATE_KEY, 'rates:date:2024-12-13', 'rates:date:2024-12-16'
    )


def test_default_ttl_values():
    cache_service = RedisCacheService(redis_client=AsyncMock())

    assert cache_service.records_ttl == timedelta(hours=1)
    assert cache_service.latest_date_ttl == timedelta(minutes=5)
