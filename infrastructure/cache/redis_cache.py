import json
from datetime import date, timedelta
from decimal import Decimal

from redis import asyncio as redis

from domain.exceptions.rates import CacheError
from domain.models.rates import RateRecord

LATEST_DATE_KEY = 'rates:latest_date'


class RedisCacheService:
    def __init__(self, redis_client: redis.Redis, records_ttl: timedelta = timedelta(hours=1)):
        self.redis = redis_client
        self.records_ttl = records_ttl
        self.latest_date_ttl = timedelta(minutes=5)

    def _make_date_key(self, day: date) -> str:
        return f"rates:date:{day.isoformat()}"

    async def get_records(self, day: date) -> list[RateRecord] | None:
        data = await self.redis.get(self._make_date_key(day))

        if not data:
            return None

        try:
            return [
                RateRecord(
                    date=date.fromisoformat(item["date"]),
                    currency_code=item["currency_code"],
                    country=item["country"],
                    currency_name=item["currency_name"],
                    unit_amount=int(item["unit_amount"]),
                    rate=Decimal(item["rate"]),
                )
                for item in json.loads(data)
            ]
        except (ValueError, KeyError, TypeError) as e:
            raise CacheError(f"Invalid json data for {day.isoformat()}: {e}") from e

    async def set_records(self, day: date, records: list[RateRecord]) -> None:
        payload = [
            {
                "date": r.date.isoformat(),
                "currency_code": r.currency_code,
                "country": r.country,
                "currency_name": r.currency_name,
                "unit_amount": r.unit_amount,
                "rate": str(r.rate),
            }
            for r in records
        ]
        await self.redis.setex(self._make_date_key(day), self.records_ttl, json.dumps(payload))

    async def get_latest_date(self) -> date | None:
        data = await self.redis.get(LATEST_DATE_KEY)
        if not data:
            return None
        try:
            return date.fromisoformat(data)
        except (ValueError, TypeError) as e:
            raise CacheError(f"Invalid latest date value: {data!r}") from e

    async def set_latest_date(self, day: date) -> None:
        await self.redis.setex(LATEST_DATE_KEY, self.latest_date_ttl, day.isoformat())

    async def invalidate(self, days: set[date]) -> None:
        keys = [self._make_date_key(d) for d in sorted(days)]
        await self.redis.delete(LATEST_DATE_KEY, *keys)
