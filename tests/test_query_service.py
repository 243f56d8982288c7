"""
Testes para as consultas de leitura (SQLite em memória).
"""

from datetime import date
from decimal import Decimal

import pytest

from app.core.errors import NotFound
from app.models import FetchLog
from app.services.persistence import persist_result
from app.services.query_service import (
    get_current_dollar,
    get_current_rate,
    get_current_rates,
    get_currency,
    get_history,
    get_stats,
    list_currencies,
)
from app.services.soap_parser import (
    CurrencyEntry,
    DollarSnapshotEntry,
    NormalizedResult,
    QuoteEntry,
)


@pytest.fixture
async def populated(session):
    result = NormalizedResult(
        currencies=[
            CurrencyEntry(code=2, description="Dólar Estadounidense", symbol="$"),
            CurrencyEntry(code=3, description="Euro", symbol="€"),
        ],
        quotes=[
            QuoteEntry(currency_code=3, date="2024-06-28", buy=Decimal("8.30"), sell=Decimal("8.50")),
            QuoteEntry(currency_code=3, date="2024-07-01", buy=Decimal("8.32"), sell=Decimal("8.51")),
            QuoteEntry(currency_code=3, date="2024-07-02", buy=Decimal("8.35"), sell=Decimal("8.55")),
            QuoteEntry(currency_code=2, date="2024-07-01", reference=Decimal("7.75")),
        ],
        dollar_snapshots=[
            DollarSnapshotEntry(date="2024-06-28", reference=Decimal("7.74")),
            DollarSnapshotEntry(date="2024-07-01", reference=Decimal("7.75")),
        ],
    )
    batch = await persist_result(session, result)
    assert batch.failed == []
    return session


@pytest.mark.asyncio
class TestEmptyStore:

    async def test_reads_before_first_fetch(self, session):
        assert await get_current_rates(session) == []
        assert await get_current_dollar(session) == []
        assert await list_currencies(session) == []

        stats = await get_stats(session)
        assert stats["total_currencies"] == 0
        assert stats["total_records"] == 0
        assert stats["fetches_today"] == 0
        assert stats["last_fetch"] is None


@pytest.mark.asyncio
class TestQueries:

    async def test_current_rates_latest_per_currency(self, populated):
        rates = await get_current_rates(populated)

        assert [r["currency_code"] for r in rates] == [2, 3]
        euro = rates[1]
        assert euro["date"] == date(2024, 7, 2)
        assert euro["buy"] == Decimal("8.35")
        assert euro["symbol"] == "€"

    async def test_current_rate_by_code(self, populated):
        rate = await get_current_rate(populated, 2)
        assert rate["reference"] == Decimal("7.75")
        with pytest.raises(NotFound):
            await get_current_rate(populated, 9)

    async def test_currency_lookup(self, populated):
        assert (await get_currency(populated, 3))["description"] == "Euro"
        with pytest.raises(NotFound):
            await get_currency(populated, 42)

    async def test_currencies_ordered_by_description(self, populated):
        assert [c["code"] for c in await list_currencies(populated)] == [2, 3]

    async def test_current_dollar_is_latest_snapshot(self, populated):
        dollar = await get_current_dollar(populated)
        assert len(dollar) == 1
        assert dollar[0]["date"] == date(2024, 7, 1)
        assert dollar[0]["reference"] == Decimal("7.75")

    async def test_history_descending_and_inclusive(self, populated):
        history = await get_history(populated, 3)
        assert [h["date"] for h in history] == [date(2024, 7, 2), date(2024, 7, 1), date(2024, 6, 28)]

        bounded = await get_history(populated, 3, date(2024, 6, 28), date(2024, 7, 1))
        assert [h["date"] for h in bounded] == [date(2024, 7, 1), date(2024, 6, 28)]

        assert await get_history(populated, 3, date(2025, 1, 1)) == []

    async def test_history_unknown_currency(self, populated):
        with pytest.raises(NotFound):
            await get_history(populated, 77)

    async def test_stats(self, populated):
        populated.add(FetchLog(endpoint="https://soap.example", status_code=200, latency_ms=100, record_count=8))
        populated.add(FetchLog(endpoint="https://soap.example", status_code=None, latency_ms=300, error_message="timeout"))
        await populated.commit()

        stats = await get_stats(populated)
        assert stats["total_currencies"] == 2
        assert stats["total_records"] == 4
        assert stats["fetches_today"] == 2
        assert stats["avg_latency_ms"] == 200
        assert stats["last_fetch"] is not None
        assert stats["last_update"] is not None
