"""
Testes para a gravação do resultado normalizado (SQLite em memória).
"""

from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import select, func

from conftest import build_envelope
from app.models import Currency, DollarReference, ExchangeRate
from app.services import persistence
from app.services.persistence import persist_result, seed_currencies
from app.services.soap_parser import (
    CurrencyEntry,
    DollarSnapshotEntry,
    NormalizedResult,
    QuoteEntry,
    normalize_response,
)


async def _count(session, model) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar()


@pytest.mark.asyncio
class TestPersistResult:
    """Testes de upsert por chave natural."""

    async def test_catalog_and_daily_blocks(self, session, catalog_and_daily_xml):
        result = normalize_response(catalog_and_daily_xml)
        batch = await persist_result(session, result)

        assert [o.kind for o in batch.outcomes] == ["currency", "currency", "quote"]
        assert batch.failed == []
        assert await _count(session, Currency) == 2
        assert await _count(session, ExchangeRate) == 1

        rate = (await session.execute(select(ExchangeRate))).scalar_one()
        assert rate.currency_code == 3
        assert rate.rate_date == date(2024, 7, 1)
        assert rate.buy == Decimal("8.32")
        assert rate.sell == Decimal("8.51")
        assert rate.reference is None

    async def test_failed_currency_does_not_abort_batch(self, session, catalog_and_daily_xml):
        original = persistence._upsert_currency

        async def flaky(sess, entry):
            if entry.code == 2:
                raise OperationalError("INSERT INTO currencies", {}, Exception("database is locked"))
            await original(sess, entry)

        with patch("app.services.persistence._upsert_currency", side_effect=flaky):
            batch = await persist_result(session, normalize_response(catalog_and_daily_xml))

        assert len(batch.failed) == 1
        assert batch.failed[0].kind == "currency"
        assert batch.failed[0].key == "2"
        assert "database is locked" in batch.failed[0].error
        assert len(batch.succeeded) == 2

        assert await session.get(Currency, 2) is None
        assert (await session.get(Currency, 3)).description == "EURO"
        assert await _count(session, ExchangeRate) == 1

    async def test_oversized_code_does_not_abort_batch(self, session):
        xml = build_envelope(
            "<Variables>"
            "<Variable><moneda>99999999999999999999</moneda><descripcion>INVALIDA</descripcion></Variable>"
            "<Variable><moneda>3</moneda><descripcion>EURO</descripcion></Variable>"
            "</Variables>"
        )
        batch = await persist_result(session, normalize_response(xml))

        assert len(batch.failed) == 1
        assert batch.failed[0].key == "99999999999999999999"
        assert batch.failed[0].error
        assert (await session.get(Currency, 3)).description == "EURO"

    async def test_dollar_block_writes_snapshot_and_quote(self, session, dollar_only_xml):
        await persist_result(session, normalize_response(dollar_only_xml))

        snapshot = (await session.execute(select(DollarReference))).scalar_one()
        assert snapshot.rate_date == date(2024, 7, 1)
        assert snapshot.reference == Decimal("7.75")

        rate = (await session.execute(select(ExchangeRate))).scalar_one()
        assert rate.currency_code == 2
        assert rate.reference == Decimal("7.75")
        assert rate.buy is None
        assert rate.sell is None

        # moeda criada na primeira aparição em uma cotação
        dollar = await session.get(Currency, 2)
        assert dollar.description == "Dólar Estadounidense"
        assert dollar.symbol == "$"

    async def test_idempotent_and_last_write_wins(self, session):
        first = NormalizedResult(
            currencies=[CurrencyEntry(code=3, description="EURO", symbol="€")],
            quotes=[QuoteEntry(currency_code=3, date="2024-07-01", buy=Decimal("8.30"), sell=Decimal("8.50"))],
            dollar_snapshots=[DollarSnapshotEntry(date="2024-07-01", reference=Decimal("7.75"))],
        )
        await persist_result(session, first)
        await persist_result(session, first)

        assert await _count(session, Currency) == 1
        assert await _count(session, ExchangeRate) == 1
        assert await _count(session, DollarReference) == 1

        second = NormalizedResult(
            currencies=[CurrencyEntry(code=3, description="Euro", symbol="€")],
            quotes=[QuoteEntry(currency_code=3, date="2024-07-01", buy=Decimal("8.40"), sell=Decimal("8.60"))],
            dollar_snapshots=[DollarSnapshotEntry(date="2024-07-01", reference=Decimal("7.80"))],
        )
        await persist_result(session, second)

        assert await _count(session, ExchangeRate) == 1
        assert (await session.get(Currency, 3)).description == "Euro"
        rate = (await session.execute(select(ExchangeRate))).scalar_one()
        assert rate.buy == Decimal("8.40")
        assert rate.sell == Decimal("8.60")
        snapshot = (await session.execute(select(DollarReference))).scalar_one()
        assert snapshot.reference == Decimal("7.80")

    async def test_dollar_reference_and_daily_quote_compose(self, session):
        result = NormalizedResult(quotes=[
            QuoteEntry(currency_code=2, date="2024-07-01", reference=Decimal("7.75")),
            QuoteEntry(currency_code=2, date="2024-07-01", buy=Decimal("7.70"), sell=Decimal("7.80")),
        ])
        await persist_result(session, result)

        rate = (await session.execute(select(ExchangeRate))).scalar_one()
        assert rate.reference == Decimal("7.75")
        assert rate.buy == Decimal("7.70")
        assert rate.sell == Decimal("7.80")

    async def test_invalid_date_is_recorded_as_failure(self, session):
        result = NormalizedResult(quotes=[
            QuoteEntry(currency_code=3, date="2024-02-30", buy=Decimal("1"), sell=Decimal("1")),
            QuoteEntry(currency_code=3, date="2024-02-28", buy=Decimal("1"), sell=Decimal("1")),
        ])
        batch = await persist_result(session, result)

        assert len(batch.failed) == 1
        assert batch.failed[0].key == "3@2024-02-30"
        assert batch.to_dict()["saved"] == 1
        assert await _count(session, ExchangeRate) == 1


@pytest.mark.asyncio
async def test_seed_currencies(session):
    batch = await seed_currencies(session)
    assert len(batch.succeeded) == 10
    assert (await session.get(Currency, 1)).symbol == "Q"
    # reexecutar não duplica
    await seed_currencies(session)
    assert await _count(session, Currency) == 10
