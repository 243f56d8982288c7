"""
Gravação do resultado normalizado no banco.

Cada registro é um upsert pela chave natural, com commit próprio. Uma falha
afeta só aquele registro: é registrada no log e no ``BatchResult`` e o lote
continua. Não há transação englobando o lote; como todo upsert é idempotente,
basta reexecutar o lote inteiro.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select, and_

from app.core.errors import PersistenceFailure
from app.models import Currency, DollarReference, ExchangeRate
from app.services.currency_codes import CURRENCY_DESCRIPTIONS, description_for, symbol_for
from app.services.soap_parser import CurrencyEntry, DollarSnapshotEntry, NormalizedResult, QuoteEntry

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RecordOutcome:
    kind: str  # currency | quote | dollar
    key: str
    ok: bool
    error: Optional[str] = None


@dataclass
class BatchResult:
    outcomes: List[RecordOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> List[RecordOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> List[RecordOutcome]:
        return [o for o in self.outcomes if not o.ok]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "saved": len(self.succeeded),
            "failed": len(self.failed),
            "failures": [
                {"kind": o.kind, "key": o.key, "error": o.error}
                for o in self.failed
            ],
        }


def _to_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise PersistenceFailure(f"Data inválida: {value!r}") from e


async def _upsert_currency(session: AsyncSession, entry: CurrencyEntry) -> None:
    currency = await session.get(Currency, entry.code)
    if currency is None:
        session.add(Currency(code=entry.code, description=entry.description, symbol=entry.symbol))
        return
    currency.description = entry.description
    currency.symbol = entry.symbol
    currency.updated_at = utcnow()


async def _ensure_currency(session: AsyncSession, code: int) -> None:
    """Cria a moeda na primeira vez que ela aparece em uma cotação."""
    if await session.get(Currency, code) is not None:
        return
    session.add(Currency(code=code, description=description_for(code), symbol=symbol_for(code)))
    await session.flush()


async def _upsert_quote(session: AsyncSession, entry: QuoteEntry, fetched_at: datetime) -> None:
    rate_date = _to_date(entry.date)
    await _ensure_currency(session, entry.currency_code)

    existing = await session.execute(
        select(ExchangeRate).where(
            and_(
                ExchangeRate.currency_code == entry.currency_code,
                ExchangeRate.rate_date == rate_date,
            )
        )
    )
    rate = existing.scalar_one_or_none()
    if rate is None:
        session.add(ExchangeRate(
            currency_code=entry.currency_code,
            rate_date=rate_date,
            buy=entry.buy,
            sell=entry.sell,
            reference=entry.reference,
            fetched_at=fetched_at,
        ))
        return

    # campos não informados por este bloco preservam o valor já gravado
    if entry.buy is not None:
        rate.buy = entry.buy
    if entry.sell is not None:
        rate.sell = entry.sell
    if entry.reference is not None:
        rate.reference = entry.reference
    rate.fetched_at = fetched_at
    rate.active = True


async def _upsert_dollar_reference(session: AsyncSession, entry: DollarSnapshotEntry, fetched_at: datetime) -> None:
    rate_date = _to_date(entry.date)
    existing = await session.execute(select(DollarReference).where(DollarReference.rate_date == rate_date))
    snapshot = existing.scalar_one_or_none()
    if snapshot is None:
        session.add(DollarReference(rate_date=rate_date, reference=entry.reference, fetched_at=fetched_at))
        return
    snapshot.reference = entry.reference
    snapshot.fetched_at = fetched_at


async def _apply(
    session: AsyncSession,
    batch: BatchResult,
    kind: str,
    key: str,
    operation: Callable[[], Awaitable[None]],
) -> None:
    try:
        await operation()
        await session.commit()
    except Exception as e:
        # o driver também levanta OverflowError/ValueError/TypeError fora da hierarquia DBAPI
        await session.rollback()
        logger.warning("Erro gravando %s %s: %s", kind, key, e)
        batch.outcomes.append(RecordOutcome(kind=kind, key=key, ok=False, error=str(e)))
        return
    batch.outcomes.append(RecordOutcome(kind=kind, key=key, ok=True))


async def persist_result(session: AsyncSession, result: NormalizedResult) -> BatchResult:
    """Grava moedas, cotações e referências do dólar, nessa ordem."""
    batch = BatchResult()
    fetched_at = result.fetched_at

    for currency in result.currencies:
        await _apply(
            session, batch, "currency", str(currency.code),
            lambda currency=currency: _upsert_currency(session, currency),
        )

    for quote in result.quotes:
        await _apply(
            session, batch, "quote", f"{quote.currency_code}@{quote.date}",
            lambda quote=quote: _upsert_quote(session, quote, fetched_at),
        )

    for snapshot in result.dollar_snapshots:
        await _apply(
            session, batch, "dollar", snapshot.date,
            lambda snapshot=snapshot: _upsert_dollar_reference(session, snapshot, fetched_at),
        )

    if batch.failed:
        logger.warning("Lote gravado parcialmente: %d ok, %d com erro", len(batch.succeeded), len(batch.failed))
    return batch


async def seed_currencies(session: AsyncSession) -> BatchResult:
    """Garante o catálogo conhecido de moedas (códigos 1 a 10)."""
    entries = [
        CurrencyEntry(code=code, description=description, symbol=symbol_for(code))
        for code, description in CURRENCY_DESCRIPTIONS.items()
    ]
    return await persist_result(session, NormalizedResult(currencies=entries))
