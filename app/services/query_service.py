from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select, and_, func

from app.core.errors import NotFound
from app.models import Currency, DollarReference, ExchangeRate, FetchLog


def _serialize_currency(currency: Currency) -> Dict[str, Any]:
    return {
        "code": currency.code,
        "description": currency.description,
        "symbol": currency.symbol,
        "active": currency.active,
    }


def _serialize_rate(rate: ExchangeRate, currency: Currency) -> Dict[str, Any]:
    return {
        "currency_code": rate.currency_code,
        "description": currency.description,
        "symbol": currency.symbol,
        "date": rate.rate_date,
        "buy": rate.buy,
        "sell": rate.sell,
        "reference": rate.reference,
        "fetched_at": rate.fetched_at,
    }


async def get_current_rates(session: AsyncSession) -> List[Dict[str, Any]]:
    """Cotação mais recente (ativa) de cada moeda, ordenada pela descrição."""
    latest = (
        select(
            ExchangeRate.currency_code,
            func.max(ExchangeRate.rate_date).label("rate_date"),
        )
        .where(ExchangeRate.active == True)  # noqa: E712
        .group_by(ExchangeRate.currency_code)
        .subquery()
    )
    query = (
        select(ExchangeRate, Currency)
        .join(
            latest,
            and_(
                ExchangeRate.currency_code == latest.c.currency_code,
                ExchangeRate.rate_date == latest.c.rate_date,
            ),
        )
        .join(Currency, Currency.code == ExchangeRate.currency_code)
        .where(ExchangeRate.active == True)  # noqa: E712
        .order_by(Currency.description)
    )
    result = await session.execute(query)
    return [_serialize_rate(rate, currency) for rate, currency in result.all()]


async def list_currencies(session: AsyncSession) -> List[Dict[str, Any]]:
    result = await session.execute(
        select(Currency).where(Currency.active == True).order_by(Currency.description)  # noqa: E712
    )
    return [_serialize_currency(c) for c in result.scalars().all()]


async def get_currency(session: AsyncSession, code: int) -> Dict[str, Any]:
    """
    Busca moeda ativa por código.

    Raises:
        NotFound: se não existir moeda ativa com o código.
    """
    result = await session.execute(
        select(Currency).where(and_(Currency.code == code, Currency.active == True))  # noqa: E712
    )
    currency = result.scalar_one_or_none()
    if currency is None:
        raise NotFound(f"Moeda {code} não encontrada")
    return _serialize_currency(currency)


async def get_current_rate(session: AsyncSession, code: int) -> Dict[str, Any]:
    for rate in await get_current_rates(session):
        if rate["currency_code"] == code:
            return rate
    raise NotFound(f"Tipo de câmbio da moeda {code} não encontrado")


async def get_current_dollar(session: AsyncSession) -> List[Dict[str, Any]]:
    """Referência mais recente do dólar; lista vazia antes da primeira consulta."""
    result = await session.execute(
        select(DollarReference).order_by(desc(DollarReference.rate_date)).limit(1)
    )
    return [
        {
            "date": snap.rate_date,
            "reference": snap.reference,
            "fetched_at": snap.fetched_at,
        }
        for snap in result.scalars().all()
    ]


async def get_history(
    session: AsyncSession,
    code: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """
    Histórico de cotações de uma moeda, da mais recente para a mais antiga.

    Args:
        session: Sessão do banco
        code: Código da moeda
        start_date: Data inicial inclusiva (opcional)
        end_date: Data final inclusiva (opcional)

    Raises:
        NotFound: se a moeda não existir.
    """
    if await session.get(Currency, code) is None:
        raise NotFound(f"Moeda {code} não encontrada")

    query = (
        select(ExchangeRate, Currency)
        .join(Currency, Currency.code == ExchangeRate.currency_code)
        .where(ExchangeRate.currency_code == code)
        .where(ExchangeRate.active == True)  # noqa: E712
    )
    if start_date:
        query = query.where(ExchangeRate.rate_date >= start_date)
    if end_date:
        query = query.where(ExchangeRate.rate_date <= end_date)
    query = query.order_by(desc(ExchangeRate.rate_date))

    result = await session.execute(query)
    return [_serialize_rate(rate, currency) for rate, currency in result.all()]


async def get_stats(session: AsyncSession) -> Dict[str, Any]:
    """Contagens gerais e estatísticas das consultas SOAP do dia (UTC)."""
    today_start = datetime.combine(datetime.now(timezone.utc).date(), time.min, tzinfo=timezone.utc)

    total_currencies = await session.execute(
        select(func.count()).select_from(Currency).where(Currency.active == True)  # noqa: E712
    )
    total_rates = await session.execute(
        select(func.count()).select_from(ExchangeRate).where(ExchangeRate.active == True)  # noqa: E712
    )
    fetches = await session.execute(
        select(
            func.count(FetchLog.id),
            func.avg(FetchLog.latency_ms),
            func.max(FetchLog.created_at),
        ).where(FetchLog.created_at >= today_start)
    )
    last_update = await session.execute(
        select(func.max(ExchangeRate.fetched_at)).where(ExchangeRate.active == True)  # noqa: E712
    )

    fetch_count, avg_latency, last_fetch = fetches.one()
    return {
        "total_currencies": total_currencies.scalar() or 0,
        "total_records": total_rates.scalar() or 0,
        "fetches_today": fetch_count or 0,
        "avg_latency_ms": round(float(avg_latency or 0)),
        "last_fetch": last_fetch,
        "last_update": last_update.scalar(),
    }
