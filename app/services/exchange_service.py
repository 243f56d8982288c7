from __future__ import annotations

import logging
import time
from dataclasses import asdict
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import BanguatError
from app.models import FetchLog
from app.services.banguat_client import BanguatClient
from app.services.persistence import persist_result
from app.services.soap_parser import NormalizedResult, normalize_response

logger = logging.getLogger(__name__)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


async def _log_fetch(
    session: AsyncSession,
    *,
    endpoint: str,
    status_code: Optional[int],
    latency_ms: int,
    record_count: int,
    error: Optional[str] = None,
    requester_ip: Optional[str] = None,
) -> None:
    """Registra a consulta ao webservice na trilha de auditoria."""
    rec = FetchLog(
        endpoint=endpoint,
        method="POST",
        status_code=status_code,
        latency_ms=latency_ms,
        record_count=record_count,
        error_message=error[:1000] if error else None,
        requester_ip=requester_ip,
    )
    session.add(rec)
    await session.commit()


async def _log_failure(session: AsyncSession, **kwargs: Any) -> None:
    # a auditoria da falha não pode mascarar o erro original
    try:
        await session.rollback()
        await _log_fetch(session, **kwargs)
    except Exception as log_error:
        logger.error("Não foi possível registrar a falha na auditoria: %s", log_error)


def _summary(result: NormalizedResult) -> dict[str, Any]:
    return {
        "currencies": [asdict(c) for c in result.currencies],
        "quotes": [asdict(q) for q in result.quotes],
        "dollar": [asdict(d) for d in result.dollar_snapshots],
        "total_items": result.total_items,
        "fetched_at": result.fetched_at,
    }


async def fetch_exchange_rates(
    session: AsyncSession,
    client: Optional[BanguatClient] = None,
    requester_ip: Optional[str] = None,
) -> dict[str, Any]:
    """
    Consulta ``TipoCambioDia``, normaliza o XML, grava no banco e registra a
    consulta em ``fetch_logs``.

    Toda chamada gera exatamente um registro de auditoria, com sucesso ou erro.
    Falhas de rede, timeout ou XML inválido são registradas e relançadas.

    Returns:
        Resumo com os dados normalizados, contagem de registros, latência e o
        resultado da gravação por registro.
    """
    client = client or BanguatClient()
    started = time.perf_counter()
    status_code: Optional[int] = None
    record_count = 0

    try:
        logger.info("Consultando tipos de câmbio do dia via SOAP: %s", client.soap_url)
        status_code, xml = await client.tipo_cambio_dia()
        result = normalize_response(xml, client.method)
        record_count = result.record_count
        batch = await persist_result(session, result)
    except Exception as e:
        latency_ms = _elapsed_ms(started)
        if isinstance(e, BanguatError) and e.upstream_status is not None:
            status_code = e.upstream_status
        logger.error("Erro na consulta SOAP (%s, status=%s): %s", client.soap_url, status_code, e)
        await _log_failure(
            session,
            endpoint=client.soap_url,
            status_code=status_code,
            latency_ms=latency_ms,
            record_count=record_count,
            error=str(e),
            requester_ip=requester_ip,
        )
        raise

    latency_ms = _elapsed_ms(started)
    await _log_fetch(
        session,
        endpoint=client.soap_url,
        status_code=status_code,
        latency_ms=latency_ms,
        record_count=record_count,
        requester_ip=requester_ip,
    )
    logger.info("Tipos de câmbio obtidos e gravados: %d registros em %dms", record_count, latency_ms)

    return {
        "data": _summary(result),
        "total_records": record_count,
        "latency_ms": latency_ms,
        "persistence": batch.to_dict(),
    }
