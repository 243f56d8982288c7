from datetime import date, datetime, timezone
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.responses import ApiError, ok
from app.core.errors import BanguatError
from app.db.session import get_session
from app.services.query_service import get_current_rates, get_history

router = APIRouter(prefix="/api", tags=["rates"])

SIMULATED_MESSAGE = "Dados simulados (sem dados reais no banco)"


def simulated_rates() -> list[dict]:
    """Valores ilustrativos devolvidos enquanto o banco não tem cotações."""
    today = datetime.now(timezone.utc).date()
    now = datetime.now(timezone.utc)
    placeholders = [
        (2, "Dólar Estadounidense", "$", 7.75),
        (3, "Euro", "€", 8.45),
        (4, "Libra Esterlina", "£", 9.85),
    ]
    return [
        {
            "currency_code": code,
            "description": description,
            "symbol": symbol,
            "date": today,
            "buy": None,
            "sell": None,
            "reference": reference,
            "fetched_at": now,
        }
        for code, description, symbol, reference in placeholders
    ]


@router.get("/rates")
async def current_rates(session: AsyncSession = Depends(get_session)):
    """
    Retorna a cotação mais recente de cada moeda.

    Enquanto nenhuma consulta ao Banguat tiver sido gravada, devolve valores
    ilustrativos com `source: "simulated"`.

    **Exemplo de resposta:**
    ```json
    {
      "success": true,
      "data": [{
        "currency_code": 2,
        "description": "Dólar Estadounidense",
        "symbol": "$",
        "date": "2024-07-01",
        "buy": null,
        "sell": null,
        "reference": 7.75,
        "fetched_at": "2024-07-01T14:00:00+00:00"
      }],
      "source": "database",
      "timestamp": "2024-07-01T14:00:01+00:00"
    }
    ```
    """
    try:
        rates = await get_current_rates(session)
    except Exception as e:
        raise ApiError("Erro ao obter tipos de câmbio atuais", str(e)) from e

    if not rates:
        return ok(simulated_rates(), source="simulated", message=SIMULATED_MESSAGE)
    return ok(rates, source="database", count=len(rates))


@router.get("/rates/{currency_id}")
async def rate_history(
    currency_id: int,
    start: Optional[date] = Query(None, alias="from", description="Data inicial (YYYY-MM-DD), inclusiva"),
    end: Optional[date] = Query(None, alias="to", description="Data final (YYYY-MM-DD), inclusiva"),
    session: AsyncSession = Depends(get_session),
):
    """Histórico de cotações de uma moeda, opcionalmente filtrado por período."""
    try:
        history = await get_history(session, currency_id, start, end)
    except BanguatError:
        raise
    except Exception as e:
        raise ApiError("Erro ao obter histórico de tipo de câmbio", str(e)) from e

    return ok(history, count=len(history), currency_id=currency_id, **{"from": start, "to": end})
