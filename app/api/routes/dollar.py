from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.responses import ApiError, ok
from app.api.routes.rates import SIMULATED_MESSAGE
from app.db.session import get_session
from app.services.query_service import get_current_dollar

router = APIRouter(prefix="/api", tags=["dollar"])


@router.get("/dollar")
async def dollar(session: AsyncSession = Depends(get_session)):
    """
    Referência mais recente do dólar.

    Sem dados no banco, devolve a referência ilustrativa de 7.75.
    """
    try:
        data = await get_current_dollar(session)
    except Exception as e:
        raise ApiError("Erro ao obter câmbio do dólar", str(e)) from e

    if not data:
        now = datetime.now(timezone.utc)
        simulated = [{"date": now.date(), "reference": 7.75, "fetched_at": now}]
        return ok(simulated, source="simulated", message=SIMULATED_MESSAGE)
    return ok(data, source="database")
