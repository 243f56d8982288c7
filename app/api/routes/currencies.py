from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.responses import ApiError, ok
from app.core.errors import BanguatError
from app.db.session import get_session
from app.services.query_service import get_currency, list_currencies

router = APIRouter(prefix="/api", tags=["currencies"])


@router.get("/currencies")
async def currencies(session: AsyncSession = Depends(get_session)):
    """Lista as moedas ativas, ordenadas pela descrição."""
    try:
        data = await list_currencies(session)
    except Exception as e:
        raise ApiError("Erro ao obter moedas", str(e)) from e
    return ok(data, count=len(data))


@router.get("/currencies/{currency_id}")
async def currency(currency_id: int, session: AsyncSession = Depends(get_session)):
    try:
        data = await get_currency(session, currency_id)
    except BanguatError:
        raise
    except Exception as e:
        raise ApiError("Erro ao obter moeda", str(e)) from e
    return ok(data)
