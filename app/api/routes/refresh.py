from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.responses import ApiError, ok
from app.core.errors import BanguatError
from app.db.session import get_session
from app.services.banguat_client import BanguatClient
from app.services.exchange_service import fetch_exchange_rates

router = APIRouter(prefix="/api", tags=["refresh"])


def get_banguat_client() -> BanguatClient:
    return BanguatClient()


@router.post("/refresh")
async def refresh(
    request: Request,
    session: AsyncSession = Depends(get_session),
    client: BanguatClient = Depends(get_banguat_client),
):
    """
    Consulta o webservice SOAP do Banguat agora e grava o resultado.

    A chamada é síncrona e sem retentativas; falhas retornam o envelope de erro
    com status 502/504.
    """
    requester_ip = request.client.host if request.client else None
    try:
        summary = await fetch_exchange_rates(session, client, requester_ip=requester_ip)
    except BanguatError:
        raise
    except Exception as e:
        raise ApiError("Erro ao atualizar dados a partir da API SOAP", str(e)) from e

    return ok(summary, message="Dados atualizados corretamente a partir da API SOAP")


@router.get("/test/soap")
async def test_soap(client: BanguatClient = Depends(get_banguat_client)):
    """Testa a conexão com o webservice sem gravar nada."""
    result = await client.probe()
    body = ok(result)
    body["success"] = result["status"] == "ok"
    return body
