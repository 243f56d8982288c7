from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.responses import ApiError, ok, utc_timestamp
from app.db.session import Database, get_session
from app.services.query_service import get_stats

router = APIRouter(prefix="/api", tags=["stats"])


@router.get("/stats")
async def stats(session: AsyncSession = Depends(get_session)):
    """
    Estatísticas gerais.

    **Retorna:**
    - Total de moedas ativas e de cotações no histórico
    - Consultas SOAP de hoje, latência média e horário da última
    - Horário da última gravação de cotação
    """
    try:
        data = await get_stats(session)
    except Exception as e:
        raise ApiError("Erro ao obter estatísticas", str(e)) from e
    return ok(data)


@router.get("/test/database")
async def test_database(request: Request):
    db: Database = request.app.state.db
    connected = await db.check()
    return {
        "success": connected,
        "message": "Conexão com o banco de dados OK" if connected else "Erro na conexão com o banco de dados",
        "database": db.engine.url.database,
        "host": db.engine.url.host,
        "timestamp": utc_timestamp(),
    }
