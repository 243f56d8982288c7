from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.responses import ApiError, ok
from app.core.errors import BanguatError
from app.db.session import get_session
from app.services.compat_service import currency_to_user, history_as_user_posts, rate_to_post
from app.services.query_service import get_current_rate, get_current_rates, get_currency, get_history, list_currencies

router = APIRouter(prefix="/api", tags=["compat"])


@router.get("/users")
async def users(session: AsyncSession = Depends(get_session)):
    """Moedas expostas como "users" para o frontend legado."""
    try:
        data = [currency_to_user(c) for c in await list_currencies(session)]
    except Exception as e:
        raise ApiError("Erro ao obter dados (moedas)", str(e)) from e
    return ok(data, count=len(data))


@router.get("/users/{user_id}")
async def user(user_id: int, session: AsyncSession = Depends(get_session)):
    try:
        data = currency_to_user(await get_currency(session, user_id))
    except BanguatError:
        raise
    except Exception as e:
        raise ApiError("Erro ao obter moeda por ID", str(e)) from e
    return ok(data)


@router.get("/users/{user_id}/posts")
async def user_posts(user_id: int, session: AsyncSession = Depends(get_session)):
    try:
        history = await get_history(session, user_id)
    except BanguatError:
        raise
    except Exception as e:
        raise ApiError("Erro ao obter histórico da moeda", str(e)) from e
    return ok(history_as_user_posts(user_id, history))


@router.get("/posts")
async def posts(session: AsyncSession = Depends(get_session)):
    """Cotações atuais expostas como "posts" para o frontend legado."""
    try:
        data = [rate_to_post(r) for r in await get_current_rates(session)]
    except Exception as e:
        raise ApiError("Erro ao obter tipos de câmbio (posts)", str(e)) from e
    return ok(data, count=len(data))


@router.get("/posts/{post_id}")
async def post(post_id: int, session: AsyncSession = Depends(get_session)):
    try:
        data = rate_to_post(await get_current_rate(session, post_id))
    except BanguatError:
        raise
    except Exception as e:
        raise ApiError("Erro ao obter tipo de câmbio por ID", str(e)) from e
    return ok(data)
