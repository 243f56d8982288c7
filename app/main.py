from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import asyncio
import logging
from app.api.responses import register_exception_handlers, utc_timestamp
from app.core.config import settings
from app.core.http import close_async_client
from app.core.logger import configure_logging
from app.db.session import Database
from app.api.routes.rates import router as rates_router
from app.api.routes.currencies import router as currencies_router
from app.api.routes.dollar import router as dollar_router
from app.api.routes.refresh import router as refresh_router
from app.api.routes.stats import router as stats_router
from app.api.routes.compat import router as compat_router

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="API Banguat Tipo de Cambio", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


async def wait_for(predicate, name: str, attempts: int, delay: int):
    for _ in range(attempts):
        if await predicate():
            return True
        await asyncio.sleep(delay)
    logger.critical("%s não ficou pronto após %ss; encerrando", name, attempts * delay)
    raise RuntimeError(f"{name} não ficou pronto após {attempts * delay}s")


@app.on_event("startup")
async def on_startup():
    logger.info("Iniciando API Banguat (env=%s)", settings.env)
    if getattr(app.state, "db", None) is None:
        app.state.db = Database(settings.database_url)
    db: Database = app.state.db
    await wait_for(db.check, "Banco de dados", settings.db_connect_attempts, settings.db_connect_delay_seconds)
    await db.create_all()


@app.on_event("shutdown")
async def on_shutdown():
    await close_async_client()
    db = getattr(app.state, "db", None)
    if db is not None:
        await db.dispose()
    logger.info("Servidor encerrado")


app.include_router(rates_router)
app.include_router(currencies_router)
app.include_router(dollar_router)
app.include_router(refresh_router)
app.include_router(stats_router)
app.include_router(compat_router)


@app.get("/health")
async def health(request: Request):
    db = getattr(request.app.state, "db", None)
    db_ok = await db.check() if db is not None else False
    return {
        "status": "OK",
        "services": {"database": "OK" if db_ok else "ERROR", "soap_api": "OK"},
        "environment": settings.env,
        "timestamp": utc_timestamp(),
    }


@app.get("/info")
async def info():
    return {
        "name": "API Backend Banguat",
        "version": app.version,
        "description": "Backend para consumo da API SOAP de tipo de câmbio do Banco de Guatemala",
        "endpoints": {
            "rates": "GET /api/rates",
            "rate_history": "GET /api/rates/{currency_id}?from=&to=",
            "currencies": "GET /api/currencies",
            "dollar": "GET /api/dollar",
            "refresh": "POST /api/refresh",
            "stats": "GET /api/stats",
            "health_check": "GET /health",
            "compatibility": {"users": "GET /api/users", "posts": "GET /api/posts"},
        },
        "soap_api": {"url": settings.soap_url, "method": settings.soap_method},
        "timestamp": utc_timestamp(),
    }
