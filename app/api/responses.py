"""Envelope padrão das respostas da API e tratamento de erros."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.errors import BanguatError

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def ok(data: Any = None, **extra: Any) -> dict[str, Any]:
    return {"success": True, "data": data, **extra, "timestamp": utc_timestamp()}


def error_body(error: str, message: str, **extra: Any) -> dict[str, Any]:
    return {"success": False, "error": error, "message": message, **extra, "timestamp": utc_timestamp()}


class ApiError(Exception):
    """Erro de rota com mensagem própria para o cliente."""

    def __init__(self, error: str, message: str, status_code: int = 500):
        super().__init__(message)
        self.error = error
        self.message = message
        self.status_code = status_code


def _json(status_code: int, body: dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def _banguat_error_handler(request: Request, exc: BanguatError) -> JSONResponse:
    return _json(exc.http_status, error_body(exc.error, str(exc)))


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return _json(exc.status_code, error_body(exc.error, exc.message))


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return _json(400, error_body("Parâmetros inválidos", details))


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return _json(404, error_body(
            "Rota não encontrada",
            str(exc.detail),
            path=request.url.path,
            suggestion="Visite /info para ver os endpoints disponíveis",
        ))
    return _json(exc.status_code, error_body("Erro HTTP", str(exc.detail)))


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Erro não tratado em %s %s", request.method, request.url.path)
    message = str(exc) if settings.env == "dev" else "Erro interno"
    return _json(500, error_body("Erro interno do servidor", message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BanguatError, _banguat_error_handler)
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
