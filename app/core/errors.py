"""Exceções da integração com o webservice de câmbio do Banguat."""
from __future__ import annotations

from typing import Optional


class BanguatError(Exception):
    """Erro base da aplicação.

    ``http_status`` é o status devolvido pela API REST; ``upstream_status`` é o
    status HTTP do serviço remoto, quando conhecido.
    """

    http_status: int = 500
    error: str = "Erro interno do servidor"

    def __init__(self, message: str, *, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class RemoteUnavailable(BanguatError):
    """Falha de rede, DNS, conexão ou status HTTP de erro do serviço SOAP."""

    http_status = 502
    error = "Serviço SOAP indisponível"


class Timeout(BanguatError):
    """O serviço SOAP não respondeu dentro do tempo limite configurado."""

    http_status = 504
    error = "Tempo limite excedido consultando o serviço SOAP"


class MalformedResponse(BanguatError):
    """Resposta sem o aninhamento Envelope/Body/Response/Result esperado."""

    http_status = 502
    error = "Resposta SOAP inválida"


class PersistenceFailure(BanguatError):
    """Falha ao gravar um registro individual."""

    error = "Erro ao gravar registro"


class NotFound(BanguatError):
    http_status = 404
    error = "Registro não encontrado"
