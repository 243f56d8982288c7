from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from app.core.config import settings
from app.core.errors import MalformedResponse, RemoteUnavailable, Timeout
from app.core.http import get_async_client
from app.services.soap_parser import extract_fault

logger = logging.getLogger(__name__)

SOAP_ENVELOPE_TEMPLATE = """<?xml version="1.0" encoding="utf-8"?>
<soap:Envelope xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
               xmlns:xsd="http://www.w3.org/2001/XMLSchema"
               xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/">
  <soap:Body>
    <{method} xmlns="{namespace}" />
  </soap:Body>
</soap:Envelope>"""


class BanguatClient:
    """Cliente do webservice SOAP de tipo de câmbio do Banco de Guatemala.

    Há uma única operação, sem parâmetros; o corpo da requisição é fixo.
    Não há retentativas: uma falha é devolvida ao chamador.
    """

    def __init__(self, soap_url: str | None = None, timeout: float | None = None):
        self.soap_url = soap_url or settings.soap_url
        self.namespace = settings.soap_namespace
        self.method = settings.soap_method
        self.soap_action = settings.soap_action
        self.timeout = timeout or settings.soap_timeout_seconds
        self.envelope = SOAP_ENVELOPE_TEMPLATE.format(method=self.method, namespace=self.namespace)

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "text/xml; charset=utf-8",
            "SOAPAction": self.soap_action,
        }

    async def _post(self, timeout: float) -> httpx.Response:
        client = await get_async_client()
        try:
            return await client.post(
                self.soap_url,
                content=self.envelope.encode("utf-8"),
                headers=self._headers(),
                timeout=httpx.Timeout(timeout),
            )
        except httpx.TimeoutException as e:
            raise Timeout(f"Sem resposta de {self.soap_url} em {timeout:g}s") from e
        except httpx.TransportError as e:
            raise RemoteUnavailable(f"Falha de conexão com {self.soap_url}: {e}") from e

    async def tipo_cambio_dia(self) -> tuple[int, str]:
        """Executa ``TipoCambioDia`` e devolve ``(status_code, xml)``.

        Raises:
            Timeout, RemoteUnavailable, MalformedResponse
        """
        response = await self._post(self.timeout)
        status = response.status_code
        if status >= 400:
            fault = extract_fault(response.text)
            if fault:
                raise MalformedResponse(f"SOAP Fault (HTTP {status}): {fault}", upstream_status=status)
            raise RemoteUnavailable(f"Serviço SOAP respondeu HTTP {status}", upstream_status=status)
        if not response.text.strip():
            raise MalformedResponse("Resposta SOAP vazia", upstream_status=status)
        return status, response.text

    async def probe(self, timeout: Optional[float] = None) -> dict[str, Any]:
        """Testa a disponibilidade do serviço sem processar a resposta."""
        timeout = timeout or settings.soap_probe_timeout_seconds
        try:
            response = await self._post(timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            return {
                "status": "error",
                "message": str(e),
                "soap_url": self.soap_url,
                "status_code": e.response.status_code,
            }
        except (Timeout, RemoteUnavailable) as e:
            return {
                "status": "error",
                "message": str(e),
                "soap_url": self.soap_url,
                "status_code": None,
            }
        return {
            "status": "ok",
            "message": "Serviço SOAP funcionando corretamente",
            "soap_url": self.soap_url,
            "status_code": response.status_code,
            "content_length": len(response.content),
        }
