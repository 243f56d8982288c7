"""
Normalização da resposta SOAP de ``TipoCambioDia``.

A resposta chega como::

    Envelope/Body/TipoCambioDiaResponse/TipoCambioDiaResult
        CambioDolar/VarDolar{fecha, referencia}
        Variables/Variable{moneda, descripcion}
        CambioDia/Var{moneda, fecha, venta, compra}
        TotalItems

Os três blocos de dados são opcionais e independentes. Só a ausência do
aninhamento Envelope/Body/Response/Result é tratada como erro.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from app.core.config import settings
from app.core.errors import MalformedResponse
from app.services.currency_codes import DOLLAR_CODE, symbol_for
from app.services.utils.dates import normalize_date
from app.services.utils.json_serializer import parse_decimal, parse_int


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Envelope: cada elemento aninhado é modelado como presente ou ausente
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VarDolar:
    fecha: Optional[str] = None
    referencia: Optional[str] = None


@dataclass(frozen=True)
class Variable:
    moneda: Optional[str] = None
    descripcion: Optional[str] = None


@dataclass(frozen=True)
class Var:
    moneda: Optional[str] = None
    fecha: Optional[str] = None
    venta: Optional[str] = None
    compra: Optional[str] = None


@dataclass(frozen=True)
class EnvelopeResult:
    """Conteúdo de ``{Operation}Result``; ``None`` indica bloco ausente."""

    cambio_dolar: Optional[List[VarDolar]] = None
    variables: Optional[List[Variable]] = None
    cambio_dia: Optional[List[Var]] = None
    total_items: Optional[str] = None


# ---------------------------------------------------------------------------
# Resultado normalizado
# ---------------------------------------------------------------------------

@dataclass
class CurrencyEntry:
    code: int
    description: str
    symbol: Optional[str] = None


@dataclass
class QuoteEntry:
    currency_code: int
    date: str
    buy: Optional[Decimal] = None
    sell: Optional[Decimal] = None
    reference: Optional[Decimal] = None


@dataclass
class DollarSnapshotEntry:
    date: str
    reference: Decimal


@dataclass
class NormalizedResult:
    currencies: List[CurrencyEntry] = field(default_factory=list)
    quotes: List[QuoteEntry] = field(default_factory=list)
    dollar_snapshots: List[DollarSnapshotEntry] = field(default_factory=list)
    total_items: int = 0
    fetched_at: datetime = field(default_factory=utcnow)

    @property
    def record_count(self) -> int:
        return len(self.currencies) + len(self.quotes) + len(self.dollar_snapshots)


# ---------------------------------------------------------------------------
# Leitura do XML
# ---------------------------------------------------------------------------

def _child(parent: Optional[Tag], name: str) -> Optional[Tag]:
    if parent is None:
        return None
    found = parent.find(name, recursive=False)
    return found if isinstance(found, Tag) else None


def _children(parent: Tag, name: str) -> List[Tag]:
    return [t for t in parent.find_all(name, recursive=False) if isinstance(t, Tag)]


def _text(parent: Tag, name: str) -> Optional[str]:
    node = _child(parent, name)
    if node is None:
        return None
    return node.get_text(strip=True)


def _block(result: Tag, block_name: str, item_name: str) -> Optional[List[Tag]]:
    block = _child(result, block_name)
    if block is None:
        return None
    items = _children(block, item_name)
    return items or None


def extract_fault(xml_envelope: str) -> Optional[str]:
    """Retorna o ``faultstring`` de um SOAP Fault, se houver."""
    if not xml_envelope:
        return None
    soup = BeautifulSoup(xml_envelope, "xml")
    fault = soup.find("Fault")
    if not isinstance(fault, Tag):
        return None
    return _text(fault, "faultstring") or fault.get_text(" ", strip=True) or None


def parse_envelope(xml_envelope: str, operation: Optional[str] = None) -> EnvelopeResult:
    """Lê o envelope e devolve os blocos encontrados em ``{Operation}Result``.

    Raises:
        MalformedResponse: se faltar Envelope, Body, Response ou Result.
    """
    operation = operation or settings.soap_method
    if not xml_envelope or not xml_envelope.strip():
        raise MalformedResponse("Resposta SOAP vazia")

    soup = BeautifulSoup(xml_envelope, "xml")
    envelope = _child(soup, "Envelope")
    body = _child(envelope, "Body")
    response = _child(body, f"{operation}Response")
    result = _child(response, f"{operation}Result")
    if result is None:
        missing = next(
            name for name, node in (
                ("Envelope", envelope),
                ("Body", body),
                (f"{operation}Response", response),
                (f"{operation}Result", result),
            ) if node is None
        )
        raise MalformedResponse(f"Estrutura SOAP inesperada: elemento {missing} ausente")

    dolar_tags = _block(result, "CambioDolar", "VarDolar")
    variable_tags = _block(result, "Variables", "Variable")
    var_tags = _block(result, "CambioDia", "Var")

    return EnvelopeResult(
        cambio_dolar=[
            VarDolar(fecha=_text(t, "fecha"), referencia=_text(t, "referencia"))
            for t in dolar_tags
        ] if dolar_tags is not None else None,
        variables=[
            Variable(moneda=_text(t, "moneda"), descripcion=_text(t, "descripcion"))
            for t in variable_tags
        ] if variable_tags is not None else None,
        cambio_dia=[
            Var(moneda=_text(t, "moneda"), fecha=_text(t, "fecha"), venta=_text(t, "venta"), compra=_text(t, "compra"))
            for t in var_tags
        ] if var_tags is not None else None,
        total_items=_text(result, "TotalItems"),
    )


def normalize_envelope(envelope: EnvelopeResult) -> NormalizedResult:
    out = NormalizedResult()

    for var_dolar in envelope.cambio_dolar or []:
        rate_date = normalize_date(var_dolar.fecha)
        reference = parse_decimal(var_dolar.referencia)
        out.dollar_snapshots.append(DollarSnapshotEntry(date=rate_date, reference=reference))
        # o dólar também entra no histórico de cotações, sem compra/venda
        out.quotes.append(QuoteEntry(currency_code=DOLLAR_CODE, date=rate_date, reference=reference))

    for variable in envelope.variables or []:
        code = parse_int(variable.moneda)
        out.currencies.append(CurrencyEntry(
            code=code,
            description=variable.descripcion or "",
            symbol=symbol_for(code),
        ))

    for var in envelope.cambio_dia or []:
        out.quotes.append(QuoteEntry(
            currency_code=parse_int(var.moneda),
            date=normalize_date(var.fecha),
            buy=parse_decimal(var.compra),
            sell=parse_decimal(var.venta),
        ))

    out.total_items = parse_int(envelope.total_items)
    return out


def normalize_response(xml_envelope: str, operation: Optional[str] = None) -> NormalizedResult:
    """Converte o XML bruto do webservice em ``NormalizedResult``."""
    return normalize_envelope(parse_envelope(xml_envelope, operation))
