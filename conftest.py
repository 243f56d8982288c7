"""
Configuração global para testes pytest.
"""
import pytest
from sqlalchemy.pool import StaticPool
from app.core.http import close_async_client
from app.db.session import Database


SOAP_NS = "http://schemas.xmlsoap.org/soap/envelope/"
BANGUAT_NS = "http://www.banguat.gob.gt/variables/ws/"


def build_envelope(result_body: str, operation: str = "TipoCambioDia") -> str:
    """Monta um envelope de resposta como o devolvido pelo Banguat."""
    return f"""<?xml version="1.0" encoding="utf-8"?>
<soap:Envelope xmlns:soap="{SOAP_NS}" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" xmlns:xsd="http://www.w3.org/2001/XMLSchema">
  <soap:Body>
    <{operation}Response xmlns="{BANGUAT_NS}">
      <{operation}Result>{result_body}</{operation}Result>
    </{operation}Response>
  </soap:Body>
</soap:Envelope>"""


DOLLAR_BLOCK = """
        <CambioDolar>
          <VarDolar>
            <fecha>01/07/2024</fecha>
            <referencia>7.75</referencia>
          </VarDolar>
        </CambioDolar>"""

CATALOG_BLOCK = """
        <Variables>
          <Variable><moneda>2</moneda><descripcion>DOLARES DE EE.UU.</descripcion></Variable>
          <Variable><moneda>3</moneda><descripcion>EURO</descripcion></Variable>
        </Variables>"""

DAILY_BLOCK = """
        <CambioDia>
          <Var>
            <moneda>3</moneda>
            <fecha>1/7/2024</fecha>
            <venta>8.51</venta>
            <compra>8.32</compra>
          </Var>
        </CambioDia>"""


@pytest.fixture(scope="function", autouse=True)
async def cleanup_resources():
    """Limpa recursos compartilhados entre testes."""
    yield
    # Limpar HTTP client global
    await close_async_client()


@pytest.fixture
async def db():
    """Banco SQLite em memória, compartilhado por todas as sessões do teste."""
    database = Database(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture
async def session(db):
    async with db.session() as s:
        yield s


@pytest.fixture
def dollar_only_xml():
    return build_envelope(DOLLAR_BLOCK + "\n        <TotalItems>1</TotalItems>")


@pytest.fixture
def full_xml():
    return build_envelope(DOLLAR_BLOCK + CATALOG_BLOCK + DAILY_BLOCK + "\n        <TotalItems>4</TotalItems>")


@pytest.fixture
def catalog_and_daily_xml():
    return build_envelope(CATALOG_BLOCK + DAILY_BLOCK)
