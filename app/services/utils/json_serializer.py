"""Utilitários para serialização JSON e conversão numérica."""
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional


def json_serializer(obj):
    """
    Serializa datas e decimais para JSON.

    Usado como parâmetro `default` em json.dumps() para lidar com
    objetos que não são nativamente serializáveis em JSON.

    Raises:
    - TypeError: Se o objeto não for serializável
    """
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return float(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def parse_decimal(value: Any, default: Optional[Decimal] = Decimal("0")) -> Optional[Decimal]:
    """Converte texto numérico em ``Decimal``.

    - Aceita vírgula como separador decimal.
    - Valores vazios, inválidos ou negativos retornam ``default``.
    """
    if value is None:
        return default
    if isinstance(value, Decimal):
        parsed = value
    else:
        stripped = str(value).strip().replace(",", ".")
        if not stripped:
            return default
        try:
            parsed = Decimal(stripped)
        except InvalidOperation:
            return default
    if not parsed.is_finite() or parsed < 0:
        return default
    return parsed


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int(value: Any, default: int = 0) -> int:
    """Lê o inteiro no início do texto (``"2.0"`` → 2, ``"3 USD"`` → 3)."""
    if value is None:
        return default
    match = _LEADING_INT.match(str(value))
    if not match:
        return default
    return int(match.group(1))
