"""
Camada de compatibilidade com o frontend legado, que consome registros
genéricos de "users" e "posts".

- moeda → user (``id`` = código da moeda)
- cotação atual → post (``id`` e ``userId`` = código da moeda)
"""
from __future__ import annotations

import re
from typing import Any, Dict

_WHITESPACE = re.compile(r"\s+")


def currency_to_user(currency: Dict[str, Any]) -> Dict[str, Any]:
    code = currency["code"]
    description = currency.get("description") or ""
    return {
        "id": code,
        "name": description,
        "username": f"moneda_{code}",
        "email": f"{_WHITESPACE.sub('', description.lower())}@banguat.gt",
        "phone": f"+502-{code}000-0000",
        "website": "www.banguat.gob.gt",
        "company": {"name": "Banco de Guatemala"},
        "address": {"city": "Guatemala"},
    }


def _amount(symbol: str, value: Any) -> str:
    if value is None:
        return "N/A"
    return f"{symbol}{value}"


def rate_to_post(rate: Dict[str, Any]) -> Dict[str, Any]:
    code = rate["currency_code"]
    symbol = rate.get("symbol") or ""
    rate_date = rate.get("date")
    date_text = rate_date.isoformat() if hasattr(rate_date, "isoformat") else rate_date
    return {
        "id": code,
        "userId": code,
        "title": f"Tipo de Cambio {rate.get('description') or ''}".rstrip(),
        "body": (
            f"Compra: {_amount(symbol, rate.get('buy'))} - "
            f"Venta: {_amount(symbol, rate.get('sell'))} - "
            f"Fecha: {date_text}"
        ),
    }


def history_as_user_posts(code: int, history: list[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "user": {"id": code, "name": f"Moneda {code}"},
        "posts": history,
        "postsCount": len(history),
    }
