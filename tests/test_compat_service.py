"""
Testes para a conversão moeda/cotação → users/posts.
"""

from datetime import date
from decimal import Decimal

from app.services.compat_service import currency_to_user, history_as_user_posts, rate_to_post


def test_currency_to_user():
    user = currency_to_user({"code": 3, "description": "Euro Zona  Euro", "symbol": "€"})

    assert user["id"] == 3
    assert user["name"] == "Euro Zona  Euro"
    assert user["username"] == "moneda_3"
    assert user["email"] == "eurozonaeuro@banguat.gt"
    assert user["phone"] == "+502-3000-0000"
    assert user["website"] == "www.banguat.gob.gt"
    assert user["company"] == {"name": "Banco de Guatemala"}
    assert user["address"] == {"city": "Guatemala"}


def test_rate_to_post():
    post = rate_to_post({
        "currency_code": 3,
        "description": "Euro",
        "symbol": "€",
        "date": date(2024, 7, 1),
        "buy": Decimal("8.32"),
        "sell": Decimal("8.51"),
    })

    assert post["id"] == 3
    assert post["userId"] == 3
    assert post["title"] == "Tipo de Cambio Euro"
    assert post["body"] == "Compra: €8.32 - Venta: €8.51 - Fecha: 2024-07-01"


def test_rate_to_post_missing_values():
    post = rate_to_post({
        "currency_code": 2,
        "description": "Dólar",
        "symbol": None,
        "date": "2024-07-01",
        "buy": None,
        "sell": Decimal("0"),
        "reference": Decimal("7.75"),
    })

    assert post["body"] == "Compra: N/A - Venta: 0 - Fecha: 2024-07-01"


def test_history_as_user_posts():
    history = [{"currency_code": 3, "date": date(2024, 7, 1)}]
    result = history_as_user_posts(3, history)

    assert result == {"user": {"id": 3, "name": "Moneda 3"}, "posts": history, "postsCount": 1}
