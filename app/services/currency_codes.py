"""Tabela fixa de códigos de moeda do Banguat."""
from types import MappingProxyType
from typing import Optional

DOLLAR_CODE = 2

CURRENCY_SYMBOLS = MappingProxyType({
    1: "Q",      # Quetzal
    2: "$",      # Dólar
    3: "€",      # Euro
    4: "£",      # Libra
    5: "¥",      # Yen
    6: "₩",      # Won
    7: "¥",      # Yuan
    8: "$",      # Peso MX
    9: "R$",     # Real
    10: "$",     # Peso AR
})

CURRENCY_DESCRIPTIONS = MappingProxyType({
    1: "Quetzal",
    2: "Dólar Estadounidense",
    3: "Euro",
    4: "Libra Esterlina",
    5: "Yen Japonés",
    6: "Won Coreano",
    7: "Yuan Chino",
    8: "Peso Mexicano",
    9: "Real Brasileño",
    10: "Peso Argentino",
})


def symbol_for(code: int) -> Optional[str]:
    return CURRENCY_SYMBOLS.get(code)


def description_for(code: int) -> str:
    return CURRENCY_DESCRIPTIONS.get(code, f"Moneda {code}")
