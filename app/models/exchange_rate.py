from __future__ import annotations
from typing import Optional
from decimal import Decimal
from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint, Index
from datetime import date, datetime, timezone

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class ExchangeRate(SQLModel, table=True):
    """
    Histórico de cotações por moeda e dia.
    Compra/venda/referência são opcionais: ``None`` significa "não informado
    pela fonte", nunca zero.
    """
    __tablename__ = "exchange_rates"

    id: Optional[int] = Field(default=None, primary_key=True)
    currency_code: int = Field(foreign_key="currencies.code", index=True)
    rate_date: date = Field(index=True)
    buy: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=5)
    sell: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=5)
    reference: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=5)
    fetched_at: datetime = Field(default_factory=utcnow, index=True)
    active: bool = Field(default=True, index=True)

    __table_args__ = (
        UniqueConstraint("currency_code", "rate_date", name="uq_exchange_rates_currency_date"),
        Index("ix_exchange_rates_currency_date", "currency_code", "rate_date"),
    )


class DollarReference(SQLModel, table=True):
    """Referência diária do dólar (bloco CambioDolar do webservice)."""
    __tablename__ = "dollar_references"

    id: Optional[int] = Field(default=None, primary_key=True)
    rate_date: date = Field(index=True, unique=True)
    reference: Decimal = Field(max_digits=12, decimal_places=5)
    fetched_at: datetime = Field(default_factory=utcnow, index=True)
