from __future__ import annotations
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Currency(SQLModel, table=True):
    """
    Catálogo de moedas publicadas pelo Banguat.
    O código numérico é a chave natural e nunca muda; moedas não são
    removidas, apenas desativadas.
    """
    __tablename__ = "currencies"

    code: int = Field(primary_key=True, sa_column_kwargs={"autoincrement": False}, description="Código numérico da moeda")
    description: str = Field(default="", max_length=100, index=True)
    symbol: Optional[str] = Field(default=None, max_length=10)
    active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
