from __future__ import annotations
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class FetchLog(SQLModel, table=True):
    """Trilha de auditoria: uma linha por consulta ao webservice SOAP."""
    __tablename__ = "fetch_logs"
    id: Optional[int] = Field(default=None, primary_key=True)
    endpoint: str = Field(max_length=255)
    method: str = Field(default="POST", max_length=10)
    status_code: Optional[int] = Field(default=None)
    latency_ms: int = Field(default=0)
    record_count: int = Field(default=0)
    error_message: Optional[str] = Field(default=None, max_length=1000)
    requester_ip: Optional[str] = Field(default=None, max_length=45)
    created_at: datetime = Field(default_factory=utcnow, index=True)
