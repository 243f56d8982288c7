"""Normalização de datas vindas do webservice do Banguat."""
from __future__ import annotations

import logging
import re
from datetime import date, datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DMY_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")


def today_iso() -> str:
    """Data corrente (UTC) em ``YYYY-MM-DD``."""
    return datetime.now(timezone.utc).date().isoformat()


def normalize_date(raw: Optional[str]) -> str:
    """Converte ``D/M/YYYY`` ou ``DD/MM/YYYY`` para ``YYYY-MM-DD``.

    - Strings já em ``YYYY-MM-DD`` são devolvidas sem alteração.
    - Qualquer outro formato (inclusive vazio/``None``) ou dia/mês fora do
      calendário gera um aviso no log e devolve a data de hoje.

    Nunca levanta exceção.
    """
    value = raw.strip() if isinstance(raw, str) else ""
    if _ISO_DATE.match(value):
        return value

    match = _DMY_DATE.match(value)
    if match:
        day, month, year = (int(part) for part in match.groups())
        try:
            return date(year, month, day).isoformat()
        except ValueError:
            logger.warning("Data fora do calendário: %r", raw)
            return today_iso()

    logger.warning("Formato de data não reconhecido: %r", raw)
    return today_iso()
