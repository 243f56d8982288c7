#!/usr/bin/env python3
"""
Job de atualização dos tipos de câmbio do Banguat.

Pensado para ser chamado por um agendador externo (cron, systemd timer).

Uso:
python jobs/update_rates.py [--json]
"""

import asyncio
import argparse
import json
import sys
from pathlib import Path

# Adicionar projeto ao path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.core.config import settings
from app.core.errors import BanguatError
from app.core.http import close_async_client
from app.core.logger import configure_logging
from app.db.session import Database
from app.services.exchange_service import fetch_exchange_rates
from app.services.utils.json_serializer import json_serializer
from datetime import datetime


async def run(as_json: bool = False) -> int:
    db = Database(settings.database_url)
    try:
        print("🔍 Verificando conexão com banco...")
        if not await db.check():
            print("❌ Banco de dados não está disponível")
            return 1
        await db.create_all()

        async with db.session() as session:
            try:
                summary = await fetch_exchange_rates(session)
            except BanguatError as e:
                print(f"❌ {e.error}: {e}")
                return 1
    finally:
        await close_async_client()
        await db.dispose()

    if as_json:
        print(json.dumps(summary, default=json_serializer, ensure_ascii=False, indent=2))
        return 0

    persistence = summary["persistence"]
    print(f"✅ {summary['total_records']} registros em {summary['latency_ms']}ms")
    print(f"   Gravados: {persistence['saved']}")
    print(f"   Com erro: {persistence['failed']}")
    for failure in persistence["failures"]:
        print(f"   ⚠️  {failure['kind']} {failure['key']}: {failure['error']}")
    return 1 if persistence["failed"] else 0


async def main():
    parser = argparse.ArgumentParser(description="Atualização dos tipos de câmbio do Banguat")
    parser.add_argument("--json", action="store_true",
                       help="Imprimir o resumo completo em JSON")
    args = parser.parse_args()

    configure_logging(settings.log_level)
    print("🔄 Job de atualização de tipos de câmbio")
    print(f"📅 Data/Hora: {datetime.now().isoformat()}")
    print(f"📡 SOAP: {settings.soap_url}")
    sys.exit(await run(as_json=args.json))


if __name__ == "__main__":
    asyncio.run(main())
