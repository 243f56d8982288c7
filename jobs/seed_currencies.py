#!/usr/bin/env python3
"""
Cadastra (ou atualiza) o catálogo conhecido de moedas do Banguat.

Uso:
python jobs/seed_currencies.py
"""

import asyncio
import sys
from pathlib import Path

# Adicionar projeto ao path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.core.config import settings
from app.db.session import Database
from app.services.persistence import seed_currencies


async def main():
    db = Database(settings.database_url)
    try:
        if not await db.check():
            print("❌ Banco de dados não está disponível")
            sys.exit(1)
        await db.create_all()
        async with db.session() as session:
            batch = await seed_currencies(session)
    finally:
        await db.dispose()

    print(f"✅ Moedas gravadas: {len(batch.succeeded)}")
    for failure in batch.failed:
        print(f"⚠️  Moeda {failure.key}: {failure.error}")
    if batch.failed:
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
