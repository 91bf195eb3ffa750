# scripts/seed_profiles.py
"""
Seed a few development profiles and enrich them.
Run: python scripts/seed_profiles.py
"""
from __future__ import annotations

import asyncio
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from sqlalchemy import select

from db.engine import init_db
from db.session import session_scope
from jobs.enrichment import run_profile_enrichment
from models.profile import Profile
from services.profile_store import create_profile

SEED_USER = "seed_user"

SEED_TEXTS = [
    "Маша, 21. Обожаю танцевать и гулять. Рост 177, вес 58. 90/60/90",
    "Аня, 24 года, рост 168 см. Люблю путешествия и кофе.",
    "Hi, I'm Kate, 27, 172cm. Into climbing and photography.",
]


async def seed():
    await init_db()

    created: list[Profile] = []
    async with session_scope() as db:
        stmt = select(Profile).where(Profile.user_name == SEED_USER).limit(1)
        existing = (await db.execute(stmt)).scalar_one_or_none()
        if existing:
            print(f"Seed profiles already exist (e.g. {existing.id})")
            return

        for i, text in enumerate(SEED_TEXTS):
            profile = await create_profile(db, user_name=SEED_USER, raw_text=text, chat_id=1000 + i)
            created.append(profile)
            print(f"Created profile: {profile.id}")

    for profile in created:
        await run_profile_enrichment(profile.id, profile.raw_text)
        print(f"Enriched profile: {profile.id}")

    print("✅ Seed complete.")


if __name__ == "__main__":
    asyncio.run(seed())
