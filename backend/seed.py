import asyncio
import os
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from golfbets.db import _async_url
from golfbets.models import Course, Player, Wager

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL environment variable is required")
DATABASE_URL = _async_url(DATABASE_URL)

engine = create_async_engine(DATABASE_URL, echo=False, pool_pre_ping=True)
Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

DEMO_PARS = [4, 3, 5, 4, 4, 3, 4, 5, 4, 4, 3, 5, 4, 4, 3, 4, 5, 4]
DEMO_INDICES = [7, 15, 1, 11, 3, 17, 9, 5, 13, 8, 16, 2, 12, 4, 18, 10, 6, 14]


async def main():
    async with Session() as s:
        existing_courses = {
            x.id for x in (await s.execute(select(Course))).scalars().all()
        }
        if "demo-links" not in existing_courses:
            s.add(
                Course(
                    id="demo-links",
                    name="Demo Links",
                    city="Springfield",
                    hole_data={
                        f"hole{n}": {"par": par, "index": index}
                        for n, (par, index) in enumerate(zip(DEMO_PARS, DEMO_INDICES), start=1)
                    },
                )
            )
        await s.commit()

        existing_players = {
            x.id for x in (await s.execute(select(Player))).scalars().all()
        }
        players = [
            Player(id="demo-alex", name="Alex", handicap=10),
            Player(id="demo-bella", name="Bella", handicap=4),
            Player(id="demo-carlos", name="Carlos", handicap=18),
            Player(id="demo-diana", name="Diana", handicap=12),
        ]
        for p in players:
            if p.id not in existing_players:
                s.add(p)
        await s.commit()

        existing_wagers = {
            x.id for x in (await s.execute(select(Wager))).scalars().all()
        }
        wagers = [
            Wager(id="demo-nassau", name="Nassau", type="Nassau", amount=5.0),
            Wager(id="demo-skins", name="Skins", type="Skins", amount=2.0, carry_over=True),
            Wager(id="demo-ctp", name="Closest to pin", type="Side Bet", amount=5.0),
        ]
        for w in wagers:
            if w.id not in existing_wagers:
                s.add(w)
        await s.commit()

if __name__ == "__main__":
    asyncio.run(main())
