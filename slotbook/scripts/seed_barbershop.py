#!/usr/bin/env python3
"""Seed a barbershop: a small service catalog and Monday–Saturday working hours.

Replaces all existing weekly rules; services are matched by name and
updated in place so appointments keep their references.

Run:
    python -m slotbook.scripts.seed_barbershop
"""
from __future__ import annotations

import asyncio
import datetime as _dt
import logging
from decimal import Decimal

from sqlalchemy import delete, select

from slotbook.infra.database.engine import (
    build_engine,
    build_session_factory,
    ensure_database_exists,
    init_db,
)
from slotbook.infra.database.models import AvailabilityRule, Service

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

SERVICES = [
    {"name": "Haircut", "duration_minutes": 30, "buffer_after_minutes": 5, "price": Decimal("25.00"), "display_order": 1},
    {"name": "Beard trim", "duration_minutes": 20, "buffer_after_minutes": 5, "price": Decimal("15.00"), "display_order": 2},
    {"name": "Haircut & beard", "duration_minutes": 50, "buffer_after_minutes": 10, "price": Decimal("35.00"), "display_order": 3},
    {"name": "Hot towel shave", "duration_minutes": 40, "buffer_after_minutes": 5, "price": Decimal("30.00"), "display_order": 4},
]

# weekday: 0=Sunday .. 6=Saturday; Saturday closes early, Sunday closed.
WEEKLY_HOURS = [
    (1, _dt.time(9, 0), _dt.time(18, 0)),
    (2, _dt.time(9, 0), _dt.time(18, 0)),
    (3, _dt.time(9, 0), _dt.time(18, 0)),
    (4, _dt.time(9, 0), _dt.time(20, 0)),
    (5, _dt.time(9, 0), _dt.time(18, 0)),
    (6, _dt.time(10, 0), _dt.time(15, 0)),
]


async def seed() -> None:
    await ensure_database_exists()
    engine = build_engine()
    session_factory = build_session_factory(engine)
    await init_db()

    async with session_factory() as session:
        # ── Upsert services by name ──────────────────────────────────────────
        for data in SERVICES:
            row = await session.scalar(select(Service).where(Service.name == data["name"]))
            if row is None:
                session.add(Service(**data))
                logger.info("  + service: %s", data["name"])
            else:
                for attr, value in data.items():
                    setattr(row, attr, value)
                row.active = True
                logger.info("  ~ service: %s", data["name"])

        # ── Replace weekly rules ─────────────────────────────────────────────
        result = await session.execute(delete(AvailabilityRule))
        if result.rowcount:
            logger.info("Deleted %d existing weekly rules.", result.rowcount)
        for weekday, start, end in WEEKLY_HOURS:
            session.add(AvailabilityRule(weekday=weekday, start_time=start, end_time=end, is_active=True))

        await session.commit()

    logger.info(
        "Barbershop seed complete: %d services + %d weekly rules.",
        len(SERVICES),
        len(WEEKLY_HOURS),
    )


if __name__ == "__main__":
    asyncio.run(seed())
