"""
Seed script: populates demo conditions and logs.

- Clears every existing condition and log first (this is a single-user store).
- Inserts four conditions with 2-9 weeks of history each: a fluctuating
  migraine, an improving back strain, a stable insomnia and a worsening
  stress condition.

Usage:
    python3 seed.py
"""

import logging
import random
from datetime import datetime, timedelta

import store
from db import init_db
from models import BodyRegion, ConditionCreate, LogCreate

logger = logging.getLogger("seed")

NOW = datetime.now().replace(second=0, microsecond=0)

# label, location, region, days of history, entries, base, variance, drift per entry
DEMO_CONDITIONS = [
    ("Chronic Migraine", "Left Temple", BodyRegion.HEAD, 60, 40, 6, 3, 0.0),
    ("Lumbar Strain", "Lower Back", BodyRegion.PELVIS, 40, 30, 8, 1, -0.15),
    ("Insomnia", "General", None, 30, 25, 4, 2, 0.0),
    ("Work Stress", "Head/Chest", BodyRegion.CHEST, 14, 12, 3, 1, 0.4),
]


def day(offset: int, hour: int = 8) -> datetime:
    return (NOW - timedelta(days=offset)).replace(hour=hour, minute=0)


def seed(rng: random.Random) -> tuple[int, int]:
    store.reset()
    n_logs = 0
    for label, location, region, start_day, count, base, variance, drift in DEMO_CONDITIONS:
        condition = store.create_condition(ConditionCreate(
            label=label,
            location=location,
            region=region,
            onset_date=day(start_day + 30).date(),
        ))
        level = float(base)
        for i in range(count):
            level += drift
            value = round(level + rng.uniform(-variance, variance))
            value = max(1, min(10, value))
            # Skip roughly 30% of days so the history looks natural.
            if rng.random() <= 0.3:
                continue
            medication = ""
            if value > 6 and rng.random() > 0.5:
                medication = "Painkiller"
            store.create_log(LogCreate(
                condition_id=condition.id,
                timestamp=day(start_day - i, hour=rng.choice([7, 8, 12, 18, 21])),
                intensity=value,
                medication=medication,
            ))
            n_logs += 1
    return len(DEMO_CONDITIONS), n_logs


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    init_db()
    n_conditions, n_logs = seed(random.Random(42))  # fixed seed for reproducibility
    logger.info("Seeded %d conditions and %d logs.", n_conditions, n_logs)
