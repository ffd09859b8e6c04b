from datetime import datetime, time, timedelta, timezone
import random

from corefive.core.config import settings
from corefive.core.pillars import Pillar
from corefive.core.time_utils import local_now, monday_of
from corefive.db import SessionLocal
from corefive.models.activity_log import ActivityLog


# (day offset from Monday, pillar, low, high) for a typical on-plan week
WEEK_PATTERN = [
    (0, Pillar.cardio, 30, 45),
    (0, Pillar.mindfulness, 10, 15),
    (1, Pillar.strength, 1, 1),
    (1, Pillar.clean_eating, 1, 1),
    (2, Pillar.cardio, 30, 50),
    (2, Pillar.clean_eating, 1, 1),
    (3, Pillar.strength, 1, 1),
    (3, Pillar.mindfulness, 10, 20),
    (3, Pillar.clean_eating, 1, 1),
    (4, Pillar.cardio, 30, 45),
    (4, Pillar.clean_eating, 1, 1),
    (5, Pillar.strength, 1, 1),
    (5, Pillar.cardio, 40, 60),
    (5, Pillar.mindfulness, 15, 20),
    (6, Pillar.clean_eating, 1, 1),
    (6, Pillar.mindfulness, 15, 20),
]


def clear_logs(db, user_id: str) -> None:
    """Delete the user's logs so we can reseed cleanly."""
    db.query(ActivityLog).filter(ActivityLog.user_id == user_id).delete()
    db.commit()


def seed_demo_logs(db, user_id: str, weeks: int = 6) -> None:
    """Insert `weeks` weeks of logs ending with the current (partial) week."""
    now = local_now(settings.timezone)
    this_monday = monday_of(now.date())
    rows = []

    for offset in range(weeks - 1, -1, -1):
        wk = this_monday - timedelta(weeks=offset)
        for day in range(7):
            d = wk + timedelta(days=day)
            if d > now.date():
                continue
            # 7-7.5h of sleep most nights
            rows.append((d, Pillar.sleep, round(random.uniform(6.5, 7.5), 1), wk))
        for day, pillar, low, high in WEEK_PATTERN:
            d = wk + timedelta(days=day)
            if d > now.date():
                continue
            rows.append((d, pillar, random.randint(low, high), wk))

    db.add_all(
        ActivityLog(
            user_id=user_id,
            pillar=pillar.value,
            value=value,
            logged_at=datetime.combine(d, time(12, 0), tzinfo=timezone.utc),
            week_start=wk,
        )
        for d, pillar, value, wk in rows
    )
    db.commit()

    print(f"Seeded {len(rows)} demo logs for {user_id}")


def main():
    db = SessionLocal()
    try:
        clear_logs(db, settings.default_user_id)
        seed_demo_logs(db, settings.default_user_id)
    finally:
        db.close()


if __name__ == "__main__":
    main()
