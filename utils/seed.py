import calendar
import logging
import random
from datetime import date, timedelta

from models import db
from models.booking import Booking, BookingStatus
from models.client import Client
from models.trainer_block import TrainerBlock

log = logging.getLogger(__name__)

DEMO_CLIENTS = [
    {"name": "Alice Johnson", "gym": "Central Gym", "preferred_time": "Mon 07:00, Thu 07:00", "sessions_left": 10},
    {"name": "Ben Carter", "gym": "Central Gym", "preferred_time": "Evenings", "sessions_left": 5},
    {"name": "Chloe Sharkperson", "gym": "Riverside Fitness", "sessions_left": 8},
    {"name": "Diego Park", "gym": "Riverside Fitness", "preferred_time": "Sat 09:00", "sessions_left": 12},
    {"name": "Eva Lin", "gym": "Central Gym", "sessions_left": 3},
]

START_HOURS = list(range(6, 20))  # 06:00 .. 19:xx


def store_is_empty() -> bool:
    return Client.query.first() is None and Booking.query.first() is None


def seed_demo_data(seed: int, today: date = None):
    """
    Populate an empty store with demo clients and bookings.

    Deterministic for a given seed and ``today``. Returns a dict of counts, or
    None when the store already holds data.
    """
    if not store_is_empty():
        log.info("Seed skipped: store is not empty")
        return None

    today = today or date.today()
    rnd = random.Random(seed)

    clients = [Client(**row) for row in DEMO_CLIENTS]
    db.session.add_all(clients)
    db.session.flush()

    taken = set()
    bookings = []

    def add_booking(client, day, start, minutes, session_type):
        if (day, start) in taken:
            return
        taken.add((day, start))
        bookings.append(Booking(
            client_id=client.id,
            date=day,
            start_minutes=start,
            duration_minutes=minutes,
            session_type=session_type,
            status=BookingStatus.SCHEDULED,
        ))

    # a few near-term sessions so the week list is never empty
    add_booking(clients[0], today + timedelta(days=1), 9 * 60, 60, "Training")
    add_booking(clients[1], today + timedelta(days=2), 15 * 60 + 30, 75, "Consultation")
    add_booking(clients[2], today + timedelta(days=3), 11 * 60, 60, "Training")

    # sprinkle across the current month so the month view has counts
    days_in_month = calendar.monthrange(today.year, today.month)[1]
    for day_num in range(1, days_in_month + 1):
        day = date(today.year, today.month, day_num)
        base = 2 if day_num % 3 == 0 else 1
        weekend_penalty = -1 if day.weekday() >= 5 else 0
        count = max(0, min(3, base + weekend_penalty + rnd.randint(0, 1)))

        for _ in range(count):
            client = clients[rnd.randrange(len(clients))]
            start = rnd.choice(START_HOURS) * 60 + (30 if rnd.randint(0, 1) else 0)
            minutes = 75 if rnd.randint(0, 3) == 0 else 60
            session_type = "Consultation" if rnd.randint(0, 2) == 0 else "Training"
            add_booking(client, day, start, minutes, session_type)

    db.session.add_all(bookings)

    lunch = TrainerBlock(date=today, start_minutes=12 * 60, duration_minutes=60, note="Lunch")
    db.session.add(lunch)
    db.session.commit()

    counts = {"clients": len(clients), "bookings": len(bookings), "blocks": 1}
    log.info("Seeded demo data: %s", counts)
    return counts
