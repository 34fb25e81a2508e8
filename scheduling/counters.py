from models import BookingStatus

COUNTER_TARGETS = ("left", "completed")


def transfer_completed(client, delta: int) -> int:
    """
    Move sessions between left and completed, never past zero on either side.
    Returns the signed amount actually moved.
    """
    if delta > 0:
        take = min(delta, client.sessions_left)
        client.sessions_left -= take
        client.sessions_completed += take
        return take
    if delta < 0:
        give = min(-delta, client.sessions_completed)
        client.sessions_completed -= give
        client.sessions_left += give
        return -give
    return 0


def adjust_counter(client, target: str, delta: int, limit: int = 5) -> int:
    target = (target or "").strip().lower()
    if target not in COUNTER_TARGETS:
        raise ValueError("Unknown counter target")

    delta = max(-limit, min(limit, int(delta)))

    if target == "left":
        # buying more sessions (or correcting) changes the package size
        before = client.sessions_left
        client.sessions_left = max(0, before + delta)
        return client.sessions_left - before

    return transfer_completed(client, delta)


def complete_booking(booking):
    if booking.status != BookingStatus.SCHEDULED:
        raise ValueError("Only scheduled bookings can be completed")
    booking.set_status(BookingStatus.COMPLETED)
    if booking.client is not None:
        transfer_completed(booking.client, 1)


def undo_complete_booking(booking):
    if booking.status != BookingStatus.COMPLETED:
        raise ValueError("Booking is not completed")
    booking.set_status(BookingStatus.SCHEDULED)
    if booking.client is not None:
        transfer_completed(booking.client, -1)
