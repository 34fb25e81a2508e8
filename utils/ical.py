from datetime import datetime, timedelta

PRODID = "-//TrainerBooking//Calendar//EN"
MAX_LINE_OCTETS = 75


def escape_text(value: str) -> str:
    value = value.replace("\r\n", "\n").replace("\r", "\n")
    return (
        value.replace("\\", "\\\\")
        .replace(",", "\\,")
        .replace(";", "\\;")
        .replace("\n", "\\n")
    )


def fold_line(line: str) -> str:
    """Fold a content line at 75 octets; continuation lines start with a space."""
    if len(line.encode("utf-8")) <= MAX_LINE_OCTETS:
        return line

    parts = []
    current, size = "", 0
    for ch in line:
        width = len(ch.encode("utf-8"))
        # continuation lines spend one octet on the leading space
        limit = MAX_LINE_OCTETS if not parts else MAX_LINE_OCTETS - 1
        if size + width > limit:
            parts.append(current)
            current, size = "", 0
        current += ch
        size += width
    parts.append(current)
    return "\r\n ".join(parts)


def _local_stamp(day, minutes: int) -> str:
    dt = datetime(day.year, day.month, day.day) + timedelta(minutes=minutes)
    return dt.strftime("%Y%m%dT%H%M%S")


def build_calendar(bookings, now: datetime = None) -> str:
    """Render bookings as an iCalendar (RFC 5545) document with floating local times."""
    now = now or datetime.utcnow()
    dtstamp = now.strftime("%Y%m%dT%H%M%SZ")

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
    ]
    for b in bookings:
        client = b.client
        title = f"{client.name if client else 'Client'} - {b.session_type}"
        location = (client.gym if client else None) or ""

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:tbs-{b.id}@trainerbooking")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART:{_local_stamp(b.date, b.start_minutes)}")
        lines.append(f"DTEND:{_local_stamp(b.date, b.end_minutes)}")
        lines.append(f"SUMMARY:{escape_text(title)}")
        if location.strip():
            lines.append(f"LOCATION:{escape_text(location)}")
        lines.append("END:VEVENT")
    lines.append("END:VCALENDAR")

    return "\r\n".join(fold_line(line) for line in lines) + "\r\n"
