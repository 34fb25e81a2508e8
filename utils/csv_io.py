import csv
import io

from models.booking import BookingStatus
from scheduling.intervals import format_hhmm, parse_hhmm
from utils.forms import clean_str, parse_bool, parse_date

CLIENT_COLUMNS = [
    "id", "name", "phone", "email", "gym", "preferred_time", "notes",
    "on_holiday", "sessions_left", "sessions_completed",
]
BOOKING_COLUMNS = [
    "id", "client_id", "date", "start", "duration_minutes", "session_type", "status",
]


class CsvImportError(ValueError):
    def __init__(self, row: int, message: str):
        super().__init__(f"Row {row}: {message}")
        self.row = row
        self.message = message


def _write(columns, rows) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(columns)
    writer.writerows(rows)
    return output.getvalue()


def export_clients(clients) -> str:
    return _write(CLIENT_COLUMNS, (
        [
            c.id, c.name, c.phone or "", c.email or "", c.gym or "",
            c.preferred_time or "", c.notes or "", "true" if c.on_holiday else "false",
            c.sessions_left, c.sessions_completed,
        ]
        for c in clients
    ))


def export_bookings(bookings) -> str:
    return _write(BOOKING_COLUMNS, (
        [
            b.id, b.client_id, b.date.isoformat(), format_hhmm(b.start_minutes),
            b.duration_minutes, b.session_type, b.status,
        ]
        for b in bookings
    ))


def _reader(text: str, required):
    reader = csv.DictReader(io.StringIO(text))
    missing = [c for c in required if c not in (reader.fieldnames or [])]
    if missing:
        raise CsvImportError(1, f"missing column(s): {', '.join(missing)}")
    # data rows start on line 2 (after the header)
    return enumerate(reader, start=2)


def _int(value, field, row, default=None):
    value = clean_str(value)
    if value is None:
        if default is None:
            raise CsvImportError(row, f"{field} is required")
        return default
    try:
        return int(value)
    except ValueError:
        raise CsvImportError(row, f"{field} must be an integer") from None


def parse_clients(text: str):
    rows = []
    for row_num, raw in _reader(text, ["name"]):
        name = clean_str(raw.get("name"))
        if not name:
            raise CsvImportError(row_num, "name is required")
        client_id = clean_str(raw.get("id"))
        rows.append({
            "id": _int(client_id, "id", row_num) if client_id else None,
            "name": name[:120],
            "phone": clean_str(raw.get("phone")),
            "email": clean_str(raw.get("email")),
            "gym": clean_str(raw.get("gym")),
            "preferred_time": clean_str(raw.get("preferred_time")),
            "notes": clean_str(raw.get("notes")),
            "on_holiday": parse_bool(raw.get("on_holiday")),
            "sessions_left": max(0, _int(raw.get("sessions_left"), "sessions_left", row_num, default=0)),
            "sessions_completed": max(0, _int(raw.get("sessions_completed"), "sessions_completed", row_num, default=0)),
        })
    return rows


def parse_bookings(text: str, known_client_ids):
    rows = []
    for row_num, raw in _reader(text, ["client_id", "date", "start"]):
        client_id = _int(raw.get("client_id"), "client_id", row_num)
        if client_id not in known_client_ids:
            raise CsvImportError(row_num, f"unknown client_id {client_id}")
        try:
            day = parse_date(raw.get("date"))
            start = parse_hhmm(raw.get("start") or "")
        except ValueError as exc:
            raise CsvImportError(row_num, str(exc)) from None

        duration = _int(raw.get("duration_minutes"), "duration_minutes", row_num, default=60)
        if duration < 0:
            raise CsvImportError(row_num, "duration_minutes must be >= 0")

        status = (clean_str(raw.get("status")) or BookingStatus.SCHEDULED).upper()
        if status not in BookingStatus.ALL:
            raise CsvImportError(row_num, f"unknown status {status}")

        booking_id = clean_str(raw.get("id"))
        rows.append({
            "id": _int(booking_id, "id", row_num) if booking_id else None,
            "client_id": client_id,
            "date": day,
            "start_minutes": start,
            "duration_minutes": duration,
            "session_type": (clean_str(raw.get("session_type")) or "Training")[:64],
            "status": status,
        })
    return rows
