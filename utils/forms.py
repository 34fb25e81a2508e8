from datetime import date

from scheduling.intervals import parse_hhmm

TRUTHY = {"1", "true", "yes", "on"}


def parse_date(value) -> date:
    # Expect YYYY-MM-DD
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise ValueError("Invalid date. Use YYYY-MM-DD")
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        raise ValueError("Invalid date. Use YYYY-MM-DD") from None


def parse_time(value) -> int:
    return parse_hhmm(value)


def parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY


def parse_duration(value, default: int) -> int:
    if value is None or value == "":
        return default
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValueError("duration_minutes must be a whole number of minutes")
    minutes = int(value)
    if minutes < 0:
        raise ValueError("duration_minutes must be >= 0")
    return minutes


def parse_ids(value):
    """Accept [1, 2] or "1,2,x" and return the valid integer ids in order."""
    if value is None:
        return []
    items = value if isinstance(value, list) else str(value).split(",")
    ids = []
    for item in items:
        try:
            ids.append(int(str(item).strip()))
        except ValueError:
            continue
    return ids


def clean_str(value):
    if value is None:
        return None
    return str(value).strip() or None
