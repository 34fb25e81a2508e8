from dataclasses import dataclass

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class Interval:
    """A span on one calendar date: start offset and duration, both in minutes."""

    start: int
    duration: int

    @property
    def end(self) -> int:
        return self.start + self.duration

    @property
    def is_empty(self) -> bool:
        return self.duration <= 0

    def overlaps(self, other: "Interval") -> bool:
        return overlaps(self, other)

    def clamp(self, lo: int, hi: int) -> "Interval":
        start = min(max(self.start, lo), hi)
        end = max(min(self.end, hi), start)
        return Interval(start, end - start)


def overlaps(a: Interval, b: Interval) -> bool:
    # half-open: [s, s+d). Touching intervals do not conflict.
    if a.is_empty or b.is_empty:
        return False
    return a.start < b.end and a.end > b.start


def parse_hhmm(value: str) -> int:
    """'09:30' -> 570. Raises ValueError on anything else."""
    if not isinstance(value, str):
        raise ValueError("Time must be a string like 09:30")
    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid time: {value!r}. Use HH:MM")
    hours, minutes = int(parts[0]), int(parts[1])
    if hours > 23 or minutes > 59:
        raise ValueError(f"Invalid time: {value!r}. Use HH:MM")
    return hours * 60 + minutes


def format_hhmm(minutes: int) -> str:
    # end-of-day (24:00) is a valid end marker for a window
    hours, mins = divmod(int(minutes), 60)
    return f"{hours:02d}:{mins:02d}"
