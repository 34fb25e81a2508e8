"""
Booking availability checks.

A candidate interval is compared against everything already committed on the
same date. Trainer blocks are hard conflicts and can never be overridden.
Other non-cancelled bookings are soft conflicts: without override the caller
gets them back for display, with override they are returned in ``clashing``
so the caller can soft-cancel them via ``apply_override``.
"""
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from models import Booking, BookingStatus, TrainerBlock
from scheduling.intervals import Interval, format_hhmm, overlaps

STATUS_OK = "ok"
STATUS_BLOCK_CONFLICT = "blockConflict"
STATUS_BOOKING_CONFLICT = "bookingConflict"

KIND_BLOCK = "block"
KIND_BOOKING = "booking"
KIND_SELF = "self"


@dataclass
class Conflict:
    description: str
    related_id: Optional[int] = None
    kind: str = KIND_BOOKING

    def to_dict(self):
        return {"description": self.description, "related_id": self.related_id, "kind": self.kind}


@dataclass
class AvailabilityResult:
    status: str
    conflicts: List[Conflict] = field(default_factory=list)
    # bookings that must be soft-cancelled before the change is applied
    clashing: List[Booking] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK

    @property
    def overridable(self) -> bool:
        return self.status != STATUS_BLOCK_CONFLICT

    def to_dict(self):
        return {
            "status": self.status,
            "overridable": self.overridable,
            "conflicts": [c.to_dict() for c in self.conflicts],
        }


def describe_booking(booking) -> str:
    name = getattr(booking, "client_name", None) or "Unknown"
    return f"{name} @ {format_hhmm(booking.start_minutes)}-{format_hhmm(booking.end_minutes)}"


def describe_block(block) -> str:
    label = f"Blocked ({block.note})" if block.note else "Blocked"
    return f"{label} @ {format_hhmm(block.start_minutes)}-{format_hhmm(block.end_minutes)}"


def evaluate(
    target: Interval,
    bookings: Iterable,
    blocks: Iterable,
    exclude_ids: Iterable[int] = (),
    override: bool = False,
) -> AvailabilityResult:
    """Pure check of ``target`` against one day's bookings and blocks."""
    if target.is_empty:
        return AvailabilityResult(STATUS_OK)

    block_hits = [bl for bl in blocks if overlaps(target, bl.interval)]
    if block_hits:
        return AvailabilityResult(
            STATUS_BLOCK_CONFLICT,
            conflicts=[Conflict(describe_block(bl), bl.id, KIND_BLOCK) for bl in block_hits],
        )

    excluded = set(exclude_ids)
    clashing = [
        b for b in bookings
        if b.id not in excluded
        and b.status != BookingStatus.CANCELLED
        and overlaps(target, b.interval)
    ]
    conflicts = [Conflict(describe_booking(b), b.id, KIND_BOOKING) for b in clashing]

    if clashing and not override:
        return AvailabilityResult(STATUS_BOOKING_CONFLICT, conflicts, clashing)
    return AvailabilityResult(STATUS_OK, conflicts, clashing)


def evaluate_bulk(
    selected: List,
    start: int,
    others: Iterable,
    blocks: Iterable,
    override: bool = False,
    self_overlap_blocks: bool = True,
) -> AvailabilityResult:
    """Pure check for moving every booking in ``selected`` to the same ``start``."""
    others = list(others)
    blocks = list(blocks)
    selected_ids = {b.id for b in selected}

    block_conflicts = {}
    clashing = {}
    conflicts = []
    for sb in selected:
        res = evaluate(
            Interval(start, sb.duration_minutes),
            others,
            blocks,
            exclude_ids=selected_ids,
            override=True,
        )
        if res.status == STATUS_BLOCK_CONFLICT:
            for c in res.conflicts:
                block_conflicts.setdefault(c.related_id, c)
            continue
        for conflict, booking in zip(res.conflicts, res.clashing):
            if booking.id not in clashing:
                clashing[booking.id] = booking
                conflicts.append(conflict)

    if block_conflicts:
        return AvailabilityResult(STATUS_BLOCK_CONFLICT, list(block_conflicts.values()))

    self_conflict = None
    durations = sorted((b.duration_minutes for b in selected if b.duration_minutes > 0), reverse=True)
    if len(durations) > 1:
        # all share one start, so the second longest bounds the overlapping span
        self_conflict = Conflict(
            f"Selected bookings overlap each other @ {format_hhmm(start)}-{format_hhmm(start + durations[1])}",
            None,
            KIND_SELF,
        )
        conflicts.append(self_conflict)

    blocking = bool(clashing) or (self_conflict is not None and self_overlap_blocks)
    if blocking and not override:
        return AvailabilityResult(STATUS_BOOKING_CONFLICT, conflicts, list(clashing.values()))
    return AvailabilityResult(STATUS_OK, conflicts, list(clashing.values()))


def bookings_on(day, exclude_ids: Iterable[int] = ()):
    q = Booking.query.filter(Booking.date == day, Booking.status != BookingStatus.CANCELLED)
    exclude_ids = list(exclude_ids)
    if exclude_ids:
        q = q.filter(Booking.id.notin_(exclude_ids))
    return q.order_by(Booking.start_minutes.asc()).all()


def blocks_on(day):
    return (
        TrainerBlock.query
        .filter(TrainerBlock.date == day)
        .order_by(TrainerBlock.start_minutes.asc())
        .all()
    )


def check_availability(day, start: int, duration: int, exclude_booking_id=None, override: bool = False):
    exclude = [exclude_booking_id] if exclude_booking_id is not None else []
    return evaluate(
        Interval(start, duration),
        bookings_on(day, exclude),
        blocks_on(day),
        exclude_ids=exclude,
        override=override,
    )


def check_bulk_move(selected, day, start: int, override: bool = False, self_overlap_blocks: bool = True):
    ids = [b.id for b in selected]
    return evaluate_bulk(
        selected,
        start,
        bookings_on(day, ids),
        blocks_on(day),
        override=override,
        self_overlap_blocks=self_overlap_blocks,
    )


def apply_override(result: AvailabilityResult) -> int:
    """Soft-cancel the bookings an overridden check collided with. Caller commits."""
    if not result.ok:
        raise ValueError(f"Cannot apply override to a {result.status} result")
    for booking in result.clashing:
        booking.set_status(BookingStatus.CANCELLED)
    return len(result.clashing)
