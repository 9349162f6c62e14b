"""Weekly availability as sets of `DAY_SHIFT` slot tokens."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from carematch.matching.models import Day, Shift
from carematch.matching.normalize import normalize_token
from carematch.utils.logging import get_logger

logger = get_logger("matching.availability")

DAYS: tuple[Day, ...] = tuple(Day)
SHIFTS: tuple[Shift, ...] = tuple(Shift)
ALL_SLOTS: tuple[str, ...] = tuple(
    f"{day.value}_{shift.value}" for day in DAYS for shift in SHIFTS
)
_SLOT_ORDER: dict[str, int] = {slot: idx for idx, slot in enumerate(ALL_SLOTS)}

DEFAULT_START_TIME = "08:00"
DEFAULT_END_TIME = "18:00"


def make_slot(day: Day | str, shift: Shift | str) -> str:
    """Build a slot token such as MONDAY_MORNING."""
    return f"{normalize_token(day)}_{normalize_token(shift)}"


def split_slot(slot: str) -> tuple[str, str]:
    """Split a slot token into (day, shift)."""
    day, _, shift = slot.partition("_")
    return day, shift


def _sorted_slots(slots: Iterable[str]) -> list[str]:
    return sorted(slots, key=lambda s: (_SLOT_ORDER.get(s, len(_SLOT_ORDER)), s))


def _day_entry(schedule: Mapping, day: Day) -> Mapping | None:
    for key in (day.value.lower(), day.value, day.value.capitalize()):
        entry = schedule.get(key)
        if entry is not None:
            return entry
    return None


def _entry_value(entry: Mapping, snake: str, camel: str) -> object:
    value = entry.get(snake)
    if value is None:
        value = entry.get(camel)
    return value


def _parse_hour(value: object, default: str, day: Day) -> int:
    raw = str(value) if value else default
    try:
        return int(raw.split(":")[0])
    except ValueError:
        logger.warning("Malformed time %r on %s, using %s", raw, day.value, default)
        return int(default.split(":")[0])


def shifts_for_hours(start_hour: int, end_hour: int) -> list[Shift]:
    """Return the shift buckets a start/end hour pair touches.

    Buckets overlap at their boundaries: 10h-19h covers morning,
    afternoon and night.
    """
    shifts: list[Shift] = []
    if start_hour < 12 and end_hour > 6:
        shifts.append(Shift.MORNING)
    if start_hour < 18 and end_hour > 12:
        shifts.append(Shift.AFTERNOON)
    if start_hour < 23 and end_hour > 18:
        shifts.append(Shift.NIGHT)
    if end_hour <= 6 or start_hour >= 23:
        shifts.append(Shift.OVERNIGHT)
    return shifts


def schedule_to_slots(schedule: Mapping | None) -> set[str]:
    """Convert a per-day time-range schedule into a slot set.

    Expected shape::

        {"monday": {"enabled": True, "start_time": "08:00", "end_time": "18:00"}, ...}

    camelCase time keys (startTime/endTime) are accepted too. Disabled or
    absent days contribute nothing.
    """
    slots: set[str] = set()
    if not schedule or not isinstance(schedule, Mapping):
        return slots

    for day in DAYS:
        entry = _day_entry(schedule, day)
        if not isinstance(entry, Mapping) or not entry.get("enabled"):
            continue

        start_hour = _parse_hour(
            _entry_value(entry, "start_time", "startTime"), DEFAULT_START_TIME, day
        )
        end_hour = _parse_hour(
            _entry_value(entry, "end_time", "endTime"), DEFAULT_END_TIME, day
        )
        for shift in shifts_for_hours(start_hour, end_hour):
            slots.add(make_slot(day, shift))

    return slots


def slots_to_arrays(slots: Iterable[str] | None) -> tuple[list[str], list[str]]:
    """Project a slot set onto its distinct days and shifts.

    Lossy unless the slot set is a full days x shifts cross product.
    """
    day_set: set[str] = set()
    shift_set: set[str] = set()
    for slot in slots or []:
        day, shift = split_slot(slot)
        day_set.add(day)
        shift_set.add(shift)

    day_order = [d.value for d in DAYS]
    shift_order = [s.value for s in SHIFTS]
    days = [d for d in day_order if d in day_set]
    shifts = [s for s in shift_order if s in shift_set]
    return days, shifts


def arrays_to_slots(
    days: Iterable[object] | None, shifts: Iterable[object] | None
) -> list[str]:
    """Build the full cross product of days and shifts as slot tokens."""
    day_tokens = [t for t in (normalize_token(d) for d in days or []) if t]
    shift_tokens = [t for t in (normalize_token(s) for s in shifts or []) if t]
    slots: list[str] = []
    for day in day_tokens:
        for shift in shift_tokens:
            slot = f"{day}_{shift}"
            if slot not in slots:
                slots.append(slot)
    return slots


def overlap(a: Iterable[str] | None, b: Iterable[str] | None) -> bool:
    """Return True if the slot sets share a slot, or if either is empty."""
    set_a = set(a or [])
    set_b = set(b or [])
    if not set_a or not set_b:
        return True
    return not set_a.isdisjoint(set_b)


def intersection(a: Iterable[str] | None, b: Iterable[str] | None) -> list[str]:
    """Return the shared slots in calendar order."""
    return _sorted_slots(set(a or []) & set(b or []))


def overlap_ratio(
    family: Iterable[str] | None, caregiver: Iterable[str] | None
) -> float:
    """Fraction of the family's slots the caregiver covers.

    An empty or missing slot set on either side counts as full
    compatibility (1.0).
    """
    family_set = set(family or [])
    caregiver_set = set(caregiver or [])
    if not family_set or not caregiver_set:
        return 1.0
    return len(family_set & caregiver_set) / len(family_set)


@dataclass
class DayOverlap:
    """Minute-level overlap between required and available hours on one day."""

    required: bool
    available: bool
    required_minutes: int = 0
    overlap_minutes: int = 0


@dataclass
class ScheduleComparison:
    """Minute-level comparison of two weekly time-range schedules."""

    overlap_percentage: float
    total_overlap_minutes: int
    total_required_minutes: int
    days: dict[str, DayOverlap] = field(default_factory=dict)
    matching_days: list[str] = field(default_factory=list)
    missing_days: list[str] = field(default_factory=list)


def _minutes(value: object, default: str) -> int:
    raw = str(value) if value else default
    hours, _, minutes = raw.partition(":")
    try:
        return int(hours) * 60 + int(minutes or 0)
    except ValueError:
        logger.warning("Malformed time %r, using %s", raw, default)
        return _minutes(default, default)


def _day_range(entry: Mapping | None) -> tuple[int, int] | None:
    if not isinstance(entry, Mapping) or not entry.get("enabled"):
        return None
    start = _minutes(_entry_value(entry, "start_time", "startTime"), DEFAULT_START_TIME)
    end = _minutes(_entry_value(entry, "end_time", "endTime"), DEFAULT_END_TIME)
    return start, end


def compare_schedules(
    required: Mapping | None, available: Mapping | None
) -> ScheduleComparison:
    """Compare the hours a job requires with the hours a caregiver offers.

    The percentage is the share of required minutes the caregiver covers.
    No required schedule (or no required minutes) is a 100% match.
    """
    if not required:
        return ScheduleComparison(
            overlap_percentage=100.0,
            total_overlap_minutes=0,
            total_required_minutes=0,
        )

    available = available or {}
    result = ScheduleComparison(
        overlap_percentage=100.0,
        total_overlap_minutes=0,
        total_required_minutes=0,
    )

    for day in DAYS:
        need = _day_range(_day_entry(required, day))
        offer = _day_range(_day_entry(available, day))
        info = DayOverlap(required=need is not None, available=offer is not None)

        if need is not None:
            info.required_minutes = max(0, need[1] - need[0])
            if offer is not None:
                info.overlap_minutes = max(
                    0, min(need[1], offer[1]) - max(need[0], offer[0])
                )
            if info.overlap_minutes > 0:
                result.matching_days.append(day.value)
            else:
                result.missing_days.append(day.value)

        result.days[day.value] = info
        result.total_required_minutes += info.required_minutes
        result.total_overlap_minutes += info.overlap_minutes

    if result.total_required_minutes > 0:
        result.overlap_percentage = (
            100.0 * result.total_overlap_minutes / result.total_required_minutes
        )
    return result
