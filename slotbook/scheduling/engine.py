"""Slot engine: pure functions from (service, rules, exceptions, appointments, now) to bookable starts.

Nothing here reads a clock or a database. Callers pass the freshest data
they have and the current time; identical inputs always give identical output.
"""
from __future__ import annotations

import datetime as _dt
from typing import Iterable, List, Optional, Sequence, Tuple

from slotbook.core.exceptions import SlotUnavailableError
from slotbook.scheduling.types import (
    AppointmentStatus,
    BookedInterval,
    DateException,
    DateRange,
    ExceptionType,
    ServiceSpec,
    WeeklyRule,
    weekday_of,
)

Window = Tuple[_dt.datetime, _dt.datetime]

REPLACE = "replace"
SUBTRACT = "subtract"


def exception_for(day: _dt.date, exceptions: Iterable[DateException]) -> Optional[DateException]:
    """First exception on *day*; later duplicates are ignored."""
    for exc in exceptions:
        if exc.date == day:
            return exc
    return None


def rule_windows(day: _dt.date, rules: Iterable[WeeklyRule]) -> List[Window]:
    weekday = weekday_of(day)
    return _merge_windows([
        (_dt.datetime.combine(day, r.start_time), _dt.datetime.combine(day, r.end_time))
        for r in rules
        if r.is_active and r.weekday == weekday
    ])


def working_windows(
    day: _dt.date,
    rules: Iterable[WeeklyRule],
    exceptions: Iterable[DateException],
    *,
    blocked_mode: str = REPLACE,
) -> List[Window]:
    """Working windows for *day* after applying its exception, sorted and non-overlapping."""
    exc = exception_for(day, exceptions)
    if exc is not None and exc.closes_whole_day:
        return []

    base = rule_windows(day, rules)
    if exc is None or not exc.has_times:
        return base

    exc_window = (
        _dt.datetime.combine(day, exc.start_time),  # type: ignore[arg-type]
        _dt.datetime.combine(day, exc.end_time),  # type: ignore[arg-type]
    )
    if exc.exception_type is ExceptionType.EXTRA:
        return [exc_window]

    # Blocked with times never opens a day that has no rule.
    if not base:
        return []
    if blocked_mode == SUBTRACT:
        result: List[Window] = []
        for window in base:
            result.extend(_subtract(window, exc_window))
        return result
    return [exc_window]


def compute_day_slots(
    day: _dt.date,
    service: ServiceSpec,
    rules: Sequence[WeeklyRule],
    exceptions: Sequence[DateException],
    appointments: Sequence[BookedInterval],
    now: _dt.datetime,
    *,
    blocked_mode: str = REPLACE,
) -> List[_dt.datetime]:
    """Ordered bookable start times for *service* on *day*.

    Candidates start at each window's start and advance by duration + buffer
    while the service still ends inside the window. A candidate is dropped
    when it starts at or before *now*, or when [t, t + duration) overlaps a
    non-cancelled appointment (touching boundaries do not overlap).
    """
    windows = working_windows(day, rules, exceptions, blocked_mode=blocked_mode)
    if not windows:
        return []

    busy = [a for a in appointments if a.status is not AppointmentStatus.CANCELLED]
    duration = service.duration
    step = service.step

    slots: List[_dt.datetime] = []
    for window_start, window_end in windows:
        t = window_start
        while t + duration <= window_end:
            slot_end = t + duration
            if t > now and not any(a.overlaps(t, slot_end) for a in busy):
                slots.append(t)
            t += step
    return slots


def is_date_open(
    day: _dt.date,
    rules: Iterable[WeeklyRule],
    exceptions: Iterable[DateException],
    now: _dt.datetime,
) -> bool:
    """Whether the date picker should offer *day* at all (not whether slots remain)."""
    if day < now.date():
        return False
    exc = exception_for(day, exceptions)
    if exc is not None and exc.closes_whole_day:
        return False
    if exc is not None and exc.exception_type is ExceptionType.EXTRA:
        return True
    weekday = weekday_of(day)
    return any(r.is_active and r.weekday == weekday for r in rules)


def list_open_dates(
    date_range: DateRange,
    rules: Sequence[WeeklyRule],
    exceptions: Sequence[DateException],
    now: _dt.datetime,
) -> List[_dt.date]:
    return [d for d in date_range.days() if is_date_open(d, rules, exceptions, now)]


def validate_booking(
    service: ServiceSpec,
    start: _dt.datetime,
    rules: Sequence[WeeklyRule],
    exceptions: Sequence[DateException],
    appointments: Sequence[BookedInterval],
    now: _dt.datetime,
    *,
    blocked_mode: str = REPLACE,
) -> None:
    """Raise SlotUnavailableError unless *start* is one of the day's bookable slots."""
    day = start.date()
    slots = compute_day_slots(
        day, service, rules, exceptions, appointments, now, blocked_mode=blocked_mode,
    )
    if start in slots:
        return

    if start <= now:
        reason = "past"
    elif not working_windows(day, rules, exceptions, blocked_mode=blocked_mode):
        reason = "closed"
    elif any(
        a.status is not AppointmentStatus.CANCELLED and a.overlaps(start, start + service.duration)
        for a in appointments
    ):
        reason = "taken"
    else:
        reason = "off_grid"
    raise SlotUnavailableError(
        "The selected time is no longer available, please pick another time",
        details={"start": start.isoformat(), "service_id": str(service.id), "reason": reason},
    )


def _merge_windows(windows: List[Window]) -> List[Window]:
    """Sort and join windows that overlap or touch."""
    if not windows:
        return []
    windows = sorted(windows)
    merged = [windows[0]]
    for start, end in windows[1:]:
        last_start, last_end = merged[-1]
        if start <= last_end:
            merged[-1] = (last_start, max(last_end, end))
        else:
            merged.append((start, end))
    return merged


def _subtract(window: Window, block: Window) -> List[Window]:
    """Remove *block* from *window*; yields 0, 1 or 2 pieces."""
    start, end = window
    block_start, block_end = block
    if block_end <= start or block_start >= end:
        return [window]
    pieces: List[Window] = []
    if block_start > start:
        pieces.append((start, block_start))
    if block_end < end:
        pieces.append((block_end, end))
    return pieces
