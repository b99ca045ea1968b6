"""Positioning of events on the calendar day timeline."""
import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Iterable, List, Sequence, Tuple

from processor.models import Event, EventLayout, EventPosition, TimeSlot

logger = logging.getLogger(__name__)

ALL_DAY_THRESHOLD = timedelta(hours=23)
ALL_DAY_HEIGHT = 8
MIN_EVENT_HEIGHT = 2
GRID_WIDTH = 96
LEFT_MARGIN = 2
COLUMN_GUTTER = 1


def is_event_on_day(event: Event, day: date, tz: tzinfo = timezone.utc) -> bool:
    """
    Check whether an event intersects a calendar day.

    Args:
        event: Event to check
        day: Calendar day
        tz: Timezone the day is expressed in (default: UTC)

    Returns:
        True if [start, end] overlaps the day's 00:00:00 to 23:59:59 window
    """
    day_start = datetime.combine(day, time(0, 0, 0), tzinfo=tz)
    day_end = datetime.combine(day, time(23, 59, 59), tzinfo=tz)
    return event.start_time <= day_end and event.end_time >= day_start


def events_for_day(
    events: Iterable[Event],
    day: date,
    tz: tzinfo = timezone.utc
) -> List[Event]:
    return [event for event in events if is_event_on_day(event, day, tz)]


def time_as_percentage(instant: datetime, tz: tzinfo = timezone.utc) -> float:
    """Percentage of the day elapsed at the instant's wall-clock time in tz."""
    local = instant.astimezone(tz)
    total_minutes = local.hour * 60 + local.minute + local.second / 60
    return total_minutes / (24 * 60) * 100


def is_all_day(start: datetime, end: datetime) -> bool:
    return end - start >= ALL_DAY_THRESHOLD


def event_vertical_position(
    start: datetime,
    end: datetime,
    tz: tzinfo = timezone.utc
) -> EventPosition:
    """
    Compute top offset and height of an event on the day timeline.

    Events lasting 23 hours or more are all-day events and get a fixed
    slot at the top. Timed events that cross midnight are cut at the end
    of the day. Heights never drop below MIN_EVENT_HEIGHT.

    Args:
        start: Event start instant
        end: Event end instant
        tz: Timezone of the displayed day

    Returns:
        EventPosition with top and height in percent of the day
    """
    if is_all_day(start, end):
        return EventPosition(top=0, height=ALL_DAY_HEIGHT, is_all_day=True)

    start_percentage = time_as_percentage(start, tz)
    end_percentage = time_as_percentage(end, tz)

    if end_percentage < start_percentage:
        end_percentage = 100

    height = max(end_percentage - start_percentage, MIN_EVENT_HEIGHT)
    return EventPosition(top=start_percentage, height=height, is_all_day=False)


def split_all_day(events: Iterable[Event]) -> Tuple[List[Event], List[Event]]:
    """
    Partition a day's events into all-day and timed events.

    Returns:
        Tuple of (all_day_events, timed_events)
    """
    all_day_events = []
    timed_events = []
    for event in events:
        if is_all_day(event.start_time, event.end_time):
            all_day_events.append(event)
        else:
            timed_events.append(event)
    return all_day_events, timed_events


def events_overlap(first: Event, second: Event) -> bool:
    return first.start_time < second.end_time and second.start_time < first.end_time


def layout_overlapping_events(events: Sequence[Event]) -> List[EventLayout]:
    """
    Assign horizontal columns to a single day's timed events.

    Events are taken in start order. Each one joins the first group that
    holds an event it overlaps, or opens a new group. Every event in a
    group gets its own column, so the group's column count equals its size.

    Args:
        events: Timed events for one day

    Returns:
        EventLayout for every input event, grouped by overlap group
    """
    if not events:
        return []

    sorted_events = sorted(events, key=lambda event: event.start_time)

    groups: List[List[Event]] = []
    for event in sorted_events:
        for group in groups:
            if any(events_overlap(event, member) for member in group):
                group.append(event)
                break
        else:
            groups.append([event])

    layouts = []
    for group in groups:
        total_columns = len(group)
        column_width = GRID_WIDTH // total_columns

        for index, event in enumerate(group):
            layouts.append(EventLayout(
                id=event.id,
                left=LEFT_MARGIN + index * column_width,
                width=max(column_width - COLUMN_GUTTER, 0),
                column=index,
                total_columns=total_columns
            ))

    logger.debug(f"Laid out {len(layouts)} events in {len(groups)} overlap groups")
    return layouts


def hourly_slots() -> List[TimeSlot]:
    """Hour markers for the day timeline."""
    return [
        TimeSlot(hour=hour, display=f"{hour:02d}:00", percentage=hour / 24 * 100)
        for hour in range(24)
    ]
