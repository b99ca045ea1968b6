"""Visible day ranges and navigation for the calendar views."""
from datetime import date, timedelta
from typing import List, Sequence

VIEW_DAY = 'day'
VIEW_THREE_DAY = '3day'
VIEW_WEEK = 'week'
VIEW_TYPES = (VIEW_WEEK, VIEW_THREE_DAY, VIEW_DAY)

NAVIGATION_STEP_DAYS = {
    VIEW_DAY: 1,
    VIEW_THREE_DAY: 3,
    VIEW_WEEK: 7,
}


def get_week_start(day: date) -> date:
    """Return the Monday of the week containing day."""
    return day - timedelta(days=day.weekday())


def get_week_days(day: date) -> List[date]:
    """Return Monday through Sunday of the week containing day."""
    week_start = get_week_start(day)
    return [week_start + timedelta(days=offset) for offset in range(7)]


def get_view_days(anchor: date, view: str) -> List[date]:
    """
    Compute the days shown by a calendar view.

    The 3-day view starts at the anchor but never later than the Friday
    of the anchor's week, so it stays within one Monday-based week.
    Unknown views fall back to the week view.

    Args:
        anchor: Day the view is anchored on
        view: One of 'day', '3day', 'week'

    Returns:
        Ordered list of days
    """
    if view == VIEW_DAY:
        return [anchor]

    if view == VIEW_THREE_DAY:
        week_start = get_week_start(anchor)
        start_index = min(anchor.weekday(), 4)
        return [week_start + timedelta(days=start_index + offset) for offset in range(3)]

    return get_week_days(anchor)


def navigate_view(anchor: date, direction: str, view: str) -> date:
    """
    Move the anchor one page forward or back.

    Args:
        anchor: Current anchor day
        direction: 'next' or 'prev'
        view: Current view type

    Returns:
        New anchor day
    """
    step = NAVIGATION_STEP_DAYS.get(view, NAVIGATION_STEP_DAYS[VIEW_WEEK])
    if direction == 'next':
        return anchor + timedelta(days=step)
    return anchor - timedelta(days=step)


def _short_label(day: date) -> str:
    return f"{day.strftime('%b')} {day.day}"


def format_view_range(days: Sequence[date], view: str) -> str:
    """Header label for the visible range, e.g. 'Jan 15 - Jan 21, 2024'."""
    if not days:
        return ''

    start = days[0]
    end = days[-1]

    if view == VIEW_DAY:
        return f"{start.strftime('%A, %B')} {start.day}, {start.year}"
    if view == VIEW_THREE_DAY:
        return f"{_short_label(start)} - {_short_label(end)}"
    return f"{_short_label(start)} - {_short_label(end)}, {end.year}"
