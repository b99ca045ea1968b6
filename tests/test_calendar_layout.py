"""Unit tests for calendar layout calculations."""
from datetime import date, datetime, timedelta, timezone

import pytest

from layout.calendar_layout import (
    event_vertical_position,
    events_for_day,
    hourly_slots,
    is_event_on_day,
    layout_overlapping_events,
    split_all_day,
    time_as_percentage,
)

DAY = date(2024, 1, 15)


def at(hour, minute=0, second=0, day=DAY):
    return datetime(day.year, day.month, day.day, hour, minute, second, tzinfo=timezone.utc)


class TestIsEventOnDay:
    """Test cases for day membership."""

    def test_event_within_day(self, make_event):
        event = make_event(1, at(10), at(12))
        assert is_event_on_day(event, DAY)
        assert not is_event_on_day(event, DAY + timedelta(days=1))
        assert not is_event_on_day(event, DAY - timedelta(days=1))

    def test_multi_day_event(self, make_event):
        """Events spanning several days appear on each of them."""
        event = make_event(1, at(20), at(6, day=DAY + timedelta(days=2)))

        days = [DAY + timedelta(days=offset) for offset in range(-1, 4)]
        assert [is_event_on_day(event, day) for day in days] == [
            False, True, True, True, False
        ]

    def test_ending_at_midnight_touches_next_day(self, make_event):
        event = make_event(1, at(22), at(0, day=DAY + timedelta(days=1)))
        assert is_event_on_day(event, DAY + timedelta(days=1))

    def test_respects_timezone(self, make_event):
        """Day boundaries follow the requested timezone."""
        cest = timezone(timedelta(hours=2))
        event = make_event(1, at(23), at(23, 30))

        assert is_event_on_day(event, DAY + timedelta(days=1), tz=cest)
        assert not is_event_on_day(event, DAY, tz=cest)

    def test_events_for_day(self, make_event):
        today = make_event(1, at(9), at(10))
        tomorrow = make_event(2, at(9, day=DAY + timedelta(days=1)))

        assert events_for_day([today, tomorrow], DAY) == [today]


class TestTimeAsPercentage:
    """Test cases for time_as_percentage."""

    @pytest.mark.parametrize("hour,minute,second,expected", [
        (0, 0, 0, 0.0),
        (6, 0, 0, 25.0),
        (12, 0, 0, 50.0),
        (18, 0, 0, 75.0),
    ])
    def test_whole_hours(self, hour, minute, second, expected):
        assert time_as_percentage(at(hour, minute, second)) == pytest.approx(expected)

    def test_sub_minute_precision(self):
        assert time_as_percentage(at(12, 0, 30)) == pytest.approx(720.5 / 1440 * 100)

    def test_below_one_hundred(self):
        assert time_as_percentage(at(23, 59, 59)) < 100

    def test_timezone_conversion(self):
        cest = timezone(timedelta(hours=2))
        assert time_as_percentage(at(10), tz=cest) == pytest.approx(50.0)


class TestEventVerticalPosition:
    """Test cases for event_vertical_position."""

    @pytest.mark.parametrize("duration", [
        timedelta(hours=23),
        timedelta(hours=24),
        timedelta(days=3, hours=5),
    ])
    def test_all_day_events(self, duration):
        """Long events get the fixed all-day slot."""
        position = event_vertical_position(at(7, 13), at(7, 13) + duration)

        assert position.top == 0
        assert position.height == 8
        assert position.is_all_day is True

    def test_timed_event(self):
        position = event_vertical_position(at(6), at(12))

        assert position.top == pytest.approx(25.0)
        assert position.height == pytest.approx(25.0)
        assert position.is_all_day is False

    @pytest.mark.parametrize("start_hour,end_hour", [(22, 2), (18, 1), (23, 0)])
    def test_crossing_midnight(self, start_hour, end_hour):
        """Events ending after midnight are cut at the end of the day."""
        start = at(start_hour)
        end = at(end_hour, day=DAY + timedelta(days=1))

        position = event_vertical_position(start, end)

        assert position.height == pytest.approx(100 - position.top)

    def test_minimum_height(self):
        """Very short events keep a clickable height."""
        position = event_vertical_position(at(10), at(10, 5))

        assert position.height == 2

    def test_just_under_all_day(self):
        position = event_vertical_position(at(0, 30), at(23, 29))

        assert position.is_all_day is False
        assert position.top == pytest.approx(time_as_percentage(at(0, 30)))


class TestSplitAllDay:
    """Test cases for split_all_day."""

    def test_partition(self, make_event):
        long_event = make_event(1, at(0), at(0) + timedelta(hours=30))
        short_event = make_event(2, at(10), at(11))

        all_day, timed = split_all_day([long_event, short_event])

        assert all_day == [long_event]
        assert timed == [short_event]


class TestLayoutOverlappingEvents:
    """Test cases for layout_overlapping_events."""

    def test_empty(self):
        assert layout_overlapping_events([]) == []

    def test_single_event(self, make_event):
        layout = layout_overlapping_events([make_event(1, at(10), at(11))])

        assert len(layout) == 1
        assert layout[0].id == 1
        assert layout[0].left == 2
        assert layout[0].width == 95
        assert layout[0].column == 0
        assert layout[0].total_columns == 1

    def test_two_overlapping_events(self, make_event):
        first = make_event(1, at(10), at(12))
        second = make_event(2, at(11), at(13))

        layout = {item.id: item for item in layout_overlapping_events([second, first])}

        assert layout[1].column == 0
        assert layout[2].column == 1
        assert layout[1].left == 2
        assert layout[2].left == 50
        assert layout[1].width == layout[2].width == 47
        assert layout[1].total_columns == layout[2].total_columns == 2

    def test_touching_events_do_not_overlap(self, make_event):
        first = make_event(1, at(10), at(11))
        second = make_event(2, at(11), at(12))

        layout = layout_overlapping_events([first, second])

        assert all(item.total_columns == 1 for item in layout)
        assert all(item.column == 0 for item in layout)

    def test_chained_overlaps_share_group(self, make_event):
        """A and C do not overlap but both overlap B, so each gets a column."""
        a = make_event(1, at(10), at(12))
        b = make_event(2, at(11), at(13))
        c = make_event(3, at(12, 30), at(14))

        layout = {item.id: item for item in layout_overlapping_events([c, a, b])}

        assert [layout[i].column for i in (1, 2, 3)] == [0, 1, 2]
        assert all(layout[i].total_columns == 3 for i in (1, 2, 3))
        assert [layout[i].left for i in (1, 2, 3)] == [2, 34, 66]
        assert layout[1].width == 31

    def test_columns_unique_within_group(self, make_event):
        """No two events in one group share a column; totals match group size."""
        events = [
            make_event(1, at(8), at(9)),
            make_event(2, at(8, 30), at(10)),
            make_event(3, at(9, 15), at(9, 45)),
            make_event(4, at(13), at(14)),
            make_event(5, at(13, 30), at(15)),
            make_event(6, at(18), at(19)),
        ]

        layout = layout_overlapping_events(events)

        assert sorted(item.id for item in layout) == [1, 2, 3, 4, 5, 6]
        by_id = {item.id: item for item in layout}
        assert {by_id[i].column for i in (1, 2, 3)} == {0, 1, 2}
        assert all(by_id[i].total_columns == 3 for i in (1, 2, 3))
        assert {by_id[i].column for i in (4, 5)} == {0, 1}
        assert all(by_id[i].total_columns == 2 for i in (4, 5))
        assert by_id[6].column == 0
        assert by_id[6].total_columns == 1

    def test_very_large_group_has_no_negative_width(self, make_event):
        """Groups wider than the grid collapse to zero width, never negative."""
        events = [make_event(i, at(10), at(12)) for i in range(100)]

        layout = layout_overlapping_events(events)

        assert len(layout) == 100
        assert all(item.total_columns == 100 for item in layout)
        assert all(item.width == 0 for item in layout)
        assert sorted(item.column for item in layout) == list(range(100))


class TestHourlySlots:
    """Test cases for hourly_slots."""

    def test_slots(self):
        slots = hourly_slots()

        assert len(slots) == 24
        assert slots[0].display == '00:00'
        assert slots[13].display == '13:00'
        assert slots[6].percentage == pytest.approx(25.0)
