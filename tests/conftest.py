"""Shared fixtures for the test suite."""
from datetime import datetime, timedelta, timezone

import pytest

from processor.models import Event, RawEvent, Route

NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def _iso(value: datetime) -> str:
    return value.strftime('%Y-%m-%dT%H:%M:%S.000000Z')


@pytest.fixture
def now():
    """Fixed reference instant."""
    return NOW


@pytest.fixture
def make_event():
    """Factory for canonical events."""
    def _make_event(event_id, start, end=None, title=None):
        return Event(
            id=event_id,
            title=title or f"Event {event_id}",
            short_description='Short',
            description='Long description',
            start_time=start,
            end_time=end or start + timedelta(hours=2),
            link=f"https://my.vatsim.net/events/{event_id}",
            banner=f"https://vatsim-my.nyc3.digitaloceanspaces.com/events/{event_id}.png",
            airports=['LDZA'],
            routes=[Route(departure='LDZA', arrival='LJLJ', route='DCT')],
            organisers=['Adria (EMEA)']
        )
    return _make_event


@pytest.fixture
def make_raw_event():
    """Factory for upstream raw events."""
    def _make_raw_event(event_id, start, end=None, name=None):
        return RawEvent(
            id=event_id,
            name=name or f"Event {event_id}",
            short_description='Short',
            description='Long description',
            start_time=_iso(start),
            end_time=_iso(end or start + timedelta(hours=2)),
            link=f"https://my.vatsim.net/events/{event_id}",
            banner=f"https://vatsim-my.nyc3.digitaloceanspaces.com/events/{event_id}.png",
            airports=[{'icao': 'LDZA'}],
            routes=[{'departure': 'LDZA', 'arrival': 'LJLJ', 'route': 'DCT'}],
            organisers=[
                {'region': 'EMEA', 'division': 'Adria', 'organised_by_vatsim': False}
            ],
            type='Event'
        )
    return _make_raw_event
