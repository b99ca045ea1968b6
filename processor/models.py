"""Data models for event processing."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class Route:
    """Departure/arrival pair with the filed route string."""
    departure: str
    arrival: str
    route: str


@dataclass
class RawEvent:
    """Event record as returned by the VATSIM events API."""
    id: int
    name: str
    short_description: str
    description: str
    start_time: str
    end_time: str
    link: str
    banner: str
    airports: List[Dict[str, Any]] = field(default_factory=list)
    routes: List[Dict[str, Any]] = field(default_factory=list)
    organisers: List[Dict[str, Any]] = field(default_factory=list)
    type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RawEvent':
        """Build a RawEvent from an upstream JSON object."""
        return cls(
            id=data.get('id'),
            name=data.get('name') or '',
            short_description=data.get('short_description') or '',
            description=data.get('description') or '',
            start_time=data.get('start_time'),
            end_time=data.get('end_time'),
            link=data.get('link') or '',
            banner=data.get('banner') or '',
            airports=data.get('airports') or [],
            routes=data.get('routes') or [],
            organisers=data.get('organisers') or [],
            type=data.get('type')
        )


@dataclass
class Event:
    """Canonical event served by the API."""
    id: int
    title: str
    short_description: str
    description: str
    start_time: datetime
    end_time: datetime
    link: str
    banner: str
    airports: List[str] = field(default_factory=list)
    routes: List[Route] = field(default_factory=list)
    organisers: List[str] = field(default_factory=list)


@dataclass
class CacheEntry:
    """Cached events for a single region."""
    events: List[Event]
    retained_events: List[Event]
    last_updated: datetime
    expiry: datetime


@dataclass
class EventsResult:
    """Result of a cache lookup."""
    events: List[Event]
    cached: bool
    last_updated: datetime
    stale: bool = False
    error: Optional[str] = None


@dataclass
class EventPosition:
    """Vertical placement of an event on the day timeline, in percent."""
    top: float
    height: float
    is_all_day: bool


@dataclass
class EventLayout:
    """Horizontal placement of an event within its overlap group."""
    id: int
    left: int
    width: int
    column: int
    total_columns: int


@dataclass
class TimeSlot:
    """Hour marker on the day timeline."""
    hour: int
    display: str
    percentage: float
