"""Event processor for converting upstream VATSIM events to canonical form."""
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from processor.models import Event, RawEvent, Route

logger = logging.getLogger(__name__)

# Seconds fraction of any length, before an optional UTC offset
FRACTION_PATTERN = re.compile(r'(T?\d{2}:\d{2}:\d{2})\.(\d+)')


class EventProcessingError(ValueError):
    """Raised when a raw event cannot be converted in strict mode."""


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp into an aware UTC datetime.

    Args:
        value: Timestamp such as "2024-01-15T18:00:00.000000Z"

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        ValueError: If the value is empty or not ISO 8601
    """
    if not value or not value.strip():
        raise ValueError("empty timestamp")

    text = value.strip()
    if text.endswith('Z') or text.endswith('z'):
        text = text[:-1] + '+00:00'

    # fromisoformat before 3.11 only accepts 3 or 6 fraction digits
    text = FRACTION_PATTERN.sub(
        lambda match: f"{match.group(1)}.{match.group(2)[:6].ljust(6, '0')}",
        text,
        count=1
    )

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Format an instant as ISO 8601 UTC with millisecond precision."""
    utc_value = value.astimezone(timezone.utc)
    return (
        utc_value.strftime('%Y-%m-%dT%H:%M:%S')
        + f".{utc_value.microsecond // 1000:03d}Z"
    )


def event_to_dict(event: Event) -> Dict[str, Any]:
    """
    Convert an Event to its JSON wire form.

    Args:
        event: Canonical Event

    Returns:
        Dictionary with the public camelCase keys
    """
    return {
        'id': event.id,
        'title': event.title,
        'description': event.description,
        'shortDescription': event.short_description,
        'startTime': format_timestamp(event.start_time),
        'endTime': format_timestamp(event.end_time),
        'link': event.link,
        'banner': event.banner,
        'airports': list(event.airports),
        'routes': [
            {
                'departure': route.departure,
                'arrival': route.arrival,
                'route': route.route
            }
            for route in event.routes
        ],
        'organisers': list(event.organisers)
    }


def event_from_dict(data: Dict[str, Any]) -> Event:
    """
    Rebuild an Event from its JSON wire form.

    Raises:
        KeyError: If a required key is missing
        ValueError: If a timestamp cannot be parsed
    """
    return Event(
        id=data['id'],
        title=data.get('title', ''),
        short_description=data.get('shortDescription', ''),
        description=data.get('description', ''),
        start_time=parse_timestamp(data['startTime']),
        end_time=parse_timestamp(data['endTime']),
        link=data.get('link', ''),
        banner=data.get('banner', ''),
        airports=list(data.get('airports') or []),
        routes=[
            Route(
                departure=route.get('departure', ''),
                arrival=route.get('arrival', ''),
                route=route.get('route', '')
            )
            for route in data.get('routes') or []
        ],
        organisers=list(data.get('organisers') or [])
    )


class EventProcessor:
    """Processor for converting raw VATSIM events to canonical events."""

    def process_events(
        self,
        raw_events: List[RawEvent],
        strict: bool = False
    ) -> List[Event]:
        """
        Convert raw upstream events to canonical events.

        Records that cannot be converted are logged and skipped, unless
        strict is set, in which case the first one aborts the batch.

        Args:
            raw_events: List of RawEvent objects from the feed client
            strict: Raise instead of skipping unconvertible records

        Returns:
            List of Event objects

        Raises:
            EventProcessingError: In strict mode, if any record is invalid
        """
        processed_events = []

        for raw_event in raw_events:
            try:
                event = self._process_single_event(raw_event)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                if strict:
                    raise EventProcessingError(
                        f"Failed to process event '{raw_event.name}': {e}"
                    ) from e
                logger.warning(
                    f"Failed to process event '{raw_event.name}': {e}"
                )
                continue

            if event:
                processed_events.append(event)
            elif strict:
                raise EventProcessingError(
                    f"Event '{raw_event.name}' missing required field: id"
                )

        logger.info(
            f"Processed {len(processed_events)} valid events out of "
            f"{len(raw_events)} total events"
        )
        return processed_events

    def _process_single_event(self, raw_event: RawEvent) -> Optional[Event]:
        """
        Process a single event.

        Args:
            raw_event: Raw upstream event

        Returns:
            Event object or None if the record has no identifier
        """
        if raw_event.id is None:
            logger.warning(f"Event '{raw_event.name}' missing required field: id")
            return None

        return Event(
            id=raw_event.id,
            title=raw_event.name,
            short_description=raw_event.short_description,
            description=raw_event.description,
            start_time=parse_timestamp(raw_event.start_time),
            end_time=parse_timestamp(raw_event.end_time),
            link=raw_event.link,
            banner=raw_event.banner,
            airports=[airport['icao'] for airport in raw_event.airports],
            routes=[
                Route(
                    departure=route.get('departure', ''),
                    arrival=route.get('arrival', ''),
                    route=route.get('route', '')
                )
                for route in raw_event.routes
            ],
            organisers=[
                self.format_organiser(organiser)
                for organiser in raw_event.organisers
            ]
        )

    def format_organiser(self, organiser: Dict[str, Any]) -> str:
        """
        Format an organiser record for display.

        Args:
            organiser: Dict with 'division' and 'region' keys

        Returns:
            String such as "Adria (EMEA)"
        """
        return f"{organiser.get('division', '')} ({organiser.get('region', '')})"
