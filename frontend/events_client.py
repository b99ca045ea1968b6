"""Client for the /api/events endpoint used by the calendar front-end."""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import requests

from processor.event_processor import event_from_dict
from processor.models import Event

logger = logging.getLogger(__name__)


@dataclass
class EventsState:
    """What the calendar shows after a load."""
    events: List[Event] = field(default_factory=list)
    error: Optional[str] = None
    last_updated: Optional[int] = None
    cached: bool = False


class EventsApiClient:
    """Loads events from the proxy endpoint and rehydrates them."""

    DEFAULT_REGION = 'EMEA'

    def __init__(self, base_url: str, timeout: int = 30):
        """
        Initialize the API client.

        Args:
            base_url: Origin serving /api/events, e.g. "https://events.example"
            timeout: HTTP request timeout in seconds (default: 30)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def load(self, region: str = DEFAULT_REGION) -> EventsState:
        """
        Load events for a region.

        Failures never raise; they are reported through EventsState.error
        so the caller can show a retryable banner.

        Args:
            region: Region key

        Returns:
            EventsState with events, error message and cache metadata
        """
        params = {'region': region} if region != self.DEFAULT_REGION else None

        try:
            response = requests.get(
                f"{self.base_url}/api/events",
                params=params,
                timeout=self.timeout
            )
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Failed to load events for region {region}: {e}")
            return EventsState(error=str(e) or 'Network error')

        if not isinstance(data, dict) or not data.get('success'):
            error = data.get('error') if isinstance(data, dict) else None
            return EventsState(error=error or 'Failed to fetch events')

        try:
            events = [event_from_dict(item) for item in data.get('data') or []]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Malformed events payload for region {region}: {e}")
            return EventsState(error=str(e) or 'Network error')

        return EventsState(
            events=events,
            error=data.get('error'),
            last_updated=data.get('lastUpdated'),
            cached=bool(data.get('cached'))
        )
