"""Client for the VATSIM events API."""
import logging
from typing import List

import requests

from processor.models import RawEvent

logger = logging.getLogger(__name__)

VATSIM_REGIONS = {
    'all': 'https://my.vatsim.net/api/v2/events/latest',
    'EMEA': 'https://my.vatsim.net/api/v2/events/view/region/EMEA',
    'AMAS': 'https://my.vatsim.net/api/v2/events/view/region/AMAS',
    'APAC': 'https://my.vatsim.net/api/v2/events/view/region/APAC',
}

DEFAULT_REGION = 'EMEA'


def resolve_region(region) -> str:
    """Return the region if it is known, otherwise the default region."""
    if region in VATSIM_REGIONS:
        return region
    return DEFAULT_REGION


class EventFetchError(Exception):
    """Raised when events cannot be fetched from the VATSIM API."""


class VatsimEventsClient:
    """Fetches raw events from the VATSIM events API."""

    USER_AGENT = 'VATAdria Event Platform'

    def __init__(self, timeout: int = 30):
        """
        Initialize the events client.

        Args:
            timeout: HTTP request timeout in seconds (default: 30)
        """
        self.timeout = timeout

    def fetch_events(self, region: str = DEFAULT_REGION) -> List[RawEvent]:
        """
        Fetch raw events for a region.

        Args:
            region: Region key from VATSIM_REGIONS

        Returns:
            List of RawEvent objects

        Raises:
            EventFetchError: On network failure, non-2xx status or a
                malformed response body
        """
        url = VATSIM_REGIONS[resolve_region(region)]
        logger.info(f"Fetching VATSIM events for region {region} from {url}")

        try:
            response = requests.get(
                url,
                headers={'User-Agent': self.USER_AGENT},
                timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error fetching VATSIM events for region {region}: {e}")
            raise EventFetchError(
                f"Failed to fetch events from VATSIM API for region {region}"
            ) from e

        events = self._parse_events(payload, region)
        logger.info(f"Successfully fetched {len(events)} events for region {region}")
        return events

    def _parse_events(self, payload, region: str) -> List[RawEvent]:
        """
        Parse the response body into RawEvent objects.

        Args:
            payload: Decoded JSON body, expected to be {"data": [...]}
            region: Region the body was fetched for

        Returns:
            List of RawEvent objects

        Raises:
            EventFetchError: If the body does not have the expected shape
        """
        if not isinstance(payload, dict):
            raise EventFetchError(
                f"Malformed response from VATSIM API for region {region}"
            )

        records = payload.get('data') or []
        if not isinstance(records, list):
            raise EventFetchError(
                f"Malformed response from VATSIM API for region {region}"
            )

        events = []
        for record in records:
            if not isinstance(record, dict):
                raise EventFetchError(
                    f"Malformed event record from VATSIM API for region {region}"
                )
            events.append(RawEvent.from_dict(record))

        return events
