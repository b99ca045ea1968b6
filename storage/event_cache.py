"""In-memory event cache with TTL refresh and retention-window merging."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Optional

from feed.vatsim_client import EventFetchError, VatsimEventsClient, resolve_region
from processor.event_processor import EventProcessingError, EventProcessor
from processor.models import CacheEntry, Event, EventsResult

logger = logging.getLogger(__name__)

STALE_CACHE_MESSAGE = 'API unavailable, serving cached data'


class NoCachedDataError(Exception):
    """Raised when fetching fails and nothing is cached for the region."""

    def __init__(self, region: str):
        super().__init__(
            f"Failed to fetch events and no cached data available for region {region}"
        )
        self.region = region


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def merge_and_filter(
    retained: Iterable[Event],
    fetched: Iterable[Event],
    now: datetime,
    retention: timedelta = timedelta(hours=24)
) -> List[Event]:
    """
    Merge fetched events into previously retained ones.

    Fetched events replace retained events with the same id. The result
    keeps upcoming events, ongoing events and events that ended within
    the retention window, sorted by start time.

    Args:
        retained: Events kept from earlier fetches
        fetched: Events from the latest fetch
        now: Current instant
        retention: How long ended events stay visible

    Returns:
        Merged and filtered list of events
    """
    merged: Dict[int, Event] = {event.id: event for event in retained}
    for event in fetched:
        merged[event.id] = event

    cutoff = now - retention
    kept = [
        event for event in merged.values()
        if event.start_time > now
        or event.start_time <= now < event.end_time
        or event.end_time >= cutoff
    ]

    kept.sort(key=lambda event: event.start_time)
    return kept


class EventCache:
    """Process-wide store of cache entries keyed by region."""

    def __init__(self):
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, region: str) -> Optional[CacheEntry]:
        return self._entries.get(region)

    def put(self, region: str, entry: CacheEntry) -> None:
        self._entries[region] = entry

    def clear(self) -> None:
        self._entries.clear()

    def regions(self) -> List[str]:
        return list(self._entries)


class EventCacheManager:
    """Serves events per region from cache, refreshing from the feed."""

    CACHE_TTL = timedelta(minutes=30)
    RETENTION_WINDOW = timedelta(hours=24)

    def __init__(
        self,
        client: VatsimEventsClient,
        cache: EventCache,
        processor: Optional[EventProcessor] = None,
        now: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the cache manager.

        Args:
            client: Feed client used to fetch raw events
            cache: Cache the manager reads and writes
            processor: Converts raw events to canonical events
            now: Clock returning an aware datetime (default: UTC now)
        """
        self.client = client
        self.cache = cache
        self.processor = processor or EventProcessor()
        self.now = now or utc_now

    def get_events(self, region: str) -> EventsResult:
        """
        Return events for a region, fetching when the cache has expired.

        Args:
            region: Region key; unknown values use the default region

        Returns:
            EventsResult with the visible events and cache flags

        Raises:
            NoCachedDataError: If the fetch fails and nothing is cached
        """
        region = resolve_region(region)
        now = self.now()
        entry = self.cache.get(region)

        if entry is not None and now < entry.expiry:
            logger.info(f"Serving {len(entry.events)} cached events for region {region}")
            return EventsResult(
                events=entry.events,
                cached=True,
                last_updated=entry.last_updated
            )

        logger.info(f"Cache miss for region {region}, fetching fresh events")

        try:
            raw_events = self.client.fetch_events(region)
            fetched = self.processor.process_events(raw_events, strict=True)
        except (EventFetchError, EventProcessingError) as e:
            if entry is None:
                logger.error(f"Fetch failed for region {region} with no cached data: {e}")
                raise NoCachedDataError(region) from e

            logger.warning(
                f"Fetch failed for region {region}, serving "
                f"{len(entry.events)} stale cached events: {e}"
            )
            return EventsResult(
                events=entry.events,
                cached=True,
                stale=True,
                last_updated=entry.last_updated,
                error=STALE_CACHE_MESSAGE
            )

        retained = entry.retained_events if entry is not None else []
        merged = merge_and_filter(retained, fetched, now, self.RETENTION_WINDOW)

        self.cache.put(region, CacheEntry(
            events=merged,
            retained_events=merged,
            last_updated=now,
            expiry=now + self.CACHE_TTL
        ))

        logger.info(
            f"Cached {len(merged)} events for region {region} "
            f"({len(fetched)} fetched, {len(retained)} previously retained)"
        )
        return EventsResult(events=merged, cached=False, last_updated=now)
