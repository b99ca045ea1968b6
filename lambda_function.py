"""AWS Lambda handler for the VATSIM events API."""
import json
import logging
import os
from typing import Any, Dict, Optional

from feed.vatsim_client import VatsimEventsClient, resolve_region
from processor.event_processor import event_to_dict
from storage.event_cache import EventCache, EventCacheManager, NoCachedDataError

NO_DATA_MESSAGE = 'Failed to fetch events and no cached data available'

# Reused across warm invocations of the same container
_cache_manager: Optional[EventCacheManager] = None


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def get_cache_manager() -> EventCacheManager:
    """Return the container-wide cache manager, creating it on first use."""
    global _cache_manager
    if _cache_manager is None:
        timeout_seconds = int(os.environ.get('TIMEOUT_SECONDS', '30'))
        _cache_manager = EventCacheManager(
            client=VatsimEventsClient(timeout=timeout_seconds),
            cache=EventCache()
        )
    return _cache_manager


def _response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    """Build an API Gateway proxy response with a JSON body."""
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body)
    }


def handle_events_request(
    region_param: Optional[str],
    manager: EventCacheManager
) -> Dict[str, Any]:
    """
    Serve GET /api/events for a region.

    Args:
        region_param: Raw region query parameter, may be None
        manager: Cache manager used to look up events

    Returns:
        API Gateway proxy response dict
    """
    logger = logging.getLogger(__name__)
    region = resolve_region(region_param)

    try:
        result = manager.get_events(region)
    except NoCachedDataError as e:
        logger.error(f"API error: {e}")
        return _response(500, {
            'success': False,
            'region': region,
            'error': NO_DATA_MESSAGE
        })
    except Exception as e:
        logger.error(
            f"Unexpected error serving events: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return _response(500, {
            'success': False,
            'region': region,
            'error': NO_DATA_MESSAGE
        })

    body = {
        'success': True,
        'data': [event_to_dict(event) for event in result.events],
        'cached': result.cached,
        'region': region,
        'lastUpdated': int(result.last_updated.timestamp() * 1000)
    }
    if result.stale:
        body['stale'] = True
    if result.error:
        body['error'] = result.error

    return _response(200, body)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler function for GET /api/events.

    Args:
        event: API Gateway proxy event
        context: Lambda context object

    Returns:
        API Gateway proxy response dict
    """
    log_level = os.environ.get('LOG_LEVEL', 'INFO')
    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    method = (event or {}).get('httpMethod') or 'GET'
    if method.upper() != 'GET':
        logger.warning(f"Rejected {method} request")
        return _response(405, {'success': False, 'error': 'Method not allowed'})

    params = (event or {}).get('queryStringParameters') or {}
    region_param = params.get('region')
    logger.info(
        "Events request received",
        extra={'region': region_param}
    )

    return handle_events_request(region_param, get_cache_manager())
