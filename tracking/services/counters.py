"""
Daily operational counters kept in the Django cache.
"""
import logging
import time

from django.core.cache import cache
from django.utils import timezone

logger = logging.getLogger('tracking.services')

DAY_IN_SECONDS = 24 * 60 * 60

EVENTS_SENT_PREFIX = 'ttp_events_sent_'
API_ERRORS_PREFIX = 'ttp_api_errors_'
LAST_EVENT_TIME_KEY = 'ttp_last_event_time'


def _bucket_key(prefix, day=None):
    day = day or timezone.localdate()
    return f'{prefix}{day.isoformat()}'


def _increment(prefix):
    key = _bucket_key(prefix)
    cache.add(key, 0, timeout=DAY_IN_SECONDS)
    try:
        return cache.incr(key)
    except ValueError:
        # Bucket expired between add and incr
        cache.set(key, 1, timeout=DAY_IN_SECONDS)
        return 1


def increment_event_counter():
    count = _increment(EVENTS_SENT_PREFIX)
    cache.set(LAST_EVENT_TIME_KEY, int(time.time()), timeout=None)
    return count


def increment_error_counter():
    count = _increment(API_ERRORS_PREFIX)
    logger.debug("TikTok API errors today: %s", count)
    return count


def get_api_stats():
    return {
        'events_sent_today': cache.get(_bucket_key(EVENTS_SENT_PREFIX)) or 0,
        'last_event_time': cache.get(LAST_EVENT_TIME_KEY) or 0,
        'api_errors_today': cache.get(_bucket_key(API_ERRORS_PREFIX)) or 0,
    }
