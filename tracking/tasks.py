import logging

from celery import shared_task

from .conf import is_enabled, is_pixel_ready
from .services.counters import increment_error_counter, increment_event_counter
from .services.events_api import capture_request_context, send_event

logger = logging.getLogger('tracking.tasks')


@shared_task
def deliver_event(event_name, properties=None, user_data=None, context=None):
    """Send one event and record the outcome in the daily counters. Never retried."""
    if not is_enabled():
        return False
    sent = send_event(event_name, properties, user_data, context)
    if sent:
        increment_event_counter()
    else:
        increment_error_counter()
    return sent


def dispatch(event_name, properties=None, user_data=None, request=None):
    """Queue an event off the request path. Failures are logged, never raised."""
    if not is_pixel_ready():
        return False
    try:
        deliver_event.delay(event_name, properties or {}, user_data or {}, capture_request_context(request))
    except Exception:
        logger.warning("Failed to queue TikTok event '%s'", event_name, exc_info=True)
        return False
    return True
