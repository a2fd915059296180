from .events_api import (
    send_event, send_test_event, test_connection, capture_request_context,
    format_user_data, format_properties,
)
from .counters import increment_event_counter, increment_error_counter, get_api_stats

__all__ = [
    'send_event', 'send_test_event', 'test_connection', 'capture_request_context',
    'format_user_data', 'format_properties',
    'increment_event_counter', 'increment_error_counter', 'get_api_stats',
]
