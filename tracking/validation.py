"""
Pre-send checks and generic cleanup for event data.
"""
import numbers
import re

from django.utils.html import strip_tags

VALID_EVENTS = (
    'ViewContent', 'AddToCart', 'AddToWishlist', 'InitiateCheckout',
    'AddPaymentInfo', 'Purchase', 'Lead', 'Contact', 'ClickButton',
    'Search', 'Download', 'CompleteRegistration', 'Subscribe',
    'StartTrial', 'PlaceAnOrder', 'CustomizeProduct', 'FindLocation',
    'Schedule', 'SubmitApplication', 'ApplicationApproval',
)

MAX_CONTENT_IDS = 100

_PERCENT_OCTET_RE = re.compile(r'%[a-fA-F0-9]{2}')
_WHITESPACE_RE = re.compile(r'[\r\n\t ]+')


def validate_event_data(event_name, properties):
    """
    Check an event before sending.

    Returns True when the event is acceptable, otherwise a human readable
    reason string.
    """
    properties = properties or {}

    if event_name not in VALID_EVENTS:
        return f'Invalid event name: {event_name}'

    if 'value' in properties and 'currency' not in properties:
        return 'Currency is required when value is present'

    if 'content_ids' in properties:
        content_ids = properties['content_ids']
        if not isinstance(content_ids, (list, tuple)):
            return 'content_ids must be a list'
        if len(content_ids) > MAX_CONTENT_IDS:
            return f'Too many content_ids (maximum {MAX_CONTENT_IDS})'

    return True


def sanitize_text_field(value):
    """Strip tags, percent-encoded octets and extra whitespace from a string."""
    value = strip_tags(str(value))
    value = _PERCENT_OCTET_RE.sub('', value)
    value = _WHITESPACE_RE.sub(' ', value)
    return value.strip()


def sanitize_event_data(data):
    """Drop empty values and clean strings in a flat key/value map."""
    sanitized = {}
    for key, value in (data or {}).items():
        if value is None or value == '':
            continue
        if isinstance(value, str):
            sanitized[key] = sanitize_text_field(value)
        elif isinstance(value, (numbers.Number, list, tuple, dict)):
            sanitized[key] = value
    return sanitized
