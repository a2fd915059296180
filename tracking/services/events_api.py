"""
TikTok Events API: server-side event tracking.
Formats storefront events into the Events API schema and posts them.
"""
import hashlib
import logging
import numbers
import re
import time

import requests
from django.core.exceptions import ImproperlyConfigured, ValidationError
from django.core.validators import validate_email
from django.conf import settings

from tracking.conf import TikTokConfig, is_enabled, site_url
from tracking.validation import validate_event_data

logger = logging.getLogger('tracking.services')

SEND_TIMEOUT = 3
TEST_TIMEOUT = 10
MIN_PHONE_DIGITS = 7

# Input property key -> Events API property key
PROPERTY_MAPPING = {
    'content_ids': 'content_id',
    'content_name': 'content_name',
    'content_category': 'content_category',
    'content_type': 'content_type',
    'value': 'value',
    'currency': 'currency',
    'search_string': 'search_string',
    'num_items': 'num_items',
}

_NON_DIGIT_RE = re.compile(r'[^0-9]')


def hash_value(value):
    """SHA256 hash for PII fields per TikTok requirements."""
    return hashlib.sha256(str(value).encode()).hexdigest()


def _json_number(value):
    """Decimal and other numeric types become float so the body serializes."""
    if isinstance(value, numbers.Number) and not isinstance(value, (bool, int, float)):
        try:
            return float(value)
        except (TypeError, ValueError):
            return value
    return value


def _is_email(value):
    if not isinstance(value, str):
        return False
    try:
        validate_email(value.strip())
    except ValidationError:
        return False
    return True


def format_user_data(user_data=None, context=None):
    """
    Hash and filter user identifiers.

    Args:
        user_data: dict with optional email, phone, external_id
        context: request context from capture_request_context()

    Returns:
        dict with email/phone/external_id hashes and the raw _ttp cookie.
        Invalid or missing identifiers are left out.
    """
    user_data = user_data if isinstance(user_data, dict) else {}
    context = context or {}
    formatted = {}

    email = user_data.get('email')
    if email and _is_email(email):
        formatted['email'] = hash_value(email.strip().lower())

    phone = user_data.get('phone')
    if phone:
        digits = _NON_DIGIT_RE.sub('', str(phone))
        if len(digits) >= MIN_PHONE_DIGITS:
            formatted['phone'] = hash_value(digits)

    # A logged-in user always wins over a caller-supplied id
    if context.get('user_id'):
        formatted['external_id'] = hash_value(context['user_id'])
    elif user_data.get('external_id'):
        formatted['external_id'] = hash_value(user_data['external_id'])

    if context.get('ttp'):
        formatted['ttp'] = context['ttp']

    return formatted


def format_properties(properties=None):
    """Map storefront property keys onto Events API property keys."""
    if not isinstance(properties, dict):
        return {}

    formatted = {}
    for source_key, tiktok_key in PROPERTY_MAPPING.items():
        if properties.get(source_key) is None:
            continue
        value = properties[source_key]
        if source_key == 'content_ids' and isinstance(value, (list, tuple)):
            formatted[tiktok_key] = ','.join(str(v) for v in value)
        else:
            formatted[tiktok_key] = _json_number(value)

    contents = properties.get('contents')
    if isinstance(contents, (list, tuple)):
        formatted['contents'] = []
        for content in contents:
            formatted_content = {}
            if isinstance(content, dict):
                content_id = content.get('id')
                if content_id is None:
                    content_id = content.get('content_id')
                if content_id is not None:
                    formatted_content['content_id'] = _json_number(content_id)
                # Name is only synthesized for line items carrying a quantity
                if 'quantity' in content:
                    formatted_content['content_name'] = f"Product {content_id if content_id is not None else ''}"
            formatted['contents'].append(formatted_content)

    return formatted


def capture_request_context(request):
    """Snapshot the parts of a request that events need, in JSON-safe form."""
    if request is None:
        return {}

    user = getattr(request, 'user', None)
    user_id = user.pk if user is not None and user.is_authenticated else None

    return {
        'page_url': request.build_absolute_uri(),
        'referrer': request.META.get('HTTP_REFERER', ''),
        'user_id': user_id,
        'ttp': request.COOKIES.get('_ttp', ''),
    }


def build_event(event_name, properties=None, user_data=None, context=None):
    context = context or {}
    return {
        'event': event_name,
        'event_time': int(time.time()),
        'user': format_user_data(user_data, context),
        'properties': format_properties(properties),
        'page': {
            'url': context.get('page_url') or site_url(),
            'referrer': context.get('referrer') or '',
        },
    }


def build_envelope(config, event):
    envelope = {
        'event_source': 'web',
        'event_source_id': config.pixel_id,
        'data': [event],
    }
    if config.test_event_code:
        envelope['test_event_code'] = config.test_event_code
    return envelope


def send_event(event_name, properties=None, user_data=None, context=None):
    """
    Send a server-side event to TikTok Events API.

    The response body is never read: only transport failures are observed.

    Args:
        event_name: TikTok event name (ViewContent, AddToCart, Purchase, etc.)
        properties: storefront properties (content_ids, value, currency, ...)
        user_data: dict with email, phone, external_id (hashed before sending)
        context: request context from capture_request_context()

    Returns:
        True if the request went out, False otherwise.
    """
    try:
        config = TikTokConfig.from_settings()
    except ImproperlyConfigured as e:
        logger.error("TikTok event '%s' not sent: %s", event_name, e)
        return False

    if not is_enabled():
        return False

    if getattr(settings, 'TIKTOK_VALIDATE_EVENTS', False):
        result = validate_event_data(event_name, properties)
        if result is not True:
            logger.warning("TikTok event '%s' rejected: %s", event_name, result)
            return False

    payload = build_envelope(config, build_event(event_name, properties, user_data, context))

    try:
        with requests.post(
            config.track_url,
            json=payload,
            headers=config.headers,
            timeout=SEND_TIMEOUT,
            verify=True,
            stream=True,
        ):
            pass
    except requests.RequestException as e:
        logger.warning("TikTok event '%s' failed: %s", event_name, e)
        return False
    except (TypeError, ValueError) as e:
        logger.warning("TikTok event '%s' could not be encoded: %s", event_name, e)
        return False

    logger.debug("TikTok event '%s' dispatched", event_name)
    return True


def test_connection():
    """
    Post a synthetic event and report whether the API accepted it.

    Returns:
        dict with success (bool) and message (str)
    """
    try:
        config = TikTokConfig.from_settings()
    except ImproperlyConfigured:
        return {'success': False, 'message': 'Incomplete configuration'}

    now = int(time.time())
    payload = build_envelope(config, {
        'event': 'ViewContent',
        'event_time': now,
        'user': {'external_id': hash_value(f'test_user_{now}')},
        'properties': {'content_type': 'product', 'currency': 'EUR'},
        'page': {'url': site_url(), 'referrer': ''},
    })

    try:
        resp = requests.post(
            config.track_url,
            json=payload,
            headers=config.headers,
            timeout=TEST_TIMEOUT,
            verify=True,
        )
    except requests.RequestException as e:
        logger.warning("TikTok connection test failed: %s", e)
        return {'success': False, 'message': f'Connection error: {e}'}

    try:
        data = resp.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        if data.get('code') in (0, '0'):
            return {'success': True, 'message': 'Connection successful! TikTok Events API is operational.'}
        if data.get('message'):
            return {'success': False, 'message': f"API error: {data['message']}"}

    return {'success': False, 'message': 'Invalid API response'}


def send_test_event():
    """Send a sample ViewContent event through the normal send path."""
    success = send_event(
        'ViewContent',
        {
            'content_type': 'product',
            'content_ids': ['test_product_123'],
            'value': 9.99,
            'currency': 'EUR',
        },
        {
            'email': 'test@example.com',
            'external_id': 'test_user_123',
        },
    )
    return {
        'success': success,
        'message': 'Test event sent successfully' if success else 'Failed to send test event',
    }
