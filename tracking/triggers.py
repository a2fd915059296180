"""
Storefront event triggers.

Each helper turns shop objects into the property shape TikTok expects and
queues the event. Products and orders are duck-typed: attributes or dict
keys are both accepted. None of these helpers raise.
"""
import logging
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError

from .conf import default_currency, is_enabled
from .models import TrackedOrder
from .tasks import dispatch

logger = logging.getLogger('tracking')

CHECKOUT_EVENTS = ('InitiateCheckout', 'AddPaymentInfo')


def _get(obj, name, default=None):
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _money(value):
    """Coerce a price to float, treating junk as 0."""
    try:
        return float(Decimal(str(value))) if value not in (None, '') else 0.0
    except (InvalidOperation, ValueError, TypeError):
        return 0.0


def _category_name(product):
    category = _get(product, 'category')
    if category is None:
        return ''
    return str(_get(category, 'name', category))


def track_view_content(product, request=None):
    if product is None:
        return False
    product_id = _get(product, 'id')
    return dispatch('ViewContent', {
        'content_ids': [product_id],
        'content_name': _get(product, 'name', '') or '',
        'content_category': _category_name(product),
        'content_type': 'product',
        'value': _money(_get(product, 'price')),
        'currency': _get(product, 'currency') or default_currency(),
    }, request=request)


def track_add_to_cart(product_id, product_name='', price=0, request=None, currency=None):
    if not product_id:
        return False
    return dispatch('AddToCart', {
        'content_ids': [product_id],
        'content_name': product_name or '',
        'content_type': 'product',
        'value': _money(price),
        'currency': currency or default_currency(),
    }, request=request)


def track_search(query, request=None):
    query = (query or '').strip()
    if not query:
        return False
    return dispatch('Search', {'search_string': query}, request=request)


def track_initiate_checkout(cart_items, currency=None, request=None):
    """
    Args:
        cart_items: iterable of (product, quantity) pairs
    """
    content_ids = []
    contents = []
    value = 0.0

    for product, quantity in cart_items or ():
        if product is None:
            continue
        product_id = _get(product, 'id')
        content_ids.append(product_id)
        contents.append({
            'content_id': product_id,
            'content_type': 'product',
            'content_name': _get(product, 'name', '') or '',
        })
        value += _money(_get(product, 'price')) * int(quantity or 0)

    if not content_ids:
        return False

    return dispatch('InitiateCheckout', {
        'content_ids': content_ids,
        'contents': contents,
        'content_type': 'product',
        'value': round(value, 2),
        'currency': currency or default_currency(),
    }, request=request)


def track_checkout_step(event_type, checkout_data, request=None):
    """Server-side copy of a checkout event reported by the browser."""
    if event_type not in CHECKOUT_EVENTS or not isinstance(checkout_data, dict):
        return False
    contents = checkout_data.get('contents')
    if not contents:
        return False

    user_data = {}
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        user_data = {'email': user.email, 'external_id': user.pk}

    return dispatch(event_type, {
        'contents': contents,
        'content_type': 'product',
        'value': _money(checkout_data.get('value')),
        'currency': checkout_data.get('currency') or default_currency(),
    }, user_data, request=request)


def track_purchase(order, request=None):
    """Send Purchase once per order."""
    if order is None or not _get(order, 'id') or not is_enabled():
        return False

    order_id = _get(order, 'id')
    content_ids = []
    contents = []
    for item in _get(order, 'items', None) or ():
        product = _get(item, 'product')
        if product is None:
            continue
        product_id = _get(item, 'product_id') or _get(product, 'id')
        content_ids.append(product_id)
        contents.append({
            'content_id': product_id,
            'content_type': 'product',
            'content_name': _get(product, 'name', '') or '',
        })

    if not content_ids:
        return False

    total = _money(_get(order, 'total'))
    currency = _get(order, 'currency') or default_currency()

    try:
        _, created = TrackedOrder.objects.get_or_create(
            order_id=str(order_id),
            defaults={'value': Decimal(str(total)), 'currency': currency[:3]},
        )
    except IntegrityError:
        created = False
    if not created:
        logger.info(f"Purchase for order {order_id} already tracked, skipping")
        return False

    user_data = {
        'email': _get(order, 'billing_email'),
        'phone': _get(order, 'billing_phone'),
        'external_id': _get(order, 'user_id') or f'guest_{order_id}',
    }

    return dispatch('Purchase', {
        'content_ids': content_ids,
        'contents': contents,
        'content_type': 'product',
        'value': total,
        'currency': currency,
    }, user_data, request=request)
