import json
import logging

from django.contrib.admin.views.decorators import staff_member_required
from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from . import triggers
from .services import events_api
from .services.counters import get_api_stats
from .validation import sanitize_text_field

logger = logging.getLogger('tracking')


@require_POST
def track_add_to_cart(request):
    """
    Server-side AddToCart reported by the storefront script.
    POST /tracking/add-to-cart/  product_id, product_price, product_name
    """
    try:
        product_id = int(request.POST.get('product_id') or 0)
    except (TypeError, ValueError):
        product_id = 0
    try:
        product_price = float(request.POST.get('product_price') or 0)
    except (TypeError, ValueError):
        product_price = 0.0
    product_name = sanitize_text_field(request.POST.get('product_name', ''))

    if product_id:
        triggers.track_add_to_cart(product_id, product_name, product_price, request=request)

    return HttpResponse('OK')


@require_POST
def track_search(request):
    """POST /tracking/search/  search_query"""
    search_query = sanitize_text_field(request.POST.get('search_query', ''))
    if search_query:
        triggers.track_search(search_query, request=request)
    return HttpResponse('OK')


@require_POST
def track_checkout(request):
    """
    Server-side copy of InitiateCheckout / AddPaymentInfo.
    POST /tracking/checkout/

    Expected payload:
    {
        "event_type": "InitiateCheckout",
        "checkout_data": {"contents": [...], "value": 12.5, "currency": "EUR"}
    }
    """
    try:
        data = json.loads(request.body or b'{}')
    except ValueError:
        return JsonResponse({'error': 'Invalid JSON'}, status=400)
    if not isinstance(data, dict):
        return JsonResponse({'error': 'Invalid payload'}, status=400)

    event_type = sanitize_text_field(data.get('event_type', ''))
    triggers.track_checkout_step(event_type, data.get('checkout_data') or {}, request=request)
    return HttpResponse('OK')


@staff_member_required
@require_GET
def connection_test(request):
    result = events_api.test_connection()
    logger.info(f"TikTok connection test by {request.user}: {result['message']}")
    return JsonResponse(result)


@staff_member_required
@require_POST
def test_event(request):
    return JsonResponse(events_api.send_test_event())


@staff_member_required
@require_GET
def api_stats(request):
    return JsonResponse(get_api_stats())
