from django.conf import settings

from .conf import is_pixel_ready


def tiktok_pixel(request):
    """Provide pixel id and readiness for templates."""
    ready = is_pixel_ready()
    return {
        'tiktok_pixel_id': getattr(settings, 'TIKTOK_PIXEL_ID', '') if ready else '',
        'tiktok_pixel_ready': ready,
    }
