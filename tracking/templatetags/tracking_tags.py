"""Template tags for the TikTok pixel."""
import hashlib
import time
import uuid

from django import template
from django.conf import settings
from django.utils.html import json_script

from tracking.conf import is_pixel_ready

register = template.Library()


def generate_event_id(event_name, extra=''):
    """Unique id shared by the browser and server copies of an event."""
    digest = hashlib.md5(f'{extra}{uuid.uuid4().hex}'.encode()).hexdigest()[:8]
    return f'{event_name.lower()}_{int(time.time())}_{digest}'


@register.inclusion_tag('tracking/pixel.html')
def tiktok_pixel():
    """Pixel base code, page lifecycle controller and conflict blocking."""
    ready = is_pixel_ready()
    return {
        'pixel_ready': ready,
        'pixel_id': getattr(settings, 'TIKTOK_PIXEL_ID', '') if ready else '',
    }


@register.inclusion_tag('tracking/track_event.html')
def tiktok_track(event_name, data=None):
    """Queue a browser-side ttq.track call until the pixel is ready."""
    event_id = generate_event_id(event_name)
    payload = dict(data or {})
    payload['ttp_tracked'] = True
    return {
        'pixel_ready': is_pixel_ready(),
        'event_name': event_name,
        'event_id': event_id,
        'payload_script': json_script(payload, f'ttp-{event_id}'),
    }
