"""
TikTok tracking configuration read from Django settings.
"""
from dataclasses import dataclass

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from tracking import __version__

API_BASE_URL = 'https://business-api.tiktok.com/open_api'
USER_AGENT = f'TikTokTrackingPro/{__version__} (Django)'


@dataclass(frozen=True)
class TikTokConfig:
    pixel_id: str
    access_token: str
    api_version: str
    test_event_code: str = ''

    @property
    def track_url(self):
        return f'{API_BASE_URL}/{self.api_version}/pixel/track/'

    @property
    def headers(self):
        return {
            'Content-Type': 'application/json',
            'Access-Token': self.access_token,
            'User-Agent': USER_AGENT,
        }

    @classmethod
    def from_settings(cls):
        """Build the config, raising ImproperlyConfigured if a required value is missing."""
        pixel_id = getattr(settings, 'TIKTOK_PIXEL_ID', '')
        access_token = getattr(settings, 'TIKTOK_ACCESS_TOKEN', '')
        api_version = getattr(settings, 'TIKTOK_API_VERSION', '')

        missing = [
            name for name, value in (
                ('TIKTOK_PIXEL_ID', pixel_id),
                ('TIKTOK_ACCESS_TOKEN', access_token),
                ('TIKTOK_API_VERSION', api_version),
            ) if not value
        ]
        if missing:
            raise ImproperlyConfigured(f"Missing TikTok settings: {', '.join(missing)}")

        return cls(
            pixel_id=str(pixel_id),
            access_token=str(access_token),
            api_version=str(api_version),
            test_event_code=getattr(settings, 'TIKTOK_TEST_EVENT_CODE', '') or '',
        )


def is_enabled():
    return bool(getattr(settings, 'TIKTOK_TRACKING_ENABLED', True))


def is_pixel_ready():
    """Pixel id and token are configured and tracking is switched on."""
    return bool(
        getattr(settings, 'TIKTOK_PIXEL_ID', '')
        and getattr(settings, 'TIKTOK_ACCESS_TOKEN', '')
        and is_enabled()
    )


def default_currency():
    return getattr(settings, 'TIKTOK_DEFAULT_CURRENCY', 'EUR') or 'EUR'


def site_url():
    return getattr(settings, 'SITE_URL', 'http://localhost:8000').rstrip('/') + '/'
