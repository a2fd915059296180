import logging

from django.conf import settings

from .conf import is_pixel_ready
from .triggers import track_search

logger = logging.getLogger('tracking')

SESSION_KEY = 'ttp_tracked_searches'
MAX_TRACKED_SEARCHES = 50
SKIP_PREFIXES = ('/admin/', '/tracking/', '/static/')


class SearchTrackingMiddleware:
    """
    Fire a Search event for storefront GETs carrying a search query
    (?s=... or ?q=...). Repeats of the same query in a session are ignored.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.method == 'GET' and not request.path.startswith(SKIP_PREFIXES) and is_pixel_ready():
            query = self._search_query(request)
            if query:
                self._track(request, query)
        return self.get_response(request)

    @staticmethod
    def _search_query(request):
        for param in getattr(settings, 'TIKTOK_SEARCH_PARAMS', ('s', 'q')):
            value = request.GET.get(param, '').strip()
            if value:
                return value
        return ''

    @staticmethod
    def _track(request, query):
        session = getattr(request, 'session', None)
        if session is not None:
            tracked = session.get(SESSION_KEY, [])
            if query in tracked:
                return
            # Oldest queries drop off once the cap is reached
            session[SESSION_KEY] = (tracked + [query])[-MAX_TRACKED_SEARCHES:]
        track_search(query, request=request)
