"""
Tests for the daily counters.
"""
from datetime import date
from unittest.mock import patch

from django.core.cache import cache
from django.test import SimpleTestCase

from tracking.services import counters


class CounterTests(SimpleTestCase):
    """Tests for day-bucketed counters."""

    def setUp(self):
        cache.clear()

    def tearDown(self):
        cache.clear()

    @patch('tracking.services.counters.timezone.localdate')
    def test_same_day_shares_bucket(self, mock_today):
        mock_today.return_value = date(2024, 5, 1)

        counters.increment_event_counter()
        counters.increment_event_counter()

        self.assertEqual(cache.get('ttp_events_sent_2024-05-01'), 2)

    @patch('tracking.services.counters.timezone.localdate')
    def test_next_day_starts_fresh(self, mock_today):
        mock_today.return_value = date(2024, 5, 1)
        counters.increment_event_counter()
        counters.increment_event_counter()

        mock_today.return_value = date(2024, 5, 2)
        counters.increment_event_counter()

        self.assertEqual(cache.get('ttp_events_sent_2024-05-01'), 2)
        self.assertEqual(cache.get('ttp_events_sent_2024-05-02'), 1)

    @patch('tracking.services.counters.cache')
    def test_buckets_expire_after_a_day(self, mock_cache):
        mock_cache.incr.return_value = 1

        self.assertEqual(counters.increment_error_counter(), 1)

        key, value = mock_cache.add.call_args[0]
        self.assertTrue(key.startswith('ttp_api_errors_'))
        self.assertEqual(value, 0)
        self.assertEqual(mock_cache.add.call_args[1]['timeout'], 86400)
        mock_cache.incr.assert_called_once_with(key)

    @patch('tracking.services.counters.cache')
    def test_bucket_recreated_if_expired_mid_increment(self, mock_cache):
        mock_cache.incr.side_effect = ValueError('missing')

        self.assertEqual(counters.increment_event_counter(), 1)

        key = mock_cache.add.call_args[0][0]
        mock_cache.set.assert_any_call(key, 1, timeout=86400)

    @patch('tracking.services.counters.time.time', return_value=1700000000)
    def test_event_counter_stamps_last_event_time(self, mock_time):
        counters.increment_event_counter()
        self.assertEqual(cache.get('ttp_last_event_time'), 1700000000)

    def test_error_counter_leaves_last_event_time(self):
        counters.increment_error_counter()
        self.assertIsNone(cache.get('ttp_last_event_time'))

    def test_get_api_stats(self):
        self.assertEqual(counters.get_api_stats(), {
            'events_sent_today': 0,
            'last_event_time': 0,
            'api_errors_today': 0,
        })

        counters.increment_event_counter()
        counters.increment_error_counter()
        counters.increment_error_counter()

        stats = counters.get_api_stats()
        self.assertEqual(stats['events_sent_today'], 1)
        self.assertEqual(stats['api_errors_today'], 2)
        self.assertGreater(stats['last_event_time'], 0)
