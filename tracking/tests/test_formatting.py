"""
Tests for user data hashing and property mapping.
"""
import hashlib

from django.test import SimpleTestCase

from tracking.services.events_api import (
    PROPERTY_MAPPING, format_properties, format_user_data, hash_value,
)


def sha256(value):
    return hashlib.sha256(value.encode()).hexdigest()


class FormatUserDataTests(SimpleTestCase):
    """Tests for format_user_data."""

    def test_email_is_normalized_and_hashed(self):
        """Should hash the trimmed, lower-cased email."""
        result = format_user_data({'email': '  Buyer@Example.COM '})
        self.assertEqual(result['email'], sha256('buyer@example.com'))

    def test_invalid_emails_are_omitted(self):
        """Should never include malformed emails, hashed or not."""
        for email in ['not-an-email', 'a@', '@b.com', 'foo bar@baz.com', 12345]:
            result = format_user_data({'email': email})
            self.assertNotIn('email', result, email)

    def test_short_phone_is_dropped(self):
        """Should drop phones with fewer than 7 digits."""
        result = format_user_data({'phone': '(12) 34-56'})
        self.assertNotIn('phone', result)

    def test_phone_is_digit_stripped_and_hashed(self):
        """Should hash only the digits of the phone number."""
        result = format_user_data({'phone': '+39 333-123 4567'})
        self.assertEqual(result['phone'], sha256('393331234567'))

    def test_seven_digit_phone_is_kept(self):
        result = format_user_data({'phone': '555-1234'})
        self.assertEqual(result['phone'], sha256('5551234'))

    def test_external_id_from_caller(self):
        """Should hash the caller-supplied external id."""
        result = format_user_data({'external_id': 42})
        self.assertEqual(result['external_id'], sha256('42'))

    def test_logged_in_user_wins_over_external_id(self):
        """Should prefer the session user id over the supplied one."""
        result = format_user_data({'external_id': 'guest_9'}, {'user_id': 7})
        self.assertEqual(result['external_id'], sha256('7'))

    def test_ttp_cookie_passed_through(self):
        """Should forward the _ttp cookie without hashing it."""
        result = format_user_data({}, {'ttp': 'abc.123'})
        self.assertEqual(result['ttp'], 'abc.123')

    def test_empty_input(self):
        self.assertEqual(format_user_data(None), {})
        self.assertEqual(format_user_data('junk'), {})

    def test_hash_value_stringifies(self):
        self.assertEqual(hash_value(5), sha256('5'))


class FormatPropertiesTests(SimpleTestCase):
    """Tests for format_properties."""

    def test_content_ids_are_joined(self):
        """Should serialize a content_ids list as a comma-joined string."""
        result = format_properties({'content_ids': ['A', 'B', 'C']})
        self.assertEqual(result, {'content_id': 'A,B,C'})

    def test_numeric_content_ids_are_joined(self):
        result = format_properties({'content_ids': [1, 2]})
        self.assertEqual(result['content_id'], '1,2')

    def test_scalar_content_ids_pass_through(self):
        result = format_properties({'content_ids': 'SKU-1'})
        self.assertEqual(result['content_id'], 'SKU-1')

    def test_absent_keys_are_omitted(self):
        """Should not add defaults for missing properties."""
        result = format_properties({'value': 10, 'currency': 'EUR'})
        self.assertEqual(result, {'value': 10, 'currency': 'EUR'})

    def test_unknown_keys_are_dropped(self):
        """Should only emit mapped keys plus contents."""
        result = format_properties({
            'content_ids': ['1'],
            'content_name': 'Mug',
            'content_category': 'Kitchen',
            'content_type': 'product',
            'value': 9.5,
            'currency': 'EUR',
            'search_string': 'mug',
            'num_items': 2,
            'contents': [{'id': '1'}],
            'hash': 'abc',
            'ttp_tracked': True,
        })
        allowed = set(PROPERTY_MAPPING.values()) | {'contents'}
        self.assertTrue(set(result) <= allowed)
        self.assertNotIn('hash', result)
        self.assertNotIn('ttp_tracked', result)

    def test_contents_keep_only_id(self):
        result = format_properties({'contents': [{'id': 5, 'price': 3}]})
        self.assertEqual(result['contents'], [{'content_id': 5}])

    def test_contents_name_synthesized_only_with_quantity(self):
        """Should synthesize 'Product <id>' only when quantity is present."""
        result = format_properties({'contents': [
            {'id': 5, 'quantity': 2},
            {'content_id': 6, 'content_name': 'Real name'},
        ]})
        self.assertEqual(result['contents'][0], {'content_id': 5, 'content_name': 'Product 5'})
        self.assertEqual(result['contents'][1], {'content_id': 6})

    def test_malformed_contents_degrade(self):
        """Should keep going on junk elements rather than fail."""
        result = format_properties({'contents': ['oops', None, {'id': 1}]})
        self.assertEqual(result['contents'], [{}, {}, {'content_id': 1}])

    def test_non_dict_input(self):
        self.assertEqual(format_properties(None), {})
        self.assertEqual(format_properties(['a']), {})

    def test_mapping_has_eight_entries(self):
        self.assertEqual(len(PROPERTY_MAPPING), 8)
