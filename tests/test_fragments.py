"""Tests for :mod:`travel_accounts.fragments`."""

from unittest import TestCase

from travel_accounts.domain import RecoveryType
from travel_accounts.fragments import Location, parse_fragment


class TestParseFragment(TestCase):
    """Recovery links carry their tokens in the URL fragment."""

    def test_recovery_link(self):
        """A full recovery fragment yields both tokens and the type."""
        request = parse_fragment(
            '#access_token=abc&refresh_token=def&type=recovery'
        )
        self.assertEqual(request.access_token, 'abc')
        self.assertEqual(request.refresh_token, 'def')
        self.assertEqual(request.type, RecoveryType.RECOVERY)
        self.assertTrue(request.is_recovery)

    def test_leading_hash_is_optional(self):
        """The fragment parses the same with or without ``#``."""
        self.assertEqual(parse_fragment('access_token=abc&type=recovery'),
                         parse_fragment('#access_token=abc&type=recovery'))

    def test_missing_refresh_token(self):
        """A missing or blank refresh token is None."""
        self.assertIsNone(
            parse_fragment('#access_token=abc&type=recovery').refresh_token
        )
        self.assertIsNone(
            parse_fragment('#access_token=abc&refresh_token=&type=recovery')
            .refresh_token
        )

    def test_unknown_type(self):
        """Any type but ``recovery`` is ``other``."""
        for fragment in ('#access_token=abc&type=signup',
                         '#access_token=abc&type=magiclink',
                         '#access_token=abc'):
            request = parse_fragment(fragment)
            self.assertEqual(request.type, RecoveryType.OTHER, fragment)
            self.assertFalse(request.is_recovery)

    def test_no_access_token(self):
        """Without an access token there is nothing to recover."""
        self.assertIsNone(parse_fragment(''))
        self.assertIsNone(parse_fragment('#'))
        self.assertIsNone(parse_fragment('#type=recovery&refresh_token=x'))
        self.assertIsNone(parse_fragment('#access_token=&type=recovery'))

    def test_percent_encoding(self):
        """Values are percent-decoded like a query string."""
        request = parse_fragment('#access_token=a%2Bb%3D&type=recovery')
        self.assertEqual(request.access_token, 'a+b=')

    def test_first_value_wins(self):
        request = parse_fragment(
            '#access_token=first&access_token=second&type=recovery'
        )
        self.assertEqual(request.access_token, 'first')


class TestLocation(TestCase):
    """The client's location can be rewritten in place."""

    def test_from_url(self):
        location = Location.from_url(
            'https://travel.example/settings?tab=1#access_token=abc'
        )
        self.assertEqual(location.scheme, 'https')
        self.assertEqual(location.netloc, 'travel.example')
        self.assertEqual(location.pathname, '/settings')
        self.assertEqual(location.query, 'tab=1')
        self.assertEqual(location.fragment, 'access_token=abc')
        self.assertEqual(location.href,
                         'https://travel.example/settings?tab=1'
                         '#access_token=abc')

    def test_empty_path(self):
        """A URL without a path is at ``/``."""
        location = Location.from_url('https://travel.example#x=1')
        self.assertEqual(location.pathname, '/')

    def test_replace_state_with_path(self):
        """Replacing with a bare path keeps the origin and drops the rest."""
        location = Location.from_url(
            'https://travel.example/reset?x=1#access_token=abc'
        )
        location.replace_state(location.pathname)
        self.assertEqual(location.href, 'https://travel.example/reset')
        self.assertEqual(location.fragment, '')
        self.assertEqual(location.replaced, ['https://travel.example/reset'])

    def test_replace_state_with_url(self):
        location = Location.from_url('https://travel.example/a')
        location.replace_state('http://other.example/b#c')
        self.assertEqual(location.href, 'http://other.example/b#c')
