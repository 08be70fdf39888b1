import unittest
import re
from datetime import datetime, timedelta, timezone

from api.exceptions import AuthError
from api.tokens import TokenService
from api.utils import MAX_ID, parse_id

SIGNING_KEY = "unit-test-signing-key"


class TokenServiceTestCase(unittest.TestCase):
    def setUp(self):
        self.tokens = TokenService(SIGNING_KEY, lifetime=timedelta(minutes=5))

    def _encode(self, payload):
        """Signs a raw payload with the service's own backend, bypassing issue()."""
        return self.tokens.backend.encode(payload)

    def _assert_rejected(self, token):
        with self.assertRaises(AuthError) as caught:
            self.tokens.validate(token)
        self.assertEqual(caught.exception.status_code, 401)

    def test_issued_token_names_the_player(self):
        token = self.tokens.issue("alice")
        self.assertEqual(self.tokens.validate(token), "alice")

    def test_token_has_three_segments(self):
        self.assertEqual(len(self.tokens.issue("alice").split(".")), 3)

    def test_expired_token(self):
        expired = TokenService(SIGNING_KEY, lifetime=timedelta(seconds=-1)).issue("alice")
        self._assert_rejected(expired)

    def test_wrong_signing_key(self):
        forged = TokenService("another-key").issue("alice")
        self._assert_rejected(forged)

    def test_malformed_token(self):
        self._assert_rejected("not.a.token")
        self._assert_rejected("")

    def test_tampered_payload(self):
        header, payload, signature = self.tokens.issue("alice").split(".")
        other_payload = self.tokens.issue("mallory").split(".")[1]
        self._assert_rejected(".".join([header, other_payload, signature]))
        self.assertNotEqual(payload, other_payload)

    def test_missing_subject(self):
        exp = datetime.now(timezone.utc) + timedelta(minutes=5)
        self._assert_rejected(self._encode({"exp": exp}))

    def test_blank_subject(self):
        exp = datetime.now(timezone.utc) + timedelta(minutes=5)
        self._assert_rejected(self._encode({"sub": "  ", "exp": exp}))

    def test_missing_expiry(self):
        with self.assertRaisesRegex(AuthError, re.escape("Token has no expiry claim")):
            self.tokens.validate(self._encode({"sub": "alice"}))

    def test_signing_key_is_required(self):
        with self.assertRaisesRegex(ValueError, re.escape("A signing key is required to issue tokens.")):
            TokenService("")


class ParseIdTestCase(unittest.TestCase):
    def test_valid_ids(self):
        self.assertEqual(parse_id("42"), 42)
        self.assertEqual(parse_id(str(MAX_ID)), MAX_ID)

    def test_rejects_non_integers(self):
        for raw in ("abc", "4.2", "", None):
            self.assertIsNone(parse_id(raw), raw)

    def test_rejects_ids_outside_database_range(self):
        for raw in ("0", "-1", str(MAX_ID + 1), "9" * 30):
            self.assertIsNone(parse_id(raw), raw)


if __name__ == '__main__':
    unittest.main()
