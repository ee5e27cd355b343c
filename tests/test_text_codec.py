import unittest

from smwks.codec.text import decode_text, encode_text, encode_text_twice
from smwks.errors import MalformedPayloadError


class TextCodecTests(unittest.TestCase):
    def test_escape_matches_encode_uri_component(self):
        self.assertEqual(encode_text("#fff"), "%23fff")
        self.assertEqual(encode_text("a b/c"), "a%20b%2Fc")
        self.assertEqual(encode_text("it's (ok)!*~._-"), "it's%20(ok)!*~._-")
        self.assertEqual(encode_text("é"), "%C3%A9")

    def test_writers_escape_twice(self):
        self.assertEqual(encode_text_twice("#fff"), "%2523fff")
        self.assertEqual(encode_text_twice("plain"), "plain")

    def test_decode_reverses_once(self):
        self.assertEqual(decode_text("%C3%A9"), "é")
        self.assertEqual(decode_text("%2523fff"), "%23fff")

    def test_percent_sign_does_not_round_trip(self):
        # Stored artifacts rely on the double-escape / single-decode pairing
        stored = encode_text_twice("100%")
        self.assertEqual(stored, "100%2525")
        self.assertEqual(decode_text(stored), "100%25")
        self.assertNotEqual(decode_text(stored), "100%")

    def test_non_string_fields_are_stringified(self):
        self.assertEqual(decode_text(5), "5")
        self.assertEqual(encode_text(5), "5")

    def test_invalid_utf8_escape_is_malformed(self):
        with self.assertRaises(MalformedPayloadError):
            decode_text("%FF")


if __name__ == "__main__":
    unittest.main()
