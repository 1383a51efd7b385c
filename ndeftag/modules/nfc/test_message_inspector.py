"""
Tests for first-record extraction and text classification.
"""

import unittest
from unittest.mock import patch

from ndeftag.modules.nfc import message_inspector
from ndeftag.modules.nfc.message_inspector import ReadStatus, first_record, is_well_known_text, read_text
from ndeftag.modules.nfc.ndef import (
    NdefMessage, NdefRecord, NDEF_TNF_WELL_KNOWN, NDEF_TNF_MIME_MEDIA, NDEF_TNF_ABSOLUTE_URI,
    NDEF_RTD_TEXT, NDEF_RTD_URI
)
from ndeftag.modules.nfc.text_record import encode_text_record


class TestFirstRecord(unittest.TestCase):

    def test_none_message(self):
        self.assertIsNone(first_record(None))

    def test_empty_message(self):
        self.assertIsNone(first_record(NdefMessage([])))

    def test_returns_first_and_ignores_rest(self):
        first = encode_text_record("one", "en")
        second = encode_text_record("two", "en")
        self.assertIs(first_record(NdefMessage([first, second])), first)


class TestIsWellKnownText(unittest.TestCase):

    def test_text_record(self):
        self.assertTrue(is_well_known_text(encode_text_record("hi", "en")))

    def test_wrong_tnf(self):
        record = NdefRecord(NDEF_TNF_MIME_MEDIA, NDEF_RTD_TEXT, b'', b'\x02enhi')
        self.assertFalse(is_well_known_text(record))

    def test_wrong_type(self):
        self.assertFalse(is_well_known_text(NdefRecord(NDEF_TNF_WELL_KNOWN, NDEF_RTD_URI, b'', b'\x01a')))
        self.assertFalse(is_well_known_text(NdefRecord(NDEF_TNF_WELL_KNOWN, b't', b'', b'\x02enhi')))
        self.assertFalse(is_well_known_text(NdefRecord(NDEF_TNF_WELL_KNOWN, b'Tx', b'', b'\x02enhi')))


class TestReadText(unittest.TestCase):

    def test_ok(self):
        result = read_text(NdefMessage([encode_text_record("Tag content NR. 1", "en")]))
        self.assertTrue(result.ok)
        self.assertEqual((result.text, result.language_code), ("Tag content NR. 1", "en"))

    def test_no_message(self):
        self.assertEqual(read_text(None).status, ReadStatus.NO_MESSAGE)

    def test_no_record(self):
        self.assertEqual(read_text(NdefMessage([])).status, ReadStatus.NO_RECORD)

    def test_non_text_record_is_never_decoded(self):
        uri = NdefRecord(NDEF_TNF_ABSOLUTE_URI, b'https://example.com', b'', b'')
        with patch.object(message_inspector, 'decode_text_record') as decode:
            result = read_text(NdefMessage([uri]))
        decode.assert_not_called()
        self.assertEqual(result.status, ReadStatus.NOT_TEXT)
        self.assertFalse(result.ok)

    def test_malformed_text_record_does_not_raise(self):
        record = NdefRecord(NDEF_TNF_WELL_KNOWN, NDEF_RTD_TEXT, b'', b'')
        result = read_text(NdefMessage([record]))
        self.assertEqual(result.status, ReadStatus.MALFORMED)
        self.assertIsNone(result.text)
        self.assertTrue(result.reason)

    def test_only_first_record_is_consulted(self):
        uri = NdefRecord(NDEF_TNF_WELL_KNOWN, NDEF_RTD_URI, b'', b'\x04example.com')
        message = NdefMessage([uri, encode_text_record("second", "en")])
        self.assertEqual(read_text(message).status, ReadStatus.NOT_TEXT)


if __name__ == '__main__':
    unittest.main()
