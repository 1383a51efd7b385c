"""
Tests for text record encoding and decoding.
"""

import unittest
from unittest.mock import patch

from ndeftag.modules.nfc.exceptions import NFCEncodingError, NFCMalformedPayloadError
from ndeftag.modules.nfc.ndef import NdefRecord, NDEF_TNF_WELL_KNOWN, NDEF_RTD_TEXT
from ndeftag.modules.nfc.text_record import (
    build_text_message, decode_text_record, encode_text_record, parse_text_payload
)


def text_record(payload):
    return NdefRecord(NDEF_TNF_WELL_KNOWN, NDEF_RTD_TEXT, b'', payload)


class TestEncodeTextRecord(unittest.TestCase):
    """Test cases for encode_text_record."""

    def test_tag_content_payload(self):
        record = encode_text_record("Tag content NR. 1", "en")
        self.assertEqual(record.payload, b'\x02enTag content NR. 1')
        self.assertEqual(record.payload[:3], bytes([0x02, 0x65, 0x6E]))

    def test_record_header_fields(self):
        record = encode_text_record("hello", "en")
        self.assertEqual(record.tnf, NDEF_TNF_WELL_KNOWN)
        self.assertEqual(record.type, b'T')
        self.assertEqual(record.id, b'')

    def test_status_byte_never_sets_utf16_bit(self):
        record = encode_text_record("Grüße 日本", "de")
        self.assertEqual(record.payload[0] & 0x80, 0)
        self.assertEqual(record.payload[3:], "Grüße 日本".encode('utf-8'))

    def test_sequential_writes_differ_only_in_digit(self):
        first = encode_text_record("Tag content NR. 1", "en").payload
        second = encode_text_record("Tag content NR. 2", "en").payload
        self.assertEqual(len(first), len(second))
        self.assertEqual(first[:-1], second[:-1])
        self.assertEqual((first[-1:], second[-1:]), (b'1', b'2'))

    def test_language_code_of_63_bytes(self):
        language = "x" * 63
        record = encode_text_record("text", language)
        self.assertEqual(record.payload[0], 63)
        self.assertEqual(decode_text_record(record), ("text", language))

    def test_language_code_of_64_bytes_rejected(self):
        with self.assertRaises(NFCEncodingError):
            encode_text_record("text", "x" * 64)

    def test_unencodable_text_rejected(self):
        with self.assertRaises(NFCEncodingError):
            encode_text_record("bad \ud800 surrogate", "en")

    def test_unencodable_language_rejected(self):
        with self.assertRaises(NFCEncodingError):
            encode_text_record("text", "\udfff")

    def test_non_ascii_language_rejected(self):
        # Decoding reads the language code as ASCII
        for code in ["é", "日本"]:
            with self.subTest(code=code):
                with self.assertRaises(NFCEncodingError):
                    encode_text_record("hi", code)

    def test_empty_text(self):
        record = encode_text_record("", "en")
        self.assertEqual(record.payload, b'\x02en')
        self.assertEqual(decode_text_record(record), ("", "en"))

    def test_default_language_from_config(self):
        with patch.dict("ndeftag.modules.nfc.text_record.CONFIG", {"nfc": {"language_code": "fr"}}):
            record = encode_text_record("bonjour")
        self.assertEqual(record.payload[:3], b'\x02fr')

    def test_build_text_message(self):
        message = build_text_message("Tag content NR. 1", "en")
        self.assertEqual(len(message), 1)
        self.assertEqual(message.first_record(), encode_text_record("Tag content NR. 1", "en"))


class TestDecodeTextRecord(unittest.TestCase):
    """Test cases for decode_text_record and parse_text_payload."""

    def test_decode_tag_content(self):
        record = text_record(b'\x02enTag content NR. 1')
        self.assertEqual(decode_text_record(record), ("Tag content NR. 1", "en"))

    def test_round_trip(self):
        samples = [
            ("Tag content NR. 1", "en"),
            ("", "en-US"),
            ("emoji \U0001F600 and accents éà", "fr"),
            ("line\nbreaks\ttabs", "x"),
        ]
        for text, language in samples:
            with self.subTest(text=text, language=language):
                self.assertEqual(decode_text_record(encode_text_record(text, language)), (text, language))

    def test_empty_payload_is_malformed(self):
        with self.assertRaises(NFCMalformedPayloadError):
            decode_text_record(text_record(b''))

    def test_language_length_beyond_payload_is_malformed(self):
        with self.assertRaises(NFCMalformedPayloadError):
            decode_text_record(text_record(b'\x05en'))

    def test_language_length_uses_six_bits(self):
        # 0x3C would be truncated to 0x30 by a 0x33 mask
        language = "a" * 0x3C
        payload = bytes([0x3C]) + language.encode('ascii') + b'text'
        self.assertEqual(decode_text_record(text_record(payload)), ("text", language))

    def test_bit_six_is_ignored(self):
        payload = bytes([0x40 | 0x02]) + b'entext'
        self.assertEqual(decode_text_record(text_record(payload)), ("text", "en"))

    def test_utf16_big_endian_without_bom(self):
        payload = bytes([0x80 | 0x02]) + b'en' + "héllo".encode('utf-16-be')
        parsed = parse_text_payload(payload)
        self.assertEqual(parsed.encoding, 'utf-16')
        self.assertEqual(parsed.text, "héllo")

    def test_utf16_with_little_endian_bom(self):
        payload = bytes([0x80 | 0x02]) + b'en' + b'\xff\xfe' + "héllo".encode('utf-16-le')
        self.assertEqual(decode_text_record(text_record(payload)), ("héllo", "en"))

    def test_odd_length_utf16_is_malformed(self):
        payload = bytes([0x80 | 0x02]) + b'en' + b'\x00a\x00'
        with self.assertRaises(NFCMalformedPayloadError):
            decode_text_record(text_record(payload))

    def test_invalid_utf8_is_malformed(self):
        with self.assertRaises(NFCMalformedPayloadError):
            decode_text_record(text_record(b'\x02en\xff\xfe'))

    def test_non_ascii_language_is_malformed(self):
        with self.assertRaises(NFCMalformedPayloadError):
            decode_text_record(text_record(b'\x02\xc3\xa9text'))

    def test_status_only_payload(self):
        parsed = parse_text_payload(b'\x00')
        self.assertEqual((parsed.encoding, parsed.language_code, parsed.text), ('utf-8', '', ''))


if __name__ == '__main__':
    unittest.main()
