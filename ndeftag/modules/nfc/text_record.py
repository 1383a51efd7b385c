"""
text_record.py - Encoding and decoding of NDEF well-known text records.

Text record payload layout:

    byte 0:        bit 7 = text encoding (0 = UTF-8, 1 = UTF-16)
                   bits 0-5 = language code length L
    bytes 1..L:    language code, ASCII (e.g. "en")
    bytes L+1..N:  text, encoded per bit 7
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ndeftag.config import CONFIG
from .exceptions import NFCEncodingError, NFCMalformedPayloadError
from .ndef import NdefMessage, NdefRecord, NDEF_TNF_WELL_KNOWN, NDEF_RTD_TEXT

# Create logger
logger = logging.getLogger(__name__)

STATUS_UTF16 = 0x80
LANGUAGE_LENGTH_MASK = 0x3F
MAX_LANGUAGE_CODE_LENGTH = LANGUAGE_LENGTH_MASK

ENCODING_UTF8 = 'utf-8'
ENCODING_UTF16 = 'utf-16'

_UTF16_BOMS = (b'\xfe\xff', b'\xff\xfe')


@dataclass(frozen=True)
class TextRecordPayload:
    """Logical view of a text record payload."""
    encoding: str
    language_code: str
    text: str


def _default_language_code():
    return CONFIG.get('nfc', {}).get('language_code', 'en')


def encode_text_record(text: str, language_code: Optional[str] = None) -> NdefRecord:
    """
    Build a well-known text record. UTF-8 is always used for the text.

    Args:
        text (str): Text to store
        language_code (str, optional): Language code, defaults to the configured one

    Returns:
        NdefRecord: TNF well-known record of type "T"

    Raises:
        NFCEncodingError: If the strings can't be encoded or the language code is too long
    """
    if language_code is None:
        language_code = _default_language_code()

    try:
        language = language_code.encode('ascii')
    except (AttributeError, UnicodeEncodeError) as e:
        raise NFCEncodingError(f"Language code is not encodable as ASCII: {e}") from e

    try:
        text_bytes = text.encode('utf-8')
    except (AttributeError, UnicodeEncodeError) as e:
        raise NFCEncodingError(f"Text record content is not encodable as UTF-8: {e}") from e

    if len(language) > MAX_LANGUAGE_CODE_LENGTH:
        raise NFCEncodingError(
            f"Language code too long ({len(language)} bytes, maximum {MAX_LANGUAGE_CODE_LENGTH})")

    status_byte = len(language) & LANGUAGE_LENGTH_MASK
    payload = bytes([status_byte]) + language + text_bytes

    logger.debug(f"Encoded text record: {len(text_bytes)} text bytes, language {language_code!r}")
    return NdefRecord(NDEF_TNF_WELL_KNOWN, NDEF_RTD_TEXT, b'', payload)


def parse_text_payload(payload) -> TextRecordPayload:
    """
    Split a text record payload into encoding, language code and text.

    Raises:
        NFCMalformedPayloadError: If the payload is empty, too short for its
            language code, or not valid in its declared encoding
    """
    payload = bytes(payload)
    if not payload:
        raise NFCMalformedPayloadError("Text record payload is empty")

    status_byte = payload[0]
    encoding = ENCODING_UTF16 if status_byte & STATUS_UTF16 else ENCODING_UTF8
    language_size = status_byte & LANGUAGE_LENGTH_MASK

    if 1 + language_size > len(payload):
        raise NFCMalformedPayloadError(
            f"Language code length {language_size} exceeds payload of {len(payload)} bytes")

    text_bytes = payload[1 + language_size:]

    try:
        language_code = payload[1:1 + language_size].decode('ascii')
        if encoding == ENCODING_UTF16 and not text_bytes.startswith(_UTF16_BOMS):
            # No byte order mark: big-endian
            text = text_bytes.decode('utf-16-be')
        else:
            text = text_bytes.decode(encoding)
    except UnicodeDecodeError as e:
        raise NFCMalformedPayloadError(f"Text record payload is not valid {encoding}: {e}") from e

    return TextRecordPayload(encoding, language_code, text)


def decode_text_record(record: NdefRecord) -> Tuple[str, str]:
    """
    Decode a text record.

    Args:
        record (NdefRecord): Record with a text record payload

    Returns:
        tuple: (text, language_code)

    Raises:
        NFCMalformedPayloadError: If the payload is not a valid text record payload
    """
    parsed = parse_text_payload(record.payload)
    return parsed.text, parsed.language_code


def build_text_message(text: str, language_code: Optional[str] = None) -> NdefMessage:
    """Wrap a single encoded text record in a message."""
    return NdefMessage([encode_text_record(text, language_code)])
