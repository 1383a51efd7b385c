"""
NFC Module - NDEF text record encoding/decoding and the tag read/write protocol.

This module encodes text into NDEF well-known text records, decodes the
first record of a tag's message, and writes messages to tags, formatting
blank tags when needed.
"""

# Import public interface functions from controller
from .nfc_controller import (
    initialize,
    shutdown,
    poll_for_tag,
    write_text,
    read_text_from_tag,
    describe_read_result,
    handle_tag,
    continuous_poll
)

from .ndef import (
    NdefRecord,
    NdefMessage,
    NDEF_TNF_EMPTY,
    NDEF_TNF_WELL_KNOWN,
    NDEF_TNF_MIME_MEDIA,
    NDEF_TNF_ABSOLUTE_URI,
    NDEF_TNF_EXTERNAL,
    NDEF_TNF_UNKNOWN,
    NDEF_RTD_TEXT
)

from .text_record import (
    TextRecordPayload,
    encode_text_record,
    decode_text_record,
    parse_text_payload,
    build_text_message
)

from .message_inspector import (
    ReadStatus,
    TextReadResult,
    first_record,
    is_well_known_text,
    read_text
)

from .tag_session import (
    TagSession,
    TagSessionState,
    WriteFailure,
    WriteResult,
    read_message,
    write_message
)

# Import exceptions for external use
from .exceptions import (
    NFCError,
    NFCHardwareError,
    NFCNoTagError,
    NFCReadError,
    NFCWriteError,
    NFCIOError,
    NFCEncodingError,
    NFCMalformedPayloadError,
    NFCTagNotWritableError,
    NFCFormatError
)

__all__ = [
    # Main controller functions
    'initialize',
    'shutdown',
    'poll_for_tag',
    'write_text',
    'read_text_from_tag',
    'describe_read_result',
    'handle_tag',
    'continuous_poll',

    # NDEF model
    'NdefRecord',
    'NdefMessage',
    'NDEF_TNF_EMPTY',
    'NDEF_TNF_WELL_KNOWN',
    'NDEF_TNF_MIME_MEDIA',
    'NDEF_TNF_ABSOLUTE_URI',
    'NDEF_TNF_EXTERNAL',
    'NDEF_TNF_UNKNOWN',
    'NDEF_RTD_TEXT',

    # Text records
    'TextRecordPayload',
    'encode_text_record',
    'decode_text_record',
    'parse_text_payload',
    'build_text_message',

    # Message inspection
    'ReadStatus',
    'TextReadResult',
    'first_record',
    'is_well_known_text',
    'read_text',

    # Tag sessions
    'TagSession',
    'TagSessionState',
    'WriteFailure',
    'WriteResult',
    'read_message',
    'write_message',

    # Exceptions
    'NFCError',
    'NFCHardwareError',
    'NFCNoTagError',
    'NFCReadError',
    'NFCWriteError',
    'NFCIOError',
    'NFCEncodingError',
    'NFCMalformedPayloadError',
    'NFCTagNotWritableError',
    'NFCFormatError'
]
