"""
ndef.py - NDEF record and message model with binary framing.

An NDEF message is a sequence of records. Each record starts with a header
byte holding the MB/ME/CF/SR/IL flags and the 3-bit Type Name Format,
followed by the type length, payload length (1 byte for short records,
4 bytes otherwise), optional id length, then type, id and payload.
"""

import logging
import struct
from dataclasses import dataclass
from typing import Optional, Tuple

from .exceptions import NFCMalformedPayloadError

# Create logger
logger = logging.getLogger(__name__)

# NDEF Record Type Name Formats
NDEF_TNF_EMPTY = 0x00
NDEF_TNF_WELL_KNOWN = 0x01
NDEF_TNF_MIME_MEDIA = 0x02
NDEF_TNF_ABSOLUTE_URI = 0x03
NDEF_TNF_EXTERNAL = 0x04
NDEF_TNF_UNKNOWN = 0x05
NDEF_TNF_UNCHANGED = 0x06

# Well Known Type definitions
NDEF_RTD_TEXT = b'T'
NDEF_RTD_URI = b'U'

# Record header flags
FLAG_MB = 0x80  # Message Begin
FLAG_ME = 0x40  # Message End
FLAG_CF = 0x20  # Chunk Flag
FLAG_SR = 0x10  # Short Record
FLAG_IL = 0x08  # ID Length present
TNF_MASK = 0x07

MAX_TYPE_LENGTH = 255
MAX_ID_LENGTH = 255


@dataclass(frozen=True)
class NdefRecord:
    """A single NDEF record. Immutable once constructed."""
    tnf: int
    type: bytes = b''
    id: bytes = b''
    payload: bytes = b''

    def __post_init__(self):
        # Normalise bytearray / list input to bytes
        object.__setattr__(self, 'type', bytes(self.type))
        object.__setattr__(self, 'id', bytes(self.id))
        object.__setattr__(self, 'payload', bytes(self.payload))

        if not NDEF_TNF_EMPTY <= self.tnf <= NDEF_TNF_UNCHANGED:
            raise ValueError(f"Invalid type name format: {self.tnf}")
        if self.tnf == NDEF_TNF_UNCHANGED:
            raise ValueError("TNF_UNCHANGED is only valid inside chunked records")
        if self.tnf == NDEF_TNF_EMPTY and (self.type or self.id or self.payload):
            raise ValueError("TNF_EMPTY records must have empty type, id and payload")
        if self.tnf == NDEF_TNF_UNKNOWN and self.type:
            raise ValueError("TNF_UNKNOWN records must have an empty type")
        if len(self.type) > MAX_TYPE_LENGTH:
            raise ValueError(f"Record type too long ({len(self.type)} bytes)")
        if len(self.id) > MAX_ID_LENGTH:
            raise ValueError(f"Record id too long ({len(self.id)} bytes)")

    def to_bytes(self, message_begin=True, message_end=True):
        """
        Serialize the record with its header.

        Args:
            message_begin (bool): Set the MB flag (first record of a message)
            message_end (bool): Set the ME flag (last record of a message)

        Returns:
            bytes: Framed record
        """
        header = self.tnf
        if message_begin:
            header |= FLAG_MB
        if message_end:
            header |= FLAG_ME

        short_record = len(self.payload) < 256
        if short_record:
            header |= FLAG_SR
        if self.id:
            header |= FLAG_IL

        record = bytearray([header, len(self.type)])
        if short_record:
            record.append(len(self.payload))
        else:
            record += struct.pack('>I', len(self.payload))
        if self.id:
            record.append(len(self.id))

        record += self.type + self.id + self.payload
        return bytes(record)


@dataclass(frozen=True)
class NdefMessage:
    """An ordered sequence of NDEF records."""
    records: Tuple[NdefRecord, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'records', tuple(self.records))

    def __len__(self):
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def first_record(self) -> Optional[NdefRecord]:
        """Return the first record, or None for an empty message."""
        return self.records[0] if self.records else None

    def to_bytes(self) -> bytes:
        """
        Serialize the message.

        Raises:
            ValueError: If the message holds no records
        """
        if not self.records:
            raise ValueError("Cannot serialize an NDEF message without records")

        last = len(self.records) - 1
        return b''.join(
            record.to_bytes(message_begin=(i == 0), message_end=(i == last))
            for i, record in enumerate(self.records)
        )

    @classmethod
    def from_bytes(cls, data) -> 'NdefMessage':
        """
        Parse a complete NDEF message.

        Args:
            data (bytes): Raw message bytes, without any TLV wrapping

        Returns:
            NdefMessage: Parsed message

        Raises:
            NFCMalformedPayloadError: If the data is not a well formed NDEF message
        """
        data = bytes(data)
        if not data:
            raise NFCMalformedPayloadError("Empty NDEF message")

        records = []
        offset = 0
        message_end = False

        while offset < len(data):
            if message_end:
                raise NFCMalformedPayloadError(
                    f"Unexpected data after message end at offset {offset}")

            record, offset, flags = _parse_record(data, offset)

            if not records and not flags & FLAG_MB:
                raise NFCMalformedPayloadError("First record is missing the Message Begin flag")
            if records and flags & FLAG_MB:
                raise NFCMalformedPayloadError("Message Begin flag set on a record after the first")

            records.append(record)
            message_end = bool(flags & FLAG_ME)

        if not message_end:
            raise NFCMalformedPayloadError("NDEF message has no Message End record")

        logger.debug(f"Parsed NDEF message with {len(records)} record(s)")
        return cls(records)


def _take(data, offset, length, what):
    """Slice ``length`` bytes from ``data`` or fail on truncation."""
    end = offset + length
    if end > len(data):
        raise NFCMalformedPayloadError(
            f"Truncated {what}: need {length} bytes at offset {offset}, have {len(data) - offset}")
    return data[offset:end], end


def _parse_record(data, offset):
    """Parse one record at ``offset``; returns (record, next_offset, header flags)."""
    header_bytes, offset = _take(data, offset, 2, "record header")
    header, type_length = header_bytes

    if header & FLAG_CF:
        raise NFCMalformedPayloadError("Chunked NDEF records are not supported")

    if header & FLAG_SR:
        length_bytes, offset = _take(data, offset, 1, "payload length")
        payload_length = length_bytes[0]
    else:
        length_bytes, offset = _take(data, offset, 4, "payload length")
        payload_length = struct.unpack('>I', length_bytes)[0]

    id_length = 0
    if header & FLAG_IL:
        id_length_bytes, offset = _take(data, offset, 1, "id length")
        id_length = id_length_bytes[0]

    type_value, offset = _take(data, offset, type_length, "record type")
    id_value, offset = _take(data, offset, id_length, "record id")
    payload, offset = _take(data, offset, payload_length, "payload")

    try:
        record = NdefRecord(header & TNF_MASK, type_value, id_value, payload)
    except ValueError as e:
        raise NFCMalformedPayloadError(f"Invalid NDEF record: {e}") from e

    return record, offset, header
