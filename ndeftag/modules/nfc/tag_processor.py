"""
tag_processor.py - Functions for processing NFC Type 2 Tag data.

Type 2 Tags (NTAG21x, MIFARE Ultralight) are organised in 4-byte pages.
Page 3 holds the capability container (CC); the data area starts at page 4
and stores the NDEF message inside a TLV block.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .exceptions import NFCMalformedPayloadError

# Create logger
logger = logging.getLogger(__name__)

PAGE_SIZE = 4
CC_PAGE = 3
DATA_AREA_START_PAGE = 4

# Capability container
CC_MAGIC = 0xE1
CC_VERSION = 0x10  # Mapping version 1.0
CC_ACCESS_READ_WRITE = 0x00
CC_ACCESS_READ_ONLY = 0x0F

# TLV block types
TLV_NULL = 0x00
TLV_LOCK_CONTROL = 0x01
TLV_MEMORY_CONTROL = 0x02
TLV_NDEF_MESSAGE = 0x03
TLV_PROPRIETARY = 0xFD
TLV_TERMINATOR = 0xFE

# Lengths of 0xFF and above use the 3-byte format
TLV_LONG_LENGTH_MARKER = 0xFF
MAX_TLV_LENGTH = 0xFFFE


def format_uid(raw_uid):
    """
    Format raw UID bytes to a standardized string format.

    Args:
        raw_uid (bytes): Raw UID from NFC reader

    Returns:
        str: Formatted UID string (hex format, uppercase, colon separated)
    """
    if not raw_uid:
        return None

    uid_hex = bytes(raw_uid).hex().upper()

    # Format with colons for readability (e.g., "AA:BB:CC:DD")
    return ':'.join(uid_hex[i:i+2] for i in range(0, len(uid_hex), 2))


@dataclass(frozen=True)
class CapabilityContainer:
    """Parsed contents of page 3."""
    magic: int
    version: int
    data_area_size: int  # bytes
    access: int

    @property
    def is_ndef_formatted(self):
        return self.magic == CC_MAGIC

    @property
    def is_blank(self):
        return self.magic == 0 and self.version == 0 and self.data_area_size == 0 and self.access == 0

    @property
    def is_writable(self):
        # High nibble is read access, low nibble write access
        return (self.access & 0x0F) == 0x0

    @classmethod
    def parse(cls, page):
        """
        Parse the 4 bytes of the CC page.

        Raises:
            NFCMalformedPayloadError: If fewer than 4 bytes are given
        """
        if page is None or len(page) < PAGE_SIZE:
            raise NFCMalformedPayloadError(f"Capability container must be {PAGE_SIZE} bytes")
        magic, version, size, access = bytes(page[:PAGE_SIZE])
        return cls(magic, version, size * 8, access)


def build_capability_container(data_area_units, writable=True):
    """
    Build a CC page for formatting a blank tag.

    Args:
        data_area_units (int): Data area size in units of 8 bytes
        writable (bool): Whether to grant write access

    Returns:
        bytes: 4-byte CC page
    """
    access = CC_ACCESS_READ_WRITE if writable else CC_ACCESS_READ_ONLY
    return bytes([CC_MAGIC, CC_VERSION, data_area_units & 0xFF, access])


def find_ndef_tlv(data) -> Optional[Tuple[int, int]]:
    """
    Locate the first NDEF message TLV in a data area prefix.

    Args:
        data (bytes): Bytes read from the start of the data area

    Returns:
        tuple or None: (value_offset, value_length) of the NDEF TLV, or None
            if a terminator is reached or the data ends before any NDEF TLV

    Raises:
        NFCMalformedPayloadError: If a TLV header is cut short inside ``data``
    """
    data = bytes(data)
    offset = 0

    while offset < len(data):
        tlv_type = data[offset]
        offset += 1

        if tlv_type == TLV_NULL:
            continue
        if tlv_type == TLV_TERMINATOR:
            return None

        if offset >= len(data):
            raise NFCMalformedPayloadError(f"TLV 0x{tlv_type:02X} has no length field")

        length = data[offset]
        offset += 1
        if length == TLV_LONG_LENGTH_MARKER:
            if offset + 2 > len(data):
                raise NFCMalformedPayloadError(f"TLV 0x{tlv_type:02X} has a truncated 3-byte length")
            length = int.from_bytes(data[offset:offset+2], byteorder='big')
            offset += 2

        if tlv_type == TLV_NDEF_MESSAGE:
            logger.debug(f"Found NDEF TLV at offset {offset} with length {length}")
            return offset, length

        # Lock control, memory control, proprietary or unknown TLV
        offset += length

    return None


def build_ndef_tlv(message_bytes):
    """
    Wrap an NDEF message in an NDEF TLV followed by a terminator TLV.

    Args:
        message_bytes (bytes): Serialized NDEF message

    Returns:
        bytes: TLV encoded data

    Raises:
        ValueError: If the message is too long for a TLV
    """
    message_length = len(message_bytes)
    if message_length > MAX_TLV_LENGTH:
        raise ValueError(f"NDEF message too long for a TLV ({message_length} bytes)")

    if message_length < TLV_LONG_LENGTH_MARKER:
        # Standard 1-byte length format
        tlv_length = bytes([message_length])
    else:
        # 3-byte length format for lengths >= 255
        tlv_length = bytes([TLV_LONG_LENGTH_MARKER]) + message_length.to_bytes(2, byteorder='big')
        logger.debug(f"Using 3-byte TLV length format for message length {message_length}")

    return bytes([TLV_NDEF_MESSAGE]) + tlv_length + bytes(message_bytes) + bytes([TLV_TERMINATOR])


def pad_to_pages(data):
    """Pad data with zeros to a whole number of pages."""
    remainder = len(data) % PAGE_SIZE
    if remainder:
        data = bytes(data) + b'\x00' * (PAGE_SIZE - remainder)
    return bytes(data)
