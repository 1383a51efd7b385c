"""
type2_tag.py - NFC Forum Type 2 Tag adapter for the tag session protocols.

A Type2Tag is created when a tag is discovered. Discovery reads the
capability container and, for NDEF formatted tags, the NDEF message, which
is kept as the cached message. Formatted tags expose an NDEF view, blank
tags a formatting view.
"""

import logging
from typing import Optional

from ndeftag.utils.logger import LoggerMixin
from .exceptions import NFCFormatError, NFCIOError, NFCMalformedPayloadError, NFCTagNotWritableError
from .ndef import NdefMessage
from .tag_processor import (
    CapabilityContainer, PAGE_SIZE, CC_PAGE, DATA_AREA_START_PAGE,
    build_capability_container, build_ndef_tlv, find_ndef_tlv, format_uid, pad_to_pages
)

# Create logger
logger = logging.getLogger(__name__)

# Lock/memory control TLVs (5 bytes each) plus a 4-byte NDEF TLV header fit in 4 pages
TLV_HEADER_PAGES = 4


def _read_bytes(reader, start_page, length):
    """Read ``length`` bytes starting at ``start_page``."""
    data = bytearray()
    page = start_page
    while len(data) < length:
        data += reader.read_page(page)
        page += 1
    return bytes(data[:length])


def _write_bytes(reader, start_page, data):
    """Write ``data`` (padded to whole pages) starting at ``start_page``."""
    data = pad_to_pages(data)
    for i in range(0, len(data), PAGE_SIZE):
        reader.write_page(start_page + i // PAGE_SIZE, data[i:i+PAGE_SIZE])


def read_ndef_message(reader, data_area_size) -> Optional[NdefMessage]:
    """
    Read the NDEF message stored in the data area.

    Returns:
        NdefMessage or None: None if the data area holds no (or an empty) NDEF TLV

    Raises:
        NFCIOError: If reading fails
        NFCMalformedPayloadError: If the stored data is not a valid message
    """
    header_length = min(TLV_HEADER_PAGES * PAGE_SIZE, data_area_size)
    header = _read_bytes(reader, DATA_AREA_START_PAGE, header_length)

    location = find_ndef_tlv(header)
    if location is None:
        return None

    offset, length = location
    if length == 0:
        return None
    if offset + length > data_area_size:
        raise NFCMalformedPayloadError(
            f"NDEF TLV of {length} bytes exceeds data area of {data_area_size} bytes")

    data = _read_bytes(reader, DATA_AREA_START_PAGE, offset + length)
    return NdefMessage.from_bytes(data[offset:])


class _Type2Technology(LoggerMixin):
    """Connection handling shared by the NDEF and formatting views."""

    def __init__(self, tag):
        self.tag = tag
        self._connected = False
        self.setup_logger()

    def connect(self):
        self.tag.reader.select(self.tag.uid)
        self._connected = True
        self.logger.debug(f"Connected to tag {self.tag.uid_str}")

    def close(self):
        if self._connected:
            self._connected = False
            self.logger.debug(f"Closed connection to tag {self.tag.uid_str}")

    def _ensure_connected(self):
        if not self._connected:
            raise NFCIOError("Tag is not connected")

    def _checked_tlv(self, message, data_area_size):
        tlv = build_ndef_tlv(message.to_bytes())
        if len(tlv) > data_area_size:
            raise NFCIOError(
                f"NDEF message needs {len(tlv)} bytes, tag data area holds {data_area_size}")
        return tlv

    def _write_message(self, message, data_area_size):
        tlv = self._checked_tlv(message, data_area_size)
        _write_bytes(self.tag.reader, DATA_AREA_START_PAGE, tlv)
        self.tag.cached_message = message


class Type2Ndef(_Type2Technology):
    """NDEF view of a formatted Type 2 Tag."""

    def is_writable(self):
        return self.tag.capability_container.is_writable

    def get_cached_ndef_message(self):
        return self.tag.cached_message

    def write_ndef_message(self, message):
        self._ensure_connected()
        if not self.is_writable():
            raise NFCTagNotWritableError(f"Tag {self.tag.uid_str} is read-only")
        self._write_message(message, self.tag.capability_container.data_area_size)
        self.logger.info(f"Wrote NDEF message to tag {self.tag.uid_str}")


class Type2NdefFormatable(_Type2Technology):
    """Formatting view of a blank Type 2 Tag."""

    def __init__(self, tag, data_area_units):
        super().__init__(tag)
        self.data_area_units = data_area_units

    def format(self, message):
        self._ensure_connected()
        if not self.tag.capability_container.is_blank:
            raise NFCFormatError(f"Tag {self.tag.uid_str} is already formatted")
        cc = build_capability_container(self.data_area_units)
        capability_container = CapabilityContainer.parse(cc)

        # Size is checked before the CC page so an oversized message leaves the tag blank
        tlv = self._checked_tlv(message, capability_container.data_area_size)
        self.tag.reader.write_page(CC_PAGE, cc)
        self.tag.capability_container = capability_container
        _write_bytes(self.tag.reader, DATA_AREA_START_PAGE, tlv)
        self.tag.cached_message = message
        self.logger.info(f"Formatted tag {self.tag.uid_str} for NDEF")


class Type2Tag:
    """
    Handle for a discovered Type 2 Tag.

    Attributes:
        reader: NFCReader the tag was discovered on
        uid (bytes): Tag UID
        capability_container (CapabilityContainer): Parsed CC page
        cached_message (NdefMessage): Message read at discovery, or None
    """

    def __init__(self, reader, uid, capability_container, cached_message=None,
                 format_data_area_units=0x06):
        self.reader = reader
        self.uid = bytes(uid)
        self.capability_container = capability_container
        self.cached_message = cached_message
        self.format_data_area_units = format_data_area_units

    @property
    def uid_str(self):
        return format_uid(self.uid)

    @classmethod
    def discover(cls, reader, uid, format_data_area_units=0x06):
        """
        Read the CC and any NDEF message from a freshly detected tag.

        A malformed stored message is logged and treated as no message.

        Raises:
            NFCIOError: If the tag can't be read
        """
        cc = CapabilityContainer.parse(reader.read_page(CC_PAGE))
        tag = cls(reader, uid, cc, format_data_area_units=format_data_area_units)

        if cc.is_ndef_formatted:
            try:
                tag.cached_message = read_ndef_message(reader, cc.data_area_size)
            except NFCMalformedPayloadError as e:
                logger.warning(f"Ignoring malformed NDEF data on tag {tag.uid_str}: {e}")

        return tag

    def get_ndef(self) -> Optional[Type2Ndef]:
        if not self.capability_container.is_ndef_formatted:
            return None
        return Type2Ndef(self)

    def get_ndef_formatable(self) -> Optional[Type2NdefFormatable]:
        if not self.capability_container.is_blank:
            return None
        return Type2NdefFormatable(self, self.format_data_area_units)
