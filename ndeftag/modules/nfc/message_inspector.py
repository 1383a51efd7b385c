"""
message_inspector.py - Locate and classify the first record of an NDEF message.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from .exceptions import NFCMalformedPayloadError
from .ndef import NdefMessage, NdefRecord, NDEF_TNF_WELL_KNOWN, NDEF_RTD_TEXT
from .text_record import decode_text_record

# Create logger
logger = logging.getLogger(__name__)


class ReadStatus(enum.Enum):
    OK = "ok"
    NO_MESSAGE = "no_message"
    NO_RECORD = "no_record"
    NOT_TEXT = "not_text"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class TextReadResult:
    """Outcome of reading text from a message."""
    status: ReadStatus
    text: Optional[str] = None
    language_code: Optional[str] = None
    reason: str = ""

    @property
    def ok(self):
        return self.status is ReadStatus.OK


def first_record(message: Optional[NdefMessage]) -> Optional[NdefRecord]:
    """
    Get the first record of a message.

    Returns:
        NdefRecord or None: None when there is no message or it has no records
    """
    if message is None:
        return None
    records = message.records
    return records[0] if records else None


def is_well_known_text(record: NdefRecord) -> bool:
    """True iff the record is TNF well-known with type exactly b"T"."""
    return record.tnf == NDEF_TNF_WELL_KNOWN and record.type == NDEF_RTD_TEXT


def read_text(message: Optional[NdefMessage]) -> TextReadResult:
    """
    Decode the first record of a message as text.

    Never raises for message content: absent, empty, non-text and malformed
    messages are reported through the result status.
    """
    if message is None:
        return TextReadResult(ReadStatus.NO_MESSAGE, reason="No NDEF message")

    record = first_record(message)
    if record is None:
        return TextReadResult(ReadStatus.NO_RECORD, reason="NDEF message has no records")

    if not is_well_known_text(record):
        logger.debug(f"First record is not text (TNF {record.tnf}, type {record.type!r})")
        return TextReadResult(
            ReadStatus.NOT_TEXT,
            reason=f"Record has TNF {record.tnf} and type {record.type!r}"
        )

    try:
        text, language_code = decode_text_record(record)
    except NFCMalformedPayloadError as e:
        logger.warning(f"Malformed text record: {e}")
        return TextReadResult(ReadStatus.MALFORMED, reason=str(e))

    return TextReadResult(ReadStatus.OK, text=text, language_code=language_code)
