"""
tag_session.py - Read/write protocol for a single tag interaction.

The session only talks to the technology protocols below; concrete
transports (see type2_tag.py) implement them. Writing handles both tags
that already carry an NDEF application and blank tags that must be
formatted first. Every failure is returned as a WriteResult instead of
being raised, and an opened connection is always closed.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from .ndef import NdefMessage

# Create logger
logger = logging.getLogger(__name__)


class NdefTechnology(Protocol):
    """NDEF view of a tag that already carries an NDEF application."""

    def connect(self) -> None: ...

    def close(self) -> None: ...

    def is_writable(self) -> bool: ...

    def write_ndef_message(self, message: NdefMessage) -> None: ...

    def get_cached_ndef_message(self) -> Optional[NdefMessage]: ...


class NdefFormatableTechnology(Protocol):
    """One-shot formatting view of a blank tag."""

    def connect(self) -> None: ...

    def format(self, message: NdefMessage) -> None: ...

    def close(self) -> None: ...


class Tag(Protocol):
    """Handle for a detected tag."""

    def get_ndef(self) -> Optional[NdefTechnology]: ...

    def get_ndef_formatable(self) -> Optional[NdefFormatableTechnology]: ...


class TagSessionState(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTED_WRITABLE = "connected_writable"
    CONNECTED_READ_ONLY = "connected_read_only"
    CONNECTED_UNFORMATTED = "connected_unformatted"


class WriteFailure(enum.Enum):
    NOT_WRITABLE = "not_writable"
    FORMAT_FAILED = "format_failed"
    IO_ERROR = "io_error"
    NO_TAG = "no_tag"
    ENCODING_FAILED = "encoding_failed"


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a write. Truthy iff the message was written."""
    written: bool
    failure: Optional[WriteFailure] = None
    reason: str = ""

    def __bool__(self):
        return self.written

    @classmethod
    def success(cls):
        return cls(True)

    @classmethod
    def failed(cls, failure, reason=""):
        return cls(False, failure, reason)


def read_message(tag: Tag) -> Optional[NdefMessage]:
    """
    Get the NDEF message cached when the tag was discovered.

    Returns:
        NdefMessage or None: None if the tag has no NDEF view or no message
    """
    ndef = tag.get_ndef()
    if ndef is None:
        logger.debug("Tag has no NDEF view")
        return None
    return ndef.get_cached_ndef_message()


class TagSession:
    """
    One connection to one tag.

    Attributes:
        tag: Tag handle the session talks to
        state (TagSessionState): Current connection state
    """

    def __init__(self, tag: Tag):
        self.tag = tag
        self.state = TagSessionState.DISCONNECTED
        self._technology = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False

    @property
    def connected(self):
        return self.state is not TagSessionState.DISCONNECTED

    def connect_ndef(self, ndef: NdefTechnology):
        """Connect through the NDEF view and record whether the tag is writable."""
        ndef.connect()
        self._technology = ndef
        writable = ndef.is_writable()
        if writable:
            self.state = TagSessionState.CONNECTED_WRITABLE
        else:
            self.state = TagSessionState.CONNECTED_READ_ONLY
        logger.debug(f"Tag session connected: {self.state.value}")

    def connect_formatable(self, formatable: NdefFormatableTechnology):
        """Connect through the formatting view of a blank tag."""
        formatable.connect()
        self._technology = formatable
        self.state = TagSessionState.CONNECTED_UNFORMATTED
        logger.debug("Tag session connected: unformatted tag")

    def close(self):
        """
        Close the connection if one is open.

        Returns:
            bool: False if the transport failed to close
        """
        if self._technology is None:
            return True

        technology = self._technology
        self._technology = None
        self.state = TagSessionState.DISCONNECTED
        try:
            technology.close()
            logger.debug("Tag session closed")
            return True
        except Exception as e:
            logger.error(f"Error closing tag connection: {e}")
            return False

    def write(self, message: NdefMessage) -> WriteResult:
        """
        Write a message, formatting the tag first if it has no NDEF application.

        Returns:
            WriteResult: Written, or the failure that prevented it
        """
        result = None
        try:
            result = self._write(message)
        except Exception as e:
            logger.error(f"Error writing NDEF message to tag: {e}")
            result = WriteResult.failed(WriteFailure.IO_ERROR, str(e))
        finally:
            closed = self.close()

        if result.written and not closed:
            result = WriteResult.failed(WriteFailure.IO_ERROR, "Failed to close tag connection")
        return result

    def _write(self, message):
        ndef = self.tag.get_ndef()
        if ndef is None:
            return self._format(message)

        self.connect_ndef(ndef)
        if self.state is TagSessionState.CONNECTED_READ_ONLY:
            logger.warning("Tag is read-only, not writing")
            return WriteResult.failed(WriteFailure.NOT_WRITABLE, "Tag is read-only")

        ndef.write_ndef_message(message)
        logger.info("NDEF message written to tag")
        return WriteResult.success()

    def _format(self, message):
        formatable = self.tag.get_ndef_formatable()
        if formatable is None:
            logger.error("Tag supports neither NDEF nor NDEF formatting")
            return WriteResult.failed(
                WriteFailure.FORMAT_FAILED, "Tag supports neither NDEF nor NDEF formatting")

        try:
            self.connect_formatable(formatable)
            formatable.format(message)
        except Exception as e:
            logger.error(f"Error formatting tag: {e}")
            return WriteResult.failed(WriteFailure.FORMAT_FAILED, str(e))

        logger.info("Tag formatted with NDEF message")
        return WriteResult.success()


def write_message(tag: Optional[Tag], message: NdefMessage) -> WriteResult:
    """
    Write a message to a tag in its own session.

    Returns:
        WriteResult: Never raises for transport failures
    """
    if tag is None:
        return WriteResult.failed(WriteFailure.NO_TAG, "No tag")

    return TagSession(tag).write(message)
