"""
nfc_controller.py - Main NFC controller interface for other application modules.

This module owns the reader singleton and turns each detected tag into a
read or write interaction. Read and write outcomes are reported as result
values; nothing raised by a tag interaction escapes handle_tag().
"""

import logging
import threading
import time

from ndeftag.config import CONFIG
from ndeftag.utils.validators import is_valid_nfc_uid
from .exceptions import NFCError, NFCEncodingError, NFCHardwareError
from .hardware_interface import NFCReader
from .message_inspector import ReadStatus, TextReadResult, read_text
from .tag_processor import format_uid
from .tag_session import WriteFailure, WriteResult, read_message, write_message
from .text_record import build_text_message
from .type2_tag import Type2Tag

# Configure logger
logger = logging.getLogger(__name__)

# Global reader instance (singleton pattern)
_nfc_reader = None
_reader_lock = threading.Lock()
_initialized = False

# Status texts reported for each tag interaction outcome
MSG_WRITTEN = "Tag written!"
MSG_WRITE_FAILED = "Failed to write tag"
MSG_CONTENT = "Content: {text}"
MSG_NO_MESSAGE = "No Ndef message found."
MSG_NO_RECORD = "No Ndef record found."
MSG_NOT_TEXT = "Record is not Text formatted."
MSG_MALFORMED = "Malformed text record."

_READ_MESSAGES = {
    ReadStatus.NO_MESSAGE: MSG_NO_MESSAGE,
    ReadStatus.NO_RECORD: MSG_NO_RECORD,
    ReadStatus.NOT_TEXT: MSG_NOT_TEXT,
    ReadStatus.MALFORMED: MSG_MALFORMED,
}


def initialize(i2c_bus=None, i2c_address=None, retries=3, reader=None):
    """
    Initialize the NFC controller and hardware.

    Args:
        i2c_bus (int): I2C bus number, defaults to the configured one
        i2c_address (int): I2C device address of the PN532, defaults to the configured one
        retries (int): Number of connection retries before failing
        reader (NFCReader, optional): Reader to use instead of creating one

    Returns:
        bool: True if initialization successful, False otherwise
    """
    global _nfc_reader, _initialized

    nfc_config = CONFIG.get("nfc", {})
    if i2c_bus is None:
        i2c_bus = nfc_config.get("i2c_bus", 1)
    if i2c_address is None:
        i2c_address = nfc_config.get("i2c_address", 0x24)

    with _reader_lock:
        # Return early if already initialized
        if _initialized and _nfc_reader is not None:
            logger.debug("NFC controller already initialized")
            return True

        _initialized = False

        for attempt in range(retries):
            # Clean up previous instance if it exists
            if _nfc_reader is not None:
                _nfc_reader.disconnect()

            _nfc_reader = reader if reader is not None else NFCReader(i2c_bus, i2c_address)

            if not _nfc_reader.connect():
                logger.error(f"Failed to connect to NFC hardware (attempt {attempt+1}/{retries})")
                # Wait before retrying, increasing delay with each attempt
                time.sleep(0.5 * (attempt + 1))
                continue

            try:
                # Reset hardware to ensure clean state
                _nfc_reader.reset()
            except NFCHardwareError as e:
                logger.error(f"Error during NFC initialization (attempt {attempt+1}/{retries}): {e}")
                _nfc_reader.disconnect()
                time.sleep(0.5 * (attempt + 1))
                continue

            _initialized = True
            logger.info(f"NFC controller initialized successfully on bus {i2c_bus}, address 0x{i2c_address:02X}")
            return True

        # If we get here, all retries failed
        _nfc_reader = None
        logger.error(f"NFC initialization failed after {retries} attempts")
        return False


def shutdown():
    """
    Clean shutdown of NFC hardware.

    Returns:
        bool: True once the reader is released
    """
    global _nfc_reader, _initialized

    with _reader_lock:
        if not _nfc_reader:
            logger.debug("NFC controller already shut down or not initialized")
            _initialized = False
            return True

        try:
            _nfc_reader.disconnect()
            logger.info("NFC controller shut down successfully")
            return True
        finally:
            _nfc_reader = None
            _initialized = False


def _ensure_initialized():
    """
    Internal helper to ensure NFC controller is initialized before operations.

    Raises:
        NFCHardwareError: If NFC controller is not initialized
    """
    if not _initialized or _nfc_reader is None:
        error_msg = "NFC controller not initialized"
        logger.error(error_msg)
        raise NFCHardwareError(error_msg)


def poll_for_tag(timeout=0.1):
    """
    Check for presence of an NFC tag and read its NDEF data.

    Args:
        timeout (float): Timeout in seconds for the polling operation

    Returns:
        Type2Tag or None: Discovered tag, None if no tag or it couldn't be read

    Raises:
        NFCHardwareError: If the controller is not initialized
    """
    with _reader_lock:
        _ensure_initialized()

        raw_uid = _nfc_reader.poll(timeout=timeout)
        if not raw_uid:
            return None

        uid = format_uid(raw_uid)
        if not is_valid_nfc_uid(uid):
            logger.warning(f"Unusual UID length for tag {uid}")
        logger.debug(f"NFC tag detected: {uid}")

        try:
            return Type2Tag.discover(
                _nfc_reader, raw_uid,
                format_data_area_units=CONFIG.get("nfc", {}).get("format_data_area_size", 0x06)
            )
        except NFCError as e:
            logger.warning(f"Unable to read tag {uid}: {e}")
            return None


def write_text(tag, content, language_code=None):
    """
    Encode text as a single text record message and write it to the tag.

    Args:
        tag: Tag handle
        content (str): Text to write
        language_code (str, optional): Language code, defaults to the configured one

    Returns:
        WriteResult: Outcome of the write
    """
    try:
        message = build_text_message(content, language_code)
    except NFCEncodingError as e:
        logger.error(f"Unable to encode text record: {e}")
        return WriteResult.failed(WriteFailure.ENCODING_FAILED, str(e))

    # Writes go through the shared reader
    with _reader_lock:
        return write_message(tag, message)


def read_text_from_tag(tag):
    """
    Decode the first record of the tag's cached message as text.

    Returns:
        TextReadResult: Outcome of the read
    """
    return read_text(read_message(tag))


def describe_read_result(result: TextReadResult) -> str:
    """Status text for a read outcome."""
    if result.status is ReadStatus.OK:
        return MSG_CONTENT.format(text=result.text)
    return _READ_MESSAGES[result.status]


def handle_tag(tag, write_mode, write_counter=1):
    """
    Handle one tag-detected event.

    In write mode the tag receives the configured write template filled with
    ``write_counter``; the caller owns the counter and advances it. In read
    mode the tag's first record is decoded as text.

    Args:
        tag: Tag handle
        write_mode (bool): Write instead of read
        write_counter (int): Number used in the written text

    Returns:
        str: Status text for the user
    """
    try:
        if write_mode:
            template = CONFIG.get("nfc", {}).get("write_template", "Tag content NR. {counter}")
            result = write_text(tag, template.format(counter=write_counter))
            if result:
                return MSG_WRITTEN
            logger.warning(f"Write failed ({result.failure.value}): {result.reason}")
            return MSG_WRITE_FAILED

        return describe_read_result(read_text_from_tag(tag))

    except Exception as e:
        logger.error(f"Error handling tag: {e}")
        return MSG_WRITE_FAILED if write_mode else MSG_NO_MESSAGE


def continuous_poll(callback, interval=None, exit_event=None):
    """
    Poll for tags until ``exit_event`` is set, calling ``callback(tag)`` once
    for each newly presented tag. A tag is reported again only after it has
    left the field.

    Args:
        callback (callable): Called with the discovered Type2Tag
        interval (float): Seconds between polls, defaults to the configured one
        exit_event (threading.Event, optional): Stops polling when set
    """
    if interval is None:
        interval = CONFIG.get("nfc", {}).get("poll_interval", 0.1)
    if exit_event is None:
        exit_event = threading.Event()

    logger.info(f"Starting continuous polling with interval {interval}s")
    last_uid = None

    while not exit_event.is_set():
        try:
            tag = poll_for_tag()
        except NFCHardwareError:
            logger.error("NFC controller not initialized, stopping continuous poll")
            break

        if tag is None:
            if last_uid is not None:
                logger.debug("Tag removed")
            last_uid = None
        elif tag.uid != last_uid:
            last_uid = tag.uid
            try:
                callback(tag)
            except Exception as e:
                logger.error(f"Error in tag detection callback: {e}")

        exit_event.wait(interval)

    logger.info("Continuous polling stopped")
