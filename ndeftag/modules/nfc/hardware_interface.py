"""
hardware_interface.py - Low-level NFC reader interface using Adafruit PN532 library.
"""

import logging
from .exceptions import NFCHardwareError, NFCIOError, NFCNoTagError
from .tag_processor import PAGE_SIZE

# Create logger
logger = logging.getLogger(__name__)

class NFCReader:
    """
    NFC reader interface using the Adafruit PN532 library.

    Attributes:
        i2c_bus (int): I2C bus number (not used in Adafruit implementation, kept for API compatibility)
        i2c_address (int): I2C device address
        _pn532: PN532 device instance
        _i2c: I2C bus instance
    """

    def __init__(self, i2c_bus=1, i2c_address=0x24, pn532=None):
        """
        Initialize NFC reader with I2C parameters.

        Args:
            i2c_bus (int): I2C bus number (kept for API compatibility)
            i2c_address (int): I2C device address of the PN532 (default 0x24)
            pn532: Already constructed PN532 device, used instead of opening I2C
        """
        self.i2c_bus = i2c_bus
        self.i2c_address = i2c_address
        self._pn532 = pn532
        self._i2c = None
        self._connected = False
        self._last_tag_uid = None
        logger.info(f"Initializing NFC reader on I2C bus {i2c_bus}, address 0x{i2c_address:02X}")

    @property
    def connected(self):
        return self._connected

    @property
    def last_tag_uid(self):
        return self._last_tag_uid

    def connect(self):
        """
        Establish connection to the NFC hardware.

        Returns:
            bool: True if connected successfully
        """
        try:
            if self._pn532 is None:
                # Imported here so the rest of the package works without the board support packages
                import board
                import busio
                from adafruit_pn532.i2c import PN532_I2C

                # Initialize I2C bus
                self._i2c = busio.I2C(board.SCL, board.SDA)

                # Create PN532 instance
                self._pn532 = PN532_I2C(self._i2c, address=self.i2c_address, debug=False)

            # Get firmware version to check connection
            ic, ver, rev, support = self._pn532.firmware_version
            logger.info(f"Connected to PN532 NFC reader: IC={ic}, Version=v{ver}.{rev}, Support={support}")

            # Configure to read ISO14443A tags
            self._pn532.SAM_configuration()

            self._connected = True
            return True

        except Exception as e:
            logger.error(f"Error connecting to NFC hardware: {str(e)}")
            self.disconnect()
            return False

    def disconnect(self):
        """Close connection to NFC hardware."""
        try:
            if self._i2c:
                self._i2c.deinit()
                logger.info("Disconnected from NFC hardware")
        except Exception as e:
            logger.error(f"Error disconnecting from NFC hardware: {str(e)}")
        finally:
            if self._i2c is not None:
                self._pn532 = None
            self._i2c = None
            self._connected = False
            self._last_tag_uid = None

    def reset(self):
        """
        Reset the NFC hardware.
        Note: Adafruit library doesn't expose a direct reset command,
        but we can reinitialize the device.
        """
        self._ensure_connected()

        try:
            # Configure PN532 back to default settings
            self._pn532.SAM_configuration()
            logger.info("NFC hardware reset completed")
            return True
        except Exception as e:
            logger.error(f"Error resetting NFC hardware: {str(e)}")
            raise NFCHardwareError(f"Failed to reset NFC hardware: {str(e)}")

    def get_version(self):
        """
        Get firmware version from the NFC hardware.

        Returns:
            str: Version string or None if failed
        """
        if not self._connected:
            logger.error("Not connected to NFC hardware")
            return None

        try:
            ic, ver, rev, support = self._pn532.firmware_version
            return f"v{ver}.{rev}"
        except Exception as e:
            logger.error(f"Error getting NFC hardware version: {str(e)}")
            return None

    def poll(self, timeout=0.1):
        """
        Poll for tag presence.

        Returns:
            bytes or None: Tag UID if detected, None otherwise
        """
        if not self._connected:
            logger.error("Not connected to NFC hardware")
            return None

        try:
            # read_passive_target will return None if no card is available
            uid = self._pn532.read_passive_target(timeout=timeout)

            if uid is not None:
                self._last_tag_uid = bytes(uid)
                logger.debug(f"Tag detected with UID: {self._last_tag_uid.hex()}")
                return self._last_tag_uid

            self._last_tag_uid = None
            return None

        except Exception as e:
            logger.error(f"Error polling for NFC tag: {str(e)}")
            self._last_tag_uid = None
            return None

    def select(self, uid, timeout=0.5):
        """
        Re-select a tag, checking it is still the one with ``uid``.

        Raises:
            NFCNoTagError: If no tag or a different tag is in the field
        """
        self._ensure_connected()

        found = self.poll(timeout=timeout)
        if found is None:
            raise NFCNoTagError("No NFC tag detected")
        if found != bytes(uid):
            raise NFCNoTagError(f"Different tag in field: {found.hex()}")

    def read_page(self, page_number):
        """
        Read a 4-byte page from the currently selected tag.

        Args:
            page_number (int): Page to read

        Returns:
            bytes: Page data

        Raises:
            NFCIOError: If reading fails
        """
        self._ensure_connected()

        try:
            data = self._pn532.ntag2xx_read_block(page_number)
        except Exception as e:
            error_msg = f"Error reading page {page_number}: {str(e)}"
            logger.error(error_msg)
            raise NFCIOError(error_msg)

        if data is None or len(data) < PAGE_SIZE:
            raise NFCIOError(f"Invalid data read from page {page_number}")

        return bytes(data[:PAGE_SIZE])

    def write_page(self, page_number, data):
        """
        Write a 4-byte page on the currently selected tag.

        Args:
            page_number (int): Page to write
            data (bytes): Exactly 4 bytes

        Raises:
            NFCIOError: If writing fails
        """
        self._ensure_connected()

        if data is None or len(data) != PAGE_SIZE:
            raise NFCIOError(f"Data length must be exactly {PAGE_SIZE} bytes")

        try:
            success = self._pn532.ntag2xx_write_block(page_number, bytes(data))
        except Exception as e:
            error_msg = f"Error writing page {page_number}: {str(e)}"
            logger.error(error_msg)
            raise NFCIOError(error_msg)

        if not success:
            raise NFCIOError(f"Tag rejected write to page {page_number}")

        logger.debug(f"Wrote page {page_number}: {bytes(data).hex()}")

    def _ensure_connected(self):
        if not self._connected:
            raise NFCHardwareError("Not connected to NFC hardware")
