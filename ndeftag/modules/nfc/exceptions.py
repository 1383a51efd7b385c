"""
exceptions.py - Custom exception classes for the NFC module.
"""

class NFCError(Exception):
    """Base exception for all NFC related errors."""
    pass

class NFCHardwareError(NFCError):
    """Exception raised when there's a hardware communication error."""
    pass

class NFCNoTagError(NFCError):
    """Exception raised when an operation requires a tag but none is present."""
    pass

class NFCReadError(NFCError):
    """Exception raised when tag reading fails."""
    pass

class NFCWriteError(NFCError):
    """Exception raised when tag writing fails."""
    pass

class NFCIOError(NFCError):
    """Exception raised when the tag transport fails during connect, read, write or close."""
    pass

class NFCEncodingError(NFCError):
    """Exception raised when text or a language code cannot be encoded into a text record."""
    pass

class NFCMalformedPayloadError(NFCReadError):
    """Exception raised when NDEF bytes or a text record payload are structurally invalid."""
    pass

class NFCTagNotWritableError(NFCWriteError):
    """Exception raised when attempting to write NDEF data to a non-writable or incorrectly formatted tag."""
    pass

class NFCFormatError(NFCWriteError):
    """Exception raised when formatting a blank tag for NDEF fails."""
    pass
