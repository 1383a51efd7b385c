"""
Utils Module - Common utility functions and classes for the NDEF text tag application.

This package provides reusable utilities for logging, error handling
and input validation.
"""

# Import and expose key functions from other modules
from .exceptions import (
    AppError,
    ValidationError,
    ConfigurationError
)

from .logger import (
    setup_logger,
    get_logger,
    set_global_log_level,
    LoggerMixin
)

from .validators import (
    is_valid_language_code,
    is_valid_nfc_uid,
    validate_language_code
)

# Define version
__version__ = '0.1.0'
