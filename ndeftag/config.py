"""
NDEF Text Tag Reader/Writer - Configuration

This module contains all the configuration settings for the application.
"""

import copy
import json
import logging
import os

from ndeftag.utils.exceptions import ConfigurationError
from ndeftag.utils.validators import is_valid_language_code

logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_CONFIG = {
    # Application settings
    "app_name": "NDEF Text Tag",
    "debug_mode": False,
    "log_file": "",  # Empty logs to console only

    # NFC settings
    "nfc": {
        "poll_interval": 0.1,  # seconds
        "i2c_bus": 1,
        "i2c_address": 0x24,  # PN532 default I2C address
        "language_code": "en",  # Language of written text records
        "write_template": "Tag content NR. {counter}",
        # Data area size written to the capability container of blank tags,
        # in units of 8 bytes (0x06 = 48 bytes, MIFARE Ultralight)
        "format_data_area_size": 0x06,
    },
}

# Path to user configuration file
CONFIG_PATH = os.environ.get("NDEFTAG_CONFIG", os.path.expanduser("~/.ndeftag/config.json"))

# Global CONFIG object
CONFIG = {}


def validate_config(config):
    """
    Check the NFC section of a configuration dict.

    Raises:
        ConfigurationError: If a setting is unusable
    """
    nfc = config.get("nfc", {})

    language_code = nfc.get("language_code")
    if not is_valid_language_code(language_code):
        raise ConfigurationError(
            f"Invalid language code: {language_code!r}",
            {"setting": "nfc.language_code"}
        )

    template = nfc.get("write_template")
    try:
        template.format(counter=1)
    except (AttributeError, KeyError, IndexError, ValueError) as e:
        raise ConfigurationError(
            f"Invalid write template {template!r}: {e}",
            {"setting": "nfc.write_template"}
        )

    size = nfc.get("format_data_area_size")
    if not isinstance(size, int) or not 0 < size <= 0xFF:
        raise ConfigurationError(
            f"Invalid data area size: {size!r}",
            {"setting": "nfc.format_data_area_size"}
        )


def load_config():
    """
    Load configuration from file or create default if not exists.

    CONFIG is updated in place so modules that imported it see the reload.
    """
    # Start with default config
    CONFIG.clear()
    CONFIG.update(copy.deepcopy(DEFAULT_CONFIG))

    # Try to load user config
    if os.path.exists(CONFIG_PATH):
        try:
            with open(CONFIG_PATH, 'r') as f:
                user_config = json.load(f)

            # Merge user config with defaults (shallow update for each section)
            for section, values in user_config.items():
                if section in CONFIG and isinstance(CONFIG[section], dict) and isinstance(values, dict):
                    CONFIG[section].update(values)
                else:
                    CONFIG[section] = values

        except (OSError, ValueError) as e:
            logger.error(f"Error loading config from {CONFIG_PATH}: {e}")
            # Continue with default config
    else:
        # Save default config
        save_config()

    return CONFIG


def save_config():
    """Save current configuration to file."""
    try:
        config_dir = os.path.dirname(CONFIG_PATH)
        if config_dir:
            os.makedirs(config_dir, exist_ok=True)
        with open(CONFIG_PATH, 'w') as f:
            json.dump(CONFIG, f, indent=4)
    except OSError as e:
        logger.error(f"Error saving config: {e}")


# Load configuration at module import
load_config()
