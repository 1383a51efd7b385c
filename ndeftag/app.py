#!/usr/bin/env python3
"""
NDEF Text Tag - Main Application

This is the entry point for the tag reader/writer. It initializes the NFC
reader and handles every presented tag in read or write mode. In write mode
each tag receives the configured text with a counter that advances after
every write attempt.
"""

import argparse
import logging
import sys
import threading

from ndeftag.config import CONFIG, validate_config
from ndeftag.modules.nfc import nfc_controller
from ndeftag.utils.exceptions import AppError
from ndeftag.utils.logger import setup_logger
from ndeftag.utils.validators import validate_language_code

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Read or write NDEF text records on NFC tags")
    parser.add_argument('-m', '--mode', choices=['read', 'write'], default='read',
                        help="Read tags or write text to them (default: read)")
    parser.add_argument('-c', '--counter', type=int, default=1,
                        help="First counter value used in written text (default: 1)")
    parser.add_argument('-l', '--language', type=str, default=None,
                        help="Language code for written text records (default: from config)")
    parser.add_argument('-i', '--interval', type=float, default=None,
                        help="Seconds between polls (default: from config)")
    parser.add_argument('--log-file', type=str, default=None, help="Also log to this file")
    parser.add_argument('--debug', action='store_true', help="Enable debug level logging")
    return parser.parse_args(argv)


class TagHandler:
    """
    Callback for continuous polling. Owns the write counter.

    Attributes:
        write_mode (bool): Write instead of read
        write_counter (int): Counter used for the next write
    """

    def __init__(self, write_mode, write_counter=1):
        self.write_mode = write_mode
        self.write_counter = write_counter
        self.last_status = None

    def __call__(self, tag):
        counter = self.write_counter
        status = nfc_controller.handle_tag(tag, self.write_mode, counter)
        if self.write_mode:
            self.write_counter += 1
        self.last_status = status
        logger.info(f"Tag {tag.uid_str}: {status}")
        print(status)


def main(argv=None):
    """Run the application; returns the process exit code."""
    args = parse_args(argv)

    level = logging.DEBUG if args.debug or CONFIG.get("debug_mode") else logging.INFO
    setup_logger("ndeftag", log_file=args.log_file or CONFIG.get("log_file") or None, level=level)

    try:
        validate_config(CONFIG)
        if args.language is not None:
            CONFIG["nfc"]["language_code"] = validate_language_code(args.language, "--language")
    except AppError as e:
        logger.error(f"Configuration error: {e.message}")
        return 2

    logger.info(f"Starting {CONFIG.get('app_name')} in {args.mode} mode")

    if not nfc_controller.initialize():
        logger.error("NFC reader unavailable, exiting")
        return 1

    handler = TagHandler(args.mode == 'write', args.counter)
    exit_event = threading.Event()

    try:
        nfc_controller.continuous_poll(handler, interval=args.interval, exit_event=exit_event)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        exit_event.set()
    finally:
        nfc_controller.shutdown()

    return 0


if __name__ == "__main__":
    sys.exit(main())
