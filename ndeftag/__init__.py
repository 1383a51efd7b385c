"""
NDEF Text Tag - read and write NFC Forum text records on NFC tags.
"""

__version__ = '0.1.0'
