"""
Modules package for the NDEF text tag application.

This package contains the specialized functionality modules:
- nfc: NDEF text record codec and tag read/write protocol
"""
