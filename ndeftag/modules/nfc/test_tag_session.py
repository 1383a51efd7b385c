"""
Tests for the tag session read/write protocol, using mocked tag technologies.
"""

import unittest
from unittest.mock import MagicMock

from ndeftag.modules.nfc.exceptions import NFCIOError
from ndeftag.modules.nfc.tag_session import (
    TagSession, TagSessionState, WriteFailure, read_message, write_message
)
from ndeftag.modules.nfc.text_record import build_text_message


MESSAGE = build_text_message("Tag content NR. 1", "en")


def make_ndef(writable=True, cached=None):
    ndef = MagicMock(name="ndef")
    ndef.is_writable.return_value = writable
    ndef.get_cached_ndef_message.return_value = cached
    return ndef


def make_tag(ndef=None, formatable=None):
    tag = MagicMock(name="tag")
    tag.get_ndef.return_value = ndef
    tag.get_ndef_formatable.return_value = formatable
    return tag


class TestReadMessage(unittest.TestCase):

    def test_returns_cached_message_without_connecting(self):
        ndef = make_ndef(cached=MESSAGE)
        self.assertIs(read_message(make_tag(ndef)), MESSAGE)
        ndef.connect.assert_not_called()
        ndef.close.assert_not_called()

    def test_no_ndef_view(self):
        self.assertIsNone(read_message(make_tag(None, MagicMock())))

    def test_no_cached_message(self):
        self.assertIsNone(read_message(make_tag(make_ndef(cached=None))))


class TestWriteMessage(unittest.TestCase):

    def test_writes_to_writable_tag(self):
        ndef = make_ndef(writable=True)
        result = write_message(make_tag(ndef), MESSAGE)

        self.assertTrue(result)
        self.assertIsNone(result.failure)
        ndef.connect.assert_called_once_with()
        ndef.write_ndef_message.assert_called_once_with(MESSAGE)
        ndef.close.assert_called_once_with()

    def test_read_only_tag_is_not_written(self):
        ndef = make_ndef(writable=False)
        result = write_message(make_tag(ndef), MESSAGE)

        self.assertFalse(result)
        self.assertEqual(result.failure, WriteFailure.NOT_WRITABLE)
        ndef.write_ndef_message.assert_not_called()
        ndef.close.assert_called_once_with()

    def test_formats_tag_without_ndef_view(self):
        formatable = MagicMock(name="formatable")
        result = write_message(make_tag(None, formatable), MESSAGE)

        self.assertTrue(result)
        formatable.connect.assert_called_once_with()
        formatable.format.assert_called_once_with(MESSAGE)
        formatable.close.assert_called_once_with()

    def test_format_failure(self):
        formatable = MagicMock(name="formatable")
        formatable.format.side_effect = OSError("tag lost")
        result = write_message(make_tag(None, formatable), MESSAGE)

        self.assertFalse(result)
        self.assertEqual(result.failure, WriteFailure.FORMAT_FAILED)
        self.assertIn("tag lost", result.reason)
        formatable.close.assert_called_once_with()

    def test_format_connect_failure_does_not_close(self):
        formatable = MagicMock(name="formatable")
        formatable.connect.side_effect = NFCIOError("no tag")
        result = write_message(make_tag(None, formatable), MESSAGE)

        self.assertEqual(result.failure, WriteFailure.FORMAT_FAILED)
        formatable.close.assert_not_called()

    def test_tag_without_ndef_or_format_support(self):
        result = write_message(make_tag(None, None), MESSAGE)
        self.assertEqual(result.failure, WriteFailure.FORMAT_FAILED)

    def test_connect_failure_is_io_error(self):
        ndef = make_ndef()
        ndef.connect.side_effect = NFCIOError("tag moved away")
        result = write_message(make_tag(ndef), MESSAGE)

        self.assertEqual(result.failure, WriteFailure.IO_ERROR)
        ndef.close.assert_not_called()

    def test_write_failure_is_io_error_and_closes(self):
        ndef = make_ndef()
        ndef.write_ndef_message.side_effect = RuntimeError("transceive failed")
        result = write_message(make_tag(ndef), MESSAGE)

        self.assertEqual(result.failure, WriteFailure.IO_ERROR)
        self.assertIn("transceive failed", result.reason)
        ndef.close.assert_called_once_with()

    def test_is_writable_failure_still_closes(self):
        ndef = make_ndef()
        ndef.is_writable.side_effect = NFCIOError("lost")
        result = write_message(make_tag(ndef), MESSAGE)

        self.assertEqual(result.failure, WriteFailure.IO_ERROR)
        ndef.close.assert_called_once_with()

    def test_close_failure_after_write_is_io_error(self):
        ndef = make_ndef()
        ndef.close.side_effect = NFCIOError("close failed")
        result = write_message(make_tag(ndef), MESSAGE)

        self.assertFalse(result)
        self.assertEqual(result.failure, WriteFailure.IO_ERROR)

    def test_close_failure_keeps_original_failure(self):
        ndef = make_ndef(writable=False)
        ndef.close.side_effect = NFCIOError("close failed")
        result = write_message(make_tag(ndef), MESSAGE)

        self.assertEqual(result.failure, WriteFailure.NOT_WRITABLE)

    def test_no_tag(self):
        result = write_message(None, MESSAGE)
        self.assertEqual(result.failure, WriteFailure.NO_TAG)


class TestTagSession(unittest.TestCase):

    def test_state_transitions(self):
        ndef = make_ndef(writable=True)
        session = TagSession(make_tag(ndef))
        self.assertEqual(session.state, TagSessionState.DISCONNECTED)

        session.connect_ndef(ndef)
        self.assertEqual(session.state, TagSessionState.CONNECTED_WRITABLE)
        self.assertTrue(session.connected)

        self.assertTrue(session.close())
        self.assertEqual(session.state, TagSessionState.DISCONNECTED)

    def test_read_only_and_unformatted_states(self):
        session = TagSession(make_tag())
        session.connect_ndef(make_ndef(writable=False))
        self.assertEqual(session.state, TagSessionState.CONNECTED_READ_ONLY)
        session.close()

        session.connect_formatable(MagicMock())
        self.assertEqual(session.state, TagSessionState.CONNECTED_UNFORMATTED)
        session.close()

    def test_context_manager_closes_exactly_once(self):
        ndef = make_ndef()
        with TagSession(make_tag(ndef)) as session:
            session.connect_ndef(ndef)
        session.close()
        ndef.close.assert_called_once_with()

    def test_close_without_connect(self):
        self.assertTrue(TagSession(make_tag()).close())

    def test_close_failure_returns_false(self):
        ndef = make_ndef()
        ndef.close.side_effect = OSError("bus error")
        session = TagSession(make_tag(ndef))
        session.connect_ndef(ndef)

        self.assertFalse(session.close())
        self.assertEqual(session.state, TagSessionState.DISCONNECTED)


if __name__ == '__main__':
    unittest.main()
