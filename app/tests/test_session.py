# SPDX-License-Identifier: MIT
"""Tests for session module."""

import unittest
import signal
import threading
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from co2monitor.session import (
    SessionController,
    install_signal_handlers,
    restore_signal_handlers,
)
from co2monitor.stream import StreamError

from fakes import MockStream, StreamFactory


class RecordingSleep(object):
    """Records requested delays, interleaved with the stream's writes."""

    def __init__(self, stream=None):
        self.stream = stream
        self.events = []

    def __call__(self, seconds):
        self.events.append(('sleep', seconds))

    def log_writes(self):
        original = self.stream.write

        def write(data):
            original(data)
            self.events.append(('write', data))
        self.stream.write = write


class TestSessionController(unittest.TestCase):

    def make(self, stream=None, error=None):
        self.stream = stream if stream is not None else MockStream()
        self.factory = StreamFactory(self.stream, error)
        self.sleep = RecordingSleep(self.stream)
        return SessionController(self.factory, sleep=self.sleep)

    def test_open_uses_path_and_baudrate(self):
        controller = self.make()
        stream = controller.open('/dev/tty.usbmodem1')
        self.assertIs(stream, self.stream)
        self.assertTrue(controller.is_open)
        self.assertEqual(self.factory.calls, [('/dev/tty.usbmodem1', 115200)])

    def test_open_failure_propagates(self):
        controller = self.make(error=StreamError("Cannot open"))
        with self.assertRaises(StreamError):
            controller.open('/dev/tty.usbmodem1')
        self.assertFalse(controller.is_open)

    def test_handshake_sequence(self):
        controller = self.make()
        controller.open('/dev/tty.usbmodem1')
        self.sleep.log_writes()
        controller.handshake()

        self.assertEqual(self.sleep.events, [
            ('sleep', 0.1),
            ('write', b'STP\r\n'),
            ('sleep', 0.5),
            ('write', b'STA\r\n'),
        ])

    def test_handshake_write_failure(self):
        controller = self.make(MockStream(fail_from=2))
        controller.open('/dev/tty.usbmodem1')
        with self.assertRaises(StreamError):
            controller.handshake()
        self.assertEqual(self.stream.written, [b'STP\r\n'])

    def test_shutdown_sends_one_stop_and_closes(self):
        controller = self.make()
        controller.open('/dev/tty.usbmodem1')
        self.sleep.log_writes()
        controller.shutdown()

        self.assertEqual(self.sleep.events, [
            ('write', b'STP\r\n'),
            ('sleep', 0.5),
        ])
        self.assertTrue(self.stream.closed)
        self.assertFalse(controller.is_open)

    def test_shutdown_write_failure_still_closes(self):
        controller = self.make(MockStream(fail_from=1))
        controller.open('/dev/tty.usbmodem1')
        with self.assertRaises(StreamError):
            controller.shutdown()
        self.assertEqual(self.stream.write_attempts, 1)
        self.assertTrue(self.stream.closed)
        self.assertFalse(controller.is_open)

    def test_shutdown_when_not_open(self):
        controller = self.make()
        controller.shutdown()
        self.assertEqual(self.stream.written, [])

    def test_context_manager_closes_on_error(self):
        controller = self.make()
        with self.assertRaises(RuntimeError):
            with controller:
                controller.open('/dev/tty.usbmodem1')
                raise RuntimeError("boom")
        self.assertTrue(self.stream.closed)
        self.assertFalse(controller.is_open)

    def test_close_idempotent(self):
        controller = self.make()
        controller.open('/dev/tty.usbmodem1')
        controller.close()
        controller.close()
        self.assertTrue(self.stream.closed)


class TestSignalHandlers(unittest.TestCase):

    def test_signals_set_cancel(self):
        cancel = threading.Event()
        previous = install_signal_handlers(cancel)
        try:
            self.assertEqual(set(previous), {signal.SIGINT, signal.SIGTERM})
            handler = signal.getsignal(signal.SIGTERM)
            handler(signal.SIGTERM, None)
            self.assertTrue(cancel.is_set())
        finally:
            restore_signal_handlers(previous)

    def test_sigint_delivery(self):
        cancel = threading.Event()
        previous = install_signal_handlers(cancel)
        try:
            os.kill(os.getpid(), signal.SIGINT)
            self.assertTrue(cancel.wait(1.0))
        finally:
            restore_signal_handlers(previous)

    def test_restore(self):
        before = signal.getsignal(signal.SIGTERM)
        previous = install_signal_handlers(threading.Event())
        restore_signal_handlers(previous)
        self.assertEqual(signal.getsignal(signal.SIGTERM), before)


if __name__ == '__main__':
    unittest.main()
