"""Non-blocking driver for an ESP8266 WiFi module speaking AT commands."""

from __future__ import annotations

from enum import Enum, auto

from .serialport import SerialPort
from .taskqueue import QueueFullError, TaskQueue
from .timers import TickScheduler, TimedPeripheral, Timer

SSID = "MIRED"
PASSWORD = "password"
TCP_HOST = "192.168.248.150"
TCP_PORT = "5000"

SEND_INTERVAL_TICKS = 500
"""Ticks between two queued send steps."""

_OK_REPLY = b"OK\r\n"


class WifiState(Enum):
    """Connection stages of the module."""

    CONNECTED = auto()
    DISCONNECTED = auto()
    TCP_CONNECT = auto()
    SET_MODE = auto()
    CONNECT = auto()
    RESET = auto()


def digit_count(number: int) -> int:
    """Number of decimal digits of a non-negative integer (1 for zero)."""
    if number < 0:
        raise ValueError(f"number must not be negative: {number}")
    return len(str(number))


class Esp8266(TimedPeripheral):
    """Brings the module onto a WiFi network, opens a TCP link and sends values.

    Each tick the driver scans one received byte for an ``OK\\r\\n`` reply.
    ``init_module`` is called repeatedly from the main loop and advances the
    connection one stage per reply. ``send`` queues a value; every
    SEND_INTERVAL_TICKS the next step is performed: first the
    ``AT+CIPSEND`` header, then, once the module has answered OK, the digits.
    """

    def __init__(
        self,
        port: SerialPort,
        scheduler: TickScheduler,
        ssid: str = SSID,
        password: str = PASSWORD,
        host: str = TCP_HOST,
        tcp_port: str = TCP_PORT,
    ) -> None:
        self.port = port
        self.ssid = ssid
        self.password = password
        self.host = host
        self.tcp_port = str(tcp_port)
        self.state = WifiState.DISCONNECTED

        self._ok = False
        self._ok_for_data = False
        self._configured = False
        self._first_iteration = True
        self._first_reset_iteration = True
        self._match_pos = 0

        self._queue = TaskQueue()
        scheduler.register(self)
        self._timer = scheduler.register(
            Timer(SEND_INTERVAL_TICKS, self.process_next, False)
        )

    @property
    def configured(self) -> bool:
        """True once the TCP connection has been acknowledged."""
        return self._configured

    def check_response_ok(self) -> bool:
        """Consume one received byte; True when it completes ``OK\\r\\n``."""
        value = self.port.receive()
        if value is None:
            return False
        if value == _OK_REPLY[self._match_pos]:
            self._match_pos += 1
            if self._match_pos == len(_OK_REPLY):
                self._match_pos = 0
                if self._configured:
                    self._ok_for_data = True
                return True
        return False

    def callback(self) -> None:
        self._ok = self.check_response_ok()

    def _take_ok(self) -> bool:
        if self._ok:
            self._ok = False
            return True
        return False

    def init_module(self) -> None:
        """Advance the connection sequence by at most one stage."""
        state = self.state
        if state is WifiState.DISCONNECTED:
            if self._first_iteration:
                self.port.transmit(b"AT\r\n")
                self._first_iteration = False
            if self._take_ok():
                self._first_iteration = True
                self.port.transmit(b"AT+CWMODE=3\r\n")
                self.state = WifiState.SET_MODE
        elif state is WifiState.SET_MODE:
            if self._take_ok():
                command = f'AT+CWJAP="{self.ssid}","{self.password}"\r\n'
                self.port.transmit(command.encode("ascii"))
                self.state = WifiState.CONNECT
        elif state is WifiState.CONNECT:
            if self._take_ok():
                command = f'AT+CIPSTART="TCP","{self.host}",{self.tcp_port}\r\n'
                self.port.transmit(command.encode("ascii"))
                self.state = WifiState.TCP_CONNECT
        elif state is WifiState.TCP_CONNECT:
            if self._take_ok():
                self.state = WifiState.CONNECTED
                self._configured = True
        elif state is WifiState.RESET:
            if self._first_reset_iteration:
                self.port.transmit(b"AT+RST\r\n")
                self._first_reset_iteration = False
            if self._take_ok():
                self.state = WifiState.SET_MODE
                self._first_reset_iteration = True

    def is_connected(self) -> bool:
        return self.state is WifiState.CONNECTED

    def send(self, value: int) -> None:
        """Queue a non-negative value for sending over the TCP link."""
        if value < 0:
            raise ValueError(f"cannot send a negative value: {value}")
        if len(self._queue) + 2 > self._queue.capacity:
            raise QueueFullError("send queue is full")
        was_empty = self._queue.is_empty()
        self._queue.enqueue(self._send_length, value)
        self._queue.enqueue(self._send_data, value)
        if was_empty:
            self._timer.stop()
            self._timer.start()

    def process_next(self) -> None:
        """Run the next queued step and rearm the timer, or stop it if idle."""
        if self._queue.is_empty():
            self._timer.stop()
            return
        task = self._queue.dequeue()
        task()
        self._timer.stop()
        self._timer.start()

    def _send_length(self, value: int) -> None:
        command = f"AT+CIPSEND={digit_count(value)}\r\n"
        self.port.transmit(command.encode("ascii"))
        self._ok_for_data = False

    def _send_data(self, value: int) -> None:
        if self._ok_for_data:
            self.port.transmit_decimal(value)
            self._ok_for_data = False