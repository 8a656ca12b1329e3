# src/polsim_core/protocol/channel.py
"""
Byte channels to the hardware controller.

`ByteChannel` is the only surface the codec sees: a non-blocking single-byte poll,
a blocking exact-length read and a write. `SerialChannel` implements it on top of
pyserial; tests substitute a scripted source.
"""
import logging
from typing import Protocol, runtime_checkable

import serial

from .exceptions import ChannelOpenError

logger = logging.getLogger(__name__)

#: Returned by `poll_byte` when nothing is pending. Never a valid control byte.
NO_DATA = 0x00


@runtime_checkable
class ByteChannel(Protocol):
    def poll_byte(self) -> int:
        """Returns the next pending byte, or NO_DATA without waiting."""
        ...

    def read_exact(self, count: int) -> bytes:
        """Blocks until exactly `count` bytes have been received."""
        ...

    def write(self, data: bytes) -> None:
        ...

    def close(self) -> None:
        ...


class SerialChannel:
    """A `ByteChannel` over a pyserial port opened 8N1."""

    def __init__(self, port: serial.Serial):
        self._port = port

    @classmethod
    def open(cls, device: str, baudrate: int = 9600) -> "SerialChannel":
        logger.info(f"Opening controller port {device} at {baudrate} baud...")
        try:
            port = serial.Serial(
                device,
                baudrate=baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=None,  # reads block until satisfied
            )
        except (serial.SerialException, ValueError) as e:
            logger.error(f"Could not open port {device}: {e}")
            raise ChannelOpenError(device=device, details=str(e)) from e
        logger.info(f"Controller port {device} open.")
        return cls(port)

    def poll_byte(self) -> int:
        if not self._port.in_waiting:
            return NO_DATA
        data = self._port.read(1)
        return data[0] if data else NO_DATA

    def read_exact(self, count: int) -> bytes:
        data = bytearray()
        while len(data) < count:
            data.extend(self._port.read(count - len(data)))
        return bytes(data)

    def write(self, data: bytes) -> None:
        self._port.write(data)
        self._port.flush()

    def close(self) -> None:
        if self._port.is_open:
            self._port.close()
            logger.info("Controller port closed.")
