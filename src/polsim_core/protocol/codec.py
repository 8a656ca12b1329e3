# src/polsim_core/protocol/codec.py
"""
Wire encoding for the controller link.

All multi-byte values travel most-significant byte first. The module-level
encode/decode functions are pure; `ControllerCodec` binds them to a channel.
"""
import logging
import struct

from .channel import ByteChannel, NO_DATA

logger = logging.getLogger(__name__)

_INT32 = struct.Struct(">i")
_UINT32 = struct.Struct(">I")
_FLOAT32 = struct.Struct(">f")

PAYLOAD_SIZE = 4


def encode_int32(value: int) -> bytes:
    return _INT32.pack(value)

def decode_int32(data: bytes) -> int:
    return _INT32.unpack(data)[0]

def encode_uint32(value: int) -> bytes:
    """Encodes the low 32 bits of `value`."""
    return _UINT32.pack(value & 0xFFFFFFFF)

def decode_uint32(data: bytes) -> int:
    return _UINT32.unpack(data)[0]

def encode_float(value: float) -> bytes:
    return _FLOAT32.pack(value)

def decode_float(data: bytes) -> float:
    return _FLOAT32.unpack(data)[0]


class ControllerCodec:
    """Reads and writes typed values over a `ByteChannel`."""

    def __init__(self, channel: ByteChannel):
        self.channel = channel

    def poll_control(self) -> int:
        """Non-blocking: the next control byte, or NO_DATA."""
        return self.channel.poll_byte()

    def read_int32(self) -> int:
        return decode_int32(self.channel.read_exact(PAYLOAD_SIZE))

    def read_float(self) -> float:
        return decode_float(self.channel.read_exact(PAYLOAD_SIZE))

    def read_string(self) -> str:
        """Reads a NUL-terminated byte string, blocking for each byte."""
        buffer = bytearray()
        while True:
            byte = self.channel.read_exact(1)[0]
            if byte == NO_DATA:
                break
            buffer.append(byte)
        return buffer.decode("ascii", errors="replace")

    def write_bytes(self, *values: int) -> None:
        self.channel.write(bytes(values))

    def write_int32(self, value: int) -> None:
        self.channel.write(encode_int32(value))

    def write_uint32(self, value: int) -> None:
        self.channel.write(encode_uint32(value))

    def write_float(self, value: float) -> None:
        self.channel.write(encode_float(value))
