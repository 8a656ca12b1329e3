# src/polsim_core/protocol/__init__.py
from .channel import ByteChannel, SerialChannel, NO_DATA
from .codec import (
    ControllerCodec,
    encode_int32, decode_int32,
    encode_uint32, decode_uint32,
    encode_float, decode_float,
)
from .link import ControllerLink, ControlByte, CONFIRMATION_SEQUENCE
from .exceptions import ChannelOpenError

__all__ = [
    # Channels
    "ByteChannel", "SerialChannel", "NO_DATA",
    # Codec
    "ControllerCodec",
    "encode_int32", "decode_int32",
    "encode_uint32", "decode_uint32",
    "encode_float", "decode_float",
    # Command servicing
    "ControllerLink", "ControlByte", "CONFIRMATION_SEQUENCE",
    # Exceptions
    "ChannelOpenError",
]
