# src/polsim_core/protocol/link.py
import logging
import time
from enum import IntEnum
from typing import Callable, Dict, Optional

from ..state import SimulationState
from .channel import NO_DATA
from .codec import ControllerCodec

logger = logging.getLogger(__name__)


class ControlByte(IntEnum):
    """Control bytes sent by the controller; each selects exactly one action."""
    SET_FREQUENCY = 0x11
    CONFIRM = 0x33
    EVENT_NUMBER = 0x77
    SET_DIRECTION = 0x88
    SET_POLARIZATION_RATE = 0xBB
    MESSAGE = 0xEE
    GET_POLARIZATION = 0xFF


#: Reply to a confirmation request.
CONFIRMATION_SEQUENCE = (0xBE, 0xEF)


class ControllerLink:
    """
    Services the controller's command stream against the simulation state.

    The host never writes unprompted: every reply is triggered by a control byte.
    The direction (0x88) is the last value the controller sends in each cycle, so
    receiving it completes a data row and fires `on_row`.
    """

    def __init__(
        self,
        codec: ControllerCodec,
        state: SimulationState,
        on_row: Optional[Callable[[SimulationState], None]] = None,
        wall_time: Callable[[], float] = time.time,
    ):
        self.codec = codec
        self.state = state
        self.on_row = on_row
        self._wall_time = wall_time
        self._handlers: Dict[int, Callable[[], None]] = {
            ControlByte.SET_FREQUENCY: self._rx_frequency,
            ControlByte.CONFIRM: self._tx_confirmation,
            ControlByte.EVENT_NUMBER: self._tx_event_number,
            ControlByte.SET_DIRECTION: self._rx_direction,
            ControlByte.SET_POLARIZATION_RATE: self._rx_polarization_rate,
            ControlByte.MESSAGE: self._rx_message,
            ControlByte.GET_POLARIZATION: self._tx_polarization,
        }

    def service_pending(self) -> int:
        """
        Processes control bytes until none is pending.

        Returns:
            The number of control bytes consumed, recognized or not.
        """
        handled = 0
        while (control := self.codec.poll_control()) != NO_DATA:
            handled += 1
            handler = self._handlers.get(control)
            if handler is None:
                logger.warning(f"Received unknown control byte: 0x{control:02X}")
                continue
            handler()
        return handled

    def _rx_frequency(self):
        mhz = self.codec.read_int32()
        self.state.frequency = mhz / 1000.0
        logger.debug(f"Reading frequency: {self.state.frequency:f} GHz")

    def _tx_confirmation(self):
        logger.debug("Confirmation requested")
        self.codec.write_bytes(*CONFIRMATION_SEQUENCE)

    def _tx_event_number(self):
        event_number = int(self._wall_time()) & 0xFFFFFFFF
        logger.debug(f"Writing event number {event_number}")
        self.codec.write_uint32(event_number)

    def _rx_direction(self):
        self.state.direction = self.codec.read_int32()
        logger.debug(f"Reading motor direction: {self.state.direction}")
        if self.on_row is not None:
            self.on_row(self.state)

    def _rx_polarization_rate(self):
        self.state.polarization_rate = self.codec.read_float()
        logger.debug(f"Reading polarization rate: {self.state.polarization_rate:f}")

    def _rx_message(self):
        message = self.codec.read_string()
        logger.info(f'Message: "{message}"')

    def _tx_polarization(self):
        logger.debug(f"Writing polarization: {self.state.polarization:f}")
        self.codec.write_float(self.state.polarization)
