# tests/conftest.py
"""
Shared fixtures for the PolSim Core test suite.

Provides scripted stand-ins for the two external collaborators of the simulation
loop (the controller byte channel and the wall clock), plus small factories that
wire a state, engine, writer and runner together the way `run_scenario` does.
"""
import io

import numpy as np
import pytest

from polsim_core.config import SimulationConfig
from polsim_core.dynamics import BeamController, PolarizationEngine
from polsim_core.output import DataWriter
from polsim_core.protocol import ControllerCodec, ControllerLink, NO_DATA
from polsim_core.scenario import ScenarioInterpreter
from polsim_core.simulation import SimulationRunner
from polsim_core.state import SimulationState


class ScriptedChannel:
    """A ByteChannel fed from a byte script; records everything written."""

    def __init__(self, incoming: bytes = b""):
        self.incoming = bytearray(incoming)
        self.written = bytearray()
        self.closed = False

    def feed(self, data: bytes):
        self.incoming.extend(data)

    def poll_byte(self) -> int:
        if not self.incoming:
            return NO_DATA
        return self.incoming.pop(0)

    def read_exact(self, count: int) -> bytes:
        # A real channel would block here; in tests that is always a scripting bug.
        assert len(self.incoming) >= count, f"read of {count} byte(s) would block forever"
        data = bytes(self.incoming[:count])
        del self.incoming[:count]
        return data

    def write(self, data: bytes) -> None:
        self.written.extend(data)

    def close(self) -> None:
        self.closed = True


class FakeClock:
    """Advances by `tick` seconds every time it is read."""

    def __init__(self, tick: float = 0.5, start: float = 0.0):
        self.tick = tick
        self.current = start
        self.reads = 0

    def now(self) -> float:
        value = self.current
        self.current += self.tick
        self.reads += 1
        return value


@pytest.fixture
def channel():
    return ScriptedChannel()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def config():
    return SimulationConfig()


@pytest.fixture
def state(config):
    return SimulationState.from_config(config)


@pytest.fixture
def fast_engine():
    """Coarser integration keeps multi-step tests quick; dynamics are unchanged in kind."""
    return PolarizationEngine(delta_t=1.0, substeps=50, rng=np.random.default_rng(1234))


@pytest.fixture
def output_stream():
    return io.StringIO()


@pytest.fixture
def writer(output_stream):
    return DataWriter(output_stream)


@pytest.fixture
def make_runner(fast_engine, writer, fake_clock):
    """Builds a runner for `state`; paced states get a link on `channel`."""
    def _make(state, channel=None, delay=1.0):
        link = None
        if state.serial_on:
            link = ControllerLink(ControllerCodec(channel if channel is not None else ScriptedChannel()), state)
        runner = SimulationRunner(state, fast_engine, writer, delay=delay, link=link, clock=fake_clock)
        if link is not None:
            link.on_row = runner.emit_row
        return runner
    return _make


@pytest.fixture
def make_interpreter(make_runner, config):
    def _make(state, channel=None):
        runner = make_runner(state, channel)
        return ScenarioInterpreter(state, runner, BeamController(state, config.dose_rate))
    return _make


def data_rows(text: str):
    """Splits written output into rows of column strings, skipping the header."""
    return [line.split() for line in text.splitlines() if line and not line.startswith("#")]


@pytest.fixture
def parse_rows():
    return data_rows
