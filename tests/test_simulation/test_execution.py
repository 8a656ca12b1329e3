# tests/test_simulation/test_execution.py
import pytest

from polsim_core import (
    RunSummary,
    SimulationConfig,
    SimulationRunError,
    SimulationSetupError,
    run_scenario,
)
from polsim_core.output import HEADER
from polsim_core.protocol import ControlByte, encode_float, encode_int32
from polsim_core.scenario import RejectionCode
from polsim_core.simulation import default_output_path


@pytest.fixture
def fast_config():
    return SimulationConfig(substeps=50, seed=3)


def write_scenario(tmp_path, text, name="run.scn"):
    path = tmp_path / name
    path.write_text(text)
    return path


# --- Unpaced end-to-end ---

def test_five_second_run(tmp_path, parse_rows):
    scenario = write_scenario(tmp_path, "serial off\nfreq 140.145\ntime 5\n")
    summary = run_scenario(scenario, config=SimulationConfig())

    assert isinstance(summary, RunSummary)
    assert summary.output_path == default_output_path(scenario)
    assert summary.output_path.name == "run.scn.txt"
    assert summary.rows_written == 5
    assert summary.rejections == ()

    text = summary.output_path.read_text()
    assert text.splitlines()[0] == HEADER
    rows = parse_rows(text)
    assert [float(r[0]) for r in rows] == [1.0, 2.0, 3.0, 4.0, 5.0]
    polarizations = [float(r[2]) for r in rows]
    assert all(b > a for a, b in zip(polarizations, polarizations[1:]))
    assert all(float(r[3]) == 0.0 for r in rows)
    assert all(r[6] == "N/A" for r in rows)


def test_full_scenario(tmp_path, fast_config):
    scenario = write_scenario(tmp_path, (
        "# typical shift\n"
        "init\n"
        "mfld 5\n"
        "temp 1.0\n"
        "sdst 0.9\n"
        "done\n"
        "beam on\n"
        "time 10\n"
        "trip 4\n"
        "fllw on\n"
        "time +6\n"
        "beam off\n"
        "annl 5 80\n"
        "time 30\n"
    ))
    output = tmp_path / "out" / "data.txt"
    output.parent.mkdir()
    summary = run_scenario(scenario, output, fast_config)

    state = summary.final_state
    assert summary.output_path == output
    assert summary.rows_written == 30
    assert state.time == 30.0
    assert state.anneal_count == 1
    assert state.last_anneal_dose == pytest.approx(18 * fast_config.dose_rate)
    assert state.base_steady_state == 0.9
    assert state.polarization > 0


def test_rejections_are_collected_in_order(tmp_path, fast_config):
    scenario = write_scenario(tmp_path, "mfld 3\nwarp\ntime 1\nserial on\n")
    summary = run_scenario(scenario, tmp_path / "o.txt", fast_config)

    assert [r.code for r in summary.rejections] == [
        RejectionCode.NOT_IN_INIT_BLOCK, RejectionCode.UNKNOWN_COMMAND, RejectionCode.SERIAL_NOT_FIRST,
    ]
    assert [r.line_number for r in summary.rejections] == [1, 2, 4]
    assert summary.rows_written == 1


def test_invalid_serial_line_keeps_default(tmp_path, fast_config):
    scenario = write_scenario(tmp_path, "serial sideways\ntime 2\n")
    summary = run_scenario(scenario, tmp_path / "o.txt", fast_config)
    assert [r.code for r in summary.rejections] == [RejectionCode.INVALID_SWITCH]
    assert summary.final_state.serial_on is False
    assert summary.rows_written == 2


def test_seeded_fluctuations_are_reproducible(tmp_path, fast_config):
    scenario = write_scenario(tmp_path, "init\nrand on\ndone\ntime 20\n")
    first = run_scenario(scenario, tmp_path / "a.txt", fast_config)
    second = run_scenario(scenario, tmp_path / "b.txt", fast_config)
    assert first.final_state.polarization == second.final_state.polarization
    assert (tmp_path / "a.txt").read_text() == (tmp_path / "b.txt").read_text()


# --- Paced end-to-end ---

def test_paced_run_with_injected_channel(tmp_path, fast_config, channel, fake_clock, parse_rows):
    channel.feed(
        bytes([ControlByte.CONFIRM])
        + bytes([ControlByte.SET_FREQUENCY]) + encode_int32(140145)
        + bytes([ControlByte.SET_POLARIZATION_RATE]) + encode_float(0.5)
        + bytes([ControlByte.SET_DIRECTION]) + encode_int32(1)
    )
    scenario = write_scenario(tmp_path, "serial on\ntime 2\n")
    summary = run_scenario(scenario, tmp_path / "o.txt", fast_config, channel=channel, clock=fake_clock)

    assert summary.final_state.serial_on is True
    assert summary.final_state.time == 2.0
    assert summary.rows_written == 1
    assert parse_rows(summary.output_path.read_text())[0][6] == "1"
    assert bytes(channel.written) == b"\xbe\xef"
    # A channel passed in by the caller stays open.
    assert channel.closed is False


# --- Errors ---

def test_missing_scenario_is_setup_error(tmp_path):
    with pytest.raises(SimulationSetupError) as excinfo:
        run_scenario(tmp_path / "nope.scn")
    assert "Scenario File Error" in str(excinfo.value)


def test_unwritable_output_is_setup_error(tmp_path):
    scenario = write_scenario(tmp_path, "time 1\n")
    with pytest.raises(SimulationSetupError) as excinfo:
        run_scenario(scenario, tmp_path / "no" / "such" / "dir" / "out.txt")
    assert "Output File Error" in str(excinfo.value)


def test_unavailable_serial_port_is_setup_error(tmp_path):
    scenario = write_scenario(tmp_path, "serial on\ntime 1\n")
    config = SimulationConfig(serial_port=str(tmp_path / "no-such-port"))
    with pytest.raises(SimulationSetupError) as excinfo:
        run_scenario(scenario, tmp_path / "o.txt", config)
    assert "Controller Channel Error" in str(excinfo.value)


def test_duplicate_init_block_is_run_error(tmp_path, fast_config):
    scenario = write_scenario(tmp_path, "init\ndone\ntime 2\ninit\ndone\n")
    output = tmp_path / "o.txt"
    with pytest.raises(SimulationRunError) as excinfo:
        run_scenario(scenario, output, fast_config)
    assert "Duplicate Init Block" in str(excinfo.value)
    # Rows written before the failure are kept.
    assert len(output.read_text().splitlines()) == 3
