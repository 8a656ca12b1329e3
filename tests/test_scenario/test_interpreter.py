# tests/test_scenario/test_interpreter.py
import pytest

from polsim_core.scenario import (
    DuplicateInitBlockError,
    RejectionCode,
    resolve_serial_mode,
    tokenize,
    tokenize_lines,
)


def run(interpreter, text):
    return interpreter.run(tokenize_lines(text.splitlines()))


def codes(rejections):
    return [r.code for r in rejections]


# --- Init block ---

class TestInitBlock:

    def test_parameters_inside_init_block(self, state, make_interpreter):
        interpreter = make_interpreter(state)
        rejections = run(interpreter, "init\nmfld 2.5\ntemp 1.62\nrand on\ndone")

        assert rejections == []
        assert state.field == 2.5
        assert state.temperature == 1.62
        assert state.randomness_on is True
        assert state.steady_state == pytest.approx(0.72, abs=0.005)
        assert state.did_init and not state.in_init_block

    def test_parameter_outside_init_block_is_rejected(self, state, make_interpreter):
        rejections = run(make_interpreter(state), "mfld 2.5")
        assert codes(rejections) == [RejectionCode.NOT_IN_INIT_BLOCK]
        assert state.field == 5.0

    def test_time_inside_init_block_is_rejected(self, state, make_interpreter):
        rejections = run(make_interpreter(state), "init\ntime 5\ndone")
        assert codes(rejections) == [RejectionCode.INSIDE_INIT_BLOCK]
        assert state.time == 0.0

    def test_trip_inside_init_block_is_rejected(self, state, make_interpreter):
        rejections = run(make_interpreter(state), "init\ntrip 4\ndone")
        assert codes(rejections) == [RejectionCode.INSIDE_INIT_BLOCK]

    def test_anneal_allowed_inside_init_block(self, state, make_interpreter):
        rejections = run(make_interpreter(state), "init\nannl 3 80\ndone")
        assert rejections == []
        assert state.anneal_count == 1
        assert state.time == 3.0

    def test_nested_init_is_rejected(self, state, make_interpreter):
        rejections = run(make_interpreter(state), "init\ninit\ndone")
        assert codes(rejections) == [RejectionCode.INIT_ALREADY_OPEN]
        assert state.did_init

    def test_unmatched_done_is_rejected(self, state, make_interpreter):
        assert codes(run(make_interpreter(state), "done")) == [RejectionCode.NO_OPEN_INIT_BLOCK]

    def test_second_init_block_is_fatal(self, state, make_interpreter):
        interpreter = make_interpreter(state)
        with pytest.raises(DuplicateInitBlockError) as excinfo:
            run(interpreter, "init\ndone\ntime 1\ninit")
        assert excinfo.value.line_number == 4
        assert excinfo.value.first_block_line == 1
        assert "Duplicate Init Block" in excinfo.value.get_diagnostic_report()

    def test_steady_state_sets_base_value(self, state, make_interpreter):
        rejections = run(make_interpreter(state), "init\nsdst 0.8\ntemp 1.5\ndone")
        assert rejections == []
        assert state.base_steady_state == 0.8
        assert state.steady_state < 0.8

    def test_steady_state_after_temperature_is_scaled(self, state, make_interpreter):
        run(make_interpreter(state), "init\ntemp 1.5\nsdst 0.9\ndone")
        assert state.base_steady_state == 0.9
        assert state.steady_state == pytest.approx(0.72, abs=0.005)

    def test_steady_state_above_one_is_rejected(self, state, make_interpreter):
        rejections = run(make_interpreter(state), "init\nsdst 1.2\ndone")
        assert codes(rejections) == [RejectionCode.INVALID_ARGUMENT]
        assert state.base_steady_state == 0.95


# --- Rejections ---

def test_unknown_command_is_rejected_and_skipped(state, make_interpreter):
    interpreter = make_interpreter(state)
    rejections = run(interpreter, "warp 9\ntime 2")
    assert codes(rejections) == [RejectionCode.UNKNOWN_COMMAND]
    assert rejections[0].line_number == 1
    assert "warp" in str(rejections[0])
    assert state.time == 2.0


def test_missing_argument(state, make_interpreter):
    rejections = run(make_interpreter(state), "annl 5")
    assert codes(rejections) == [RejectionCode.MISSING_ARGUMENT]
    assert rejections[0].details == {"command": "annl", "expected": 2, "given": 1}
    assert state.anneal_count == 0


def test_invalid_number(state, make_interpreter):
    rejections = run(make_interpreter(state), "freq xyzzy")
    assert codes(rejections) == [RejectionCode.INVALID_ARGUMENT]
    assert state.frequency == 140.145


def test_wrong_dimension_is_rejected(state, make_interpreter):
    rejections = run(make_interpreter(state), "freq 5kelvin")
    assert codes(rejections) == [RejectionCode.INVALID_ARGUMENT]


@pytest.mark.parametrize("template", ["time {}", "freq {}", "annl {} 80"])
@pytest.mark.parametrize("token", ["+", "-", "(", "1/0", "2**99999"])
def test_malformed_expression_is_rejected_and_run_continues(state, make_interpreter, template, token):
    rejections = run(make_interpreter(state), template.format(token) + "\ntime 2")
    assert codes(rejections) == [RejectionCode.INVALID_ARGUMENT]
    assert rejections[0].line_number == 1
    assert state.time == 2.0
    assert state.frequency == 140.145
    assert state.anneal_count == 0


def test_invalid_switch(state, make_interpreter):
    rejections = run(make_interpreter(state), "beam maybe")
    assert codes(rejections) == [RejectionCode.INVALID_SWITCH]
    assert state.dose_rate == 0.0


def test_negative_duration_is_rejected(state, make_interpreter):
    assert codes(run(make_interpreter(state), "trip -4")) == [RejectionCode.INVALID_ARGUMENT]


def test_serial_after_first_line_is_rejected(state, make_interpreter):
    rejections = run(make_interpreter(state), "serial on")
    assert codes(rejections) == [RejectionCode.SERIAL_NOT_FIRST]
    assert state.serial_on is False


def test_follow_rejected_while_serial(make_interpreter, state):
    state.serial_on = True
    rejections = run(make_interpreter(state), "fllw on")
    assert codes(rejections) == [RejectionCode.FOLLOW_WHILE_SERIAL]
    assert state.follow_frequency is False


def test_rejection_message_formatting():
    message = RejectionCode.MISSING_ARGUMENT.format_message(command="time", expected=1, given=0)
    assert message == "Command 'time' expects 1 argument(s), got 0."
    assert RejectionCode.MISSING_ARGUMENT.code == "SCN_ARGS"


# --- Running commands ---

def test_time_runs_to_absolute_target(state, make_interpreter, output_stream, parse_rows):
    run(make_interpreter(state), "time 5")
    rows = parse_rows(output_stream.getvalue())
    assert [float(r[0]) for r in rows] == [1.0, 2.0, 3.0, 4.0, 5.0]


def test_time_in_the_past_runs_nothing(state, make_interpreter, output_stream, parse_rows):
    run(make_interpreter(state), "time 3\ntime 2")
    assert state.time == 3.0
    assert len(parse_rows(output_stream.getvalue())) == 3


def test_relative_time(state, make_interpreter):
    run(make_interpreter(state), "time 3\ntime +5")
    assert state.time == 8.0


def test_time_with_units(state, make_interpreter):
    run(make_interpreter(state), "time 1min")
    assert state.time == 60.0


def test_frequency_with_units(state, make_interpreter):
    assert run(make_interpreter(state), "freq 140200MHz") == []
    assert state.frequency == pytest.approx(140.2)


def test_beam_on_and_off(state, make_interpreter, config):
    interpreter = make_interpreter(state)
    run(interpreter, "beam on\ntime 2")
    assert state.dose_rate == config.dose_rate
    assert state.dose == pytest.approx(2 * config.dose_rate)
    run(interpreter, "beam off\ntime 4")
    assert state.dose_rate == 0.0
    assert state.dose == pytest.approx(2 * config.dose_rate)


def test_follow_toggles(state, make_interpreter):
    interpreter = make_interpreter(state)
    run(interpreter, "fllw on")
    assert state.follow_frequency is True
    run(interpreter, "fllw off")
    assert state.follow_frequency is False


def test_trip_advances_full_duration(state, make_interpreter, output_stream, parse_rows):
    run(make_interpreter(state), "trip 6")
    assert state.time == 6.0
    assert state.tripping is False
    assert len(parse_rows(output_stream.getvalue())) == 6


def test_anneal_writes_zero_polarization_rows(state, make_interpreter, output_stream, parse_rows):
    run(make_interpreter(state), "time 2\nannl 3 80\ntime 6")
    rows = parse_rows(output_stream.getvalue())
    assert [float(r[0]) for r in rows] == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    assert [float(r[2]) for r in rows[2:5]] == [0.0, 0.0, 0.0]
    assert float(rows[5][2]) > float(rows[1][2])
    assert state.anneal_count == 1


# --- Serial mode selection ---

@pytest.mark.parametrize("text, default, expected, code", [
    ("serial on", False, True, None),
    ("serial off", True, False, None),
    ("serial maybe", True, True, RejectionCode.INVALID_SWITCH),
    ("serial", False, False, RejectionCode.MISSING_ARGUMENT),
])
def test_resolve_serial_mode(text, default, expected, code):
    serial_on, rejection = resolve_serial_mode(tokenize(text, 1), default)
    assert serial_on is expected
    assert (rejection.code if rejection else None) is code
