import io
from datetime import timedelta

import pytest

from kinestudy.display import (
    AnimationDisplay,
    AnimationStyle,
    CounterDisplay,
    Speedometer,
    StatusDisplay,
    as_duration,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_as_duration_accepts_numbers_and_timedeltas():
    assert as_duration(2) == 2.0
    assert as_duration(timedelta(milliseconds=250)) == 0.25


def test_speedometer_rejects_bad_discount():
    with pytest.raises(ValueError):
        Speedometer(lambda: 0, 1.5)
    with pytest.raises(ValueError):
        Speedometer(lambda: 0, -0.1)


def test_speedometer_zero_duration_gives_zero():
    clock = FakeClock()
    sm = Speedometer(lambda: 3, 0.5, clock=clock)
    assert sm.speed() == 0.0


def test_speedometer_full_discount_uses_last_increment():
    value = [0]
    clock = FakeClock()
    sm = Speedometer(lambda: value[0], 1.0, clock=clock)
    value[0] = 10
    clock.now = 2.0
    assert sm.speed() == pytest.approx(10 / 2.0)


def test_render_speed_format():
    value = [0]
    clock = FakeClock()
    sm = Speedometer(lambda: value[0], 1.0, clock=clock)
    value[0] = 10
    clock.now = 2.0
    out = io.StringIO()
    sm.render_speed(out, "it/s", " ")
    assert out.getvalue() == "(5.00 it/s) "


def test_render_speed_without_unit():
    clock = FakeClock()
    sm = Speedometer(lambda: 0, 1.0, clock=clock)
    out = io.StringIO()
    sm.render_speed(out, "", "")
    assert out.getvalue() == "(0.00)"


def test_animation_no_tty_draws_first_two_stills():
    out = io.StringIO()
    anim = AnimationDisplay(out=out, message="loading", interval=30, no_tty=True)
    anim.done()
    stills = AnimationStyle.ELLIPSIS.stills
    assert out.getvalue() == f"loading {stills[0]} \nloading {stills[1]} \n\n"


def test_animation_custom_stills_start_at_second():
    out = io.StringIO()
    anim = AnimationDisplay(out=out, style=["a", "b", "c"], interval=30, no_tty=True)
    anim.done()
    assert out.getvalue().split("\n")[:2] == ["b ", "c "]


def test_animation_empty_custom_stills_rejected():
    with pytest.raises(ValueError):
        AnimationDisplay(style=[], show=False)


def test_tty_mode_clears_line_first():
    out = io.StringIO()
    anim = AnimationDisplay(out=out, style=["x"], interval=30)
    anim.done()
    assert out.getvalue().startswith("\r\033[K")
    assert out.getvalue().endswith("\n")


def test_context_manager_runs_and_stops():
    out = io.StringIO()
    with AnimationDisplay(out=out, interval=30, no_tty=True, show=False) as anim:
        assert anim.running()
    assert not anim.running()


def test_status_message_round_trip():
    status = StatusDisplay(out=io.StringIO(), message="first", show=False)
    status.message = "second"
    assert status.message == "second"


def test_status_renders_updated_message():
    out = io.StringIO()
    status = StatusDisplay(out=out, message="one", style=["*"], interval=30, no_tty=True, show=False)
    status.message = "two"
    status.show()
    status.done()
    assert out.getvalue().startswith("two * \n")


def test_counter_with_format():
    out = io.StringIO()
    counter = CounterDisplay(lambda: 7, out=out, fmt="{value} done", interval=30, no_tty=True)
    counter.done()
    assert out.getvalue().startswith("7 done \n")


def test_counter_float_value_has_two_decimals():
    out = io.StringIO()
    counter = CounterDisplay(lambda: 2.5, out=out, message="n", interval=30, no_tty=True)
    counter.done()
    assert out.getvalue().startswith("n 2.50 \n")


def test_counter_with_speed_appends_unit():
    out = io.StringIO()
    counter = CounterDisplay(lambda: 4, out=out, speed=0.5, speed_unit="ev/s",
                             interval=30, no_tty=True)
    counter.done()
    first = out.getvalue().split("\n")[0]
    assert first.startswith("4 (")
    assert first.endswith(" ev/s) ")


def test_negative_interval_rejected():
    with pytest.raises(ValueError):
        CounterDisplay(lambda: 0, out=io.StringIO(), interval=-1, show=False)


def test_done_without_show_is_noop():
    counter = CounterDisplay(lambda: 0, out=io.StringIO(), show=False)
    counter.done()
    assert counter.running() is False
    assert counter.out.getvalue() == ""