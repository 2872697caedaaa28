"""Asynchronous terminal displays: animations, status lines and counters."""

from __future__ import annotations

import abc
import enum
import sys
import threading
import time
from collections.abc import Callable, Sequence
from datetime import timedelta
from typing import Optional, TextIO, Union

RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
MAGENTA = "\033[35m"
CYAN = "\033[36m"
RESET = "\033[0m"

COLORS = {
    "red": RED,
    "green": GREEN,
    "yellow": YELLOW,
    "blue": BLUE,
    "magenta": MAGENTA,
    "cyan": CYAN,
    "reset": RESET,
}

_CLEAR_LINE = "\033[K"
_CURSOR_UP = "\033[A"
_NO_TTY_INTERVAL = 60.0

Interval = Union[float, int, timedelta]


def as_duration(interval: Interval) -> float:
    """Interval in seconds, from a number of seconds or a timedelta."""
    if isinstance(interval, timedelta):
        return interval.total_seconds()
    return float(interval)


class AnimationStyle(enum.Enum):
    """Built-in animations, each a sequence of stills and a refresh interval."""

    ELLIPSIS = ((".  ", ".. ", "..."), 0.5)
    CLOCK = (
        ("🕐", "🕜", "🕑", "🕝", "🕒", "🕞", "🕓", "🕟", "🕔", "🕠", "🕕", "🕡",
         "🕖", "🕢", "🕗", "🕣", "🕘", "🕤", "🕙", "🕥", "🕚", "🕦", "🕛", "🕧"),
        0.5,
    )
    MOON = (("🌕", "🌖", "🌗", "🌘", "🌑", "🌒", "🌓", "🌔"), 0.5)
    EARTH = (("🌎", "🌍", "🌏"), 0.5)
    BAR = (("-", "/", "|", "\\"), 0.5)
    UNICODE_BAR = (("╶─╴", " ╱ ", " │ ", " ╲ "), 0.5)
    BOUNCE = (
        (
            "●                  ", "●                  ", "●                  ",
            "●                  ", " ●                 ", "  ●                ",
            "   ●               ", "     ●             ", "       ●           ",
            "         ●         ", "           ●       ", "             ●     ",
            "               ●   ", "                ●  ", "                 ● ",
            "                  ●", "                  ●", "                  ●",
            "                  ●", "                 ● ", "                ●  ",
            "               ●   ", "             ●     ", "           ●       ",
            "         ●         ", "       ●           ", "     ●             ",
            "   ●               ", "  ●                ", " ●                 ",
        ),
        0.05,
    )

    @property
    def stills(self) -> tuple[str, ...]:
        return self.value[0]

    @property
    def interval(self) -> float:
        return self.value[1]


class AsyncDisplayer:
    """Runs the refresh loop of a display in a worker thread."""

    def __init__(self, parent: BaseDisplay, out: TextIO, interval: float, no_tty: bool) -> None:
        if interval < 0:
            raise ValueError("display interval must not be negative")
        self.parent = parent
        self.out = out
        self.interval = interval
        self.no_tty = no_tty
        self._thread: Optional[threading.Thread] = None
        self._cond = threading.Condition()
        self._done = False
        self._last_newlines = 0

    def _display(self, redraw: bool = False) -> None:
        if not self.no_tty:
            self.out.write("\r" + _CLEAR_LINE)
            self.out.write((_CURSOR_UP + _CLEAR_LINE) * self._last_newlines)
        self._last_newlines = self.parent._render(redraw, " ")
        if self.no_tty:
            self.out.write("\n")
        self.out.flush()

    def _run(self) -> None:
        self._display()
        while True:
            start = time.monotonic()
            remaining = self.interval
            with self._cond:
                done = self._done
                while not done and remaining >= 0:
                    self._cond.wait(remaining)
                    remaining = self.interval - (time.monotonic() - start)
                    if remaining > 0 and not self.no_tty:
                        # early wake-up: redraw without advancing animations
                        self._display(redraw=True)
                    done = self._done
            self._display()
            if done:
                self.out.write("\n")
                self.out.flush()
                break

    def running(self) -> bool:
        """True while the display thread is alive and not yet joined."""
        return self._thread is not None

    def notify(self) -> None:
        """Wake the display thread so that it redraws."""
        with self._cond:
            self._cond.notify_all()

    def show(self) -> None:
        """Start the refresh loop; does nothing if it is already running."""
        if self.running():
            return
        if self.interval <= 0:
            raise ValueError("display interval must be positive")
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def done(self) -> None:
        """Stop the refresh loop after a final draw; does nothing if not running."""
        if self._thread is None:
            return
        with self._cond:
            self._done = True
            self._cond.notify_all()
        self._thread.join()
        self._thread = None


class BaseDisplay(abc.ABC):
    """Common machinery of every display; usable as a context manager."""

    def __init__(
        self,
        out: Optional[TextIO] = None,
        interval: Interval = 0.5,
        message: str = "",
        fmt: str = "",
        no_tty: bool = False,
    ) -> None:
        self._displayer = AsyncDisplayer(
            self, out if out is not None else sys.stdout, as_duration(interval), no_tty
        )
        self._message = message
        self._format = fmt

    @abc.abstractmethod
    def _render(self, redraw: bool = False, end: str = " ") -> int:
        """Write the display and return the number of newlines written."""

    def _render_message(self) -> int:
        if self._message:
            self.out.write(self._message + " ")
        return self._message.count("\n")

    @property
    def out(self) -> TextIO:
        """Stream the display writes to."""
        return self._displayer.out

    def start(self) -> None:
        """Prepare the display (e.g. speed measurement) without drawing."""

    def show(self) -> None:
        """Start drawing the display."""
        self.start()
        self._displayer.show()

    def done(self) -> None:
        """Stop drawing the display."""
        self._displayer.done()

    def running(self) -> bool:
        """True while the display is being drawn."""
        return self._displayer.running()

    def __enter__(self) -> BaseDisplay:
        self.show()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.done()


class AnimationDisplay(BaseDisplay):
    """A message followed by a looping animation."""

    def __init__(
        self,
        out: Optional[TextIO] = None,
        message: str = "",
        style: Union[AnimationStyle, Sequence[str]] = AnimationStyle.ELLIPSIS,
        interval: Interval = 0.0,
        no_tty: bool = False,
        show: bool = True,
    ) -> None:
        if isinstance(style, AnimationStyle):
            self._stills = list(style.stills)
            default = style.interval
            # start on the last still; the first draw advances to the first
            self._frame = len(self._stills) - 1
        else:
            self._stills = list(style)
            if not self._stills:
                raise ValueError("an animation needs at least one still")
            default = 0.5
            self._frame = 0
        seconds = as_duration(interval)
        if seconds == 0:
            seconds = _NO_TTY_INTERVAL if no_tty else default
        super().__init__(out, seconds, message, "", no_tty)
        if show:
            self.show()

    def _render(self, redraw: bool = False, end: str = " ") -> int:
        newlines = self._render_message()
        self._advance(redraw, end)
        return newlines

    def _advance(self, redraw: bool, end: str) -> None:
        if not redraw:
            self._frame = (self._frame + 1) % len(self._stills)
        self.out.write(self._stills[self._frame] + end)


class StatusDisplay(AnimationDisplay):
    """An animation whose message can be changed while it runs."""

    def __init__(self, *args, **kwargs) -> None:
        self._message_lock = threading.Lock()
        super().__init__(*args, **kwargs)

    def _render(self, redraw: bool = False, end: str = " ") -> int:
        with self._message_lock:
            newlines = self._render_message()
        self._advance(redraw, end)
        return newlines

    @property
    def message(self) -> str:
        """The displayed message; setting it triggers a redraw."""
        with self._message_lock:
            return self._message

    @message.setter
    def message(self, text: str) -> None:
        with self._message_lock:
            self._message = text
        self._displayer.notify()


class Speedometer:
    """Discounted moving estimate of how fast a monitored value changes."""

    def __init__(
        self,
        progress: Callable[[], float],
        discount: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not 0 <= discount <= 1:
            raise ValueError("discount must be in [0, 1]")
        self._progress = progress
        self._discount = discount
        self._clock = clock
        self._progress_sum = 0.0
        self._duration_sum = 0.0
        self._last_time = clock()
        self._last_progress = progress()

    def speed(self) -> float:
        """Current speed in units of progress per second."""
        now = self._clock()
        duration = now - self._last_time
        self._last_time = now
        current = self._progress()
        increment = current - self._last_progress
        self._last_progress = current
        keep = 1 - self._discount
        self._progress_sum = keep * self._progress_sum + increment
        self._duration_sum = keep * self._duration_sum + duration
        if self._duration_sum == 0:
            return 0.0
        return self._progress_sum / self._duration_sum

    def render_speed(self, out: TextIO, speed_unit: str, end: str = " ") -> None:
        """Write the speed as ``(1.23 unit)`` followed by ``end``."""
        speed = self.speed()
        text = f"({speed:.2f})" if not speed_unit else f"({speed:.2f} {speed_unit})"
        out.write(text + end)

    def start(self) -> None:
        """Measure from the present value and time onwards."""
        self._last_progress = self._progress()
        self._last_time = self._clock()


def _format_value(value: object) -> str:
    return f"{value:.2f}" if isinstance(value, float) else str(value)


class CounterDisplay(BaseDisplay):
    """Shows the current value of a monitored quantity, optionally with its speed."""

    def __init__(
        self,
        progress: Callable[[], float],
        out: Optional[TextIO] = None,
        fmt: str = "",
        message: str = "",
        speed: Optional[float] = None,
        speed_unit: str = "it/s",
        interval: Interval = 0.0,
        no_tty: bool = False,
        show: bool = True,
    ) -> None:
        seconds = as_duration(interval)
        if seconds == 0:
            seconds = _NO_TTY_INTERVAL if no_tty else 0.1
        super().__init__(out, seconds, message, fmt + " " if fmt else "", no_tty)
        self._progress = progress
        self._speed_unit = speed_unit
        self._speedometer = Speedometer(progress, speed) if speed is not None else None
        if show:
            self.show()

    def _render(self, redraw: bool = False, end: str = " ") -> int:
        if self._format:
            fields = dict(COLORS, value=self._progress())
            if self._speedometer is not None:
                fields["speed"] = self._speedometer.speed()
            self.out.write(self._format.format(**fields))
            return self._format.count("\n")
        newlines = self._render_message()
        self.out.write(_format_value(self._progress()) + (" " if self._speedometer else end))
        if self._speedometer is not None:
            self._speedometer.render_speed(self.out, self._speed_unit, end)
        return newlines + end.count("\n")

    def start(self) -> None:
        if self._speedometer is not None:
            self._speedometer.start()