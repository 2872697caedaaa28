"""Progress bars, composite displays and iterables that report their own progress."""

from __future__ import annotations

import enum
from collections.abc import Callable, Collection, Iterable, Iterator
from dataclasses import dataclass
from typing import Generic, Optional, TextIO, TypeVar, Union

from kinestudy.display import (
    COLORS,
    CYAN,
    GREEN,
    RED,
    RESET,
    BaseDisplay,
    Interval,
    Speedometer,
    as_duration,
)

T = TypeVar("T")

BAR_WIDTH = 30
_NO_TTY_INTERVAL = 60.0
_DEFAULT_INTERVAL = 0.1

Number = Union[int, float]


@dataclass(frozen=True)
class BarParts:
    """The strings a progress bar is drawn from, with optional colour modifiers."""

    left: str
    right: str
    fill: tuple[str, ...]
    empty: tuple[str, ...]

    incomplete_left_modifier: str = ""
    complete_left_modifier: str = ""
    middle_modifier: str = ""
    right_modifier: str = ""

    percent_left_modifier: str = ""
    percent_right_modifier: str = ""

    value_left_modifier: str = ""
    value_right_modifier: str = ""

    speed_left_modifier: str = ""
    speed_right_modifier: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "fill", tuple(self.fill))
        object.__setattr__(self, "empty", tuple(self.empty))
        if not self.fill or not self.empty:
            raise ValueError("a progress bar needs at least one fill and one empty string")
        if len(self.empty) > 1 and len(self.empty) != len(self.fill):
            raise ValueError("partial empty strings must match the partial fill strings")


class ProgressBarStyle(enum.Enum):
    """Built-in progress bar looks."""

    BARS = "bars"
    BLOCKS = "blocks"
    RICH = "rich"
    LINE = "line"

    @property
    def parts(self) -> BarParts:
        return _STYLE_PARTS[self]


_STYLE_PARTS = {
    ProgressBarStyle.BARS: BarParts("|", "|", ("|",), (" ",)),
    ProgressBarStyle.BLOCKS: BarParts(
        "|", "|", ("▏", "▎", "▍", "▌", "▋", "▊", "▉", "█"), (" ",)
    ),
    ProgressBarStyle.RICH: BarParts(
        "",
        "",
        ("╸", "━"),
        ("╺", "━"),
        incomplete_left_modifier="\033[38;2;249;38;114m",
        complete_left_modifier="\033[38;2;114;156;31m",
        middle_modifier="\033[38;5;237m",
        right_modifier=RESET,
        percent_left_modifier=CYAN,
        percent_right_modifier=RESET,
        value_left_modifier=GREEN,
        value_right_modifier=RESET,
        speed_left_modifier=RED,
        speed_right_modifier=RESET,
    ),
    ProgressBarStyle.LINE: BarParts("", "", ("╾", "━"), ("─",)),
}


def _trunc_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


class ProgressBarDisplay(BaseDisplay):
    """Compares a monitored value with a total and draws percentage, bar and counts."""

    def __init__(
        self,
        progress: Callable[[], Number],
        out: Optional[TextIO] = None,
        total: Number = 100,
        fmt: str = "",
        message: str = "",
        speed: Optional[float] = None,
        speed_unit: str = "it/s",
        style: Union[ProgressBarStyle, BarParts] = ProgressBarStyle.BLOCKS,
        interval: Interval = 0.0,
        no_tty: bool = False,
        show: bool = True,
    ) -> None:
        seconds = as_duration(interval)
        if seconds == 0:
            seconds = _NO_TTY_INTERVAL if no_tty else _DEFAULT_INTERVAL
        super().__init__(out, seconds, message, fmt + " " if fmt else "", no_tty)
        self._progress = progress
        self._total = total
        self._parts = style.parts if isinstance(style, ProgressBarStyle) else style
        self._speed_unit = speed_unit
        self._speedometer = Speedometer(progress, speed) if speed is not None else None
        if show:
            self.show()

    def _is_float(self, progress: Number) -> bool:
        return isinstance(progress, float) or isinstance(self._total, float)

    def _percent(self, progress: Number) -> float:
        if self._total == 0:
            return 100.0
        return progress * 100.0 / self._total

    def _cells(self, progress: Number) -> tuple[int, int]:
        """Number of full cells and index of the partial fill string (0 for none)."""
        pieces = len(self._parts.fill)
        total = self._total
        if total == 0:
            on, partial = (BAR_WIDTH if progress >= 0 else 0), 0
        elif isinstance(progress, int) and isinstance(total, int):
            on = _trunc_div(BAR_WIDTH * progress, total)
            partial = _trunc_div(pieces * BAR_WIDTH * progress, total) - pieces * on
        else:
            on = int(BAR_WIDTH * progress / total)
            partial = int(pieces * BAR_WIDTH * progress / total - pieces * on)
        if on >= BAR_WIDTH:
            on, partial = BAR_WIDTH, 0
        elif on < 0:
            on, partial = 0, 0
        return on, max(partial, 0)

    def _bar(self, progress: Number) -> str:
        parts = self._parts
        on, partial = self._cells(progress)
        off = BAR_WIDTH - on - (1 if partial > 0 else 0)
        complete = progress >= self._total

        pieces = [parts.left]
        pieces.append(parts.complete_left_modifier if complete else parts.incomplete_left_modifier)
        pieces.append(parts.fill[-1] * on)
        if partial > 0:
            pieces.append(parts.fill[partial - 1])
        pieces.append(parts.middle_modifier)
        if off > 0:
            pieces.append(parts.empty[partial] if len(parts.empty) > 1 else parts.empty[-1])
            pieces.append(parts.empty[-1] * (off - 1))
        pieces.append(parts.right_modifier)
        pieces.append(parts.right)
        return "".join(pieces)

    def _counts(self, progress: Number, end: str) -> str:
        if self._is_float(progress):
            total_text = f"{self._total:.2f}"
            value_text = f"{progress:.2f}"
        else:
            total_text = str(self._total)
            value_text = str(progress)
        return f"{value_text:>{len(total_text)}}/{total_text}{end}"

    def _render(self, redraw: bool = False, end: str = " ") -> int:
        progress = self._progress()
        if self._format:
            fields = dict(
                COLORS,
                value=progress,
                bar=self._bar(progress),
                percent=self._percent(progress),
                total=self._total,
            )
            if self._speedometer is not None:
                fields["speed"] = self._speedometer.speed()
            self.out.write(self._format.format(**fields))
            return self._format.count("\n")

        parts = self._parts
        out = self.out
        newlines = self._render_message()

        out.write(parts.percent_left_modifier)
        out.write(f"{self._percent(progress):6.2f}% ")
        out.write(parts.percent_right_modifier)

        out.write(self._bar(progress) + " ")

        out.write(parts.value_left_modifier)
        out.write(self._counts(progress, " " if self._speedometer else end))
        out.write(parts.value_right_modifier)

        if self._speedometer is not None:
            out.write(parts.speed_left_modifier)
            self._speedometer.render_speed(out, self._speed_unit, end)
            out.write(parts.speed_right_modifier)

        return newlines + end.count("\n")

    def start(self) -> None:
        if self._speedometer is not None:
            self._speedometer.start()


class CompositeDisplay(BaseDisplay):
    """Draws several displays side by side on one shared refresh loop."""

    def __init__(self, displays: Iterable[BaseDisplay], delim: str = " ") -> None:
        self._displays = list(displays)
        if not self._displays:
            raise ValueError("a composite display needs at least one display")
        if any(display.running() for display in self._displays):
            raise RuntimeError("cannot combine running displays")
        front = self._displays[0]._displayer
        super().__init__(front.out, front.interval, "", "", front.no_tty)
        self._delim = delim
        self._displayer = front
        for display in self._displays:
            child = display._displayer
            front.interval = min(front.interval, child.interval)
            front.no_tty = front.no_tty or child.no_tty
            child.out = front.out
        front.parent = self

    def _render(self, redraw: bool = False, end: str = " ") -> int:
        newlines = self._render_message()
        last = len(self._displays) - 1
        for position, display in enumerate(self._displays):
            if position:
                self.out.write(self._delim)
                newlines += self._delim.count("\n")
            display._render(redraw, end if position == last else "")
        return newlines + end.count("\n")

    def start(self) -> None:
        for display in self._displays:
            display.start()


def composite(displays: Iterable[BaseDisplay], delim: str = " ") -> CompositeDisplay:
    """Combine displays into one; the result is not started."""
    return CompositeDisplay(displays, delim)


class IterableBar(Generic[T]):
    """Iterates over a collection while a progress bar tracks the iteration.

    The bar starts when iteration begins and stops when it ends or is abandoned.
    """

    def __init__(
        self,
        items: Collection[T],
        out: Optional[TextIO] = None,
        fmt: str = "",
        message: str = "",
        speed: Optional[float] = None,
        speed_unit: str = "it/s",
        style: Union[ProgressBarStyle, BarParts] = ProgressBarStyle.BLOCKS,
        interval: Interval = 0.0,
        no_tty: bool = False,
    ) -> None:
        self._items = items
        self._count = 0
        self._bar = ProgressBarDisplay(
            lambda: self._count,
            out=out,
            total=len(items),
            fmt=fmt,
            message=message,
            speed=speed,
            speed_unit=speed_unit,
            style=style,
            interval=interval,
            no_tty=no_tty,
            show=False,
        )

    @property
    def count(self) -> int:
        """Number of items fully processed so far."""
        return self._count

    @property
    def bar(self) -> ProgressBarDisplay:
        return self._bar

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        self._bar.show()
        try:
            for item in self._items:
                yield item
                self._count += 1
        finally:
            self._bar.done()