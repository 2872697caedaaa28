"""Fixed-binning histograms, per-thread accumulation and the study's histogram set."""

from __future__ import annotations

import math
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from typing import Generic, TypeVar


def _find_bin(value: float, bins: int, low: float, high: float) -> int:
    """Bin number with 0 as underflow and ``bins + 1`` as overflow (NaN overflows)."""
    if value < low:
        return 0
    if not value < high:
        return bins + 1
    return min(1 + int(bins * (value - low) / (high - low)), bins)


def _check_axis(bins: int, low: float, high: float) -> None:
    if bins < 1:
        raise ValueError("a histogram axis needs at least one bin")
    if not high > low:
        raise ValueError("the upper edge of an axis must exceed the lower edge")


def _edges(bins: int, low: float, high: float) -> list[float]:
    width = (high - low) / bins
    return [low + width * i for i in range(bins)] + [high]


class Histogram1D:
    """One-dimensional histogram with under/overflow and sum of squared weights."""

    def __init__(self, name: str, bins: int, low: float, high: float) -> None:
        _check_axis(bins, low, high)
        self.name = name
        self.bins = bins
        self.low = float(low)
        self.high = float(high)
        self._content = [0.0] * (bins + 2)
        self._sumw2 = [0.0] * (bins + 2)
        self._entries = 0
        self._sumw = 0.0
        self._sumwx = 0.0
        self._sumwx2 = 0.0

    def __repr__(self) -> str:
        return f"Histogram1D({self.name!r}, {self.bins}, {self.low}, {self.high})"

    @property
    def contents(self) -> list[float]:
        """Bin contents without under- and overflow."""
        return self._content[1:-1]

    @property
    def errors(self) -> list[float]:
        """Statistical uncertainty of each in-range bin."""
        return [math.sqrt(w2) for w2 in self._sumw2[1:-1]]

    @property
    def underflow(self) -> float:
        return self._content[0]

    @property
    def overflow(self) -> float:
        return self._content[-1]

    def fill(self, value: float, weight: float = 1.0) -> None:
        """Add ``weight`` to the bin holding ``value``."""
        index = _find_bin(value, self.bins, self.low, self.high)
        self._content[index] += weight
        self._sumw2[index] += weight * weight
        self._entries += 1
        if 0 < index <= self.bins:
            self._sumw += weight
            self._sumwx += weight * value
            self._sumwx2 += weight * value * value

    def add(self, other: Histogram1D) -> None:
        """Add the contents of a histogram with the same binning."""
        if (self.bins, self.low, self.high) != (other.bins, other.low, other.high):
            raise ValueError("cannot add histograms with different binning")
        self._content = [a + b for a, b in zip(self._content, other._content)]
        self._sumw2 = [a + b for a, b in zip(self._sumw2, other._sumw2)]
        self._entries += other._entries
        self._sumw += other._sumw
        self._sumwx += other._sumwx
        self._sumwx2 += other._sumwx2

    def scale(self, factor: float) -> None:
        """Multiply every bin by ``factor``."""
        self._content = [c * factor for c in self._content]
        self._sumw2 = [w2 * factor * factor for w2 in self._sumw2]
        self._sumw *= factor
        self._sumwx *= factor
        self._sumwx2 *= factor

    def maximum(self) -> float:
        """Largest in-range bin content."""
        return max(self.contents)

    def entries(self) -> int:
        """Number of fills, including those outside the range."""
        return self._entries

    def mean(self) -> float:
        """Weighted mean of the in-range fills; 0 when there are none."""
        return self._sumwx / self._sumw if self._sumw else 0.0

    def std(self) -> float:
        """Weighted standard deviation of the in-range fills; 0 when there are none."""
        if not self._sumw:
            return 0.0
        mean = self._sumwx / self._sumw
        return math.sqrt(abs(self._sumwx2 / self._sumw - mean * mean))

    def bin_edges(self) -> list[float]:
        """The ``bins + 1`` edges of the in-range bins."""
        return _edges(self.bins, self.low, self.high)


class Histogram2D:
    """Two-dimensional histogram with under/overflow on both axes."""

    def __init__(
        self,
        name: str,
        x_bins: int,
        x_low: float,
        x_high: float,
        y_bins: int,
        y_low: float,
        y_high: float,
    ) -> None:
        _check_axis(x_bins, x_low, x_high)
        _check_axis(y_bins, y_low, y_high)
        self.name = name
        self.x_bins, self.x_low, self.x_high = x_bins, float(x_low), float(x_high)
        self.y_bins, self.y_low, self.y_high = y_bins, float(y_low), float(y_high)
        self._grid = [[0.0] * (y_bins + 2) for _ in range(x_bins + 2)]
        self._entries = 0

    def __repr__(self) -> str:
        return f"Histogram2D({self.name!r}, {self.x_bins}x{self.y_bins})"

    @property
    def counts(self) -> list[list[float]]:
        """In-range contents indexed as ``counts[x_bin][y_bin]``."""
        return [column[1:-1] for column in self._grid[1:-1]]

    @property
    def x_edges(self) -> list[float]:
        return _edges(self.x_bins, self.x_low, self.x_high)

    @property
    def y_edges(self) -> list[float]:
        return _edges(self.y_bins, self.y_low, self.y_high)

    def _binning(self) -> tuple:
        return (self.x_bins, self.x_low, self.x_high, self.y_bins, self.y_low, self.y_high)

    def fill(self, x: float, y: float, weight: float = 1.0) -> None:
        """Add ``weight`` to the cell holding ``(x, y)``."""
        ix = _find_bin(x, self.x_bins, self.x_low, self.x_high)
        iy = _find_bin(y, self.y_bins, self.y_low, self.y_high)
        self._grid[ix][iy] += weight
        self._entries += 1

    def add(self, other: Histogram2D) -> None:
        """Add the contents of a histogram with the same binning."""
        if self._binning() != other._binning():
            raise ValueError("cannot add histograms with different binning")
        self._grid = [
            [a + b for a, b in zip(mine, theirs)]
            for mine, theirs in zip(self._grid, other._grid)
        ]
        self._entries += other._entries

    def entries(self) -> int:
        """Number of fills, including those outside the range."""
        return self._entries


H = TypeVar("H", Histogram1D, Histogram2D)


class ThreadedHistogram(Generic[H]):
    """Gives every thread its own histogram and merges them on request."""

    def __init__(self, factory: Callable[[], H]) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._per_thread: dict[int, H] = {}

    def get(self) -> H:
        """The histogram belonging to the calling thread."""
        ident = threading.get_ident()
        with self._lock:
            hist = self._per_thread.get(ident)
            if hist is None:
                hist = self._per_thread[ident] = self._factory()
            return hist

    def merge(self) -> H:
        """A new histogram holding the sum of all threads' histograms."""
        merged = self._factory()
        with self._lock:
            parts = list(self._per_thread.values())
        for part in parts:
            merged.add(part)
        return merged


def _threaded(name: str, bins: int, low: float, high: float) -> ThreadedHistogram[Histogram1D]:
    return ThreadedHistogram(partial(Histogram1D, name, bins, low, high))


def _field(name: str, bins: int, low: float, high: float):
    return field(default_factory=partial(_threaded, name, bins, low, high))


@dataclass
class ElectronHistograms:
    """Electron kinematics before and after the selection cuts."""

    hist1d_p: ThreadedHistogram[Histogram1D] = _field("p_e", 200, 0, 11)
    hist1d_phi: ThreadedHistogram[Histogram1D] = _field("phi_e", 200, -190, 190)
    hist1d_theta: ThreadedHistogram[Histogram1D] = _field("theta_e", 200, 0, 35)
    hist1d_chi2: ThreadedHistogram[Histogram1D] = _field("chi2_e", 200, -6, 6)
    hist1d_vz: ThreadedHistogram[Histogram1D] = _field("vz_e", 200, -30, 20)

    hist1d_p_cut: ThreadedHistogram[Histogram1D] = _field("p_e_cut", 200, 0, 11)
    hist1d_phi_cut: ThreadedHistogram[Histogram1D] = _field("phi_e_cut", 200, -190, 190)
    hist1d_theta_cut: ThreadedHistogram[Histogram1D] = _field("theta_e_cut", 200, 0, 35)
    hist1d_chi2_cut: ThreadedHistogram[Histogram1D] = _field("chi2_e_cut", 200, -6, 6)
    hist1d_vz_cut: ThreadedHistogram[Histogram1D] = _field("vz_e_cut", 200, -30, 20)


@dataclass
class Histograms:
    """All histograms filled by the study."""

    electron: ElectronHistograms = field(default_factory=ElectronHistograms)