"""Drawing histograms to figures and saving them in several formats."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from matplotlib.colors import LogNorm
from matplotlib.figure import Figure

from kinestudy.histograms import Histogram1D, Histogram2D

_DPI = 100
_MARGIN = 0.12
_FORMATS = ("pdf", "svg", "png")


class Color:
    """The colour palette used in the plots."""

    BLUE = "#0C5DA5"
    RED = "#FF2C00"
    VIOLET = "#964a8b"
    GREEN = "#006F29"
    ORANGE = "#ffa600"
    GREY = "#787878"
    BLACK = "#121415"
    MARRON = "#9c5e3d"
    DARK_BLUE = "#395892"
    LIGHT_GREEN = "#66a87e"
    PINK = "#ee3377"
    DARK_PINK = "#8e1e47"
    PAUL = "#009988"
    DARK_PAUL = "#004c44"
    DARK_RED = "#a21025"
    VIOLET2 = "#7a49a5"
    BLUE2 = "#4974a5"
    GREEN2 = "#3a7512"


@dataclass(frozen=True)
class Figsize:
    """Figure size in pixels."""

    width: int = 800
    height: int = 600


@dataclass(frozen=True)
class OptionTH1:
    """Options for drawing one or two 1D histograms."""

    file_name: str = ""
    color1: str = Color.BLACK
    alpha_color1: float = 0.0
    color2: str = Color.BLUE
    alpha_color2: float = 0.0
    draw_option: str = "histo"
    opt_stat: str = "emr"
    x_range: tuple[float, ...] = ()
    cuts: tuple[float, ...] = ()
    scale1: float = 0.0
    scale2: float = 0.0
    legend1: str = ""
    legend2: str = ""
    title: str = ""
    log_x: bool = False
    log_y: bool = False
    label: str = ""
    label_offset: float = 0.8
    label_size: float = 0.05


@dataclass(frozen=True)
class OptionTH2:
    """Options for drawing a 2D histogram."""

    file_name: str = ""
    log_x: bool = False
    log_y: bool = False
    log_z: bool = False
    label_x: str = ""
    label_x_offset: float = 0.8
    label_x_size: float = 0.05
    label_y: str = ""
    label_y_offset: float = 1.0
    label_y_size: float = 0.05


def linspace(start: float, end: float, num: int) -> list[float]:
    """``num`` evenly spaced values from ``start`` to ``end`` inclusive."""
    if num == 0:
        return []
    if num == 1:
        return [start]
    delta = (end - start) / (num - 1)
    return [start + delta * i for i in range(num - 1)] + [end]


def make_canvas(figsize: Figsize = Figsize()) -> Figure:
    """A figure with one set of axes and 12% margins on every side."""
    figure = Figure(figsize=(figsize.width / _DPI, figsize.height / _DPI), dpi=_DPI)
    figure.subplots_adjust(left=_MARGIN, right=1 - _MARGIN, top=1 - _MARGIN, bottom=_MARGIN)
    figure.add_subplot()
    return figure


def save_canvas(figure: Figure, path: Union[str, Path], file_name: str) -> list[Path]:
    """Save ``figure`` as ``<path>/<fmt>/<file_name>.<fmt>`` for each output format."""
    saved = []
    for fmt in _FORMATS:
        directory = Path(path) / fmt
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / f"{file_name}.{fmt}"
        figure.savefig(target, format=fmt)
        saved.append(target)
    return saved


def _font_points(figure: Figure, fraction: float) -> float:
    """Font size in points for a size given as a fraction of the figure height."""
    return fraction * figure.get_figheight() * 72


def _set_axis_label(figure: Figure, axis, text: str, offset: float, size: float) -> None:
    axis.set_label_text(text, fontsize=_font_points(figure, size))
    axis.labelpad = offset * 5


def _draw_hist(ax, hist: Histogram1D, color: str, alpha: float, draw_option: str, label: str):
    edges = hist.bin_edges()
    values = hist.contents
    if "e" in draw_option.lower():
        centers = [(lo + hi) / 2 for lo, hi in zip(edges, edges[1:])]
        artist = ax.errorbar(centers, values, yerr=hist.errors, fmt="o", markersize=2,
                             color=color, label=label or None)
    else:
        artist = ax.stairs(values, edges, color=color, label=label or None)
    if alpha > 0:
        ax.stairs(values, edges, fill=True, color=color, alpha=alpha)
    return artist


def _draw_stats(ax, hists: list[tuple[Histogram1D, str]], opt_stat: str) -> None:
    rows = {"e": ("Entries", lambda h: f"{h.entries()}"),
            "m": ("Mean", lambda h: f"{h.mean():.4g}"),
            "r": ("Std Dev", lambda h: f"{h.std():.4g}")}
    wanted = [rows[letter] for letter in opt_stat.lower() if letter in rows]
    if not wanted:
        return
    top = 0.98
    for hist, color in hists:
        lines = [hist.name] + [f"{title}  {value(hist)}" for title, value in wanted]
        ax.text(0.98, top, "\n".join(lines), transform=ax.transAxes, ha="right", va="top",
                color=color, fontsize=8,
                bbox={"facecolor": "white", "edgecolor": color, "linewidth": 0.5})
        top -= 0.045 * len(lines) + 0.02


def _draw_cuts(ax, cuts, height: float) -> None:
    for cut in cuts:
        if math.isfinite(cut):
            ax.vlines(cut, 0, 0.8 * height, colors=Color.RED, linewidth=2)


def _finish_axes(figure: Figure, ax, options: OptionTH1) -> None:
    _set_axis_label(figure, ax.xaxis, options.label, options.label_offset, options.label_size)
    if options.title:
        ax.set_title(options.title)
    if options.log_x:
        ax.set_xscale("log")
    if options.log_y:
        ax.set_yscale("log")
    if len(options.x_range) == 2:
        ax.set_xlim(*options.x_range)


def draw_hist1d(hist: Histogram1D, path: Union[str, Path],
                options: OptionTH1 = OptionTH1()) -> list[Path]:
    """Draw one histogram with its cut lines and statistics, then save it."""
    figure = make_canvas()
    ax = figure.axes[0]
    file_name = options.file_name or hist.name

    _draw_hist(ax, hist, options.color1, options.alpha_color1, options.draw_option, "")
    _finish_axes(figure, ax, options)
    _draw_cuts(ax, options.cuts, hist.maximum())
    _draw_stats(ax, [(hist, options.color1)], options.opt_stat)
    return save_canvas(figure, path, file_name)


def draw_hist1d_pair(first: Histogram1D, second: Histogram1D, path: Union[str, Path],
                     options: OptionTH1 = OptionTH1()) -> list[Path]:
    """Overlay two histograms, scaling them in place when asked, then save the figure."""
    figure = make_canvas()
    ax = figure.axes[0]
    file_name = options.file_name or first.name

    if options.scale1 != 0:
        first.scale(options.scale1)
    if options.scale2 != 0:
        second.scale(options.scale2)

    _draw_hist(ax, first, options.color1, options.alpha_color1, "hist", options.legend1)
    _draw_hist(ax, second, options.color2, options.alpha_color2, "hist", options.legend2)
    _finish_axes(figure, ax, options)
    _draw_cuts(ax, options.cuts, max(first.maximum(), second.maximum()))

    if options.legend1 or options.legend2:
        ax.legend(loc="upper left")

    _draw_stats(ax, [(first, options.color1), (second, options.color2)], options.opt_stat)
    return save_canvas(figure, path, file_name)


def draw_hist2d(hist: Histogram2D, path: Union[str, Path],
                options: OptionTH2 = OptionTH2()) -> list[Path]:
    """Draw a 2D histogram as a colour map with a colour bar, then save it."""
    figure = make_canvas()
    ax = figure.axes[0]
    file_name = options.file_name or hist.name

    values = [list(row) for row in zip(*hist.counts)]
    mesh = ax.pcolormesh(hist.x_edges, hist.y_edges, values,
                         norm=LogNorm() if options.log_z else None)
    figure.colorbar(mesh, ax=ax)

    _set_axis_label(figure, ax.xaxis, options.label_x, options.label_x_offset, options.label_x_size)
    _set_axis_label(figure, ax.yaxis, options.label_y, options.label_y_offset, options.label_y_size)
    if options.log_x:
        ax.set_xscale("log")
    if options.log_y:
        ax.set_yscale("log")
    return save_canvas(figure, path, file_name)