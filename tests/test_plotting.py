import pytest

from kinestudy.histograms import Histogram1D, Histogram2D
from kinestudy.plotting import (
    Figsize,
    OptionTH1,
    OptionTH2,
    draw_hist1d,
    draw_hist1d_pair,
    draw_hist2d,
    linspace,
    make_canvas,
    save_canvas,
)


def _hist(name, values):
    hist = Histogram1D(name, 20, -6, 6)
    for value in values:
        hist.fill(value)
    return hist


def test_linspace_edge_cases():
    assert linspace(0.0, 1.0, 0) == []
    assert linspace(3.0, 7.0, 1) == [3.0]


def test_linspace_endpoints_and_spacing():
    values = linspace(-2.0, 2.0, 5)
    assert len(values) == 5
    assert values[0] == -2.0 and values[-1] == 2.0
    steps = [b - a for a, b in zip(values, values[1:])]
    assert all(step == pytest.approx(steps[0]) for step in steps)


def test_make_canvas_default_size_in_pixels():
    figure = make_canvas()
    width, height = figure.get_size_inches() * figure.dpi
    assert (round(width), round(height)) == (800, 600)
    assert len(figure.axes) == 1


def test_make_canvas_custom_size_and_margins():
    figure = make_canvas(Figsize(400, 300))
    width, height = figure.get_size_inches() * figure.dpi
    assert (round(width), round(height)) == (400, 300)
    assert figure.subplotpars.left == pytest.approx(0.12)
    assert figure.subplotpars.top == pytest.approx(0.88)


def test_save_canvas_writes_every_format(tmp_path):
    saved = save_canvas(make_canvas(), tmp_path, "empty")
    assert {path.suffix for path in saved} == {".pdf", ".svg", ".png"}
    assert all(path.is_file() and path.stem == "empty" for path in saved)
    assert all(path.parent.parent == tmp_path for path in saved)


def test_draw_hist1d_defaults_to_histogram_name(tmp_path):
    hist = _hist("chi2_e", [0.1, 0.2, -1.0, 2.5])
    saved = draw_hist1d(hist, tmp_path, OptionTH1(cuts=(-3.0, 3.0), log_y=True, label="chi2"))
    assert {path.name for path in saved} == {"chi2_e.pdf", "chi2_e.svg", "chi2_e.png"}
    assert all(path.stat().st_size > 0 for path in saved)


def test_draw_hist1d_error_option_and_file_name(tmp_path):
    hist = _hist("h", [0.0, 1.0])
    saved = draw_hist1d(hist, tmp_path, OptionTH1(file_name="custom", draw_option="E",
                                                  alpha_color1=0.3))
    assert all(path.stem == "custom" for path in saved)


def test_draw_hist1d_pair_scales_in_place(tmp_path):
    first = _hist("vz_e", [0.0, 0.1, 0.2])
    second = _hist("vz_e_cut", [0.0])
    first_max, second_max = first.maximum(), second.maximum()
    saved = draw_hist1d_pair(first, second, tmp_path,
                             OptionTH1(scale1=2.0, legend1="all", legend2="cut",
                                       cuts=(float("nan"), 1.0)))
    assert first.maximum() == pytest.approx(2.0 * first_max)
    assert second.maximum() == pytest.approx(second_max)
    assert {path.stem for path in saved} == {"vz_e"}


def test_draw_hist2d(tmp_path):
    hist = Histogram2D("map", 4, 0, 4, 3, 0, 3)
    hist.fill(1.5, 1.5)
    hist.fill(2.5, 0.5, 2.0)
    saved = draw_hist2d(hist, tmp_path, OptionTH2(label_x="x", label_y="y", log_z=True))
    assert {path.name for path in saved} == {"map.pdf", "map.svg", "map.png"}
    assert all(path.is_file() for path in saved)