import math
import threading

import pytest

from kinestudy.histograms import (
    ElectronHistograms,
    Histogram1D,
    Histogram2D,
    Histograms,
    ThreadedHistogram,
)


def _filled(values, bins=10, low=0.0, high=10.0):
    hist = Histogram1D("h", bins, low, high)
    for value in values:
        hist.fill(value)
    return hist


def test_fill_counts_entries_and_contents():
    hist = _filled([0.5, 1.5, 1.7, 9.9])
    assert hist.entries() == 4
    assert sum(hist.contents) == 4
    assert hist.maximum() == 2


def test_out_of_range_goes_to_flow_bins():
    hist = _filled([-1.0, 10.0, 25.0, float("nan")])
    assert hist.underflow == 1
    assert hist.overflow == 3
    assert sum(hist.contents) == 0
    assert hist.entries() == 4


def test_mean_and_std_of_in_range_fills():
    hist = _filled([4.0, 6.0, 100.0])
    assert hist.mean() == pytest.approx(5.0)
    assert hist.std() == pytest.approx(1.0)


def test_empty_statistics_are_zero():
    hist = Histogram1D("h", 5, 0, 1)
    assert hist.mean() == 0.0
    assert hist.std() == 0.0


def test_add_sums_contents():
    first = _filled([1.0, 2.0])
    second = _filled([2.0, 3.0])
    expected = [a + b for a, b in zip(first.contents, second.contents)]
    first.add(second)
    assert first.contents == expected
    assert first.entries() == 4


def test_add_rejects_other_binning():
    with pytest.raises(ValueError):
        _filled([1.0]).add(_filled([1.0], bins=20))


def test_scale_keeps_mean_and_entries():
    hist = _filled([1.0, 2.0, 2.5])
    before_max, before_mean = hist.maximum(), hist.mean()
    hist.scale(3.0)
    assert hist.maximum() == pytest.approx(3.0 * before_max)
    assert hist.mean() == pytest.approx(before_mean)
    assert hist.entries() == 3


def test_errors_follow_weights():
    hist = Histogram1D("h", 1, 0, 1)
    hist.fill(0.5, 3.0)
    hist.fill(0.5, 4.0)
    assert hist.errors == [pytest.approx(math.sqrt(3.0**2 + 4.0**2))]


def test_bin_edges_span_the_range():
    edges = Histogram1D("h", 200, -30, 20).bin_edges()
    assert len(edges) == 201
    assert edges[0] == -30 and edges[-1] == 20
    assert edges == sorted(edges)


def test_invalid_axis_rejected():
    with pytest.raises(ValueError):
        Histogram1D("h", 0, 0, 1)
    with pytest.raises(ValueError):
        Histogram1D("h", 5, 1, 1)


def test_histogram2d_fill_and_add():
    first = Histogram2D("h2", 2, 0, 2, 2, 0, 2)
    first.fill(0.5, 1.5)
    first.fill(5.0, 0.5)
    second = Histogram2D("h2", 2, 0, 2, 2, 0, 2)
    second.fill(0.5, 1.5, 2.0)
    first.add(second)
    assert first.entries() == 3
    assert first.counts[0][1] == 3.0
    assert sum(map(sum, first.counts)) == 3.0
    assert len(first.x_edges) == 3 and len(first.y_edges) == 3


def test_histogram2d_add_rejects_other_binning():
    with pytest.raises(ValueError):
        Histogram2D("a", 2, 0, 2, 2, 0, 2).add(Histogram2D("b", 3, 0, 2, 2, 0, 2))


def test_threaded_histogram_merges_across_threads():
    threaded = ThreadedHistogram(lambda: Histogram1D("h", 10, 0, 10))

    def work():
        for _ in range(50):
            threaded.get().fill(5.0)

    workers = [threading.Thread(target=work) for _ in range(4)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()
    merged = threaded.merge()
    assert merged.entries() == 200
    assert merged.maximum() == 200


def test_threaded_get_returns_same_histogram_in_one_thread():
    threaded = ThreadedHistogram(lambda: Histogram1D("h", 10, 0, 10))
    assert threaded.get() is threaded.get()
    assert threaded.merge() is not threaded.get()


def test_electron_histograms_names_and_ranges():
    electron = Histograms().electron
    p = electron.hist1d_p.merge()
    vz_cut = electron.hist1d_vz_cut.merge()
    assert p.name == "p_e" and (p.bins, p.low, p.high) == (200, 0, 11)
    assert vz_cut.name == "vz_e_cut" and (vz_cut.low, vz_cut.high) == (-30, 20)


def test_electron_histograms_are_independent():
    first, second = ElectronHistograms(), ElectronHistograms()
    first.hist1d_p.get().fill(1.0)
    assert second.hist1d_p.merge().entries() == 0
    assert first.hist1d_p.merge().entries() == 1