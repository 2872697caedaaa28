import threading

import pytest

from kinestudy.multithread import multithread_reader


def test_every_file_is_read_once(capsys):
    files = ["a.hipo", "b.hipo", "c.hipo", "d.hipo"]
    seen = []
    lock = threading.Lock()

    def reader(name):
        with lock:
            seen.append(name)

    multithread_reader(reader, files, 2)
    assert sorted(seen) == sorted(files)


def test_results_follow_input_order(capsys):
    files = ["x", "yy", "zzz"]
    results = multithread_reader(str.upper, files, 3)
    assert results == [name.upper() for name in files]


def test_non_positive_cores_still_processes(capsys):
    files = ["one", "two"]
    results = multithread_reader(len, files, 0)
    assert results == [len(name) for name in files]


def test_empty_input_gives_empty_result(capsys):
    assert multithread_reader(str.upper, [], 2) == []


def test_reader_exception_is_raised(capsys):
    def reader(name):
        if name == "bad":
            raise ValueError(name)
        return name

    with pytest.raises(ValueError):
        multithread_reader(reader, ["good", "bad"], 2)


def test_progress_bar_reaches_total(capsys):
    files = ["a", "b", "c"]
    multithread_reader(str.lower, files, 1)
    output = capsys.readouterr().out
    assert f"{len(files)}/{len(files)}" in output
    assert "100.00%" in output