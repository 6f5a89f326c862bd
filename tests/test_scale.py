import numpy
import pytest

from mutlollipop.scale import compress_counts


def test_small_counts_are_shifted_by_one():
    scale = compress_counts([1, 5, 3, 2])
    assert scale.display.tolist() == [2.0, 6.0, 4.0, 3.0]
    assert scale.tick_positions == [2.0, 3.0, 4.0, 5.0, 6.0]
    assert scale.tick_labels == [1, 2, 3, 4, 5]


def test_large_counts_are_compressed():
    scale = compress_counts([10, 5, 1])
    assert scale.display.tolist() == [6.0, 3.5, 1.5]
    assert scale.tick_positions == [1.5, 3.5, 6.0]
    assert scale.tick_labels == [1, 5, 10]


def test_tick_count_is_bounded():
    scale = compress_counts(list(range(1, 21)))
    assert len(scale.tick_positions) <= 6
    assert len(scale.tick_positions) == len(scale.tick_labels)
    assert scale.tick_labels == sorted(scale.tick_labels)
    assert scale.tick_labels[-1] <= 20


def test_display_is_monotonic(rng):
    counts = rng.integers(1, 200, size=100)
    scale = compress_counts(counts)
    order = numpy.argsort(counts, kind="stable")
    assert numpy.all(numpy.diff(scale.display[order]) >= 0)
    assert scale.display.min() > 1.0
    assert scale.display.max() == pytest.approx(6.0)


def test_simple_axis_keeps_extremes():
    scale = compress_counts([10, 5, 1], simple_axis=True)
    assert scale.tick_positions == [1.5, 6.0]
    assert scale.tick_labels == [1, 10]

    scale = compress_counts([2, 3], simple_axis=True)
    assert scale.tick_positions == [2.0, 6.0]
    assert scale.tick_labels == [1, 5]


def test_empty_counts_raise():
    with pytest.raises(ValueError):
        compress_counts([])
