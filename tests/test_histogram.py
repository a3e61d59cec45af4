import numpy as np
import pytest

from openrm.pointer.histogram import (
    double_peak,
    draw_histogram_line,
    equalize_histogram,
    histogram,
    histogram_with_peaks,
    render_histogram,
    threshold_from_histogram,
    threshold_from_histogram_peak,
    threshold_from_histogram_view,
)

YELLOW = [0, 255, 255]


def _gray(value, shape=(20, 30)):
    return np.full(shape, value, dtype=np.uint8)


def test_histogram_constant_image_scaled_to_512():
    hist = histogram(_gray(77), 0)
    assert hist.shape == (256,)
    assert hist[77] == pytest.approx(512.0)
    assert float(hist.sum()) == pytest.approx(512.0)


def test_histogram_uniform_image_is_flat_zero():
    img = np.arange(256, dtype=np.uint8).reshape(16, 16)
    hist = histogram(img, 0)
    assert hist.tolist() == [0.0] * 256


@pytest.mark.parametrize("channel, value", [(1, 10), (2, 20), (3, 30)])
def test_histogram_channel_selection(channel, value):
    img = np.zeros((5, 6, 3), dtype=np.uint8)
    img[..., 0], img[..., 1], img[..., 2] = 10, 20, 30
    hist = histogram(img, channel)
    assert int(np.argmax(hist)) == value


def test_histogram_rejects_unknown_channel():
    with pytest.raises(ValueError):
        histogram(np.zeros((4, 4, 3), dtype=np.uint8), 7)


def test_histogram_rejects_non_uint8():
    with pytest.raises(ValueError):
        histogram(np.zeros((4, 4), dtype=np.float32), 0)


def test_double_peak_finds_weighted_second_peak():
    hist = np.zeros(256, dtype=np.float32)
    hist[40] = 100
    hist[60] = 50
    assert double_peak(hist) == (40, 60)


def test_double_peak_ignores_peak_beyond_window():
    hist = np.zeros(256, dtype=np.float32)
    hist[40] = 100
    hist[100] = 50
    first, second = double_peak(hist)
    assert first == 40
    assert second == 0


def test_double_peak_empty_raises():
    with pytest.raises(ValueError):
        double_peak(np.array([], dtype=np.float32))


def test_threshold_from_histogram_finds_level():
    assert threshold_from_histogram(_gray(50), 100, 5) == 50 + 5


def test_threshold_from_histogram_falls_back_to_begin():
    assert threshold_from_histogram(_gray(200), 100, 3) == 10 + 3


def test_threshold_from_histogram_caps_at_254():
    assert threshold_from_histogram(_gray(50), 100, 300) == 254


def test_threshold_view_uses_wider_range_and_marks_result():
    img = _gray(100)
    assert threshold_from_histogram(img, 100, 0) == 10
    threshold, view = threshold_from_histogram_view(img, 100, 0)
    assert threshold == 100
    assert view.shape == (512, 1000, 3)
    assert view[10, threshold * 4].tolist() == YELLOW


def test_threshold_peak_defaults_to_begin():
    threshold, view = threshold_from_histogram_peak(_gray(60), 5)
    assert threshold == 10 + 5
    assert view.shape == (512, 1000, 3)
    assert view[10, threshold * 4].tolist() == YELLOW


def test_threshold_peak_caps():
    threshold, _ = threshold_from_histogram_peak(_gray(60), 400)
    assert threshold == 254


def test_histogram_with_peaks_marks_main_peak():
    view = histogram_with_peaks(_gray(60))
    assert view.shape == (512, 1000, 3)
    assert view[10, 60 * 4].tolist() == YELLOW


def test_render_histogram_draws_spike():
    hist = np.zeros(256, dtype=np.float32)
    hist[100] = 7
    view = render_histogram(hist, 1000, 512)
    assert view.shape == (512, 1000, 3)
    assert view[0, 400].tolist() == [255, 255, 255]
    assert view[0, 0].tolist() == [0, 0, 0]


def test_draw_histogram_line_vertical_and_horizontal():
    base = np.zeros((512, 1000, 3), dtype=np.uint8)
    hist = np.zeros(256, dtype=np.float32)
    vertical = draw_histogram_line(base, hist, 50, True)
    assert np.all(vertical[:, 200] == YELLOW)
    horizontal = draw_histogram_line(base, hist, 50, False)
    assert np.all(horizontal[412, :] == YELLOW)
    assert not base.any()


def test_equalize_preserves_order_and_reaches_255():
    rng = np.random.default_rng(3)
    img = rng.integers(0, 200, size=(12, 17, 3), dtype=np.uint8)
    out = equalize_histogram(img)
    assert out.shape == img.shape and out.dtype == np.uint8
    for k in range(3):
        src = img[..., k].ravel()
        dst = out[..., k].ravel()
        order = np.argsort(src, kind="stable")
        assert np.all(np.diff(dst[order].astype(int)) >= 0)
        assert dst[src == src.max()].min() == 255


def test_equalize_constant_image_maps_to_255():
    out = equalize_histogram(np.full((4, 5, 3), 33, dtype=np.uint8))
    assert np.all(out == 255)


@pytest.mark.parametrize(
    "bad",
    [np.zeros((4, 4), dtype=np.uint8), np.zeros((4, 4, 3), dtype=np.float32)],
)
def test_equalize_rejects_invalid_input(bad):
    with pytest.raises(ValueError):
        equalize_histogram(bad)