"""Gray-level histograms, their rendering and thresholds derived from them."""

from __future__ import annotations

import logging
import math

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .imgproc import bgr_to_gray

log = logging.getLogger(__name__)

HIST_SIZE = 256
NORM_MAX = 512.0
VIEW_WIDTH = 1000
VIEW_HEIGHT = 512

_MARK_COLOR = (0, 255, 255)
_CURVE_COLOR = (255, 255, 255)


def _normalize_minmax(hist: np.ndarray, low: float = 0.0, high: float = NORM_MAX) -> np.ndarray:
    """Stretch values linearly onto [low, high]; a flat input maps to low."""
    values = np.asarray(hist, dtype=np.float64).ravel()
    if values.size == 0:
        return values.astype(np.float32)
    vmin, vmax = float(values.min()), float(values.max())
    spread = vmax - vmin
    scale = (high - low) / spread if spread > np.finfo(np.float64).eps else 0.0
    shift = low - vmin * scale
    return (values * scale + shift).astype(np.float32)


def _cv_round(value: float) -> int:
    return int(np.rint(value))


def _draw_line(img: np.ndarray, p0, p1, color, thickness: int) -> None:
    """Draw a straight segment in place; pixels within thickness/2 are painted."""
    rows, cols = img.shape[:2]
    radius = max(thickness / 2.0, 0.5)
    x0, y0 = float(p0[0]), float(p0[1])
    x1, y1 = float(p1[0]), float(p1[1])
    x_min = max(math.floor(min(x0, x1) - radius), 0)
    x_max = min(math.ceil(max(x0, x1) + radius), cols - 1)
    y_min = max(math.floor(min(y0, y1) - radius), 0)
    y_max = min(math.ceil(max(y0, y1) + radius), rows - 1)
    if x_min > x_max or y_min > y_max:
        return
    ys, xs = np.mgrid[y_min:y_max + 1, x_min:x_max + 1]
    dx, dy = x1 - x0, y1 - y0
    length2 = dx * dx + dy * dy
    if length2 == 0:
        t = np.zeros(xs.shape)
    else:
        t = np.clip(((xs - x0) * dx + (ys - y0) * dy) / length2, 0.0, 1.0)
    dist = np.hypot(xs - (x0 + t * dx), ys - (y0 + t * dy))
    mask = dist <= radius + 1e-9
    img[y_min:y_max + 1, x_min:x_max + 1][mask] = color


def _put_labels(img: np.ndarray, labels) -> np.ndarray:
    """Write (text, (x, baseline_y)) labels in white."""
    pil = Image.fromarray(np.ascontiguousarray(img))
    draw = ImageDraw.Draw(pil)
    font = ImageFont.load_default()
    for text, (x, y) in labels:
        draw.text((x, y - 10), text, fill=_CURVE_COLOR, font=font)
    return np.array(pil)


def histogram(image, channel: int = 0) -> np.ndarray:
    """256-bin histogram scaled onto [0, 512].

    channel 0 uses the grayscale image; 1, 2 and 3 use the blue, green and
    red channels of a BGR image.
    """
    arr = np.asarray(image)
    if arr.dtype != np.uint8:
        raise ValueError("expected an 8-bit image")
    if channel == 0:
        plane = bgr_to_gray(arr)
    elif channel in (1, 2, 3):
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise ValueError(f"expected an HxWx3 image, got shape {arr.shape}")
        plane = arr[..., channel - 1]
    else:
        raise ValueError(f"unknown histogram channel {channel}")
    counts = np.bincount(plane.ravel(), minlength=HIST_SIZE)[:HIST_SIZE]
    return _normalize_minmax(counts.astype(np.float32))


def draw_histogram_line(image, hist, position: int, vertical: bool = True) -> np.ndarray:
    """Copy of a histogram view with a marker line at a bin or a level."""
    out = np.array(image, copy=True)
    hist_size = np.asarray(hist).size
    if hist_size == 0:
        raise ValueError("histogram is empty")
    rows, cols = out.shape[:2]
    bin_w = _cv_round(cols / hist_size)
    bin_h = _cv_round(rows / hist_size)
    if vertical:
        x = position * bin_w
        _draw_line(out, (x, 0), (x, rows - 1), _MARK_COLOR, 2)
    else:
        y = rows - position * bin_h
        _draw_line(out, (0, y), (cols - 1, y), _MARK_COLOR, 2)
    return out


def render_histogram(hist, width: int = VIEW_WIDTH, height: int = VIEW_HEIGHT) -> np.ndarray:
    """Draw a histogram as a white curve with bin labels on a black BGR image."""
    values = _normalize_minmax(hist)
    hist_size = values.size
    if hist_size == 0:
        raise ValueError("histogram is empty")
    bin_w = _cv_round(width / hist_size)
    img = np.zeros((height, width, 3), dtype=np.uint8)
    for i in range(1, hist_size):
        _draw_line(
            img,
            (bin_w * (i - 1), height - _cv_round(values[i - 1])),
            (bin_w * i, height - _cv_round(values[i])),
            _CURVE_COLOR,
            2,
        )
    labels = [(str(i), (bin_w * i, height - 10)) for i in range(0, HIST_SIZE, 10)]
    return _put_labels(img, labels)


def double_peak(hist) -> tuple[int, int]:
    """Indices of the main peak and of a second, distance-weighted peak."""
    values = np.asarray(hist, dtype=np.float32).ravel()
    hist_size = values.size
    if hist_size == 0:
        raise ValueError("histogram is empty")
    first = int(np.argmax(values))

    end = 0
    for i in range(first, hist_size):
        if values[i] <= 3:
            end = min(i + 30, 250)
            break

    weighted = np.zeros(HIST_SIZE, dtype=np.float32)
    limit = min(end, hist_size, HIST_SIZE)
    k = np.arange(limit)
    weighted[:limit] = ((k - first) ** 2 * values[:limit].astype(np.float64)).astype(np.float32)
    second = min(int(np.argmax(weighted)), 255)
    return first, second


def histogram_with_peaks(image) -> np.ndarray:
    """Rendered grayscale histogram with marker lines at its two peaks."""
    hist = histogram(image, 0)
    first, second = double_peak(hist)
    view = render_histogram(hist, VIEW_WIDTH, VIEW_HEIGHT)
    view = draw_histogram_line(view, hist, first, True)
    return draw_histogram_line(view, hist, second, True)


def _scan_threshold(hist: np.ndarray, cut_threshold: float, end: int, begin: int, bias: int) -> int:
    found = next((i for i in range(end, begin, -1) if hist[i] >= cut_threshold), begin)
    return min(found + bias, 254)


def threshold_from_histogram(image, cut_threshold: float, bias: int = 0) -> int:
    """Highest gray level in (10, 80] whose scaled count reaches cut_threshold, plus bias."""
    hist = histogram(image, 0)
    return _scan_threshold(hist, cut_threshold, 80, 10, bias)


def threshold_from_histogram_view(image, cut_threshold: float, bias: int = 0) -> tuple[int, np.ndarray]:
    """Threshold searched in (10, 130], with a view marking cut level and result."""
    hist = histogram(image, 0)
    view = render_histogram(hist, VIEW_WIDTH, VIEW_HEIGHT)
    threshold = _scan_threshold(hist, cut_threshold, 130, 10, bias)
    view = draw_histogram_line(view, hist, int(cut_threshold), False)
    view = draw_histogram_line(view, hist, threshold, True)
    log.info("final_thread: %d", threshold)
    return threshold, view


def threshold_from_histogram_peak(image, bias: int = 0) -> tuple[int, np.ndarray]:
    """Threshold from a low, flat stretch after the second peak, with a view."""
    hist = histogram(image, 0)
    view = histogram_with_peaks(image)
    _, second = double_peak(hist)
    begin = 10
    threshold = begin
    run = 0
    total = 0
    for i in range(second, begin):
        if run >= 10 and total // run <= 6:
            threshold = i - run // 2
            break
        value = float(hist[i])
        if value <= 10:
            run += 1
            total = int(total + value)
        else:
            run = 0
    threshold = min(threshold + bias, 254)
    view = draw_histogram_line(view, hist, threshold, True)
    return threshold, view


def equalize_histogram(image) -> np.ndarray:
    """Equalize each channel of an 8-bit BGR image independently."""
    src = np.asarray(image)
    if src.dtype != np.uint8 or src.ndim != 3 or src.shape[2] != 3:
        channels = src.shape[2] if src.ndim == 3 else 1
        raise ValueError(f"Invalid input depth: {src.dtype} channels: {channels}")
    total = src.shape[0] * src.shape[1]
    if total == 0:
        raise ValueError("image is empty")
    out = np.empty_like(src)
    for k in range(3):
        plane = src[..., k]
        cumulative = np.cumsum(np.bincount(plane.ravel(), minlength=HIST_SIZE)).astype(np.int64)
        lut = (cumulative * 255 // total).astype(np.uint8)
        out[..., k] = lut[plane]
    return out