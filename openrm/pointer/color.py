"""Armor colour classification from the pixels around lightbars or boxes."""

from __future__ import annotations

import numpy as np

from .imgproc import bgr_to_hls, bgr_to_hsv
from .model import ArmorColor, LightbarPair, Rect


def _grow(rect: Rect, ratio_x: float, ratio_y: float) -> Rect:
    """Enlarge rect on every side by at least three pixels."""
    dx = max(3.0, rect.width * ratio_x)
    dy = max(3.0, rect.height * ratio_y)
    return Rect(
        int(rect.x - dx),
        int(rect.y - dy),
        int(rect.width + 2 * dx),
        int(rect.height + 2 * dy),
    )


def _roi_pixels(image: np.ndarray, rect: Rect) -> np.ndarray:
    """Pixels of the part of rect inside the image, as an (N, channels) array."""
    rows, cols = image.shape[:2]
    r = rect.intersect(Rect(0, 0, cols, rows))
    roi = image[r.y:r.y + r.height, r.x:r.x + r.width]
    return roi.reshape(-1, image.shape[2]).astype(np.int64)


def _hue_classes(pixels: np.ndarray):
    h, s, v = pixels[:, 0], pixels[:, 1], pixels[:, 2]
    valid = (s >= 43) & (v >= 46) & (v <= 240)
    purple = (h >= 125) & (h <= 155)
    red = ((h >= 156) & (h <= 180)) | (h <= 10)
    blue = (h >= 100) & (h <= 124)
    return valid, purple, red, blue


def armor_color_hsv_pair(image, pair: LightbarPair) -> ArmorColor:
    """Classify the colour around a lightbar pair by counting hue classes."""
    hsv = bgr_to_hsv(image)
    regions = [_grow(lb.rect.bounding_rect(), 0.5, 0.25) for lb in (pair.first, pair.second)]
    pixels = np.concatenate([_roi_pixels(hsv, region) for region in regions])
    valid, purple, red, blue = _hue_classes(pixels)
    p = int(np.count_nonzero(valid & purple))
    r = int(np.count_nonzero(valid & red & ~purple))
    b = int(np.count_nonzero(valid & blue & ~purple & ~red))

    if 2 * p > r and 2 * p > b:
        return ArmorColor.PURPLE
    if r >= b + p and r != 0:
        return ArmorColor.RED
    if b > r + p:
        return ArmorColor.BLUE
    return ArmorColor.NONE


def armor_color_hsv_box(image, box: Rect) -> ArmorColor:
    """Classify the colour around a detector box by counting hue classes.

    Unsaturated or badly exposed pixels are counted as colourless, and
    their hue is still counted as well.
    """
    hsv = bgr_to_hsv(image)
    pixels = _roi_pixels(hsv, _grow(box, 0.5, 0.25))
    valid, purple, red, blue = _hue_classes(pixels)
    none = int(np.count_nonzero(~valid))
    p = int(np.count_nonzero(purple))
    r = int(np.count_nonzero(red & ~purple))
    b = int(np.count_nonzero(blue & ~purple & ~red))

    if r + b + p <= none:
        return ArmorColor.NONE
    if 1.5 * p > r and 1.5 * p > b:
        return ArmorColor.PURPLE
    if r >= b + p and r != 0:
        return ArmorColor.RED
    if b > r + p:
        return ArmorColor.BLUE
    return ArmorColor.NONE


def armor_color_rgb_pair(image, pair: LightbarPair) -> ArmorColor:
    """Classify the colour of a lightbar pair from its mean BGR values."""
    src = np.asarray(image)
    pixels = np.concatenate([_roi_pixels(src, lb.rect.bounding_rect()) for lb in (pair.first, pair.second)])
    b, g, r = pixels[:, 0], pixels[:, 1], pixels[:, 2]
    keep = ~((b > 250) & (g > 250) & (r > 250))
    n = int(np.count_nonzero(keep))
    if n == 0:
        raise ValueError("no usable pixels around the lightbar pair")
    mean_r = int(r[keep].sum()) // n
    mean_g = int(g[keep].sum()) // n
    mean_b = int(b[keep].sum()) // n

    blue_minus_red = mean_b - mean_r
    if blue_minus_red > 90:
        return ArmorColor.BLUE
    if blue_minus_red < -90:
        return ArmorColor.RED
    if mean_r < 10 and mean_g < 10 and mean_b < 10:
        return ArmorColor.NONE
    return ArmorColor.PURPLE


def light_level_hls(image) -> float:
    """Mean HLS lightness of a BGR image."""
    arr = np.asarray(image)
    if arr.size == 0:
        raise ValueError("image is empty")
    return float(bgr_to_hls(arr)[..., 1].mean())