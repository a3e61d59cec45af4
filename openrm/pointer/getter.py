"""Measurements on images, rectangles, lightbars and armor plates."""

from __future__ import annotations

import math

import numpy as np

from .imgproc import (
    bgr_to_gray,
    bgr_to_hsv,
    contour_area,
    hsv_to_bgr,
    in_range,
    threshold_binary,
)
from .model import (
    Armor,
    ArmorColor,
    ArmorID,
    ArmorSize,
    BinaryMethod,
    GrayScaleMethod,
    Lightbar,
    LightbarPair,
    Rect,
    RotatedRect,
)

Point = tuple[float, float]

_RED_HUE = ((0, 0, 0), (10, 255, 255))
_BLUE_HUE = ((100, 0, 0), (124, 255, 255))
_PURPLE_HUE = ((125, 0, 0), (155, 255, 255))

_COLOR_NAMES = {
    ArmorColor.BLUE: "blue",
    ArmorColor.RED: "red",
    ArmorColor.NONE: "none",
    ArmorColor.PURPLE: "purple",
}
_SIZE_NAMES = {ArmorSize.SMALL: "small", ArmorSize.BIG: "big"}
_ID_NAMES = {
    ArmorID.SENTRY: "sentry",
    ArmorID.HERO: "hero",
    ArmorID.ENGINEER: "engineer",
    ArmorID.INFANTRY_3: "infantry3",
    ArmorID.INFANTRY_4: "infantry4",
    ArmorID.INFANTRY_5: "infantry5",
    ArmorID.TOWER: "tower",
}


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _channels(image) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    arr = np.asarray(image)
    if arr.ndim != 3 or arr.shape[2] != 3:
        raise ValueError(f"expected an HxWx3 image, got shape {arr.shape}")
    return arr[..., 0], arr[..., 1], arr[..., 2]


def _sat_add(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return np.clip(a.astype(np.int32) + b.astype(np.int32), 0, 255).astype(np.uint8)


def _sat_sub(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return np.clip(a.astype(np.int32) - b.astype(np.int32), 0, 255).astype(np.uint8)


def gray_scale_rgb(image, color) -> np.ndarray:
    """Pick the channel matching the armor colour; green for anything else."""
    b, g, r = _channels(image)
    if color == ArmorColor.BLUE:
        return b.copy()
    if color == ArmorColor.RED:
        return r.copy()
    if color == ArmorColor.PURPLE:
        return _sat_add(b, r)
    return g.copy()


def gray_scale_hsv(image, color) -> np.ndarray:
    """Grayscale of the pixels whose hue matches the armor colour."""
    hsv = bgr_to_hsv(image)
    bounds = {
        ArmorColor.BLUE: _BLUE_HUE,
        ArmorColor.RED: _RED_HUE,
        ArmorColor.PURPLE: _PURPLE_HUE,
    }.get(color, ((0, 0, 0), (255, 255, 255)))
    mask = in_range(hsv, *bounds)
    masked = np.where(mask[..., None] > 0, hsv, 0).astype(np.uint8)
    return bgr_to_gray(hsv_to_bgr(masked))


def gray_scale_cvt(image) -> np.ndarray:
    """Plain luminance grayscale."""
    return bgr_to_gray(image)


def gray_scale_mix(image, color) -> np.ndarray:
    """Channel pick for red and blue, hue mask for purple, luminance otherwise."""
    if color in (ArmorColor.BLUE, ArmorColor.RED):
        return gray_scale_rgb(image, color)
    if color == ArmorColor.PURPLE:
        return gray_scale_hsv(image, color)
    return gray_scale_cvt(image)


def gray_scale_sub(image, color) -> np.ndarray:
    """Channel difference that favours the armor colour, saturating at zero."""
    b, g, r = _channels(image)
    if color == ArmorColor.BLUE:
        return _sat_sub(b, r)
    if color == ArmorColor.RED:
        return _sat_sub(r, b)
    if color == ArmorColor.PURPLE:
        return _sat_sub(_sat_add(b, r), g)
    return g.copy()


def gray_scale(image, color, method) -> np.ndarray:
    """Grayscale by the chosen method; luminance when the method is unknown."""
    if method == GrayScaleMethod.RGB:
        return gray_scale_rgb(image, color)
    if method == GrayScaleMethod.HSV:
        return gray_scale_hsv(image, color)
    if method == GrayScaleMethod.MIX:
        return gray_scale_mix(image, color)
    if method == GrayScaleMethod.SUB:
        return gray_scale_sub(image, color)
    return gray_scale_cvt(image)


def _first_channel_mean(image) -> float:
    arr = np.asarray(image)
    if arr.size == 0:
        return 0.0
    if arr.ndim == 3:
        arr = arr[..., 0]
    return float(arr.mean())


def binary_average_threshold(image, threshold) -> np.ndarray:
    """Binarise at the image mean plus an offset, clamped to [0, 255]."""
    total = int(_first_channel_mean(image)) + int(threshold)
    total = min(max(total, 0), 255)
    return threshold_binary(image, total, 255)


def binary_max_min_ratio(image, ratio) -> np.ndarray:
    """Binarise at (min + max) * ratio."""
    arr = np.asarray(image)
    value = (float(arr.min()) + float(arr.max())) * ratio
    return threshold_binary(arr, value, 255)


def binary(image, threshold, method) -> np.ndarray:
    """Binarise by the chosen method; a direct threshold when unknown."""
    if method == BinaryMethod.MAX_MIN_RATIO:
        return binary_max_min_ratio(image, threshold)
    if method == BinaryMethod.AVERAGE_THRESHOLD:
        return binary_average_threshold(image, threshold)
    return threshold_binary(image, threshold, 255)


def extend_rect(rect: Rect, src_width: int, src_height: int, ratio_x: float, ratio_y: float) -> Rect:
    """Scale a rectangle about its center, limited by the image size."""
    new_w = int(rect.width * ratio_x)
    new_h = int(rect.height * ratio_y)
    new_x = max(rect.x - _cdiv(new_w - rect.width, 2), 0)
    new_y = max(rect.y - _cdiv(new_h - rect.height, 2), 0)
    new_w = min(new_w, src_width - rect.x - 2)
    new_h = min(new_h, src_height - rect.y - 2)
    return Rect(new_x, new_y, new_w, new_h)


def armor_color_name(color) -> str:
    try:
        return _COLOR_NAMES[ArmorColor(color)]
    except ValueError:
        return "unknown"


def armor_size_name(size) -> str:
    try:
        return _SIZE_NAMES[ArmorSize(size)]
    except ValueError:
        return "unknown"


def armor_id_name(armor_id) -> str:
    try:
        return _ID_NAMES[ArmorID(armor_id)]
    except ValueError:
        return ""


def overlap_ratio(rect1: Rect, rect2: Rect) -> float:
    """Overlap area over the union area of two rectangles (inclusive corners)."""
    x1 = max(rect1.x, rect2.x)
    y1 = max(rect1.y, rect2.y)
    x2 = min(rect1.x + rect1.width, rect2.x + rect2.width)
    y2 = min(rect1.y + rect1.height, rect2.y + rect2.height)
    w = max(0, x2 - x1 + 1)
    h = max(0, y2 - y1 + 1)
    overlap = float(w * h)
    area1 = float(rect1.width * rect1.height)
    area2 = float(rect2.width * rect2.height)
    return overlap / (area1 + area2 - overlap + 1e-5)


def region_color(image, region) -> ArmorColor:
    """Red or blue, whichever channel dominates a slightly enlarged region."""
    if isinstance(region, RotatedRect):
        region = region.bounding_rect()
    src = np.asarray(image)
    dx = max(3.0, region.width * 0.1)
    dy = max(3.0, region.height * 0.05)
    grown = Rect(
        int(region.x - dx),
        int(region.y - dy),
        int(region.width + 2 * dx),
        int(region.height + 2 * dy),
    )
    rows, cols = src.shape[:2]
    roi_rect = grown.intersect(Rect(0, 0, cols, rows))
    roi = src[roi_rect.y:roi_rect.y + roi_rect.height, roi_rect.x:roi_rect.x + roi_rect.width]
    red = int(roi[..., 2].astype(np.int64).sum())
    blue = int(roi[..., 0].astype(np.int64).sum())
    return ArmorColor.BLUE if blue > red else ArmorColor.RED


def rect_side_ratio(rect) -> float:
    """Longer side over shorter side; integer division for an axis-aligned Rect."""
    if isinstance(rect, RotatedRect):
        w, h = rect.size
        return float(w / h) if w > h else float(h / w)
    if rect.width > rect.height:
        return float(_cdiv(rect.width, rect.height))
    return float(_cdiv(rect.height, rect.width))


def contour_to_rect_area_ratio(contour, rect: RotatedRect) -> float:
    """Contour area over the area of its rotated rectangle."""
    return contour_area(contour) / rect.area()


def lightbar_angle_cv45(rect: RotatedRect) -> float:
    """Tilt from vertical, clockwise positive, for angles in (0, 90]."""
    return rect.angle - 90 if rect.size[0] > rect.size[1] else rect.angle


def lightbar_angle_cv41(rect: RotatedRect) -> float:
    """Tilt from vertical for the older counter-clockwise angle convention."""
    return rect.angle + 90 if rect.size[0] > rect.size[1] else rect.angle


def pair_mean_length(lb1: Lightbar, lb2: Lightbar) -> float:
    return (lb1.length + lb2.length) / 2


def pair_length_ratio(lb1: Lightbar, lb2: Lightbar) -> float:
    """Longer length over shorter length."""
    if lb1.length > lb2.length:
        return lb1.length / lb2.length
    return lb2.length / lb1.length


def pair_area_ratio(lb1: Lightbar, lb2: Lightbar) -> float:
    """Larger rotated-rect area over smaller."""
    a1 = lb1.rect.area()
    a2 = lb2.rect.area()
    return a1 / a2 if a1 > a2 else a2 / a1


def armor_side_ratio(lb1: Lightbar, lb2: Lightbar) -> float:
    """Distance between the bar centers over the first bar's length."""
    (x1, y1), (x2, y2) = lb1.rect.center, lb2.rect.center
    return math.hypot(x1 - x2, y1 - y2) / lb1.length


def pair_angle_diff(lb1: Lightbar, lb2: Lightbar) -> float:
    return abs(lb1.angle - lb2.angle)


def pair_angle_avg(lb1: Lightbar, lb2: Lightbar) -> float:
    return (lb1.angle + lb2.angle) / 2


def pair_center_offset(lb1: Lightbar, lb2: Lightbar) -> float:
    """Offset of the two centers along the pair's mean direction."""
    angle = math.radians(pair_angle_avg(lb1, lb2))
    dx = lb2.rect.center[0] - lb1.rect.center[0]
    dy = lb2.rect.center[1] - lb1.rect.center[1]
    return abs(math.sin(angle) * dx - math.cos(angle) * dy)


def pair_center(lb1: Lightbar, lb2: Lightbar) -> Point:
    return (
        (lb1.rect.center[0] + lb2.rect.center[0]) / 2,
        (lb1.rect.center[1] + lb2.rect.center[1]) / 2,
    )


def armor_rect_center(armor: Armor) -> Point:
    """Center of the armor rectangle, with integer half sizes."""
    return (
        float(armor.rect.x + _cdiv(armor.rect.width, 2)),
        float(armor.rect.y + _cdiv(armor.rect.height, 2)),
    )


def relative_to_absolute(rect: Rect, point: Point) -> Point:
    """Shift a rect-relative point into image coordinates."""
    return (rect.x + point[0], rect.y + point[1])


def nearest_lightbar_pair(pairs, armor: Armor) -> LightbarPair:
    """The pair whose center lies closest to the armor center."""
    best = LightbarPair()
    min_dist = 1e10
    ax, ay = armor.center
    for pair in pairs:
        cx, cy = pair_center(pair.first, pair.second)
        dist = math.hypot(cx - ax, cy - ay)
        if dist < min_dist:
            min_dist = dist
            best = pair
    return best


def clamp_rect(image, rect: Rect) -> Rect:
    """Treat rect's x, y as its center and clamp its corners into the image."""
    arr = np.asarray(image)
    rows, cols = arr.shape[:2]

    def clamp(value: int, upper: int) -> int:
        return min(max(value, 0), upper)

    half_w = _cdiv(rect.width, 2)
    half_h = _cdiv(rect.height, 2)
    left = clamp(rect.x - half_w, cols - 1)
    top = clamp(rect.y - half_h, rows - 1)
    right = clamp(rect.x + half_w, cols - 1)
    bottom = clamp(rect.y + half_h, rows - 1)
    x, y = min(left, right), min(top, bottom)
    return Rect(x, y, max(left, right) - x, max(top, bottom) - y)