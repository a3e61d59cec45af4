"""Armor and lightbar data types and the operations that fill them in."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum

import numpy as np

from .imgproc import bgr_to_hsv, bounding_rect, hsv_to_bgr, min_area_rect

Point = tuple[float, float]


class ArmorColor(IntEnum):
    BLUE = 0
    RED = 1
    NONE = 2
    PURPLE = 3


class ArmorSize(IntEnum):
    SMALL = 0
    BIG = 1


class ArmorID(IntEnum):
    SENTRY = 0
    HERO = 1
    ENGINEER = 2
    INFANTRY_3 = 3
    INFANTRY_4 = 4
    INFANTRY_5 = 5
    TOWER = 6


class GrayScaleMethod(IntEnum):
    RGB = 0
    HSV = 1
    CVT = 2
    MIX = 3
    SUB = 4


class BinaryMethod(IntEnum):
    MAX_MIN_RATIO = 0
    AVERAGE_THRESHOLD = 1
    DIRECT_THRESHOLD = 2


_ID_MAP = (0, 1, 2, 3, 4, 5, 6, 6, 6)
_LIGHTER_LEVELS = (40, 80, 120, 160, 200, 240, 255)


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


@dataclass
class Rect:
    """Axis-aligned integer rectangle."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    def area(self) -> int:
        return self.width * self.height

    def intersect(self, other: Rect) -> Rect:
        """Overlap of two rectangles; an empty Rect when they do not overlap."""
        x1 = max(self.x, other.x)
        y1 = max(self.y, other.y)
        w = min(self.x + self.width, other.x + other.width) - x1
        h = min(self.y + self.height, other.y + other.height) - y1
        if w <= 0 or h <= 0:
            return Rect()
        return Rect(x1, y1, w, h)


@dataclass
class RotatedRect:
    """Rotated rectangle: center, (width, height) and angle in degrees."""

    center: Point = (0.0, 0.0)
    size: tuple[float, float] = (0.0, 0.0)
    angle: float = 0.0

    def points(self) -> list[Point]:
        """The four corners."""
        rad = math.radians(self.angle)
        b = math.cos(rad) * 0.5
        a = math.sin(rad) * 0.5
        cx, cy = self.center
        w, h = self.size
        p0 = (cx - a * h - b * w, cy + b * h - a * w)
        p1 = (cx + a * h - b * w, cy - b * h - a * w)
        p2 = (2 * cx - p0[0], 2 * cy - p0[1])
        p3 = (2 * cx - p1[0], 2 * cy - p1[1])
        return [p0, p1, p2, p3]

    def bounding_rect(self) -> Rect:
        return Rect(*bounding_rect(self.points()))

    def area(self) -> float:
        return self.size[0] * self.size[1]


def _empty_contour() -> np.ndarray:
    return np.empty((0, 2), dtype=np.int64)


@dataclass
class Lightbar:
    """A light strip: its contour, rotated rect, tilt angle and length."""

    contour: np.ndarray = field(default_factory=_empty_contour)
    rect: RotatedRect = field(default_factory=RotatedRect)
    angle: float = 0.0
    length: float = 0.0

    @classmethod
    def from_contour(cls, contour) -> Lightbar:
        """Build a lightbar; a vertical bar has angle 0, clockwise positive."""
        pts = np.asarray(contour).reshape(-1, 2)
        center, size, angle = min_area_rect(pts)
        rect = RotatedRect(center, size, angle)
        width, height = size
        tilt = angle - 90 if width > height else angle
        return cls(contour=pts, rect=rect, angle=tilt, length=max(width, height))


@dataclass
class PointPair:
    point_up: Point = (0.0, 0.0)
    point_down: Point = (0.0, 0.0)


@dataclass
class LightbarPair:
    first: Lightbar = field(default_factory=Lightbar)
    second: Lightbar = field(default_factory=Lightbar)


def armor_id_from_class36(armor_class: int) -> ArmorID:
    """Robot id encoded in a 36-class detector label."""
    if armor_class < 0:
        raise ValueError(f"invalid armor class {armor_class}")
    return ArmorID(_ID_MAP[armor_class % 9])


def armor_color_from_class36(armor_class: int) -> ArmorColor:
    """Armor colour encoded in a 36-class detector label."""
    if armor_class < 0:
        raise ValueError(f"invalid armor class {armor_class}")
    return ArmorColor(armor_class // 9)


@dataclass
class Armor:
    """A detected armor plate."""

    id: ArmorID = ArmorID.SENTRY
    color: ArmorColor = ArmorColor.NONE
    size: ArmorSize = ArmorSize.SMALL
    rect: Rect = field(default_factory=Rect)
    center: Point = (0.0, 0.0)
    four_points: list[Point] = field(default_factory=list)

    def set_rect_center(self) -> None:
        self.center = (
            float(self.rect.x + _cdiv(self.rect.width, 2)),
            float(self.rect.y + _cdiv(self.rect.height, 2)),
        )

    def set_extend_rect(self, rect: Rect, src_width: int, src_height: int, ratio_x: float, ratio_y: float) -> None:
        """Scale rect about its center, clipped to the image."""
        new_width = int(rect.width * ratio_x)
        new_height = int(rect.height * ratio_y)
        x = max(rect.x - _cdiv(new_width - rect.width, 2), 0)
        y = max(rect.y - _cdiv(new_height - rect.height, 2), 0)
        self.rect = Rect(
            x,
            y,
            min(new_width, src_width - x - 2),
            min(new_height, src_height - y - 2),
        )

    def set_base_class36(self, rect, armor_class, src_width, src_height, ratio_x, ratio_y, size) -> None:
        self.id = armor_id_from_class36(armor_class)
        self.color = armor_color_from_class36(armor_class)
        self.set_extend_rect(rect, src_width, src_height, ratio_x, ratio_y)
        self.size = ArmorSize(size)
        self.set_rect_center()

    def set_base_class7(self, rect, armor_id, src_width, src_height, ratio_x, ratio_y, size) -> None:
        self.id = ArmorID(armor_id)
        self.color = ArmorColor.NONE
        self.set_extend_rect(rect, src_width, src_height, ratio_x, ratio_y)
        self.size = ArmorSize(size)
        self.set_rect_center()

    def set_four_points_relative(self, pp0: PointPair, pp1: PointPair) -> None:
        """Order corners as top-left, top-right, bottom-left, bottom-right."""
        left, right = pp0, pp1
        if (pp0.point_up[0] + pp0.point_down[0]) > (pp1.point_up[0] + pp1.point_down[0]):
            left, right = pp1, pp0
        self.four_points = [left.point_up, right.point_up, left.point_down, right.point_down]

    def relative_to_absolute(self) -> None:
        """Shift corners from rect-relative to image coordinates."""
        if len(self.four_points) < 4:
            return
        dx, dy = self.rect.x, self.rect.y
        self.four_points = [(x + dx, y + dy) for x, y in self.four_points[:4]] + self.four_points[4:]

    def set_four_points(self, pp0: PointPair, pp1: PointPair) -> None:
        self.set_four_points_relative(pp0, pp1)
        self.relative_to_absolute()

    def set_size_by_points(self, ratio: float) -> None:
        """Classify as big when the corner width/height ratio exceeds ratio."""
        if len(self.four_points) < 4:
            raise ValueError("armor needs four corner points")
        if ratio < 1.0:
            ratio = 1.0 / ratio
        p0, p1, p2, p3 = (np.asarray(p, dtype=np.float64) for p in self.four_points[:4])
        width = np.linalg.norm(p0 - p1) + np.linalg.norm(p2 - p3)
        height = np.linalg.norm(p0 - p2) + np.linalg.norm(p1 - p3)
        self.size = ArmorSize.BIG if width / height > ratio else ArmorSize.SMALL


def reset_armor_four_points(image, armor: Armor, radius: float) -> None:
    """Move each corner to the colour-weighted barycenter of a disc around it."""
    if len(armor.four_points) != 4:
        return
    if armor.color == ArmorColor.NONE:
        return
    src = np.asarray(image)
    pts = [np.asarray(p, dtype=np.float64) for p in armor.four_points]
    dist = 0.5 * np.linalg.norm(pts[0] - pts[2]) + 0.5 * np.linalg.norm(pts[1] - pts[3])
    r = int(radius * dist)

    if armor.color == ArmorColor.BLUE:
        weights = src[..., 0].astype(np.int64)
    elif armor.color == ArmorColor.RED:
        weights = src[..., 2].astype(np.int64)
    else:
        weights = src[..., 0].astype(np.int64) + src[..., 2].astype(np.int64)

    rows, cols = src.shape[:2]
    moved: list[Point] = []
    for px, py in pts:
        cx, cy = int(np.rint(px)), int(np.rint(py))
        x_min, x_max = max(cx - r, 0), min(cx + r, cols - 1)
        y_min, y_max = max(cy - r, 0), min(cy + r, rows - 1)
        ys, xs = np.mgrid[y_min:y_max + 1, x_min:x_max + 1]
        inside = np.hypot(xs - cx, ys - cy) <= r
        w = weights[y_min:y_max + 1, x_min:x_max + 1] * inside
        total = int(w.sum())
        if total == 0:
            moved.append((math.nan, math.nan))
        else:
            moved.append((float((xs * w).sum() / total), float((ys * w).sum() / total)))
    armor.four_points = moved


def lighter_lut(image) -> np.ndarray:
    """Brighten an 8-bit image by mapping values onto coarse bright levels."""
    table = np.array([_LIGHTER_LEVELS[i // 40] for i in range(256)], dtype=np.uint8)
    arr = np.asarray(image)
    if arr.dtype != np.uint8:
        raise ValueError("expected an 8-bit image")
    return table[arr]


def lighter_hsv(image) -> np.ndarray:
    """Brighten a BGR image by scaling its HSV value channel by 1.5."""
    hsv = bgr_to_hsv(image)
    value = np.clip(np.rint(hsv[..., 2].astype(np.float64) * 1.5), 0, 255)
    hsv[..., 2] = value.astype(np.uint8)
    return hsv_to_bgr(hsv)