"""Painting an armor decal over detected armor corners."""

from __future__ import annotations

import numpy as np
from PIL import Image

from .imgproc import in_range, perspective_transform, warp_perspective_onto
from .model import ArmorSize

Point = tuple[float, float]

REAL_ARMOR_SMALL_WIDTH = 135
REAL_ARMOR_SMALL_HEIGHT = 125
REAL_ARMOR_BIG_WIDTH = 230
REAL_ARMOR_BIG_HEIGHT = 127

_KEY_COLOR = (0, 255, 0)


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _decal_points(width: int, height: int, point_w: int, point_h: int) -> list[Point]:
    cx, cy = _cdiv(width, 2), _cdiv(height, 2)
    hw, hh = _cdiv(point_w, 2), _cdiv(point_h, 2)
    return [
        (float(cx - hw), float(cy - hh)),
        (float(cx + hw), float(cy - hh)),
        (float(cx - hw), float(cy + hh)),
        (float(cx + hw), float(cy + hh)),
    ]


def _read_bgr(path) -> np.ndarray:
    with Image.open(path) as img:
        rgb = np.asarray(img.convert("RGB"))
    return rgb[..., ::-1].copy()


class Reprojector:
    """Warps decal images onto armor corners, keeping their key-green pixels."""

    def __init__(self, real_point_sw, real_point_sh, real_point_bw, real_point_bh, small_decal, big_decal=None):
        self.small_decal = np.asarray(small_decal)
        self.big_decal = self.small_decal if big_decal is None else np.asarray(big_decal)
        if self.small_decal.size == 0:
            raise ValueError("small decal image is empty")
        if self.big_decal.size == 0:
            raise ValueError("big decal image is empty")

        sh, sw = self.small_decal.shape[:2]
        bh, bw = self.big_decal.shape[:2]
        point_sw = int(real_point_sw / REAL_ARMOR_SMALL_WIDTH * sw)
        point_sh = int(real_point_sh / REAL_ARMOR_SMALL_HEIGHT * sh)
        point_bw = int(real_point_bw / REAL_ARMOR_BIG_WIDTH * bw)
        point_bh = int(real_point_bh / REAL_ARMOR_BIG_HEIGHT * bh)
        self.small_points = _decal_points(sw, sh, point_sw, point_sh)
        self.big_points = _decal_points(bw, bh, point_bw, point_bh)

    @classmethod
    def from_files(cls, real_point_sw, real_point_sh, real_point_bw, real_point_bh, small_path, big_path=""):
        """Load decals from image files; an empty big_path reuses the small decal."""
        small = _read_bgr(small_path)
        big = _read_bgr(big_path) if big_path else None
        return cls(real_point_sw, real_point_sh, real_point_bw, real_point_bh, small, big)

    def apply(self, src, four_points, size) -> np.ndarray:
        """Return src with the decal's key-green pixels drawn over the armor."""
        points = list(four_points)
        if len(points) != 4:
            raise ValueError("exactly four armor corner points are needed")
        src = np.asarray(src)
        copy = src.copy()
        if size == ArmorSize.SMALL:
            matrix = perspective_transform(self.small_points, points)
            copy = warp_perspective_onto(self.small_decal, matrix, copy)
        elif size == ArmorSize.BIG:
            matrix = perspective_transform(self.big_points, points)
            copy = warp_perspective_onto(self.big_decal, matrix, copy)

        mask = in_range(copy, _KEY_COLOR, _KEY_COLOR) > 0
        return np.where(mask[..., None], copy, src).astype(src.dtype)