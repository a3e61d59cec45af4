"""Locating lightbar end points and circular blobs."""

from __future__ import annotations

import math

import numpy as np

from .imgproc import contour_area, fit_line, min_enclosing_circle
from .model import Lightbar, PointPair

Point = tuple[float, float]


def _barycenter(gray: np.ndarray, center: tuple[int, int], radius: int) -> Point:
    """Intensity-weighted centroid of the disc of given radius around center."""
    rows, cols = gray.shape[:2]
    cx, cy = center
    x_min, x_max = max(cx - radius, 0), min(cx + radius, cols - 1)
    y_min, y_max = max(cy - radius, 0), min(cy + radius, rows - 1)
    if x_min > x_max or y_min > y_max:
        return (math.nan, math.nan)
    ys, xs = np.mgrid[y_min:y_max + 1, x_min:x_max + 1]
    inside = np.hypot(xs - cx, ys - cy) <= radius
    weights = gray[y_min:y_max + 1, x_min:x_max + 1].astype(np.int64) * inside
    total = int(weights.sum())
    if total == 0:
        return (math.nan, math.nan)
    return (float((xs * weights).sum() / total), float((ys * weights).sum() / total))


def point_pair_barycenter(lightbar: Lightbar, gray, extend_dist: float, radius_ratio: float) -> PointPair:
    """Refine the two ends of a lightbar to intensity barycenters, top first."""
    gray = np.asarray(gray)
    if gray.ndim != 2:
        raise ValueError("expected a single-channel image")
    contour = np.asarray(lightbar.contour).reshape(-1, 2)
    cx, cy = lightbar.rect.center

    vx, vy, _, _ = fit_line(contour)
    k = math.copysign(math.inf, vy) if vx == 0 else vy / vx
    slope = math.atan(k)
    dx = math.cos(slope) * extend_dist
    dy = math.sin(slope) * extend_dist
    sign = 1 if k > 0 else -1

    far0 = np.array([int(cx + dx * sign), int(cy - abs(dy))], dtype=np.float64)
    far1 = np.array([int(cx - dx * sign), int(cy + abs(dy))], dtype=np.float64)
    pts = contour.astype(np.float64)
    end0 = contour[int(np.argmin(np.hypot(*(pts - far0).T)))]
    end1 = contour[int(np.argmin(np.hypot(*(pts - far1).T)))]

    radius = int(radius_ratio * math.hypot(float(end0[0] - end1[0]), float(end0[1] - end1[1])))
    first = _barycenter(gray, (int(end0[0]), int(end0[1])), radius)
    second = _barycenter(gray, (int(end1[0]), int(end1[1])), radius)
    if first[1] > second[1]:
        first, second = second, first
    return PointPair(first, second)


def circle_centers_from_contours(contours, area_threshold: float, circularity_threshold: float) -> list[Point]:
    """Centers of contours that are small enough and close enough to a circle."""
    centers: list[Point] = []
    for contour in contours:
        area = contour_area(contour)
        if area > area_threshold:
            continue
        center, radius = min_enclosing_circle(contour)
        # A degenerate circle gives an undefined circularity, which never fails the check.
        circularity = area / (math.pi * radius ** 2) if radius > 0 else math.nan
        if circularity < circularity_threshold:
            continue
        centers.append(center)
    return centers