"""Image-processing primitives on numpy arrays, following OpenCV's 8-bit conventions."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

Point = tuple[float, float]


def _as_bgr(image) -> np.ndarray:
    arr = np.asarray(image)
    if arr.ndim != 3 or arr.shape[2] != 3:
        raise ValueError(f"expected an HxWx3 image, got shape {arr.shape}")
    return arr


def _points(points) -> np.ndarray:
    arr = np.asarray(points, dtype=np.float64)
    if arr.size == 0:
        return np.empty((0, 2), dtype=np.float64)
    return arr.reshape(-1, 2)


def _round_half_up(values):
    return np.floor(values + 0.5)


def bgr_to_hsv(image) -> np.ndarray:
    """Convert an 8-bit BGR image to HSV with hue in [0, 180)."""
    arr = _as_bgr(image).astype(np.int64)
    b, g, r = arr[..., 0], arr[..., 1], arr[..., 2]
    v = arr.max(axis=2)
    diff = v - arr.min(axis=2)
    s = np.where(v > 0, _round_half_up(255.0 * diff / np.maximum(v, 1)), 0)
    expr = np.where(v == r, g - b, np.where(v == g, b - r + 2 * diff, r - g + 4 * diff))
    h = np.where(diff > 0, _round_half_up(30.0 * expr / np.maximum(diff, 1)), 0)
    h = np.where(h < 0, h + 180, h)
    return np.stack([h, s, v], axis=2).astype(np.uint8)


def hsv_to_bgr(image) -> np.ndarray:
    """Convert an 8-bit HSV image (hue in [0, 180)) back to BGR."""
    arr = _as_bgr(image).astype(np.float64)
    h = (arr[..., 0] / 30.0) % 6.0
    s = arr[..., 1] / 255.0
    v = arr[..., 2] / 255.0
    sector = np.floor(h).astype(np.int64) % 6
    f = h - np.floor(h)
    p = v * (1.0 - s)
    q = v * (1.0 - s * f)
    t = v * (1.0 - s * (1.0 - f))
    r = np.choose(sector, [v, q, p, p, t, v])
    g = np.choose(sector, [t, v, v, q, p, p])
    b = np.choose(sector, [p, p, t, v, v, q])
    out = np.stack([b, g, r], axis=2) * 255.0
    return np.clip(np.rint(out), 0, 255).astype(np.uint8)


def bgr_to_hls(image) -> np.ndarray:
    """Convert an 8-bit BGR image to HLS with hue in [0, 180)."""
    arr = _as_bgr(image).astype(np.float64) / 255.0
    b, g, r = arr[..., 0], arr[..., 1], arr[..., 2]
    vmax = arr.max(axis=2)
    vmin = arr.min(axis=2)
    diff = vmax - vmin
    light = (vmax + vmin) / 2.0
    with np.errstate(divide="ignore", invalid="ignore"):
        sat = np.where(light < 0.5, diff / (vmax + vmin), diff / (2.0 - vmax - vmin))
        expr = np.where(vmax == r, g - b, np.where(vmax == g, b - r + 2 * diff, r - g + 4 * diff))
        hue = 60.0 * expr / diff
    has_chroma = diff > 1e-12
    sat = np.where(has_chroma, sat, 0.0)
    hue = np.where(has_chroma, hue, 0.0)
    hue = np.where(hue < 0, hue + 360.0, hue)
    out = np.stack([np.rint(hue * 0.5), np.rint(light * 255.0), np.rint(sat * 255.0)], axis=2)
    return np.clip(out, 0, 255).astype(np.uint8)


def bgr_to_gray(image) -> np.ndarray:
    """Convert an 8-bit BGR image to grayscale with fixed-point luma weights."""
    arr = np.asarray(image)
    if arr.ndim == 2:
        return arr.copy()
    arr = _as_bgr(arr).astype(np.int64)
    gray = (arr[..., 2] * 4899 + arr[..., 1] * 9617 + arr[..., 0] * 1868 + (1 << 13)) >> 14
    return gray.astype(np.uint8)


def in_range(image, lower, upper) -> np.ndarray:
    """Return a 0/255 mask of pixels whose every channel lies within [lower, upper]."""
    arr = np.asarray(image)
    lo = np.atleast_1d(np.asarray(lower, dtype=np.float64))
    hi = np.atleast_1d(np.asarray(upper, dtype=np.float64))
    if arr.ndim == 2:
        mask = (arr >= lo[0]) & (arr <= hi[0])
    else:
        channels = arr.shape[2]
        if lo.size < channels or hi.size < channels:
            raise ValueError("bounds must give a value for every channel")
        mask = np.all((arr >= lo[:channels]) & (arr <= hi[:channels]), axis=2)
    return mask.astype(np.uint8) * 255


def threshold_binary(image, thresh, maxval) -> np.ndarray:
    """Set pixels above thresh to maxval and the rest to zero."""
    arr = np.asarray(image)
    if arr.dtype == np.uint8:
        limit = math.floor(thresh)
        high = int(np.clip(np.rint(maxval), 0, 255))
        return np.where(arr > limit, high, 0).astype(np.uint8)
    return np.where(arr > thresh, maxval, 0).astype(arr.dtype)


def contour_area(contour) -> float:
    """Area enclosed by a polygonal contour."""
    pts = _points(contour)
    if len(pts) < 3:
        return 0.0
    x, y = pts[:, 0], pts[:, 1]
    return float(0.5 * abs(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y)))


def _cross(o, a, b) -> float:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def convex_hull(points) -> np.ndarray:
    """Convex hull vertices of a point set, without collinear points."""
    unique = sorted({(float(x), float(y)) for x, y in _points(points)})
    if len(unique) <= 2:
        return np.array(unique, dtype=np.float64).reshape(-1, 2)
    lower: list[tuple[float, float]] = []
    for p in unique:
        while len(lower) >= 2 and _cross(lower[-2], lower[-1], p) <= 0:
            lower.pop()
        lower.append(p)
    upper: list[tuple[float, float]] = []
    for p in reversed(unique):
        while len(upper) >= 2 and _cross(upper[-2], upper[-1], p) <= 0:
            upper.pop()
        upper.append(p)
    return np.array(lower[:-1] + upper[:-1], dtype=np.float64)


def bounding_rect(points) -> tuple[int, int, int, int]:
    """Smallest integer (x, y, width, height) rectangle holding every point."""
    pts = _points(points)
    if len(pts) == 0:
        return (0, 0, 0, 0)
    x = math.floor(pts[:, 0].min())
    y = math.floor(pts[:, 1].min())
    width = math.ceil(pts[:, 0].max()) - x + 1
    height = math.ceil(pts[:, 1].max()) - y + 1
    return (x, y, width, height)


def min_area_rect(points) -> tuple[Point, tuple[float, float], float]:
    """Minimum-area rotated rectangle as (center, (width, height), angle).

    The angle lies in (0, 90]: it is the clockwise rotation of the x axis
    onto the side taken as the width.
    """
    hull = convex_hull(points)
    if len(hull) == 0:
        raise ValueError("no points given")
    if len(hull) == 1:
        return ((float(hull[0, 0]), float(hull[0, 1])), (0.0, 0.0), 0.0)

    best = None
    for p, q in zip(hull, np.roll(hull, -1, axis=0)):
        edge = q - p
        length = math.hypot(edge[0], edge[1])
        if length == 0:
            continue
        u = edge / length
        v = np.array([-u[1], u[0]])
        pu = hull @ u
        pv = hull @ v
        area = (pu.max() - pu.min()) * (pv.max() - pv.min())
        if best is None or area < best[0]:
            best = (area, u, v, pu.min(), pu.max(), pv.min(), pv.max())

    _, u, v, umin, umax, vmin, vmax = best
    center = (umin + umax) / 2.0 * u + (vmin + vmax) / 2.0 * v
    extent_u = float(umax - umin)
    extent_v = float(vmax - vmin)
    angle_u = math.degrees(math.atan2(u[1], u[0])) % 180.0
    if 0.0 < angle_u <= 90.0:
        angle, size = angle_u, (extent_u, extent_v)
    else:
        angle = angle_u - 90.0 if angle_u > 90.0 else 90.0
        size = (extent_v, extent_u)
    return ((float(center[0]), float(center[1])), size, float(angle))


def fit_line(points) -> tuple[float, float, float, float]:
    """Least-squares line as (vx, vy, x0, y0): unit direction and a point on it."""
    pts = _points(points)
    if len(pts) < 2:
        raise ValueError("at least two points are needed to fit a line")
    x0 = float(pts[:, 0].mean())
    y0 = float(pts[:, 1].mean())
    dx2 = float((pts[:, 0] ** 2).mean()) - x0 * x0
    dy2 = float((pts[:, 1] ** 2).mean()) - y0 * y0
    dxy = float((pts[:, 0] * pts[:, 1]).mean()) - x0 * y0
    theta = math.atan2(2.0 * dxy, dx2 - dy2) / 2.0
    return (math.cos(theta), math.sin(theta), x0, y0)


def _circle_two(a, b) -> tuple[np.ndarray, float]:
    return (a + b) / 2.0, math.hypot(*(a - b)) / 2.0


def _circle_three(a, b, c) -> tuple[np.ndarray, float]:
    d = 2.0 * (a[0] * (b[1] - c[1]) + b[0] * (c[1] - a[1]) + c[0] * (a[1] - b[1]))
    if abs(d) < 1e-12:
        return max((_circle_two(a, b), _circle_two(a, c), _circle_two(b, c)), key=lambda item: item[1])
    sa, sb, sc = a @ a, b @ b, c @ c
    ux = (sa * (b[1] - c[1]) + sb * (c[1] - a[1]) + sc * (a[1] - b[1])) / d
    uy = (sa * (c[0] - b[0]) + sb * (a[0] - c[0]) + sc * (b[0] - a[0])) / d
    center = np.array([ux, uy])
    return center, math.hypot(*(a - center))


def min_enclosing_circle(points) -> tuple[Point, float]:
    """Smallest circle holding every point, as (center, radius)."""
    pts = _points(points)
    if len(pts) == 0:
        raise ValueError("no points given")

    def inside(p, center, radius):
        return math.hypot(*(p - center)) <= radius + 1e-9 * max(1.0, radius)

    center, radius = pts[0].copy(), 0.0
    for i, pi in enumerate(pts):
        if inside(pi, center, radius):
            continue
        center, radius = pi.copy(), 0.0
        for j in range(i):
            pj = pts[j]
            if inside(pj, center, radius):
                continue
            center, radius = _circle_two(pi, pj)
            for k in range(j):
                pk = pts[k]
                if not inside(pk, center, radius):
                    center, radius = _circle_three(pi, pj, pk)
    return ((float(center[0]), float(center[1])), float(radius))


def perspective_transform(src_points, dst_points) -> np.ndarray:
    """3x3 homography mapping four source points onto four destination points."""
    src = _points(src_points)
    dst = _points(dst_points)
    if src.shape != (4, 2) or dst.shape != (4, 2):
        raise ValueError("exactly four source and four destination points are needed")
    rows = []
    rhs = []
    for (x, y), (u, v) in zip(src, dst):
        rows.append([x, y, 1.0, 0.0, 0.0, 0.0, -x * u, -y * u])
        rows.append([0.0, 0.0, 0.0, x, y, 1.0, -x * v, -y * v])
        rhs.extend([u, v])
    try:
        solution = np.linalg.solve(np.array(rows), np.array(rhs))
    except np.linalg.LinAlgError as exc:
        raise ValueError("points are degenerate; no perspective transform exists") from exc
    return np.append(solution, 1.0).reshape(3, 3)


def warp_perspective_onto(image, matrix, dst) -> np.ndarray:
    """Warp image by matrix over a copy of dst with bilinear sampling.

    Destination pixels whose source falls outside the image keep their
    values from dst.
    """
    src = np.asarray(image)
    out = np.array(dst, copy=True)
    if src.ndim != out.ndim or src.shape[2:] != out.shape[2:]:
        raise ValueError("image and destination must have the same channel layout")
    inverse = np.linalg.inv(np.asarray(matrix, dtype=np.float64))
    out_h, out_w = out.shape[:2]
    src_h, src_w = src.shape[:2]

    ys, xs = np.mgrid[0:out_h, 0:out_w]
    homog = np.stack([xs.ravel(), ys.ravel(), np.ones(xs.size)]).astype(np.float64)
    mapped = inverse @ homog
    w = mapped[2]
    valid = np.abs(w) > 1e-12
    safe_w = np.where(valid, w, 1.0)
    sx = mapped[0] / safe_w
    sy = mapped[1] / safe_w
    valid &= (sx >= 0) & (sx <= src_w - 1) & (sy >= 0) & (sy <= src_h - 1)

    idx = np.flatnonzero(valid)
    sx, sy = sx[idx], sy[idx]
    x0 = np.floor(sx).astype(np.int64)
    y0 = np.floor(sy).astype(np.int64)
    x1 = np.minimum(x0 + 1, src_w - 1)
    y1 = np.minimum(y0 + 1, src_h - 1)
    fx = sx - x0
    fy = sy - y0
    if src.ndim == 3:
        fx = fx[:, None]
        fy = fy[:, None]
    data = src.astype(np.float64)
    value = (
        data[y0, x0] * (1 - fx) * (1 - fy)
        + data[y0, x1] * fx * (1 - fy)
        + data[y1, x0] * (1 - fx) * fy
        + data[y1, x1] * fx * fy
    )
    if np.issubdtype(out.dtype, np.integer):
        info = np.iinfo(out.dtype)
        value = np.clip(np.rint(value), info.min, info.max)
    flat = out.reshape(out_h * out_w, *out.shape[2:])
    flat[idx] = value.astype(out.dtype)
    return out