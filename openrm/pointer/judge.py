"""Validity checks for lightbars, lightbar pairs and armor plates."""

from __future__ import annotations

import logging
from itertools import combinations

import numpy as np

from .getter import (
    armor_side_ratio,
    clamp_rect,
    contour_to_rect_area_ratio,
    lightbar_angle_cv45,
    nearest_lightbar_pair,
    pair_angle_avg,
    pair_angle_diff,
    pair_area_ratio,
    pair_center_offset,
    pair_length_ratio,
    pair_mean_length,
    rect_side_ratio,
)
from .model import Armor, ArmorColor, Lightbar, LightbarPair, Rect

log = logging.getLogger(__name__)


def is_rect_side_ratio_valid(lightbar: Lightbar, min_ratio: float, max_ratio: float) -> bool:
    ratio = rect_side_ratio(lightbar.rect)
    if ratio < min_ratio or ratio > max_ratio:
        log.debug("lb rect side ratio: %f", ratio)
        return False
    return True


def is_rect_area_valid(lightbar: Lightbar, min_area: float) -> bool:
    area = lightbar.rect.area()
    if area < min_area:
        log.debug("lb rect area: %f", area)
        return False
    return True


def is_area_ratio_valid(lightbar: Lightbar, min_ratio: float) -> bool:
    ratio = contour_to_rect_area_ratio(lightbar.contour, lightbar.rect)
    if ratio < min_ratio:
        log.debug("lb rect area ratio: %f", ratio)
        return False
    return True


def is_angle_valid(lightbar: Lightbar, max_angle: float) -> bool:
    angle = lightbar_angle_cv45(lightbar.rect)
    if abs(angle) > max_angle:
        log.debug("lb angle: %f", angle)
        return False
    return True


def is_lightbar_valid(lightbar, min_rect_side, max_rect_side, min_value_area, min_ratio_area, max_angle) -> bool:
    checks = (
        is_rect_side_ratio_valid(lightbar, min_rect_side, max_rect_side),
        is_rect_area_valid(lightbar, min_value_area),
        is_area_ratio_valid(lightbar, min_ratio_area),
        is_angle_valid(lightbar, max_angle),
    )
    return all(checks)


def is_length_ratio_valid(lb1: Lightbar, lb2: Lightbar, max_ratio: float) -> bool:
    ratio = pair_length_ratio(lb1, lb2)
    if ratio > max_ratio:
        log.debug("lb pair ratio length: %f", ratio)
        return False
    return True


def is_pair_area_ratio_valid(lb1: Lightbar, lb2: Lightbar, max_ratio: float) -> bool:
    ratio = pair_area_ratio(lb1, lb2)
    if ratio > max_ratio:
        log.debug("lb pair ratio area: %f", ratio)
        return False
    return True


def is_armor_side_valid(lb1: Lightbar, lb2: Lightbar, min_ratio: float, max_ratio: float) -> bool:
    ratio = armor_side_ratio(lb1, lb2)
    if ratio < min_ratio or ratio > max_ratio:
        log.debug("lb pair ratio side: %f", ratio)
        return False
    return True


def is_angle_diff_valid(lb1: Lightbar, lb2: Lightbar, max_angle: float) -> bool:
    angle = pair_angle_diff(lb1, lb2)
    if angle > max_angle:
        log.debug("lb pair angle diff: %f", angle)
        return False
    return True


def is_angle_avg_valid(lb1: Lightbar, lb2: Lightbar, max_angle: float) -> bool:
    angle = pair_angle_avg(lb1, lb2)
    if abs(angle) > max_angle:
        log.debug("lb pair angle avg: %f", angle)
        return False
    return True


def is_center_offset_valid(lb1: Lightbar, lb2: Lightbar, max_ratio: float) -> bool:
    ratio = pair_center_offset(lb1, lb2) / pair_mean_length(lb1, lb2)
    if ratio > max_ratio:
        log.debug("lb pair center offset: %f", ratio)
        return False
    return True


def is_lightbar_matched(
    lb1, lb2, max_ratio_length, max_ratio_area, min_ratio_side, max_ratio_side,
    max_angle_diff, max_angle_avg, max_offset,
) -> bool:
    """Whether two lightbars can be the two sides of one armor plate."""
    if not is_pair_area_ratio_valid(lb1, lb2, max_ratio_area):
        return False
    if not is_center_offset_valid(lb1, lb2, max_offset):
        return False
    checks = (
        is_length_ratio_valid(lb1, lb2, max_ratio_length),
        is_armor_side_valid(lb1, lb2, min_ratio_side, max_ratio_side),
        is_angle_diff_valid(lb1, lb2, max_angle_diff),
        is_angle_avg_valid(lb1, lb2, max_angle_avg),
    )
    return all(checks)


def is_lightbar_area_percent_valid(armor: Armor, min_area_percent: float) -> bool:
    """Whether the corner quadrilateral covers enough of the armor rectangle."""
    if len(armor.four_points) < 4:
        raise ValueError("armor needs four corner points")
    p0, p1, p2 = (np.asarray(p, dtype=np.float64) for p in armor.four_points[:3])
    quad_area = float(np.linalg.norm(p0 - p1) * np.linalg.norm(p0 - p2))
    return quad_area / armor.rect.area() > min_area_percent


def is_rect_in_image(image, rect: Rect) -> bool:
    rows, cols = np.asarray(image).shape[:2]
    if rect.width <= 0 or rect.height <= 0:
        return False
    if rect.x < 0 or rect.x >= cols or rect.x + rect.width > cols:
        return False
    if rect.y < 0 or rect.y >= rows or rect.y + rect.height > rows:
        return False
    return True


def is_point_in_image(image, point) -> bool:
    rows, cols = np.asarray(image).shape[:2]
    x, y = point
    return 0 <= x < cols and 0 <= y < rows


def _mean(region: np.ndarray) -> float:
    return float(region.mean()) if region.size else 0.0


def is_armor_color_enemy(image, pair: LightbarPair, enemy_color, threshold: float) -> bool:
    """Whether the channel difference around both lightbars exceeds threshold."""
    arr = np.asarray(image).astype(np.int32)
    b, r = arr[..., 0], arr[..., 2]
    if enemy_color == ArmorColor.BLUE:
        gray = np.clip(b - r, 0, 255)
    elif enemy_color == ArmorColor.RED:
        gray = np.clip(r - b, 0, 255)
    else:
        return False
    left = clamp_rect(gray, pair.first.rect.bounding_rect())
    right = clamp_rect(gray, pair.second.rect.bounding_rect())
    mean_left = _mean(gray[left.y:left.y + left.height, left.x:left.x + left.width])
    mean_right = _mean(gray[right.y:right.y + right.height, right.x:right.x + right.width])
    total = int(0.5 * int(mean_left) + 0.5 * int(mean_right))
    log.debug("split avg %d", total)
    return total > threshold


def lightbars_from_contours(
    contours, min_rect_side, max_rect_side, min_value_area, min_ratio_area, max_angle,
) -> list[Lightbar]:
    """Lightbars built from contours, keeping only the valid ones."""
    lightbars = (Lightbar.from_contour(contour) for contour in contours)
    return [
        lb for lb in lightbars
        if is_lightbar_valid(lb, min_rect_side, max_rect_side, min_value_area, min_ratio_area, max_angle)
    ]


def best_matched_lightbar_pair(
    lightbars, armor, max_ratio_length, max_ratio_area, min_ratio_side, max_ratio_side,
    max_angle_diff, max_angle_avg, max_offset,
) -> LightbarPair | None:
    """The matched pair nearest the armor center, or None if nothing matches."""
    matched = [
        LightbarPair(lb1, lb2)
        for lb1, lb2 in combinations(lightbars, 2)
        if is_lightbar_matched(
            lb1, lb2, max_ratio_length, max_ratio_area, min_ratio_side,
            max_ratio_side, max_angle_diff, max_angle_avg, max_offset,
        )
    ]
    if not matched:
        return None
    if len(matched) == 1:
        return matched[0]
    return nearest_lightbar_pair(matched, armor)