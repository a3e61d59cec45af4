import numpy as np
import pytest

from openrm.pointer.judge import (
    best_matched_lightbar_pair,
    is_angle_avg_valid,
    is_angle_diff_valid,
    is_angle_valid,
    is_area_ratio_valid,
    is_armor_color_enemy,
    is_armor_side_valid,
    is_center_offset_valid,
    is_length_ratio_valid,
    is_lightbar_area_percent_valid,
    is_lightbar_matched,
    is_lightbar_valid,
    is_pair_area_ratio_valid,
    is_point_in_image,
    is_rect_area_valid,
    is_rect_in_image,
    is_rect_side_ratio_valid,
    lightbars_from_contours,
)
from openrm.pointer.model import Armor, ArmorColor, Lightbar, LightbarPair, Rect


def _contour(x, y, w=2, h=10):
    return [(x, y), (x + w, y), (x + w, y + h), (x, y + h)]


def _bar(x, y, w=2, h=10):
    return Lightbar.from_contour(_contour(x, y, w, h))


LOOSE = dict(
    max_ratio_length=2.0,
    max_ratio_area=2.0,
    min_ratio_side=1.0,
    max_ratio_side=5.0,
    max_angle_diff=10.0,
    max_angle_avg=20.0,
    max_offset=0.5,
)


def test_rect_side_ratio_valid():
    bar = _bar(0, 0)
    assert is_rect_side_ratio_valid(bar, 1.0, 10.0) is True
    assert is_rect_side_ratio_valid(bar, 1.0, 4.0) is False


def test_rect_area_valid():
    bar = _bar(0, 0)
    assert is_rect_area_valid(bar, bar.rect.area() - 1) is True
    assert is_rect_area_valid(bar, bar.rect.area() + 1) is False


def test_area_ratio_valid():
    bar = _bar(0, 0)
    assert is_area_ratio_valid(bar, 0.9) is True
    triangle = Lightbar.from_contour([(0, 0), (4, 0), (0, 10)])
    assert is_area_ratio_valid(triangle, 0.9) is False


def test_angle_valid():
    assert is_angle_valid(_bar(0, 0), 0.0) is True
    assert is_angle_valid(_bar(0, 0, w=10, h=2), 45.0) is False


def test_lightbar_valid_combines_checks():
    bar = _bar(0, 0)
    assert is_lightbar_valid(bar, 1.0, 10.0, 1.0, 0.5, 30.0) is True
    assert is_lightbar_valid(bar, 1.0, 10.0, 1.0, 0.5, -1.0) is False


def test_lightbars_from_contours_filters():
    contours = [_contour(0, 0), _contour(20, 0, w=10, h=2)]
    bars = lightbars_from_contours(contours, 1.0, 10.0, 1.0, 0.5, 30.0)
    assert len(bars) == 1
    assert bars[0].length == pytest.approx(10.0)


def test_pair_checks():
    lb1 = _bar(0, 0)
    lb2 = _bar(20, 0)
    assert is_length_ratio_valid(lb1, lb2, 1.0) is True
    assert is_length_ratio_valid(lb1, _bar(20, 0, h=30), 2.0) is False
    assert is_pair_area_ratio_valid(lb1, lb2, 1.0) is True
    assert is_armor_side_valid(lb1, lb2, 1.0, 5.0) is True
    assert is_armor_side_valid(lb1, lb2, 3.0, 5.0) is False
    assert is_angle_diff_valid(lb1, lb2, 0.0) is True
    assert is_angle_avg_valid(lb1, lb2, 0.0) is True


def test_center_offset_valid():
    lb1 = _bar(0, 0)
    assert is_center_offset_valid(lb1, _bar(20, 0), 0.1) is True
    assert is_center_offset_valid(lb1, _bar(20, 8), 0.1) is False


def test_lightbar_matched():
    lb1 = _bar(0, 0)
    lb2 = _bar(20, 0)
    assert is_lightbar_matched(lb1, lb2, **LOOSE) is True
    tight = dict(LOOSE, max_ratio_side=1.5)
    assert is_lightbar_matched(lb1, lb2, **tight) is False
    assert is_lightbar_matched(lb1, _bar(20, 0, w=8, h=10), **LOOSE) is False


def test_best_matched_lightbar_pair():
    bars = [_bar(0, 0), _bar(20, 0), _bar(200, 100, w=10, h=2)]
    pair = best_matched_lightbar_pair(bars, Armor(center=(10.0, 5.0)), **LOOSE)
    assert isinstance(pair, LightbarPair)
    assert {pair.first.rect.center, pair.second.rect.center} == {bars[0].rect.center, bars[1].rect.center}
    assert best_matched_lightbar_pair(bars[:1], Armor(), **LOOSE) is None


def test_best_matched_lightbar_pair_prefers_nearest():
    bars = [_bar(0, 0), _bar(20, 0), _bar(100, 0), _bar(120, 0)]
    pair = best_matched_lightbar_pair(bars, Armor(center=(110.0, 5.0)), **LOOSE)
    assert pair.first.rect.center == bars[2].rect.center
    assert pair.second.rect.center == bars[3].rect.center


def test_lightbar_area_percent():
    armor = Armor(rect=Rect(0, 0, 10, 10), four_points=[(0, 0), (5, 0), (0, 5), (5, 5)])
    assert is_lightbar_area_percent_valid(armor, 0.2) is True
    assert is_lightbar_area_percent_valid(armor, 0.3) is False
    with pytest.raises(ValueError):
        is_lightbar_area_percent_valid(Armor(rect=Rect(0, 0, 10, 10)), 0.2)


def test_rect_in_image():
    image = np.zeros((10, 20, 3), dtype=np.uint8)
    assert is_rect_in_image(image, Rect(0, 0, 20, 10)) is True
    assert is_rect_in_image(image, Rect(1, 0, 20, 10)) is False
    assert is_rect_in_image(image, Rect(0, 0, 0, 5)) is False
    assert is_rect_in_image(image, Rect(-1, 0, 5, 5)) is False


def test_point_in_image():
    image = np.zeros((10, 20, 3), dtype=np.uint8)
    assert is_point_in_image(image, (19.5, 9.0)) is True
    assert is_point_in_image(image, (20.0, 0.0)) is False
    assert is_point_in_image(image, (-0.1, 0.0)) is False


def test_armor_color_enemy():
    image = np.zeros((100, 100, 3), dtype=np.uint8)
    image[..., 0] = 255
    pair = LightbarPair(_bar(40, 40), _bar(60, 40))
    assert is_armor_color_enemy(image, pair, ArmorColor.BLUE, 100) is True
    assert is_armor_color_enemy(image, pair, ArmorColor.RED, 100) is False
    assert is_armor_color_enemy(image, pair, ArmorColor.NONE, -1) is False