import numpy as np
import pytest
from PIL import Image

from openrm.pointer.model import ArmorSize
from openrm.pointer.reprojection import Reprojector

GREEN = (0, 255, 0)
CORNERS = [(50, 50), (99, 50), (50, 99), (99, 99)]


def _decal(bgr, size=100):
    img = np.zeros((size, size, 3), dtype=np.uint8)
    img[:] = bgr
    return img


def test_points_cover_whole_decal_when_sizes_match():
    rep = Reprojector(135, 125, 230, 127, _decal(GREEN), None)
    assert rep.small_points == [(0.0, 0.0), (100.0, 0.0), (0.0, 100.0), (100.0, 100.0)]
    assert rep.big_points == rep.small_points


def test_apply_draws_green_inside_corners():
    rep = Reprojector(135, 125, 230, 127, _decal(GREEN), None)
    src = np.zeros((200, 200, 3), dtype=np.uint8)
    out = rep.apply(src, CORNERS, ArmorSize.SMALL)
    assert out[75, 75].tolist() == list(GREEN)
    assert out[10, 10].tolist() == [0, 0, 0]
    assert out[150, 150].tolist() == [0, 0, 0]
    assert not src.any()


def test_apply_keeps_src_where_decal_is_not_green():
    rep = Reprojector(135, 125, 230, 127, _decal(GREEN), _decal((0, 0, 255)))
    rng = np.random.default_rng(7)
    src = rng.integers(0, 200, size=(200, 200, 3), dtype=np.uint8)
    out = rep.apply(src, CORNERS, ArmorSize.BIG)
    assert np.array_equal(out, src)


def test_apply_output_pixels_are_src_or_green():
    rep = Reprojector(135, 125, 230, 127, _decal(GREEN), None)
    src = np.full((200, 200, 3), 30, dtype=np.uint8)
    out = rep.apply(src, CORNERS, ArmorSize.SMALL)
    is_src = np.all(out == src, axis=2)
    is_green = np.all(out == np.array(GREEN, dtype=np.uint8), axis=2)
    assert int(np.count_nonzero(~(is_src | is_green))) == 0
    assert int(np.count_nonzero(is_green)) > 0


def test_apply_requires_four_points():
    rep = Reprojector(135, 125, 230, 127, _decal(GREEN), None)
    with pytest.raises(ValueError):
        rep.apply(np.zeros((50, 50, 3), dtype=np.uint8), CORNERS[:3], ArmorSize.SMALL)


def test_empty_decal_raises():
    with pytest.raises(ValueError):
        Reprojector(135, 125, 230, 127, np.zeros((0, 0, 3), dtype=np.uint8), None)


def test_from_files_reads_bgr(tmp_path):
    path = tmp_path / "small.png"
    rgb = np.zeros((20, 30, 3), dtype=np.uint8)
    rgb[:] = (255, 0, 0)
    Image.fromarray(rgb).save(path)
    rep = Reprojector.from_files(135, 125, 230, 127, path, "")
    assert rep.small_decal.shape == (20, 30, 3)
    assert rep.small_decal[0, 0].tolist() == [0, 0, 255]
    assert np.array_equal(rep.big_decal, rep.small_decal)


def test_from_files_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Reprojector.from_files(135, 125, 230, 127, tmp_path / "missing.png", "")