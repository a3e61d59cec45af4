# openrm

Image-processing building blocks for spotting armor plates on competition
robots, written on top of NumPy and Pillow.

## Install

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## What is inside

- `openrm.pointer.imgproc`: the small image primitives everything else uses:
  colour conversions (`bgr_to_hsv`, `hsv_to_bgr`, `bgr_to_hls`,
  `bgr_to_gray`), `in_range`, `threshold_binary`, contour geometry
  (`contour_area`, `convex_hull`, `bounding_rect`, `min_area_rect`,
  `fit_line`, `min_enclosing_circle`) and perspective warping
  (`perspective_transform`, `warp_perspective_onto`).
- `openrm.pointer.model`: the data types `Rect`, `RotatedRect`, `Lightbar`,
  `PointPair`, `LightbarPair` and `Armor`, the enums `ArmorColor`,
  `ArmorSize`, `ArmorID`, `GrayScaleMethod` and `BinaryMethod`, and helpers
  such as `armor_id_from_class36`, `reset_armor_four_points`, `lighter_lut`
  and `lighter_hsv`.
- `openrm.pointer.getter`: gray-scale conversions (`gray_scale` and its
  variants), binarisation (`binary`), rectangle helpers (`extend_rect`,
  `overlap_ratio`, `clamp_rect`) and the measurements that describe
  lightbars and lightbar pairs.
- `openrm.pointer.judge`: the checks that decide whether a contour is a
  lightbar and whether two lightbars form an armor plate, for example
  `lightbars_from_contours`, `best_matched_lightbar_pair` and
  `is_armor_color_enemy`.
- `openrm.pointer.color`: colour classification of a plate from a lightbar
  pair or a detector box (`armor_color_hsv_pair`, `armor_color_hsv_box`,
  `armor_color_rgb_pair`) and `light_level_hls`.
- `openrm.pointer.finder`: lightbar end refinement by brightness barycenter
  (`point_pair_barycenter`) and circle detection from contours
  (`circle_centers_from_contours`).
- `openrm.pointer.reprojection`: `Reprojector`, which pastes the key-green
  pixels of a decal image onto a detected plate; `Reprojector.from_files`
  loads the decals from image files.
- `openrm.pointer.histogram`: 256-bin histograms, their rendering
  (`render_histogram`, `draw_histogram_line`), peak finding (`double_peak`),
  thresholds derived from them and per-channel `equalize_histogram`.
- `openrm.tensorrt.logger`: a severity-filtered `Logger` writing timestamped,
  prefixed messages to stdout or stderr, `LogStream`, and test result
  reporting through `TestAtom` and `Logger.report_*`.
- `openrm.hik.errors`: camera SDK status codes as `MvError`; `check` returns
  `MvError.OK` or raises `CameraError`, and `error_name` gives a code's name.
- `openrm.hik.isp_errors`: image-processing library status codes as
  `IspError`; `check_isp` raises `IspAlgorithmError` on failure and issues a
  `RuntimeWarning` for the warning code.

Images are NumPy arrays of shape `(rows, cols, 3)` in BGR order, dtype
`uint8`. Failures are raised as exceptions, mostly `ValueError`.

## Example

```python
import numpy as np
from openrm.pointer.model import Armor
from openrm.pointer.judge import lightbars_from_contours, best_matched_lightbar_pair

contours = [
    np.array([[10, 10], [14, 10], [14, 40], [10, 40]]),
    np.array([[60, 10], [64, 10], [64, 40], [60, 40]]),
]
lightbars = lightbars_from_contours(contours, 1.0, 20.0, 10.0, 0.5, 40.0)
pair = best_matched_lightbar_pair(lightbars, Armor(), 2.0, 2.0, 0.5, 5.0, 20.0, 30.0, 1.0)
```

`best_matched_lightbar_pair` returns the matching pair, or `None` when no two
lightbars match.

## What it does not do

The package has no command-line program. It does not open or drive cameras:
the `openrm.hik` modules only describe the SDK's status codes. It does not run
neural-network inference either; `openrm.tensorrt` holds only the logger.
There is no table of camera pixel formats.