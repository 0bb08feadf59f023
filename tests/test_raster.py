from __future__ import annotations

import numpy as np

from histanim import DECAY_FACTOR, DecayRaster, FrameRecord, render_frames


def test_decay_law_without_new_edits():
    raster = DecayRaster(4, 4)
    raster.accumulate([(5, 100)])
    for k in range(1, 60):
        raster.decay()
        assert np.isclose(raster.magnitude[5], 100 * DECAY_FACTOR**k)
        assert raster.magnitude[5] > 0
    assert raster.is_set.sum() == 1


def test_decay_never_sets_unset_pixels():
    raster = DecayRaster(3, 3)
    for _ in range(10):
        raster.decay()
    assert not raster.is_set.any()
    assert np.all(raster.magnitude == 0.0)


def test_accumulate_drops_out_of_range_and_sums_duplicates():
    raster = DecayRaster(4, 2)
    dropped = raster.accumulate([(2, 3), (2, 4), (8, 1), (1000, 9)])
    assert dropped == 2
    assert raster.magnitude[2] == 7.0
    assert raster.is_set.tolist() == [False, False, True, False, False, False, False, False]


def test_empty_raster_normalizes_to_zero():
    raster = DecayRaster(5, 5)
    assert raster.max_magnitude() == 0.0
    assert np.all(raster.intensities() == 0)


def test_zero_magnitude_normalizes_to_zero():
    raster = DecayRaster(2, 2)
    raster.accumulate([(3, 0)])
    assert raster.is_set[3]
    assert np.all(raster.intensities() == 0)


def test_step_scales_to_255_and_rounds_half_up():
    raster = DecayRaster(4, 2)
    frame = raster.step(FrameRecord(0, [(0, 10), (5, 5), (99, 7)]))
    assert frame.intensity.shape == (2, 4)
    assert frame.intensity.dtype == np.uint8
    assert frame.intensity[0, 0] == 255
    assert frame.intensity[1, 1] == 128  # 127.5
    assert frame.intensity.sum() == 255 + 128
    assert frame.is_set[0, 0] and frame.is_set[1, 1]
    assert frame.is_set.sum() == 2


def test_render_frames_applies_decay_before_accumulate():
    frames = [
        FrameRecord(0, [(0, 10)]),
        FrameRecord(1, [(1, 10)]),
        FrameRecord(2, []),
    ]
    out = list(render_frames(frames, 2, 1))
    assert [f.frame_no for f in out] == [0, 1, 2]
    assert out[0].intensity.tolist() == [[255, 0]]
    # 9.9 / 10 * 255 = 252.45
    assert out[1].intensity.tolist() == [[252, 255]]
    # both decay equally so the ratio holds
    assert out[2].intensity.tolist() == [[252, 255]]
    assert out[0].is_set.tolist() == [[True, False]]


def test_rendered_frames_are_snapshots():
    frames = [FrameRecord(0, [(0, 1)]), FrameRecord(1, [(3, 50)])]
    first, second = list(render_frames(frames, 2, 2))
    assert first.is_set.sum() == 1
    assert second.is_set.sum() == 2
    assert first.intensity[0, 0] == 255
    assert second.intensity[0, 0] == 5  # 0.99 / 50 * 255 = 5.05
