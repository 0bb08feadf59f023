from __future__ import annotations

import pytest

from histanim import AnimationConfig, Equirectangular, MissingConfigError, Orthographic, resolve_config
from histanim.config import DEFAULT_BBOX, DEFAULT_CENTRE, parse_float_list


def test_defaults_fill_optional_settings():
    config = resolve_config(height=100, sec_per_frame=86400)
    assert config.bbox == DEFAULT_BBOX
    assert config.centre == DEFAULT_CENTRE
    assert config.projection == "equirect"
    assert config.width == 200
    assert isinstance(config.projector(), Equirectangular)


@pytest.mark.parametrize("kwargs", [{"sec_per_frame": 60}, {"height": 10}, {}])
def test_required_settings_missing_everywhere(kwargs):
    with pytest.raises(MissingConfigError):
        resolve_config(**kwargs)


def test_metadata_supplies_missing_options():
    metadata = {"height": "40", "sec_per_frame": "600", "bbox": "0,0,2,1", "centre": "1,2", "projection": "equirect"}
    config = resolve_config(metadata=metadata)
    assert (config.height, config.width, config.sec_per_frame) == (40, 80, 600)
    assert config.bbox == (0.0, 0.0, 2.0, 1.0)
    assert config.centre == (1.0, 2.0)


def test_command_line_wins_over_metadata():
    metadata = {"height": "40", "sec_per_frame": "600", "projection": "equirect"}
    config = resolve_config(height=64, sec_per_frame=60, projection="ortho", centre="10,20", metadata=metadata)
    assert (config.height, config.width, config.sec_per_frame) == (64, 64, 60)
    assert config.projection == "ortho"
    proj = config.projector()
    assert isinstance(proj, Orthographic)
    assert (proj.centre_lat, proj.centre_lon, proj.radius) == (10.0, 20.0, 64)


def test_width_mismatch_warns():
    metadata = {"height": "20", "sec_per_frame": "60", "width": "21", "bbox": "-10,-10,10,10"}
    with pytest.warns(UserWarning):
        config = resolve_config(metadata=metadata)
    assert config.width == 20


@pytest.mark.parametrize("text,count", [("1,2,3", 4), ("1,2", 1), ("a,b", 2)])
def test_parse_float_list_rejects_bad_input(text, count):
    with pytest.raises(ValueError):
        parse_float_list(text, count)


def test_create_validates():
    with pytest.raises(ValueError):
        AnimationConfig.create(0, 60)
    with pytest.raises(ValueError):
        AnimationConfig.create(10, -1)
    with pytest.raises(ValueError):
        AnimationConfig.create(10, 60, projection="mercator")
    with pytest.raises(ValueError):
        AnimationConfig.create(1, 60, bbox=(0, 0, 1, 10))
