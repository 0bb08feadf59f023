from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest
from PIL import Image

from histanim import EPOCH, __version__, get_version_string, read_intermediate
from histanim.cli import main

DAY = 86400


@pytest.fixture
def points(tmp_path):
    path = tmp_path / "points.tsv"
    lines = ["lat\tlon\ttimestamp"]
    lines += [f"5.0\t5.0\t{EPOCH + 10}"] * 3
    lines += [f"-5.0\t-5.0\t{EPOCH + 2 * DAY + 1}"]
    lines += [f"50.0\t50.0\t{EPOCH + 4 * DAY}"]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def ramp(tmp_path):
    path = tmp_path / "ramp.txt"
    path.write_text("0,0,0\n" + "".join(f"{i},255,{i},0\n" for i in range(1, 255)), encoding="utf-8")
    return path


def test_save_then_load_intermediate(tmp_path, points, ramp):
    frames_path = tmp_path / "edits.frames"
    main(["-i", str(points), "-o", str(frames_path), "--height", "20", "-s", str(DAY), "--bbox=-10,-10,10,10", "--save-intermediate"])

    metadata, frames = read_intermediate(frames_path)
    assert metadata["width"] == "20"
    assert metadata["bbox"] == "-10,-10,10,10"
    assert [f.frame_no for f in frames] == [0, 1, 2, 3, 4]
    assert frames[0].as_dict() == {115: 3}
    assert frames[2].as_dict() == {305: 1}
    assert frames[4].deltas == []

    gif_path = tmp_path / "edits.gif"
    main(["-i", str(frames_path), "-o", str(gif_path), "--load-intermediate", "--colour-ramp", str(ramp)])
    with Image.open(gif_path) as im:
        assert im.size == (20, 20)
        assert im.n_frames == len(frames)


def test_frames_mode_directly_from_points(tmp_path, points):
    prefix = str(tmp_path / "out_")
    main(["-i", str(points), "-o", prefix, "--height", "20", "-s", str(DAY), "--bbox=-10,-10,10,10", "--frames"])
    assert sorted(p.name for p in tmp_path.glob("out_*.png")) == [f"out_{n:06d}.png" for n in range(5)]


def test_missing_height_is_a_usage_error(tmp_path, points):
    with pytest.raises(SystemExit) as exc:
        main(["-i", str(points), "-o", str(tmp_path / "x"), "-s", "60", "--save-intermediate"])
    assert exc.value.code == 2


def test_gif_needs_colour_ramp(tmp_path, points):
    with pytest.raises(SystemExit):
        main(["-i", str(points), "-o", str(tmp_path / "x.gif"), "--height", "20", "-s", "60"])


def test_projection_flags_are_exclusive(tmp_path, points):
    with pytest.raises(SystemExit):
        main(["-i", str(points), "-o", "x", "--ortho", "--equirect", "--save-intermediate"])


def test_missing_input_aborts(tmp_path):
    with pytest.raises(FileNotFoundError):
        main(["-i", str(tmp_path / "nope.tsv"), "-o", str(tmp_path / "x"), "--height", "10", "-s", "60", "--save-intermediate"])


def test_cli_version():
    repo_root = Path(__file__).resolve().parents[1]
    proc = subprocess.run(
        [sys.executable, "-m", "histanim", "--version"],
        cwd=repo_root,
        capture_output=True,
        text=True,
        check=True,
    )
    assert __version__ in proc.stdout


def test_version_string_leads_with_package_version():
    assert get_version_string().startswith(__version__)
