"""Tests for the mapheat command line."""

import pytest

from mapheat.main import build_parser, main

from testinfra import FIXTURE_TILES, POINTS_JSON


def test_parser_defaults():
    args = build_parser().parse_args(["points.json"])
    assert args.inputs == ["points.json"]
    assert args.output_dir == "tiles"
    assert args.workers == 1
    assert args.size is None
    assert not args.skip_invalid


def test_writes_tiles(tmp_path):
    out = tmp_path / "tiles"
    assert main([str(POINTS_JSON), "--output-dir", str(out), "--size", "300"]) == 0
    assert {p.name for p in out.iterdir()} == {k + ".png" for k in FIXTURE_TILES}


def test_multiple_inputs_and_workers(tmp_path):
    extra = tmp_path / "extra.csv"
    extra.write_text("lat,lon\n12.5231,103.412\n")
    out = tmp_path / "tiles"
    assert main([str(POINTS_JSON), str(extra), "--output-dir", str(out),
                 "--size", "300", "--workers", "2"]) == 0
    assert len(list(out.iterdir())) == 3


def test_invalid_point_fails(tmp_path):
    bad = tmp_path / "bad.csv"
    bad.write_text("lat,lon\n12.5231,103.412\n95.0,10.0\n")
    with pytest.raises(ValueError):
        main([str(bad), "--output-dir", str(tmp_path / "tiles"), "--size", "300"])


def test_skip_invalid(tmp_path):
    bad = tmp_path / "bad.csv"
    bad.write_text("lat,lon\n12.5231,103.412\n95.0,10.0\n")
    out = tmp_path / "tiles"
    assert main([str(bad), "--output-dir", str(out), "--size", "300",
                 "--skip-invalid"]) == 0
    assert [p.name for p in out.iterdir()] == ["103.4,12.5,103.5,12.6.png"]


def test_config_file(tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("size: 300\nblur: 2\n")
    out = tmp_path / "tiles"
    assert main([str(POINTS_JSON), "--output-dir", str(out), "--config", str(cfg)]) == 0
    assert len(list(out.iterdir())) == 2


@pytest.mark.parametrize("argv", [
    ["--size", "1000"],
    ["--workers", "0"],
    ["--config", "/nonexistent/config.yaml"],
])
def test_bad_arguments(tmp_path, argv):
    with pytest.raises(SystemExit):
        main([str(POINTS_JSON), "--output-dir", str(tmp_path)] + argv)
