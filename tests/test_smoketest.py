"""
Fast end-to-end smoketest for the command line.

Validates that describe, compose, analyze and normalize run through
main() and print what a user expects. Runs in seconds.
"""

import io

import pytest
from PIL import Image

from config import Config
from main import _build_parser, main


@pytest.fixture
def photo(tmp_path):
    path = tmp_path / "room.png"
    Image.new("RGB", (300, 150), (120, 80, 40)).save(path)
    return path


class TestParser:
    """Subcommand wiring."""

    def test_no_subcommand_means_tui(self):
        assert _build_parser().parse_args([]).command is None

    def test_render_requires_out(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["render", "a kitchen"])


class TestCommands:
    """Each subcommand end to end."""

    def test_describe(self, capsys):
        assert main(["describe", "A modern living room with a sofa, 15ft by 12ft"]) == 0
        out = capsys.readouterr().out
        assert "Room Type: Living room" in out
        assert "Dimensions: Width: 15ft, Length: 12ft" in out
        assert "Generate a 3D model of a modern living room" in out

    def test_compose(self, capsys):
        assert main(["compose", "a bedroom with a bed"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Scene  7 prims, 2 lights")

    def test_compose_with_image(self, capsys, photo):
        assert main(["compose", "a bedroom with a bed", "--image", str(photo)]) == 0
        assert capsys.readouterr().out.startswith("Scene  7 prims")

    def test_analyze(self, capsys, photo):
        assert main(["analyze", str(photo)]) == 0
        out = capsys.readouterr().out
        assert "Size: 300 x 150" in out
        assert "Aspect ratio: 2.000" in out
        assert "rgb(120,80,40)" in out

    def test_normalize(self, tmp_path, photo):
        out_path = tmp_path / "out" / "normalized.jpg"
        assert main(["normalize", str(photo), "--out", str(out_path), "--width", "256"]) == 0
        img = Image.open(io.BytesIO(out_path.read_bytes()))
        assert img.size == (256, Config().image.normalize_height)


class TestErrors:
    """Bad input reports to stderr and exits 1."""

    def test_analyze_missing_file(self, capsys, tmp_path):
        assert main(["analyze", str(tmp_path / "missing.png")]) == 1
        assert "Failed to read file" in capsys.readouterr().err

    def test_compose_bad_image(self, capsys, tmp_path):
        bad = tmp_path / "bad.png"
        bad.write_bytes(b"not a png")
        assert main(["compose", "a kitchen", "--image", str(bad)]) == 1
        assert "Failed to load image" in capsys.readouterr().err
