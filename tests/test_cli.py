"""Tests for cli.py - command-line tools."""

import json
import os
import tempfile
import zipfile
from pathlib import Path

import pytest

from tilelevel.cli import main

TILED_DOC = {
    "width": 2,
    "height": 2,
    "tileset": "tiles.png",
    "solidGids": [1],
    "layers": [{"encoding": "csv", "data": "0,2,1,1"}],
    "entities": [{"type": "coin", "x": 16, "y": 0, "properties": {"value": 5}}],
}

AREA_DOC = {
    "height": 2,
    "columns": [{"repeat": 2, "metatile": [0, 1]}],
}


def write_assets(root, files):
    for name, doc in files.items():
        path = Path(root) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(doc), encoding="utf-8")


class TestInfo:
    """Test the info command."""

    def test_info(self, capsys):
        with tempfile.TemporaryDirectory() as tmp:
            write_assets(tmp, {"levels/world1_stage1.json": TILED_DOC})

            code = main(["info", tmp, "1", "1"])

        out = capsys.readouterr().out
        assert code == 0
        assert "Size: 2x2 tiles" in out
        assert "levels/world1_stage1.json (tiled)" in out
        assert "coin at (16, 0) [value=5]" in out

    def test_info_missing(self, capsys):
        with tempfile.TemporaryDirectory() as tmp:
            code = main(["info", tmp, "1", "1"])

        assert code == 1
        assert "LevelNotFound" in capsys.readouterr().err


class TestValidate:
    """Test the validate command."""

    def test_all_valid(self, capsys):
        with tempfile.TemporaryDirectory() as tmp:
            write_assets(tmp, {
                "levels/world1_stage1.json": TILED_DOC,
                "levels/world1_stage2.area.json": AREA_DOC,
            })

            code = main(["validate", tmp])

        out = capsys.readouterr().out
        assert code == 0
        assert "2/2 levels valid" in out

    def test_reports_failures(self, capsys):
        with tempfile.TemporaryDirectory() as tmp:
            write_assets(tmp, {
                "levels/world1_stage1.json": TILED_DOC,
                "levels/world1_stage2.json": dict(TILED_DOC, width=3),
            })

            code = main(["validate", tmp])

        out = capsys.readouterr().out
        assert code == 1
        assert "DimensionMismatch" in out
        assert "1/2 levels valid" in out

    def test_zip_root(self, capsys):
        with tempfile.NamedTemporaryFile(suffix='.zip', delete=False) as f:
            path = f.name
        with zipfile.ZipFile(path, "w") as zf:
            zf.writestr("levels/world1_stage1.area.json", json.dumps(AREA_DOC))

        try:
            code = main(["validate", path])
        finally:
            os.unlink(path)

        assert code == 0
        assert "1/1 levels valid" in capsys.readouterr().out

    def test_no_levels(self, capsys):
        with tempfile.TemporaryDirectory() as tmp:
            code = main(["validate", tmp])

        assert code == 1


class TestDumpAndConvert:
    """Test the dump and convert commands."""

    def test_dump_to_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            write_assets(tmp, {"levels/world1_stage1.json": TILED_DOC})
            output = os.path.join(tmp, "out", "level.json")

            code = main(["dump", tmp, "1", "1", "-o", output])

            assert code == 0
            dumped = json.loads(Path(output).read_text(encoding="utf-8"))

        assert dumped["tiles"] == [0, 2, 1, 1]
        assert dumped["collisionFlags"] == [0, 1, 0]
        assert dumped["entities"][0]["extras"] == {"value": "5"}

    def test_convert_area_to_tiled(self, capsys):
        with tempfile.TemporaryDirectory() as tmp:
            write_assets(tmp, {"levels/world1_stage1.area.json": AREA_DOC})

            code = main(["convert", tmp, "1", "1", "--to", "tiled"])

        doc = json.loads(capsys.readouterr().out)
        assert code == 0
        assert doc["width"] == 2
        assert doc["layers"][0]["data"] == "0,0,\n1,1"

    def test_convert_tiled_to_area(self, capsys):
        with tempfile.TemporaryDirectory() as tmp:
            write_assets(tmp, {"levels/world1_stage1.json": TILED_DOC})

            code = main(["convert", tmp, "1", "1", "--to", "area"])

        doc = json.loads(capsys.readouterr().out)
        assert code == 0
        assert doc["columns"] == [{"metatile": [0, 1]}, {"metatile": [2, 1]}]
        assert doc["solidGids"] == [1]

    def test_convert_negative_size_reports_error(self, capsys):
        doc = dict(TILED_DOC, width=-1, height=-4)
        with tempfile.TemporaryDirectory() as tmp:
            write_assets(tmp, {"levels/world1_stage1.json": doc})

            code = main(["convert", tmp, "1", "1", "--to", "area"])

        assert code == 1
        assert "InvalidField" in capsys.readouterr().err


class TestNoCommand:
    def test_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
