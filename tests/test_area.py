"""Tests for area.py - column-based area level documents."""

import numpy as np
import pytest

from tilelevel.area import decode_area, expand_column, encode_area_columns, to_area_document
from tilelevel.errors import SchemaError, DataIntegrityError
from tilelevel.loader import assemble_level
from tilelevel.model import TileLayout


class TestExpandColumn:
    """Test single column template expansion."""

    def test_empty_column(self):
        """Test a bare column is all zeros."""
        assert expand_column({}, 4).tolist() == [0, 0, 0, 0]

    def test_metatile_copy(self):
        """Test metatile values fill rows from the top."""
        assert expand_column({"metatile": [5, 6, 7, 8]}, 4).tolist() == [5, 6, 7, 8]

    def test_metatile_truncated(self):
        """Test a metatile longer than height is cut off."""
        assert expand_column({"metatile": [1, 2, 3, 4, 5]}, 3).tolist() == [1, 2, 3]

    def test_metatile_short(self):
        """Test a short metatile leaves remaining rows at zero."""
        assert expand_column({"metatile": [1]}, 3).tolist() == [1, 0, 0]

    def test_row_range(self):
        """Test a from/to range is filled inclusively."""
        column = {"rows": [{"from": 1, "to": 2, "gid": 4}]}

        assert expand_column(column, 4).tolist() == [0, 4, 4, 0]

    def test_row_to_defaults_to_from(self):
        """Test a range without `to` covers a single row."""
        column = {"rows": [{"from": 2, "gid": 9}]}

        assert expand_column(column, 4).tolist() == [0, 0, 9, 0]

    def test_row_range_clamped(self):
        """Test out-of-bounds ranges are clamped to the column."""
        column = {"rows": [{"from": -3, "to": 99, "gid": 1}]}

        assert expand_column(column, 3).tolist() == [1, 1, 1]

    def test_row_range_below_column(self):
        """Test a range starting past the bottom changes nothing."""
        column = {"rows": [{"from": 5, "to": 8, "gid": 1}]}

        assert expand_column(column, 3).tolist() == [0, 0, 0]

    def test_rows_override_metatile(self):
        """Test rows are applied after the metatile."""
        column = {"metatile": [1, 2], "rows": [{"from": 0, "to": 0, "gid": 9}]}

        assert expand_column(column, 2).tolist() == [9, 2]

    def test_later_rows_win(self):
        """Test overlapping ranges apply in list order."""
        column = {
            "rows": [
                {"from": 0, "to": 3, "gid": 1},
                {"from": 2, "to": 2, "gid": 7},
            ]
        }

        assert expand_column(column, 4).tolist() == [1, 1, 7, 1]

    def test_malformed_metatile_value(self):
        """Test non-integer metatile entries raise MalformedTileData."""
        with pytest.raises(DataIntegrityError) as excinfo:
            expand_column({"metatile": [1, "x"]}, 2)

        assert excinfo.value.code == "MalformedTileData"


class TestDecodeArea:
    """Test decoding area documents."""

    def test_repeat_column_block_layout(self):
        """Test repeat emits whole columns consecutively."""
        doc = {"height": 2, "columns": [{"repeat": 3, "metatile": [1, 2]}]}

        decoded = decode_area(doc)

        assert decoded.tiles.tolist() == [1, 2, 1, 2, 1, 2]
        assert decoded.width == 3
        assert decoded.layout is TileLayout.COLUMN_MAJOR

    def test_repeat_with_row_override(self):
        """Test row overrides apply to every repetition."""
        doc = {
            "height": 2,
            "columns": [
                {"repeat": 3, "metatile": [1, 2], "rows": [{"from": 0, "to": 0, "gid": 9}]}
            ],
        }

        decoded = decode_area(doc)

        assert decoded.tiles.tolist() == [9, 2, 9, 2, 9, 2]

    def test_multiple_columns(self):
        """Test columns are concatenated in order."""
        doc = {
            "height": 3,
            "columns": [
                {"metatile": [0, 0, 1]},
                {"repeat": 2, "metatile": [0, 3, 1]},
            ],
        }

        decoded = decode_area(doc)

        assert decoded.width == 3
        assert decoded.tiles.tolist() == [0, 0, 1, 0, 3, 1, 0, 3, 1]

    def test_repeat_clamped(self):
        """Test repeat below 1 counts as 1."""
        doc = {"height": 1, "columns": [{"repeat": 0, "metatile": [4]}, {"repeat": -5}]}

        decoded = decode_area(doc)

        assert decoded.width == 2
        assert decoded.tiles.tolist() == [4, 0]

    def test_defaults(self):
        """Test tile size and tileset defaults."""
        decoded = decode_area({"height": 1, "columns": [{}]})

        assert (decoded.tile_width, decoded.tile_height) == (16, 16)
        assert decoded.tileset_path == ""
        assert decoded.solid_gids == []

    def test_declared_width_overridden(self):
        """Test a nonzero computed width replaces the declared width."""
        doc = {"width": 50, "height": 2, "columns": [{"repeat": 3, "metatile": [1, 2]}]}

        decoded = decode_area(doc)

        assert decoded.width == 3
        assert decoded.tiles.size == 6

    def test_declared_width_with_no_columns(self):
        """Test a declared width with empty columns is a size mismatch."""
        doc = {"width": 5, "height": 2, "columns": []}

        with pytest.raises(DataIntegrityError) as excinfo:
            decode_area(doc)

        assert excinfo.value.code == "DimensionMismatch"

    def test_no_columns_no_width(self):
        """Test an empty column list gives an empty level."""
        decoded = decode_area({"height": 4, "columns": []})

        assert decoded.width == 0
        assert decoded.tiles.size == 0

    def test_missing_columns(self):
        """Test absent columns raises MissingColumns."""
        with pytest.raises(SchemaError) as excinfo:
            decode_area({"height": 2}, path="levels/world1_stage2.area.json")

        assert excinfo.value.code == "MissingColumns"
        assert excinfo.value.path == "levels/world1_stage2.area.json"

    def test_columns_not_array(self):
        """Test non-array columns raises MissingColumns."""
        with pytest.raises(SchemaError) as excinfo:
            decode_area({"height": 2, "columns": {"repeat": 2}})

        assert excinfo.value.code == "MissingColumns"

    def test_passthrough_fields(self):
        """Test solidGids and entities are passed through."""
        doc = {
            "height": 1,
            "columns": [{"metatile": [1]}],
            "solidGids": [1, 2],
            "entities": [{"type": "goal"}],
        }

        decoded = decode_area(doc)

        assert decoded.solid_gids == [1, 2]
        assert decoded.raw_entities == [{"type": "goal"}]

    def test_negative_height(self):
        with pytest.raises(SchemaError) as excinfo:
            decode_area({"height": -2, "columns": []}, path="levels/world1_stage1.area.json")

        assert excinfo.value.code == "InvalidField"
        assert excinfo.value.path == "levels/world1_stage1.area.json"

    def test_negative_declared_width(self):
        """Test a negative width is rejected even though columns would override it."""
        with pytest.raises(SchemaError) as excinfo:
            decode_area({"height": 1, "width": -1, "columns": [{"metatile": [1]}]})

        assert excinfo.value.code == "InvalidField"

    @pytest.mark.parametrize("field,value", [("width", "3"), ("solidGids", [1, "x"])])
    def test_late_field_errors_have_path(self, field, value):
        """Test errors from fields read after the columns still carry the path."""
        doc = {"height": 1, "columns": [{"metatile": [1]}], field: value}

        with pytest.raises(SchemaError) as excinfo:
            decode_area(doc, path="levels/world1_stage1.area.json")

        assert excinfo.value.code == "InvalidField"
        assert excinfo.value.path == "levels/world1_stage1.area.json"


class TestEncodeAreaColumns:
    """Test run-length encoding of columns."""

    def test_merges_identical_columns(self):
        """Test consecutive equal columns collapse into a repeat."""
        tiles = np.array([1, 2, 1, 2, 1, 2, 0, 3])

        entries = encode_area_columns(tiles, 2)

        assert entries == [
            {"metatile": [1, 2], "repeat": 3},
            {"metatile": [0, 3]},
        ]

    def test_empty(self):
        """Test no tiles gives no columns."""
        assert encode_area_columns(np.array([]), 2) == []

    def test_bad_height(self):
        """Test tiles that do not divide into columns are rejected."""
        with pytest.raises(ValueError, match="do not divide"):
            encode_area_columns(np.array([1, 2, 3]), 2)

    def test_roundtrip(self):
        """Test encoded columns expand back to the same tiles."""
        rng = np.random.default_rng(3)
        columns = rng.integers(0, 3, size=(12, 4))
        tiles = np.repeat(columns, 2, axis=0).ravel()

        doc = {"height": 4, "columns": encode_area_columns(tiles, 4)}
        decoded = decode_area(doc)

        assert np.array_equal(decoded.tiles, tiles)


class TestToAreaDocument:
    """Test writing levels as area documents."""

    def test_from_area_level(self):
        """Test an area level survives document -> level -> document."""
        doc = {
            "height": 2,
            "tileset": "t.png",
            "solidGids": [2],
            "columns": [{"repeat": 2, "metatile": [0, 2]}, {"metatile": [1, 2]}],
        }
        level = assemble_level(1, 2, decode_area(doc))

        out = to_area_document(level)
        again = assemble_level(1, 2, decode_area(out))

        assert out["columns"] == [{"metatile": [0, 2], "repeat": 2}, {"metatile": [1, 2]}]
        assert np.array_equal(again.tiles, level.tiles)
        assert again.solid_gids() == [2]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
