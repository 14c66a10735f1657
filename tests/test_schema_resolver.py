"""
Definition schema loader and resolver tests.
"""

import json

import pytest

from rom_inspector import (DefinitionError, Group, InvalidNode, Leaf, SchemaError, build_schema,
                           load_schema, resolve)

IMAGE = bytes(range(256)) * 4          # 1KB, byte value == offset & 0xFF

DOCUMENT = {
    "vtec_enable": {"address": "0010", "bytes": 1, "description": "VTEC enable",
                    "notes": "FF = on"},
    "rev_limit": {
        "low": {"address": "0020", "bytes": 2, "scalingFactor": 31.25,
                "description": "Rev limit (low)", "notes": ""},
        "high": {"address": "0022", "bytes": "2", "bit": 16,
                 "description": "Rev limit (high)", "notes": ""},
    },
    "fuel_map": {"address": "3fe", "bytes": 20, "description": "Fuel", "notes": ""},
}


# ─── Schema building ───────────────────────

class TestBuildSchema:
    def test_leaf_and_group_tags(self):
        schema = build_schema(DOCUMENT)
        assert isinstance(schema, Group)
        assert isinstance(schema.children["vtec_enable"], Leaf)
        assert isinstance(schema.children["rev_limit"], Group)
        assert list(schema.children) == ["vtec_enable", "rev_limit", "fuel_map"]

    def test_leaf_fields(self):
        schema = build_schema(DOCUMENT)
        low = schema.children["rev_limit"].children["low"]
        assert low == Leaf(address="0020", byte_length=2, description="Rev limit (low)",
                           scaling_factor=31.25)
        high = schema.children["rev_limit"].children["high"]
        assert high.byte_length == 2
        assert high.bit_width == 16
        assert high.scaling_factor is None

    def test_unparsable_length_becomes_zero(self):
        schema = build_schema({"x": {"address": "10", "bytes": "many"}})
        assert schema.children["x"].byte_length == 0

    def test_non_object_root_rejected(self):
        with pytest.raises(SchemaError):
            build_schema([1, 2])
        with pytest.raises(SchemaError):
            build_schema("203")

    def test_non_object_entries_kept_as_invalid(self):
        schema = build_schema({"todo": None, "grp": {"comment": "see manual"}})
        assert schema.children["todo"] == InvalidNode("NoneType")
        assert schema.children["grp"].children["comment"] == InvalidNode("str")

    def test_load_schema_file(self, tmp_path):
        path = tmp_path / "203.json"
        path.write_text(json.dumps(DOCUMENT), encoding="utf-8")
        schema = load_schema(path)
        assert len(schema) == 3

    def test_load_schema_errors(self, tmp_path):
        with pytest.raises(SchemaError):
            load_schema(tmp_path / "missing.json")
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        with pytest.raises(SchemaError):
            load_schema(bad)


# ─── Resolution ────────────────────────────

class TestResolve:
    def test_routes_in_schema_order(self):
        resolved = resolve(IMAGE, build_schema(DOCUMENT))
        assert [r.route for r in resolved] == [
            "vtec_enable", "rev_limit:low", "rev_limit:high", "fuel_map"]

    def test_one_record_per_leaf(self):
        schema = build_schema(DOCUMENT)
        leaves = sum(len(n) if isinstance(n, Group) else 1 for _, n in schema.items())
        assert len(resolve(IMAGE, schema)) == leaves

    def test_bytes_match_buffer_slice(self):
        for r in resolve(IMAGE, build_schema(DOCUMENT)):
            start = int(r.address, 16)
            if start + r.fields.byte_length <= len(IMAGE):
                assert r.raw_bytes == IMAGE[start:start + r.fields.byte_length]
                assert not r.truncated

    def test_address_case_insensitive(self):
        schema = build_schema({"a": {"address": "00Ff", "bytes": 1}})
        assert resolve(IMAGE, schema)[0].raw_bytes == b"\xFF"

    def test_truncated_at_buffer_end(self):
        resolved = resolve(IMAGE, build_schema(DOCUMENT))
        fuel = resolved[-1]
        assert fuel.raw_bytes == bytes([0xFE, 0xFF])
        assert fuel.truncated

    def test_address_past_end_gives_empty_bytes(self):
        schema = build_schema({"far": {"address": "FFFF", "bytes": 4}})
        (r,) = resolve(IMAGE, schema)
        assert r.raw_bytes == b""

    def test_malformed_leaves_skipped_with_diagnostics(self):
        schema = build_schema({
            "bad_addr": {"address": "zz", "bytes": 1},
            "ok": {"address": "01", "bytes": 1},
            "bad_len": {"address": "02", "bytes": 0},
            "nested": {"inner": {"deep": {"address": "03", "bytes": 1}}},
            "neg": {"address": "-4", "bytes": 1},
        })
        diagnostics = []
        resolved = resolve(IMAGE, schema, diagnostics)
        assert [r.route for r in resolved] == ["ok"]
        assert len(diagnostics) == 4
        assert diagnostics[0].startswith("bad_addr:")
        assert any(d.startswith("nested:inner:") for d in diagnostics)

    def test_non_object_entries_do_not_block_siblings(self):
        schema = build_schema({
            "good": {"address": "05", "bytes": 1},
            "grp": {"a": {"address": "06", "bytes": 2}, "comment": "see manual"},
            "todo": None,
            "count": 3,
        })
        diagnostics = []
        resolved = resolve(IMAGE, schema, diagnostics)
        assert [r.route for r in resolved] == ["good", "grp:a"]
        assert resolved[1].raw_bytes == bytes([6, 7])
        assert diagnostics == [
            "grp:comment: expected an object, got str",
            "todo: expected an object, got NoneType",
            "count: expected an object, got int",
        ]

    def test_definition_error_carries_route(self):
        err = DefinitionError("broken", "group:key")
        assert err.route == "group:key"
        assert str(err) == "group:key: broken"
