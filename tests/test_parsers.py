"""Tests for JSON tree and ZIP archive parsers."""
import pytest

from conftest import make_zip


# ── Flatten ──────────────────────────────────────────────────────

class TestFlatten:
    def test_nested_paths(self):
        from linguabundle.parsers.json_parser import flatten
        tree = {"x": "hi", "y": {"z": "yo", "w": {"v": "deep"}}}
        assert list(flatten(tree)) == [("x", "hi"), ("y.z", "yo"), ("y.w.v", "deep")]

    def test_document_order(self):
        from linguabundle.parsers.json_parser import flatten
        tree = {"b": "1", "a": {"d": "2", "c": "3"}, "0": "4"}
        assert [k for k, _ in flatten(tree)] == ["b", "a.d", "a.c", "0"]

    def test_prefix(self):
        from linguabundle.parsers.json_parser import flatten
        assert list(flatten({"a": "1"}, "root")) == [("root.a", "1")]

    def test_empty_key_segment_kept(self):
        from linguabundle.parsers.json_parser import flatten
        tree = {"": {"a": "x"}, "a": "y"}
        assert list(flatten(tree)) == [(".a", "x"), ("a", "y")]

    def test_lazy(self):
        from linguabundle.parsers.json_parser import flatten
        gen = flatten({"a": "1", "b": "2"})
        assert next(gen) == ("a", "1")

    @pytest.mark.parametrize("value", [1, 2.5, True, False, None, ["a", "b"], [{"a": "b"}]])
    def test_non_string_leaves_skipped(self, value):
        from linguabundle.parsers.json_parser import flatten
        tree = {"skip": value, "keep": "yes"}
        assert list(flatten(tree)) == [("keep", "yes")]

    def test_string_leaf_contributes_once(self):
        from linguabundle.parsers.json_parser import flatten
        assert list(flatten({"a": {"b": "text"}})) == [("a.b", "text")]

    def test_empty_objects(self):
        from linguabundle.parsers.json_parser import flatten
        assert list(flatten({})) == []
        assert list(flatten({"a": {}, "b": {"c": {}}, "d": "x"})) == [("d", "x")]

    def test_empty_string_is_a_leaf(self):
        from linguabundle.parsers.json_parser import flatten
        assert list(flatten({"a": ""})) == [("a", "")]

    def test_very_deep_tree(self):
        from linguabundle.parsers.json_parser import flatten
        tree = leaf = {}
        for _ in range(5000):
            leaf["n"] = {}
            leaf = leaf["n"]
        leaf["end"] = "bottom"
        (path, value), = list(flatten(tree))
        assert value == "bottom"
        assert path.count(".") == 5000


# ── Unflatten / idempotence ──────────────────────────────────────

class TestUnflatten:
    def test_rebuild(self):
        from linguabundle.parsers.json_parser import unflatten
        assert unflatten([("x", "hi"), ("y.z", "yo")]) == {"x": "hi", "y": {"z": "yo"}}

    @pytest.mark.parametrize("tree", [
        {},
        {"a": "1"},
        {"a": {"b": {"c": "1"}, "d": "2"}, "e": "3"},
        {"menu": {"file": {"open": "Open", "save": "Save"}, "edit": {"undo": "Undo"}}},
        {"a": "", "b": {"c": "  "}},
    ])
    def test_flatten_unflatten_idempotent(self, tree):
        from linguabundle.parsers.json_parser import flatten, unflatten
        pairs = list(flatten(tree))
        assert list(flatten(unflatten(pairs))) == pairs

    def test_conflict(self):
        from linguabundle.errors import PathConflictError
        from linguabundle.parsers.json_parser import unflatten
        with pytest.raises(PathConflictError):
            unflatten([("a", "leaf"), ("a.b", "child")])


# ── Editing ──────────────────────────────────────────────────────

class TestSetPathValue:
    def test_existing_leaf(self):
        from linguabundle.parsers.json_parser import set_path_value
        tree = {"x": "hallo", "y": {"z": "yo"}}
        assert set_path_value(tree, "x", "Hallo!") == {"x": "Hallo!", "y": {"z": "yo"}}

    def test_does_not_mutate_input(self):
        from linguabundle.parsers.json_parser import set_path_value
        tree = {"y": {"z": "yo"}}
        set_path_value(tree, "y.z", "new")
        assert tree == {"y": {"z": "yo"}}

    def test_creates_intermediates(self):
        from linguabundle.parsers.json_parser import set_path_value
        assert set_path_value({"x": "hi"}, "a.b.c", "new") == {
            "x": "hi", "a": {"b": {"c": "new"}}}

    def test_through_string_leaf(self):
        from linguabundle.errors import PathConflictError
        from linguabundle.parsers.json_parser import set_path_value
        with pytest.raises(PathConflictError):
            set_path_value({"a": "leaf"}, "a.b", "x")

    def test_through_null(self):
        from linguabundle.errors import PathConflictError
        from linguabundle.parsers.json_parser import set_path_value
        with pytest.raises(PathConflictError):
            set_path_value({"a": None}, "a.b", "x")

    def test_over_object(self):
        from linguabundle.errors import PathConflictError
        from linguabundle.parsers.json_parser import set_path_value
        with pytest.raises(PathConflictError):
            set_path_value({"a": {"b": "x"}}, "a", "flat")

    def test_keeps_non_string_siblings(self):
        from linguabundle.parsers.json_parser import set_path_value
        tree = {"n": 3, "list": [1, 2], "s": "old"}
        assert set_path_value(tree, "s", "new") == {"n": 3, "list": [1, 2], "s": "new"}


# ── Templating ───────────────────────────────────────────────────

class TestEmptyCopy:
    def test_strings_emptied(self):
        from linguabundle.parsers.json_parser import empty_copy
        tree = {"x": "hi", "y": {"z": "yo", "w": {}}}
        assert empty_copy(tree) == {"x": "", "y": {"z": "", "w": {}}}

    def test_other_values_pass_through(self):
        from linguabundle.parsers.json_parser import empty_copy
        tree = {"n": 1, "b": False, "nil": None, "arr": ["keep", {"a": "keep"}]}
        result = empty_copy(tree)
        assert result == tree
        assert result["arr"] is not tree["arr"]

    def test_key_order_preserved(self):
        from linguabundle.parsers.json_parser import empty_copy
        tree = {"b": "1", "a": {"d": "2", "c": "3"}}
        result = empty_copy(tree)
        assert list(result) == ["b", "a"]
        assert list(result["a"]) == ["d", "c"]


# ── Loading ──────────────────────────────────────────────────────

class TestSafeLoadsJson:
    def test_bytes(self):
        from linguabundle.parsers import safe_loads_json
        assert safe_loads_json('{"a": "ä"}'.encode("utf-8")) == {"a": "ä"}

    def test_bom(self):
        from linguabundle.parsers import safe_loads_json
        assert safe_loads_json(b'\xef\xbb\xbf{"a": "b"}') == {"a": "b"}

    @pytest.mark.parametrize("payload", [b"{not json", b"\xff\xfe\x00", b"", b'["a"]', b'"text"'])
    def test_rejects(self, payload):
        from linguabundle.errors import ParseError
        from linguabundle.parsers import safe_loads_json
        with pytest.raises(ParseError) as exc:
            safe_loads_json(payload, path="fr/b.json")
        assert exc.value.path == "fr/b.json"
        assert exc.value.kind == "parse"

    def test_depth_cap(self):
        from linguabundle.errors import ParseError
        from linguabundle.parsers import safe_loads_json
        nested = '{"a": ' * 10 + '"x"' + "}" * 10
        assert safe_loads_json(nested, max_depth=10)
        with pytest.raises(ParseError):
            safe_loads_json(nested, max_depth=9)

    def test_pathological_nesting(self):
        from linguabundle.errors import ParseError
        from linguabundle.parsers import safe_loads_json
        bomb = "[" * 200000 + "]" * 200000
        with pytest.raises(ParseError):
            safe_loads_json("{\"a\": " + bomb + "}")

    def test_tree_depth(self):
        from linguabundle.parsers import tree_depth
        assert tree_depth("x") == 0
        assert tree_depth({}) == 1
        assert tree_depth({"a": {"b": [{}]}}) == 4


# ── Archives ─────────────────────────────────────────────────────

class TestArchive:
    def test_read_order_and_dirs(self):
        from linguabundle.parsers.archive import read_archive
        data = make_zip({"en/": b"", "en/a.json": {"x": "hi"}, "de/a.json": {"x": "hallo"}})
        entries = read_archive(data)
        assert [(e.path, e.is_dir) for e in entries] == [
            ("en/", True), ("en/a.json", False), ("de/a.json", False)]
        assert entries[1].data == b'{"x": "hi"}'

    def test_not_a_zip(self):
        from linguabundle.errors import BundleImportError
        from linguabundle.parsers.archive import read_archive
        with pytest.raises(BundleImportError):
            read_archive(b"definitely not a zip")

    def test_size_limit(self):
        from linguabundle.parsers.archive import read_archive
        data = make_zip({"en/big.json": {"x": "y" * 1000}, "en/small.json": {"x": "y"}})
        assert [e.path for e in read_archive(data, max_entry_bytes=100)] == ["en/small.json"]

    def test_write(self):
        from linguabundle.parsers.archive import write_archive
        from conftest import read_zip
        data = write_archive([("en/a.json", '{"x": "hi"}'), ("de/a.json", '{"x": "ö"}')])
        assert read_zip(data) == {"en/a.json": {"x": "hi"}, "de/a.json": {"x": "ö"}}

    def test_dump_json_pretty(self):
        from linguabundle.parsers.json_parser import dump_json
        assert dump_json({"a": {"b": "ö"}}) == '{\n  "a": {\n    "b": "ö"\n  }\n}\n'
