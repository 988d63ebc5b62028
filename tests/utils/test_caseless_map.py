"""Tests for CaselessMap, the ordered case-insensitive mapping."""

import pytest as _pytest

import stepdata.constants as constants
import stepdata.utils.caseless_map as caseless_map

CaselessMap = caseless_map.CaselessMap


class TestConstruction:
    """Tests for building maps from pairs, mappings and objects."""

    def test_empty_map(self) -> None:
        """Default construction yields an empty map."""
        m = CaselessMap()

        assert m.length == 0
        assert len(m) == 0
        assert list(m) == []

    def test_from_pairs_keeps_order(self) -> None:
        """Pairs are stored in the order given."""
        m = CaselessMap([("b", 2), ("a", 1), ("c", 3)])

        assert list(m) == ["b", "a", "c"]

    def test_from_mapping(self) -> None:
        """A mapping seeds entries in its iteration order."""
        m = CaselessMap({"X": 1, "y": 2})

        assert m.to_array() == [("X", 1), ("y", 2)]

    def test_duplicate_folded_keys_overwrite_in_place(self) -> None:
        """A later duplicate keeps the first position with the later casing."""
        m = CaselessMap([("Accept", "a"), ("Host", "h"), ("ACCEPT", "b")])

        assert m.to_array() == [("ACCEPT", "b"), ("Host", "h")]

    def test_from_object_mapping(self) -> None:
        """from_object accepts a mapping."""
        m = CaselessMap.from_object({"One": 1, "Two": 2})

        assert m.get("one") == 1
        assert list(m) == ["One", "Two"]

    def test_from_object_attributes(self) -> None:
        """from_object reads instance attributes of plain objects."""

        class Options:
            def __init__(self) -> None:
                self.Level = "debug"
                self.colors = True

        m = CaselessMap.from_object(Options())

        assert m.to_json() == {"Level": "debug", "colors": True}
        assert m.get("LEVEL") == "debug"


class TestSetAndGet:
    """Tests for set/get/has."""

    def test_get_is_case_insensitive(self) -> None:
        """Lookups ignore case."""
        m = CaselessMap([("Content-Type", "json")])

        assert m.get("content-type") == "json"
        assert m.get("CONTENT-TYPE") == "json"
        assert m["Content-type"] == "json"

    def test_set_returns_self_for_chaining(self) -> None:
        """set() is chainable."""
        m = CaselessMap()

        result = m.set("a", 1).set("b", 2)

        assert result is m
        assert m.to_json() == {"a": 1, "b": 2}

    def test_overwrite_keeps_position_and_records_new_casing(self) -> None:
        """The displayed key is the last one set; position is the first."""
        m = CaselessMap([("first", 1), ("Key", 2), ("last", 3)])

        m.set("KEY", 20)

        assert m.to_array() == [("first", 1), ("KEY", 20), ("last", 3)]
        assert m.length == 3

    def test_get_missing_returns_none(self) -> None:
        """Absent keys without a default yield None."""
        assert CaselessMap().get("nope") is None

    def test_get_missing_returns_default(self) -> None:
        """Absent keys yield the supplied default."""
        assert CaselessMap().get("nope", 7) == 7

    def test_get_explicit_none_default(self) -> None:
        """An explicit None default is honored like any other."""
        assert CaselessMap().get("nope", None) is None

    def test_get_present_ignores_default(self) -> None:
        """A stored value wins over the default, even a falsy one."""
        m = CaselessMap([("zero", 0)])

        assert m.get("ZERO", 5) == 0

    def test_has(self) -> None:
        """has() is a case-insensitive membership test."""
        m = CaselessMap([("Name", "x")])

        assert m.has("name")
        assert m.has("NAME")
        assert not m.has("other")

    def test_contains(self) -> None:
        """`in` follows has() and rejects non-string keys."""
        m = CaselessMap([("Name", "x")])

        assert "nAmE" in m
        assert 1 not in m

    def test_setitem(self) -> None:
        """Item assignment goes through set()."""
        m = CaselessMap([("a", 1)])

        m["A"] = 2

        assert m.to_array() == [("A", 2)]

    def test_getitem_missing_raises_keyerror(self) -> None:
        """Subscript access follows the mapping protocol."""
        with _pytest.raises(KeyError):
            _ = CaselessMap()["missing"]


class TestDelete:
    """Tests for delete/clear and index maintenance."""

    def test_delete_absent_is_noop(self) -> None:
        """Deleting an absent key returns False and changes nothing."""
        m = CaselessMap([("a", 1)])

        assert m.delete("b") is False
        assert m.to_array() == [("a", 1)]

    def test_delete_present_returns_true(self) -> None:
        """Deleting a present key returns True."""
        m = CaselessMap([("a", 1)])

        assert m.delete("A") is True
        assert m.length == 0

    def test_delete_shifts_later_entries(self) -> None:
        """Later entries move down one place; order is preserved."""
        m = CaselessMap([("a", 1), ("B", 2), ("c", 3), ("D", 4)])

        m.delete("b")

        assert m.to_array() == [("a", 1), ("c", 3), ("D", 4)]
        assert m.length == 3
        # Index stays consistent after the shift
        assert m.get("C") == 3
        assert m.get("d") == 4
        assert m.get("a") == 1

    def test_delete_then_set_appends(self) -> None:
        """A deleted key set again goes to the end."""
        m = CaselessMap([("a", 1), ("b", 2), ("c", 3)])

        m.delete("a")
        m.set("A", 10)

        assert list(m) == ["b", "c", "A"]

    def test_overwrite_after_delete_uses_shifted_position(self) -> None:
        """Overwriting after a delete hits the shifted position."""
        m = CaselessMap([("a", 1), ("b", 2), ("c", 3)])

        m.delete("a")
        m.set("C", 30)

        assert m.to_array() == [("b", 2), ("C", 30)]

    def test_delitem_missing_raises_keyerror(self) -> None:
        """del follows the mapping protocol for absent keys."""
        m = CaselessMap()

        with _pytest.raises(KeyError):
            del m["missing"]

    def test_delitem_present(self) -> None:
        """del removes a present key case-insensitively."""
        m = CaselessMap([("Key", 1)])

        del m["KEY"]

        assert "key" not in m

    def test_clear(self) -> None:
        """clear() empties entries and index."""
        m = CaselessMap([("a", 1), ("b", 2)])

        m.clear()

        assert m.length == 0
        assert not m.has("a")
        assert m.get("a") is None


class TestViews:
    """Tests for iteration and projections."""

    def test_iteration_yields_original_casing(self) -> None:
        """Iterating yields keys as they were supplied."""
        m = CaselessMap([("Alpha", 1), ("beta", 2)])

        assert list(m) == ["Alpha", "beta"]
        assert list(m.keys()) == ["Alpha", "beta"]
        assert list(m.values()) == [1, 2]

    def test_entries(self) -> None:
        """entries() yields pairs in insertion order."""
        m = CaselessMap([("Alpha", 1), ("beta", 2)])

        assert list(m.entries()) == [("Alpha", 1), ("beta", 2)]

    def test_entries_snapshot_allows_mutation_during_iteration(self) -> None:
        """Mutating while iterating entries() does not break iteration."""
        m = CaselessMap([("a", 1), ("b", 2)])

        for key, _ in m.entries():
            m.delete(key)

        assert m.length == 0

    def test_for_each(self) -> None:
        """for_each passes value, key and the map."""
        m = CaselessMap([("a", 1), ("B", 2)])
        seen: list[tuple[int, str, bool]] = []

        m.for_each(lambda value, key, owner: seen.append((value, key, owner is m)))

        assert seen == [(1, "a", True), (2, "B", True)]

    def test_to_json(self) -> None:
        """to_json projects to a plain dict with original casing."""
        m = CaselessMap([("A", 1), ("b", [1, 2])])

        assert m.to_json() == {"A": 1, "b": [1, 2]}

    def test_equality(self) -> None:
        """Maps compare by ordered pairs, and to plain mappings by content."""
        m = CaselessMap([("a", 1), ("b", 2)])

        assert m == CaselessMap([("a", 1), ("b", 2)])
        assert m != CaselessMap([("b", 2), ("a", 1)])
        assert m == {"b": 2, "a": 1}

    def test_unhashable(self) -> None:
        """Mutable maps are not hashable."""
        with _pytest.raises(TypeError):
            hash(CaselessMap())


class TestTraceLogging:
    """Tests for trace output on index maintenance."""

    def test_overwrite_logs_at_trace(self, caplog: _pytest.LogCaptureFixture) -> None:
        """Replacing a key logs at TRACE level."""
        m = CaselessMap([("Key", 1)])

        with caplog.at_level(constants.TRACE, logger="stepdata"):
            m.set("KEY", 2)

        assert any("already exists" in r.getMessage() for r in caplog.records)

    def test_silent_map_does_not_log(self, caplog: _pytest.LogCaptureFixture) -> None:
        """silent=True suppresses trace output."""
        m = CaselessMap([("Key", 1)], silent=True)

        with caplog.at_level(constants.TRACE, logger="stepdata"):
            m.set("KEY", 2)
            m.delete("key")

        assert not [r for r in caplog.records if r.levelno == constants.TRACE]

    def test_fold_lowercases(self) -> None:
        """fold() is the lookup form of a key."""
        assert caseless_map.fold("MiXeD") == "mixed"
