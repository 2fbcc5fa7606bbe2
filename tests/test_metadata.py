# tests/test_metadata.py
"""
Tests for optionator.metadata — field descriptors and the type cache.
"""

import threading
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

import pytest

from optionator import metadata
from optionator.config import AnnotationConfig
from optionator.exceptions import InvalidTargetError
from optionator.metadata import FieldDescriptor, describe, field_types, unwrap_optional


@dataclass
class Inner:
    level: int = field(default=0, metadata={"default": "1"})


@dataclass
class Outer:
    name: str = field(default="", metadata={"default": "outer", "required": "true"})
    wait: timedelta = field(default=timedelta(0), metadata={"default": "5s", "required": "false"})
    inner: Inner = field(default_factory=Inner)
    maybe: Optional[Inner] = None
    count: int = field(default=0, metadata={"default": 3, "required": True})
    _hidden: int = field(default=0, metadata={"default": "9"})


@dataclass
class Empty:
    _only_hidden: int = 0


@dataclass
class Later:
    ref: "Optional[Later]" = None


class TestDescribe:
    """describe() output."""

    def test_visible_fields_in_order(self):
        names = [fd.name for fd in describe(Outer)]
        assert names == ["name", "wait", "inner", "maybe", "count"]

    def test_descriptor_contents(self):
        name = describe(Outer)[0]
        assert name == FieldDescriptor(index=0, name="name", default="outer", required=True, type=str)
        assert name.has_default

    def test_required_only_when_true(self):
        by_name = {fd.name: fd for fd in describe(Outer)}
        assert by_name["wait"].required is False
        assert by_name["inner"].required is False

    def test_non_string_metadata(self):
        """Non-string defaults are stringified; a bool True marks required."""
        count = {fd.name: fd for fd in describe(Outer)}["count"]
        assert count.default == "3"
        assert count.required is True

    def test_index_counts_hidden_fields(self):
        @dataclass
        class Mixed:
            _a: int = 0
            b: int = 0

        assert describe(Mixed)[0].index == 1

    def test_record_type_helpers(self):
        by_name = {fd.name: fd for fd in describe(Outer)}
        assert by_name["inner"].record_type is Inner
        assert not by_name["inner"].is_reference
        assert by_name["maybe"].record_type is Inner
        assert by_name["maybe"].is_reference
        assert by_name["name"].record_type is None

    def test_no_visible_fields(self):
        assert describe(Empty) == ()

    def test_forward_reference_resolved(self):
        assert describe(Later)[0].type == Optional[Later]

    def test_custom_keys(self):
        @dataclass
        class Tagged:
            port: int = field(default=0, metadata={"def": "80", "req": "true", "default": "1"})

        fd = describe(Tagged, AnnotationConfig(default_key="def", required_key="req"))[0]
        assert fd.default == "80"
        assert fd.required
        assert describe(Tagged)[0].default == "1"
        assert not describe(Tagged)[0].required

    @pytest.mark.parametrize("bad", [Outer(), 3, dict])
    def test_rejects_non_dataclass_types(self, bad):
        with pytest.raises(InvalidTargetError):
            describe(bad)


class TestCache:
    """Process-wide descriptor cache."""

    def test_same_tuple_returned(self):
        assert describe(Outer) is describe(Outer)

    def test_one_entry_per_type_and_keys(self):
        @dataclass
        class Fresh:
            x: int = 0

        describe(Fresh)
        describe(Fresh)
        keys = [k for k in metadata._metadata_cache if k[0] is Fresh]
        assert keys == [(Fresh, "default", "required")]

    def test_concurrent_first_lookups_agree(self):
        @dataclass
        class Shared:
            a: int = field(default=0, metadata={"default": "1"})
            b: str = field(default="", metadata={"default": "two"})

        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(describe(Shared))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 8
        assert all(r == results[0] for r in results)
        assert all(len(r) == 2 for r in results)
        assert describe(Shared) is metadata._metadata_cache[(Shared, "default", "required")]


class TestTypeHelpers:

    def test_unwrap_optional(self):
        assert unwrap_optional(Optional[int]) == (int, True)
        assert unwrap_optional(int | None) == (int, True)
        assert unwrap_optional(int) == (int, False)
        assert unwrap_optional(int | str | None)[1] is False

    def test_field_types_include_hidden(self):
        assert field_types(Outer)["_hidden"] is int
