"""Tests for the immutable route document and merge."""

from dataclasses import FrozenInstanceError

import pytest

from routescout.domain.routes import (
    RouteDocument,
    RouteSection,
    dedupe,
    merge,
    parse,
    serialize,
)


class TestDedupe:
    def test_keeps_first_occurrence_order(self):
        assert dedupe(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]

    def test_empty(self):
        assert dedupe([]) == []


class TestMerge:
    def test_creates_missing_section_at_end(self):
        doc = RouteDocument((RouteSection("ip-block", ("*",)),))
        merged = merge(doc, "ip-add", ["*.foo.com"])
        assert merged.section_names == ["ip-block", "ip-add"]
        assert merged.entries("ip-add") == ["*.foo.com"]

    def test_appends_after_existing_entries(self):
        doc = merge(RouteDocument(), "ip-add", ["a.com"])
        merged = merge(doc, "ip-add", ["b.com", "a.com", "c.com"])
        assert merged.entries("ip-add") == ["a.com", "b.com", "c.com"]

    def test_removes_duplicates_in_new_entries(self):
        merged = merge(RouteDocument(), "ip-add", ["x", "y", "x", "x"])
        assert merged.entries("ip-add") == ["x", "y"]

    def test_is_idempotent(self):
        doc = merge(RouteDocument(), "ip-block", ["*"])
        entries = ["*.foo.com", "1.2.3.4", "*.foo.com"]
        once = merge(doc, "ip-add", entries)
        twice = merge(once, "ip-add", entries)
        assert once == twice

    def test_does_not_mutate_input(self):
        doc = merge(RouteDocument(), "ip-add", ["a.com"])
        merge(doc, "ip-add", ["b.com"])
        assert doc.entries("ip-add") == ["a.com"]

    def test_keeps_section_order(self):
        doc = merge(merge(RouteDocument(), "ip-add", ["a"]), "ip-block", ["b"])
        merged = merge(doc, "ip-add", ["c"])
        assert merged.section_names == ["ip-add", "ip-block"]

    def test_document_is_frozen(self):
        doc = RouteDocument()
        with pytest.raises(FrozenInstanceError):
            doc.sections = ()


class TestParse:
    def test_sections_and_entries(self):
        doc = parse("[ip-add]\n*.foo.com\n1.2.3.4\n\n[ip-block]\n*\n")
        assert doc.as_dict() == {"ip-add": ["*.foo.com", "1.2.3.4"], "ip-block": ["*"]}

    def test_drops_entries_before_first_header(self):
        doc = parse("orphan.com\n[ip-add]\nfoo.com\n")
        assert doc.as_dict() == {"ip-add": ["foo.com"]}

    def test_blank_lines_have_no_effect(self):
        doc = parse("\n\n[ip-add]\n\nfoo.com\n\n\nbar.com\n")
        assert doc.entries("ip-add") == ["foo.com", "bar.com"]

    def test_repeated_header_continues_section(self):
        doc = parse("[ip-add]\na\n[ip-block]\n*\n[ip-add]\nb\na\n")
        assert doc.section_names == ["ip-add", "ip-block"]
        assert doc.entries("ip-add") == ["a", "b"]

    def test_strips_surrounding_whitespace(self):
        doc = parse("  [ip-add]  \n   foo.com   \r\n")
        assert doc.entries("ip-add") == ["foo.com"]

    def test_empty_text(self):
        assert parse("") == RouteDocument()

    def test_large_section_with_duplicates(self):
        hosts = [f"h{i}.example.com" for i in range(20000)]
        text = "[ip-add]\n" + "\n".join(hosts + hosts[:100]) + "\n"

        doc = parse(text)

        assert doc.entries("ip-add") == hosts

    def test_header_only_section_is_kept(self):
        doc = parse("[ip-block]\n[ip-add]\nfoo.com\n")
        assert doc.section_names == ["ip-block", "ip-add"]
        assert doc.entries("ip-block") == []


class TestSerialize:
    def test_format(self):
        doc = merge(merge(RouteDocument(), "ip-add", ["*.foo.com"]), "ip-block", ["*"])
        assert serialize(doc) == "[ip-add]\n*.foo.com\n\n[ip-block]\n*\n\n"

    def test_empty_section_keeps_header(self):
        doc = merge(RouteDocument(), "ip-add", [])
        assert serialize(doc) == "[ip-add]\n\n"

    def test_empty_document(self):
        assert serialize(RouteDocument()) == ""

    def test_round_trip(self):
        text = "[ip-add]\n*.foo.com\nbar.net\n[ip-block]\n*\n"
        doc = parse(text)
        assert parse(serialize(doc)) == doc
