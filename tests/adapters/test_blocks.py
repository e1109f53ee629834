"""Tests for balanced-block extraction and scoped scalar reads."""

from __future__ import annotations

from mizreader.adapters.blocks import (
    extract_block,
    find_keyed_block,
    iter_indexed_blocks,
    read_float,
    read_int,
    read_loose_string,
    read_string,
    read_string_list,
)
from mizreader.contracts.enums import FieldStatus


class TestExtractBlock:
    def test_nested_block(self):
        text = 'x = { a = { b = 1 }, c = 2 } tail'
        start = text.index("{")
        assert extract_block(text, start) == "{ a = { b = 1 }, c = 2 }"

    def test_inner_block(self):
        text = 'x = { a = { b = 1 }, c = 2 }'
        start = text.index("{", text.index("a"))
        assert extract_block(text, start) == "{ b = 1 }"

    def test_not_a_brace(self):
        assert extract_block("abc { }", 0) is None

    def test_out_of_range(self):
        assert extract_block("{}", 5) is None
        assert extract_block("{}", -1) is None

    def test_truncated(self):
        assert extract_block("{ a = { b = 1 }", 0) is None


class TestFindKeyedBlock:
    def test_bracketed_key(self):
        text = '{ ["weather"] = { ["qnh"] = 760 }, }'
        assert find_keyed_block(text, "weather") == '{ ["qnh"] = 760 }'

    def test_bare_key(self):
        text = "{ weather = { qnh = 760 } }"
        assert find_keyed_block(text, "weather") == "{ qnh = 760 }"

    def test_key_is_not_a_substring_match(self):
        text = '{ ["groupId"] = { 1 }, ["group"] = { 2 } }'
        assert find_keyed_block(text, "group") == "{ 2 }"

    def test_missing(self):
        assert find_keyed_block('{ ["qnh"] = 760 }', "weather") is None


class TestIterIndexedBlocks:
    def test_entries_in_document_order(self):
        array = '{ [2] = { ["name"] = "b" }, [1] = { ["name"] = "a" } }'
        entries = list(iter_indexed_blocks(array))
        assert [index for index, _ in entries] == [2, 1]
        assert '"b"' in entries[0][1]

    def test_nested_numeric_keys_are_not_siblings(self):
        array = """{
            [1] = { ["units"] = { [1] = { ["type"] = "A" }, [2] = { ["type"] = "B" } } },
            [2] = { ["units"] = { [1] = { ["type"] = "C" } } },
        }"""
        entries = list(iter_indexed_blocks(array))
        assert [index for index, _ in entries] == [1, 2]

    def test_stops_at_truncated_entry(self):
        array = '{ [1] = { ["a"] = 1 }, [2] = { ["a"] = 2 '
        assert [index for index, _ in iter_indexed_blocks(array)] == [1]

    def test_empty_array(self):
        assert list(iter_indexed_blocks("{ }")) == []


class TestScalarReads:
    def test_read_string_found(self):
        result = read_string('{ ["name"] = "Enfield" }', "name")
        assert result.status == FieldStatus.FOUND
        assert result.value == "Enfield"

    def test_read_string_single_quoted(self):
        assert read_string("{ name = 'Enfield' }", "name").value == "Enfield"

    def test_read_string_unescapes(self):
        result = read_string(r'{ ["text"] = "say \"hi\"" }', "text")
        assert result.value == 'say "hi"'

    def test_read_string_missing_uses_default(self):
        result = read_string('{ ["x"] = 1 }', "name", default="n/a")
        assert result.status == FieldStatus.DEFAULTED
        assert result.value == "n/a"

    def test_read_string_unquoted_is_malformed(self):
        result = read_string('{ ["name"] = 42 }', "name")
        assert result.status == FieldStatus.MALFORMED
        assert result.raw == "42"
        assert result.value == ""

    def test_read_string_table_value_is_defaulted(self):
        result = read_string('{ ["name"] = { } }', "name")
        assert result.status == FieldStatus.DEFAULTED

    def test_read_float_scientific(self):
        result = read_float('{ ["speed"] = 1.3888888888889e2, }', "speed")
        assert result.is_found
        assert abs(result.value - 138.88888888889) < 1e-9

    def test_read_float_negative(self):
        assert read_float('{ ["x"] = -291014.5, }', "x").value == -291014.5

    def test_read_float_malformed(self):
        result = read_float('{ ["x"] = abc, }', "x", default=7.0)
        assert result.is_malformed
        assert result.value == 7.0
        assert result.raw == "abc"

    def test_read_int_truncates(self):
        result = read_int('{ ["Day"] = 7.9 }', "Day")
        assert result.value == 7
        assert result.is_found

    def test_read_int_overflowing_literal(self):
        result = read_int('{ ["qnh"] = 1e999 }', "qnh", default=760)
        assert result.is_malformed
        assert result.value == 760
        assert result.raw == "1e999"

    def test_read_int_missing(self):
        result = read_int("{ }", "Day", default=1)
        assert result.value == 1
        assert result.status == FieldStatus.DEFAULTED

    def test_first_match_wins(self):
        text = '{ ["x"] = 1, ["sub"] = { ["x"] = 2 } }'
        assert read_int(text, "x").value == 1
        assert read_int(find_keyed_block(text, "sub"), "x").value == 2


class TestReadLooseString:
    def test_bracketed(self):
        assert read_loose_string('    ["theatre"] = "Caucasus",', "theatre") == "Caucasus"

    def test_bare_and_single_quotes(self):
        assert read_loose_string("theatre = 'Syria'", "theatre") == "Syria"

    def test_case_insensitive(self):
        assert read_loose_string('["Theatre"]="Nevada"', "theatre") == "Nevada"

    def test_priority_order(self):
        text = '["map"] = "Old", ["theater"] = "New"'
        assert read_loose_string(text, "theatre", "theater", "map") == "New"

    def test_key_suffix_does_not_match(self):
        assert read_loose_string('["minimap"] = "X"', "map") is None

    def test_missing(self):
        assert read_loose_string('["sortie"] = "X"', "theatre") is None


class TestReadStringList:
    def test_module_list(self):
        block = '{ ["F-16C_50"] = "F-16C_50", ["Su-27"] = "Su-27", }'
        assert read_string_list(block) == ["F-16C_50", "Su-27"]

    def test_empty(self):
        assert read_string_list("{ }") == []
