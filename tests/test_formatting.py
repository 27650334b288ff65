"""
Unit tests for the escaping and literal formatting helpers.
"""
from decimal import Decimal

import pytest

from admxgen.policy.models import (
    DELETE, Char, DecimalElementItem, PolicyClass, Single, TextElementItem, UInt32, UInt64,
)
from admxgen.render.formatting import (
    HELPERS, escape_identifier, escape_namespace, escape_type, escape_xmldoc, is_dei,
    is_delval, is_tei, literal, ref_id, to_dei, to_tei,
)


class TestEscapeNames:
    """Identifier, type and namespace escaping."""

    @pytest.mark.parametrize("raw, expected", [
        ("  my-type_name ", "mytypename"),
        ("HomePage", "HomePage"),
        ("123abc", "_123abc"),
        ("_x", "x"),
        ("---", "_"),
        ("Größe", "Gre"),
        ("class", "@class"),
        (None, ""),
        ("", ""),
        ("   ", ""),
    ])
    def test_escape_type(self, raw, expected):
        assert escape_type(raw) == expected

    @pytest.mark.parametrize("raw, expected", [
        ("my-id_x", "myid_x"),
        ("_private", "_private"),
        ("9lives", "_9lives"),
        ("namespace", "@namespace"),
        ("Blocked-Sites", "BlockedSites"),
    ])
    def test_escape_identifier(self, raw, expected):
        assert escape_identifier(raw) == expected

    @pytest.mark.parametrize("raw", ["a-b", "1x", "_", "class", "@class", "x y z", "-_-"])
    def test_escaping_is_idempotent(self, raw):
        """Re-escaping an escaped name changes nothing."""
        once = escape_identifier(raw)
        assert escape_identifier(once) == once
        once = escape_type(raw)
        assert escape_type(once) == once

    def test_escape_namespace_drops_empty_segments(self):
        assert escape_namespace("Contoso..Browser. 1st") == "Contoso.Browser._1st"
        assert escape_namespace("") == ""
        assert escape_namespace(None) == ""
        assert escape_namespace("...") == ""


class TestEscapeXmlDoc:
    def test_encodes_markup_per_line(self):
        text = 'a < b\nc & "d"'
        assert escape_xmldoc(text) == "/// a &lt; b\n/// c &amp; &quot;d&quot;"

    def test_empty_input_yields_one_comment_line(self):
        assert escape_xmldoc("") == "/// "
        assert escape_xmldoc(None) == "/// "

    def test_strips_xml_invalid_control_characters(self):
        assert escape_xmldoc("bad\x01char") == "/// badchar"


class TestLiteral:
    """C# literal formatting for every payload kind."""

    @pytest.mark.parametrize("value, expected", [
        (True, "true"),
        (False, "false"),
        (Char("a"), "'a'"),
        (Char(" "), "'\\u0020'"),
        (Char("'"), "'\\u0027'"),
        (UInt32(5), "5u"),
        (UInt64(5), "5uL"),
        (UInt64(18446744073709551615), "18446744073709551615uL"),
        (Single(1.5), "1.5f"),
        (1.5, "1.5d"),
        (Decimal("1.50"), "1.50m"),
        ('say "hi"', '@"say ""hi"""'),
        ("C:\\path", '@"C:\\path"'),
        (PolicyClass.Machine, "PolicyClass.Machine"),
        (DELETE, "null"),
        (None, "null"),
        (7, "7"),
    ])
    def test_literal(self, value, expected):
        assert literal(value) == expected

    def test_non_finite_floats(self):
        assert literal(Single(float("nan"))) == "float.NaN"
        assert literal(float("-inf")) == "double.NegativeInfinity"

    def test_delete_sentinel_is_not_a_string(self):
        """The delete sentinel renders as the null keyword, never as text."""
        assert literal(DELETE) != '@"null"'

    def test_unsupported_type_raises(self):
        with pytest.raises(TypeError):
            literal(object())
        with pytest.raises(TypeError):
            literal([1, 2])

    def test_unsigned_range_is_enforced(self):
        with pytest.raises(ValueError):
            UInt32(-1)
        with pytest.raises(ValueError):
            UInt32(0x1_0000_0000)


class TestHelpers:
    def test_ref_id(self):
        assert ref_id("$(string.Key_1)") == "Key_1"
        assert ref_id("$(STRING.mixedCase)") == "mixedCase"
        assert ref_id("plain text") == ""
        assert ref_id(None) == ""

    def test_is_delval(self):
        assert is_delval(DELETE)
        assert not is_delval(None)
        assert not is_delval("null")

    def test_variant_predicates_and_casts(self):
        text = TextElementItem(id="t")
        assert is_tei(text)
        assert not is_dei(text)
        assert to_tei(text) is text
        with pytest.raises(TypeError):
            to_dei(text)
        assert to_dei(DecimalElementItem(id="d")).max_value == 9999

    def test_registry_is_read_only(self):
        assert HELPERS["literal"] is literal
        assert {"escape_xmldoc", "ref_id", "is_lei", "to_mtei"} <= set(HELPERS)
        with pytest.raises(TypeError):
            HELPERS["literal"] = str
