"""
Unit tests for C# whitespace normalization.
"""
from admxgen.compiler.normalize import normalize_whitespace


class TestIndentation:
    def test_indents_by_brace_depth(self):
        source = "namespace A\n{\nclass B\n{\nint x;\n}\n}\n"
        assert normalize_whitespace(source) == (
            "namespace A\n"
            "{\n"
            "    class B\n"
            "    {\n"
            "        int x;\n"
            "    }\n"
            "}\n"
        )

    def test_reindents_existing_indentation(self):
        source = "class A\n{\n\t\t  void M() { }\n      }\n"
        assert normalize_whitespace(source) == "class A\n{\n    void M() { }\n}\n"

    def test_braces_in_strings_chars_and_comments_are_ignored(self):
        source = (
            "class A\n"
            "{\n"
            'string s = "{";\n'
            "char c = '{';\n"
            'string e = "a\\"{";\n'
            "// {\n"
            "/* { */ int y;\n"
            "}\n"
        )
        lines = normalize_whitespace(source).splitlines()
        assert lines[2:7] == [
            '    string s = "{";',
            "    char c = '{';",
            '    string e = "a\\"{";',
            "    // {",
            "    /* { */ int y;",
        ]
        assert lines[-1] == "}"

    def test_multi_line_block_comment(self):
        source = "class A\n{\n/* open {\nstill comment }\n*/\nint x;\n}\n"
        lines = normalize_whitespace(source).splitlines()
        assert lines[5] == "    int x;"
        assert lines[6] == "}"

    def test_preprocessor_directives_in_column_zero(self):
        source = "namespace A\n{\n    #pragma warning disable CS0219\n}\n"
        assert "#pragma warning disable CS0219\n" in normalize_whitespace(source)
        assert "    #pragma" not in normalize_whitespace(source)


class TestVerbatimStrings:
    def test_multi_line_verbatim_content_is_preserved(self):
        source = (
            "class A\n"
            "{\n"
            'string s = @"line1\n'
            "   keep   \n"
            '}";\n'
            "int x;\n"
            "}\n"
        )
        assert normalize_whitespace(source) == (
            "class A\n"
            "{\n"
            '    string s = @"line1\n'
            "   keep   \n"
            '}";\n'
            "    int x;\n"
            "}\n"
        )

    def test_doubled_quotes_stay_inside_the_string(self):
        source = 'class A\n{\nstring s = @"say ""{"" now";\n}\n'
        assert normalize_whitespace(source).splitlines()[-1] == "}"


class TestBlankLines:
    def test_collapses_runs_of_blank_lines(self):
        assert normalize_whitespace("a;\n\n\n\nb;\n") == "a;\n\nb;\n"

    def test_drops_blank_lines_inside_block_edges(self):
        source = "class A\n{\n\n\nint x;\n\n}\n"
        assert normalize_whitespace(source) == "class A\n{\n    int x;\n}\n"

    def test_drops_leading_and_trailing_blank_lines(self):
        assert normalize_whitespace("\n\n  a;  \n\n\n") == "a;\n"


class TestLineEndings:
    def test_crlf_and_trailing_whitespace(self):
        assert normalize_whitespace("a;   \r\nb;\t\r\n") == "a;\nb;\n"

    def test_carriage_returns_inside_verbatim_strings_are_kept(self):
        source = 'class A\r\n{\r\nstring s = @"line1\r\nline2";\r\n}\r\n'
        assert normalize_whitespace(source) == 'class A\n{\n    string s = @"line1\r\nline2";\n}\n'

    def test_crlf_after_verbatim_string_ends_is_dropped(self):
        source = 'string s = @"a\r\nb";   \r\nint x;\r\n'
        assert normalize_whitespace(source) == 'string s = @"a\r\nb";\nint x;\n'

    def test_empty_input(self):
        assert normalize_whitespace("") == ""
        assert normalize_whitespace("\n \n") == ""

    def test_idempotent_and_deterministic(self):
        source = "namespace A {\nclass B {\n\n/// <summary>\n/// x\n/// </summary>\npublic int X { get; set; }\n}\n}"
        once = normalize_whitespace(source)
        assert normalize_whitespace(once) == once
        assert normalize_whitespace(source) == once
