from __future__ import annotations

import pytest

from slimcode.models import ContentKind, SpanContext, SpanKind
from slimcode.scanners import MalformedInputError, create_scanner, scan
from slimcode.scanners.markup import MarkupScanner
from slimcode.scanners.script import match_punctuator
from tests.utils import SAMPLES


def _texts(text: str, kind: ContentKind, span_kind: SpanKind) -> list[str]:
    return [span.text for span in scan(text, kind) if span.kind is span_kind]


@pytest.mark.parametrize("kind", list(ContentKind))
def test_spans_concatenate_to_input(kind: ContentKind) -> None:
    """Spans are contiguous and cover every character of the input."""
    text = SAMPLES[kind]
    spans = list(scan(text, kind))
    assert "".join(span.text for span in spans) == text
    assert spans[0].start == 0
    assert spans[-1].end == len(text)


def test_create_scanner_rejects_unknown_kind() -> None:
    """The factory refuses values that are not content kinds."""
    with pytest.raises(ValueError):
        create_scanner("yaml")  # type: ignore[arg-type]


def test_markup_quoted_attribute_hides_angle_bracket() -> None:
    """A '>' inside a quoted value does not close the tag."""
    spans = list(scan('<a title="x > y">t</a>', ContentKind.MARKUP))
    strings = [span for span in spans if span.kind is SpanKind.STRING_LITERAL]
    assert [span.text for span in strings] == ['"x > y"']
    assert strings[0].context is SpanContext.TAG


def test_markup_raw_text_element_is_one_span() -> None:
    """Script bodies are passed through as a single raw span."""
    text = "<script>if (a < b) { x(); }</script>"
    raw = [span for span in scan(text, ContentKind.MARKUP) if span.context is SpanContext.RAW]
    assert [span.text for span in raw] == ["if (a < b) { x(); }"]


def test_markup_raw_text_elements_are_configurable() -> None:
    """Only the configured element names are treated as raw text."""
    scanner = MarkupScanner(raw_text_elements=["PRE"])
    spans = list(scanner.scan("<pre> a </pre><script> b </script>"))
    raw = [span.text for span in spans if span.context is SpanContext.RAW]
    assert raw == [" a "]


def test_markup_comment_span() -> None:
    """Comments become block comment spans."""
    assert _texts("<p>a<!-- b --></p>", ContentKind.MARKUP, SpanKind.BLOCK_COMMENT) == [
        "<!-- b -->"
    ]


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("<p>a<!-- b", "unterminated markup comment at offset 4"),
        ('<div class="x>', "unterminated attribute value at offset 11"),
        ("<div class=x", "unterminated tag at offset 0"),
    ],
)
def test_markup_malformed(text: str, message: str) -> None:
    """Broken markup is reported with the offset where the construct began."""
    with pytest.raises(MalformedInputError) as excinfo:
        list(scan(text, ContentKind.MARKUP))
    assert str(excinfo.value) == message


def test_stylesheet_string_braces_are_not_structural() -> None:
    """Braces inside CSS strings stay inside the string span."""
    text = '.b::after { content: "} {"; }'
    assert _texts(text, ContentKind.STYLESHEET, SpanKind.STRING_LITERAL) == ['"} {"']
    assert _texts(text, ContentKind.STYLESHEET, SpanKind.STRUCTURAL_TOKEN).count("{") == 1


def test_stylesheet_unterminated_comment() -> None:
    """An open comment at end of input is malformed."""
    with pytest.raises(MalformedInputError, match="unterminated comment"):
        list(scan(".a{} /* open", ContentKind.STYLESHEET))


def test_json_scan_requires_valid_document() -> None:
    """The JSON scanner refuses documents that do not parse."""
    with pytest.raises(MalformedInputError, match="line 1 column"):
        list(scan('{"a": }', ContentKind.STRUCTURED_DATA))


def test_json_strings_keep_escapes() -> None:
    """Escaped quotes do not end a JSON string span."""
    text = '{"k": "say \\"hi\\""}'
    assert _texts(text, ContentKind.STRUCTURED_DATA, SpanKind.STRING_LITERAL) == [
        '"k"',
        '"say \\"hi\\""',
    ]


def test_script_division_is_not_regex() -> None:
    """A slash after an operand is division."""
    text = "x = a / b / c"
    assert _texts(text, ContentKind.SCRIPT, SpanKind.STRING_LITERAL) == []
    assert _texts(text, ContentKind.SCRIPT, SpanKind.STRUCTURAL_TOKEN) == ["=", "/", "/"]


@pytest.mark.parametrize(
    ("text", "literal"),
    [
        ("x = /ab+c/gi.test(s)", "/ab+c/gi"),
        ("if (/[/]/.test(s)) {}", "/[/]/"),
        ("return /re\\/x/", "/re\\/x/"),
    ],
)
def test_script_regex_literals(text: str, literal: str) -> None:
    """A slash where an expression may start opens a regex literal."""
    assert _texts(text, ContentKind.SCRIPT, SpanKind.STRING_LITERAL) == [literal]


def test_script_comment_markers_inside_strings() -> None:
    """Comment markers inside strings are part of the string."""
    text = 'const s = "//not a comment"; // real'
    assert _texts(text, ContentKind.SCRIPT, SpanKind.STRING_LITERAL) == ['"//not a comment"']
    assert _texts(text, ContentKind.SCRIPT, SpanKind.LINE_COMMENT) == ["// real"]


def test_script_template_substitutions_are_code() -> None:
    """Template literals split around their substitutions."""
    text = "x = `a${ {b: 1}.b }c`"
    strings = _texts(text, ContentKind.SCRIPT, SpanKind.STRING_LITERAL)
    assert strings == ["`a${", "}c`"]
    assert "b" in _texts(text, ContentKind.SCRIPT, SpanKind.OPAQUE_CONTENT)


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ('const s = "abc', "unterminated string literal at offset 10"),
        ("x = `abc", "unterminated template literal at offset 4"),
        ("x = /abc", "unterminated regular expression literal at offset 4"),
        ("/* open", "unterminated comment at offset 0"),
        ("function f() {", "unbalanced opening brace at offset 13"),
        ("}", "unbalanced closing brace at offset 0"),
    ],
)
def test_script_malformed(text: str, message: str) -> None:
    """Unterminated literals and stray braces are malformed input."""
    with pytest.raises(MalformedInputError) as excinfo:
        list(scan(text, ContentKind.SCRIPT))
    assert str(excinfo.value) == message


def test_jsx_spans_carry_context() -> None:
    """JSX tags, text and embedded expressions are told apart."""
    text = 'const el = <Item id="a">Hi {name}</Item>;'
    spans = list(scan(text, ContentKind.SCRIPT_WITH_MARKUP))
    by_text = {span.text: span for span in spans}
    assert by_text["Item"].context is SpanContext.TAG
    assert by_text['"a"'].context is SpanContext.TAG
    assert by_text["Hi"].context is SpanContext.TEXT
    assert by_text["name"].context is SpanContext.CODE


def test_jsx_is_not_recognized_for_plain_scripts() -> None:
    """Without JSX support '<' is an operator."""
    spans = list(scan("a = b < c", ContentKind.SCRIPT))
    assert all(span.context is SpanContext.CODE for span in spans)


def test_jsx_mismatched_closing_tag() -> None:
    """A closing tag must name the element it closes."""
    with pytest.raises(MalformedInputError, match="expected closing tag for <div>"):
        list(scan("x = <div></span>", ContentKind.SCRIPT_WITH_MARKUP))


def test_match_punctuator_prefers_longest() -> None:
    """Punctuators are matched greedily."""
    assert match_punctuator(">>>=1", 0) == ">>>="
    assert match_punctuator("a?.b", 1) == "?."
    assert match_punctuator("a?.5:1", 1) == "?"


def test_quoted_string_crlf_continuation() -> None:
    """Backslash followed by CRLF continues a CSS string."""
    text = '.a::after { content: "x\\\r\ny"; }\r\n'
    assert _texts(text, ContentKind.STYLESHEET, SpanKind.STRING_LITERAL) == ['"x\\\r\ny"']


def test_script_deep_nesting_is_scanned_iteratively() -> None:
    """Deep template and JSX nesting produce complete span streams."""
    template = "x"
    for _ in range(3000):
        template = "`${" + template + "}`"
    spans = list(scan(template, ContentKind.SCRIPT))
    assert "".join(span.text for span in spans) == template
    elements = "x = " + "<a>" * 3000 + "</a>" * 3000
    spans = list(scan(elements, ContentKind.SCRIPT_WITH_MARKUP))
    assert "".join(span.text for span in spans) == elements


def test_jsx_expression_in_attribute_returns_to_tag() -> None:
    """An attribute expression closes back into its tag."""
    text = "x = <A b={ {c: 1} } d />"
    spans = list(scan(text, ContentKind.SCRIPT_WITH_MARKUP))
    by_text = {span.text: span for span in spans}
    assert by_text["d"].context is SpanContext.TAG
    assert by_text["c"].context is SpanContext.CODE
    assert spans[-1].text == "/>"
