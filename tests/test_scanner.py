"""Tests for the quote and comment aware delimiter scanner."""

from sortimports.core.scanner import (
    NOT_FOUND,
    DepthTracker,
    LexicalScanner,
    LexMode,
    contains_comment,
    find_matching_close,
    find_next_open,
)


def test_find_matching_close_simple():
    """Test matching a plain brace pair."""
    assert find_matching_close("{ a: { b } }", 0) == 11
    assert find_matching_close("{ a: { b } }", 5) == 9


def test_find_matching_close_ignores_strings():
    """Test that braces inside quotes do not count."""
    assert find_matching_close("{ a: '}' }", 0) == 9
    assert find_matching_close('{ a: "}" }', 0) == 9
    assert find_matching_close("{ `}` }", 0) == 6


def test_find_matching_close_escaped_quote():
    """Test backslash escapes inside a string."""
    text = "{ a: '\\'}' }"
    assert find_matching_close(text, 0) == 11


def test_find_matching_close_ignores_comments():
    """Test that braces inside comments do not count."""
    assert find_matching_close("{ // }\n}", 0) == 7
    assert find_matching_close("{ /* } */ }", 0) == 10


def test_find_matching_close_not_found():
    """Test the sentinel for unbalanced text."""
    assert find_matching_close("{ a: {", 0) == NOT_FOUND
    assert find_matching_close("{ '}", 0) == NOT_FOUND


def test_find_matching_close_other_delimiters():
    """Test brackets and parens."""
    assert find_matching_close("[1, [2], ']']", 0, "[", "]") == 12
    assert find_matching_close("(a, (b))", 0, "(", ")") == 7


def test_find_next_open():
    """Test locating the next unquoted opening brace."""
    assert find_next_open("'{' {", 0) == 4
    assert find_next_open("// {\n{", 0) == 5
    assert find_next_open("a { b {", 2) == 2
    assert find_next_open("abc", 0) == NOT_FOUND


def test_contains_comment():
    """Test comment detection outside strings."""
    assert contains_comment("import { a } from 'x'; // note")
    assert contains_comment("import { /* b, */ a } from 'x';")
    assert not contains_comment("import a from 'http://example.com/a';")
    assert not contains_comment("import { a } from 'x';")


def test_scanner_keeps_mode_between_feeds():
    """Test that an open template literal carries over to the next feed."""
    scanner = LexicalScanner()
    list(scanner.feed("const a = `"))
    assert scanner.mode is LexMode.TEMPLATE

    emitted = [char for _, char in scanner.feed("{ `;")]
    assert scanner.mode is LexMode.OUTSIDE
    assert emitted == [";"]


def test_depth_tracker():
    """Test running depth over several lines."""
    tracker = DepthTracker("{")
    assert not tracker.opened

    tracker.feed_line("interface A {")
    assert tracker.opened
    assert tracker.depth("{") == 1

    tracker.feed_line("  a: '}';")
    assert tracker.depth("{") == 1

    tracker.feed_line("}")
    assert tracker.depth("{") == 0


def test_depth_tracker_line_comment_ends_at_newline():
    """Test that a line comment does not swallow the next line."""
    tracker = DepthTracker("{([")
    tracker.feed_line("type A = ( // (")
    assert not tracker.balanced

    tracker.feed_line(")")
    assert tracker.balanced
    assert tracker.at_zero
