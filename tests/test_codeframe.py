"""Tests for code frames."""

from vcompiler.engine.codeframe import generate_code_frame


def test_single_line_range():
    source = '<div>\n  <p v-if="a b"></p>\n</div>'
    assert generate_code_frame(source, 11, 21) == (
        "1  |  <div>\n"
        '2  |    <p v-if="a b"></p>\n'
        "   |       ^^^^^^^^^^\n"
        "3  |  </div>"
    )


def test_range_across_lines():
    """Every line the range touches is underlined."""
    assert generate_code_frame("ab\ncd\nef", 1, 7) == (
        "1  |  ab\n"
        "   |   ^\n"
        "2  |  cd\n"
        "   |  ^^\n"
        "3  |  ef\n"
        "   |  ^"
    )


def test_context_is_limited():
    source = "\n".join(f"line{i}" for i in range(1, 11))
    start = source.index("line6") + 1
    frame = generate_code_frame(source, start, start + 3)
    numbers = [line.split("|")[0].strip() for line in frame.splitlines()]
    assert [n for n in numbers if n] == ["4", "5", "6", "7", "8"]
