"""텍스트 측정/줄바꿈 테스트 (advance 30, 줄 높이 56 폰트 기준)."""

import pytest

from renderer.errors import LayoutPreconditionError
from renderer.text import Line, measure_height, text_width, wrap

TITLE = "Mastering data fetching with React Query and Next.js"
SUMMARY = (
    "Learn how React Query simplifies data fetching and caching for you "
    "and how it works in tandem with the Next.js pre-rendering methods"
)


def test_text_width_is_sum_of_advances(font):
    assert text_width(font, "") == 0
    assert text_width(font, "abc") == 90
    assert text_width(font, "a b") == 90


def test_no_max_width_is_single_trimmed_line(font):
    assert wrap(font, "  Song A  ") == [Line("Song A", 180)]
    assert wrap(font, TITLE) == [Line(TITLE, 30 * len(TITLE))]


def test_title_wraps_into_two_lines(font):
    lines = wrap(font, TITLE, 909)
    assert [line.text for line in lines] == [
        "Mastering data fetching with",
        "React Query and Next.js",
    ]
    assert [line.width for line in lines] == [840, 690]
    assert measure_height(font, TITLE, 909) == 112


@pytest.mark.parametrize("max_width", [0, 100, 300, 909, 2000])
def test_lines_fit_unless_single_long_token(font, max_width):
    for line in wrap(font, SUMMARY, max_width):
        assert line.width == text_width(font, line.text)
        if line.width > max_width:
            assert " " not in line.text


@pytest.mark.parametrize("max_width", [None, 50, 909])
def test_height_matches_line_count(font, max_width):
    for text in (TITLE, SUMMARY, "x", ""):
        lines = wrap(font, text, max_width)
        assert measure_height(font, text, max_width) == len(lines) * 56


def test_long_token_gets_its_own_line(font):
    lines = wrap(font, "a verylongword b", 100)
    assert [line.text for line in lines] == ["a", "verylongword", "b"]
    assert lines[1].width == 360


def test_inner_whitespace_collapses_when_wrapping(font):
    assert wrap(font, "one   two\nthree", 1000) == [Line("one two three", 390)]


def test_empty_text_has_no_lines(font):
    assert wrap(font, "") == []
    assert wrap(font, "   ", 909) == []
    assert measure_height(font, "", 909) == 0


def test_negative_width_rejected(font):
    with pytest.raises(LayoutPreconditionError):
        wrap(font, "abc", -1)
    with pytest.raises(LayoutPreconditionError):
        measure_height(font, "abc", -5)
