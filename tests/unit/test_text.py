"""Tests for the text normalization helpers."""

import pytest

from b2r.models.migration_error import InvalidArgumentError
from b2r.utils.text import (
    center_truncate,
    cleanse_html,
    cleanse_quotes,
    count_chars,
    left,
    right,
    sign,
    to_slug,
    transliterate,
)

pytestmark = pytest.mark.unit


class TestLeftRight:
    def test_counts_code_points(self) -> None:
        assert count_chars("Grüße") == 5
        assert left("Grüße", 3) == "Grü"
        assert right("Grüße", 2) == "ße"

    def test_zero_and_oversized(self) -> None:
        assert left("abc", 0) == ""
        assert right("abc", 0) == ""
        assert left("abc", 10) == "abc"
        assert right("abc", 10) == "abc"

    @pytest.mark.parametrize("bad", [-1, 2.5, "3", True, None])
    def test_rejects_invalid_lengths(self, bad: object) -> None:
        with pytest.raises(InvalidArgumentError):
            left("abc", bad)  # type: ignore[arg-type]
        with pytest.raises(ValueError):
            right("abc", bad)  # type: ignore[arg-type]


class TestCenterTruncate:
    def test_fitting_text_is_unchanged(self) -> None:
        assert center_truncate("short", 30) == "short"
        assert center_truncate("x" * 30, 30) == "x" * 30

    def test_cuts_out_the_middle(self) -> None:
        result = center_truncate("abcdefghijklmnopqrstuvwxyz", 10)
        # head = ceil(10/2) - floor(3/2) = 4, tail = floor(10/2) - ceil(3/2) = 3
        assert result == "abcd...xyz"
        assert count_chars(result) <= 10

    def test_odd_limit(self) -> None:
        result = center_truncate("abcdefghijklmnopqrstuvwxyz", 11)
        # head = 6 - 1 = 5, tail = 5 - 2 = 3
        assert result == "abcde...xyz"

    def test_bound_holds_for_every_limit(self) -> None:
        text = "The quick brown fox jumps over the lazy dog"
        for limit in range(len(text) + 1):
            assert count_chars(center_truncate(text, limit)) <= limit

    def test_limit_below_ellipsis_length(self) -> None:
        assert center_truncate("abcdef", 2) == "ab"
        assert center_truncate("abcdef", 3) == "abc"
        assert center_truncate("abcdef", 0) == ""

    def test_is_idempotent(self) -> None:
        once = center_truncate("A very long Basecamp project name indeed", 30)
        assert center_truncate(once, 30) == once

    def test_custom_ellipsis(self) -> None:
        assert center_truncate("abcdefghij", 5, "~") == "abc~j"

    def test_rejects_negative_limit(self) -> None:
        with pytest.raises(InvalidArgumentError):
            center_truncate("abc", -1)


class TestCleansing:
    def test_cleanse_quotes(self) -> None:
        assert cleanse_quotes('  say "hi"  ') == "say hi"
        assert cleanse_quotes(r"C:\Client\Media") == r"C:\\Client\\Media"
        assert cleanse_quotes(r"it's\x") == r"it's\\x"

    def test_cleanse_html_markup(self) -> None:
        assert cleanse_html('<div class="x">Hello</div>world') == "Hello\nworld"
        assert cleanse_html("a<br>b<br/>c<br />d") == "a\nb\nc\nd"

    def test_cleanse_html_decodes_entities_first(self) -> None:
        assert cleanse_html("a&lt;br&gt;b") == "a\nb"
        assert cleanse_html("fish &amp; chips") == "fish & chips"

    def test_cleanse_html_strips(self) -> None:
        assert cleanse_html("  <div>x</div>  ") == "x"


class TestSlugs:
    def test_transliterate(self) -> None:
        assert transliterate("Café\u2013Bar") == "Cafe-Bar"

    def test_to_slug(self) -> None:
        assert to_slug("Website Relaunch") == "website-relaunch"
        assert to_slug("Über  Projekt: 2024!") == "uber-projekt-2024"

    def test_to_slug_of_symbols_is_empty(self) -> None:
        assert to_slug("!!!") == ""


def test_sign_appends_signature() -> None:
    assert sign("Body", "Jane Doe") == "Body\n\n-- \nJane Doe"
