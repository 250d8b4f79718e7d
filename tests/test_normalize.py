"""
Tests for tabdedup/normalize.py text normalization.
"""
import pytest

from tabdedup.normalize import clean_text, tokenize


class TestCleanText:
    """Test markup and punctuation stripping."""

    def test_lowercases(self):
        assert clean_text("Hello World") == "hello world"

    def test_strips_markup(self):
        assert clean_text("<p>Hello <b>bold</b> world</p>") == "hello bold world"

    def test_markup_is_replaced_by_space(self):
        """Adjacent tags must not glue words together."""
        assert clean_text("one<br>two") == "one two"

    def test_newlines_become_spaces(self):
        assert clean_text("line one\r\nline two\n\nthree") == "line one line two three"

    def test_punctuation_is_replaced_by_space(self):
        assert clean_text("don't stop, believing!") == "don t stop believing"

    def test_collapses_whitespace_and_trims(self):
        assert clean_text("   lots\t of    space   ") == "lots of space"

    def test_digits_survive(self):
        assert clean_text("Python 3.12 released") == "python 3 12 released"

    def test_non_ascii_letters_are_dropped(self):
        assert clean_text("café crème") == "caf cr me"

    @pytest.mark.parametrize("text", ["", None, "!!!", "<div></div>", "\n\r\n"])
    def test_empty_results(self, text):
        assert clean_text(text) == ""


class TestTokenize:
    """Test splitting into tokens."""

    def test_tokens_in_order(self):
        assert tokenize("The quick brown fox") == ["the", "quick", "brown", "fox"]

    def test_repeated_tokens_are_kept(self):
        assert tokenize("spam spam eggs") == ["spam", "spam", "eggs"]

    def test_no_empty_tokens(self):
        tokens = tokenize("  a -- b ;; c  ")
        assert tokens == ["a", "b", "c"]
        assert all(tokens)

    def test_empty_input(self):
        assert tokenize("") == []
        assert tokenize(None) == []
        assert tokenize("?!.,") == []

    def test_deterministic(self):
        text = "<h1>Title</h1> Some text, with punctuation."
        assert tokenize(text) == tokenize(text)
