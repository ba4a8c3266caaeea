"""Tests for word/sentence splitting and reading time."""

from journal.tokenizer import (
    reading_time,
    split_sentences,
    split_words,
    tokenize,
    word_count,
)


class TestTokenize:
    def test_splits_on_punctuation_and_keeps_case(self):
        assert tokenize("I'm Happy, really!") == ["I", "m", "Happy", "really"]

    def test_empty(self):
        assert tokenize("") == []
        assert tokenize(None) == []

    def test_deterministic(self):
        text = "Same input, same output."
        assert tokenize(text) == tokenize(text)


class TestSentences:
    def test_split_on_terminator_runs(self):
        assert split_sentences("One. Two!! Three?!") == ["One", " Two", " Three"]

    def test_drops_whitespace_fragments(self):
        assert split_sentences("...   !!  ") == []
        assert split_sentences("Only one") == ["Only one"]

    def test_trailing_text_without_terminator(self):
        assert split_sentences("First. second part") == ["First", " second part"]


class TestWordCount:
    def test_whitespace_words(self):
        assert split_words("  hello   world. ") == ["hello", "world."]
        assert word_count("a b\tc\nd") == 4

    def test_empty(self):
        assert word_count("") == 0
        assert word_count("   ") == 0


class TestReadingTime:
    def test_rounds_up(self):
        assert reading_time(199) == 1
        assert reading_time(200) == 1
        assert reading_time(201) == 2

    def test_zero_words(self):
        assert reading_time(0) == 0

    def test_custom_rate(self):
        assert reading_time(250, words_per_minute=100) == 3

    def test_from_content(self):
        content = " ".join(["word"] * 201)
        assert reading_time(word_count(content)) == 2
