"""Tests for readability, complexity and writing-style hints."""

import math

import pytest

from journal.readability import (
    average_sentence_length,
    complexity,
    count_syllables,
    readability,
    writing_style,
)


class TestSyllables:
    @pytest.mark.parametrize(
        "word, expected",
        [("cat", 1), ("reading", 2), ("beautiful", 3), ("Rhythm", 1), ("tsk", 0), ("sat.", 1)],
    )
    def test_vowel_groups(self, word, expected):
        assert count_syllables(word) == expected


class TestReadability:
    def test_flesch_formula(self):
        # 3 words, 1 sentence, 3 syllables
        expected = 206.835 - 1.015 * 3 - 84.6 * 1
        assert readability("The cat sat.") == pytest.approx(expected)

    def test_no_sentences_or_words(self):
        assert readability("") == 0
        assert readability("   ") == 0
        assert readability("?!.") == 0

    def test_never_nan_or_infinite(self):
        for text in ("", ".", "a", "tsk tsk.", "x" * 500):
            value = readability(text)
            assert not math.isnan(value)
            assert not math.isinf(value)

    def test_not_clamped(self):
        assert readability("Go.") > 100
        dense = "Incomprehensibilities notwithstanding, institutionalization characteristically overcomplicates."
        assert readability(dense) < 0


class TestComplexity:
    def test_long_word_share(self):
        assert complexity("extraordinary cat") == 5.0
        assert complexity("a b c d") == 0.0

    def test_empty(self):
        assert complexity("") == 0.0


class TestWritingStyle:
    def test_average_sentence_length(self):
        assert average_sentence_length("One two. Three four five six.") == 3.0
        assert average_sentence_length("") == 0.0

    def test_simple_text_has_no_hints(self):
        style = writing_style("The cat sat. The dog ran.")
        assert style.suggestions == []

    def test_long_sentence_hint(self):
        text = " ".join(["go"] * 25) + "."
        hints = writing_style(text).suggestions
        assert any("longer sentences" in h for h in hints)

    def test_complexity_and_readability_hints(self):
        text = "Institutional characteristics overwhelmingly complicate administrative procedures."
        hints = writing_style(text).suggestions
        assert any("simpler words" in h for h in hints)
        assert any("too complex" in h for h in hints)

    def test_to_dict_rounds(self):
        data = writing_style("The cat sat.").to_dict()
        assert data["readability"] == round(206.835 - 1.015 * 3 - 84.6, 2)
        assert data["complexity"] == 0.0
        assert data["average_sentence_length"] == 3.0
