"""Tests for the word polarity table."""

import pytest

from journal.lexicon import Lexicon, load_default_lexicon, load_lexicon


class TestLexicon:
    def test_case_insensitive_lookup(self):
        lex = Lexicon({"Good": 3})
        assert lex.weight("GOOD") == 3
        assert "good" in lex
        assert lex["good"] == 3

    def test_unknown_word_weighs_zero(self):
        assert Lexicon({"good": 3}).weight("table") == 0

    def test_read_only(self):
        lex = Lexicon({"good": 3})
        with pytest.raises(TypeError):
            lex._weights["bad"] = -3

    def test_parse_skips_comments_and_blanks(self):
        lex = Lexicon.parse(["# header", "", "good\t3", "bad\t-3"])
        assert dict(lex) == {"good": 3, "bad": -3}

    def test_parse_rejects_malformed(self):
        with pytest.raises(ValueError, match="line 2"):
            Lexicon.parse(["good\t3", "broken line"])

    def test_from_file(self, tmp_path):
        path = tmp_path / "custom.tsv"
        path.write_text("sunny\t2\ngloomy\t-2\n")
        lex = load_lexicon(path)
        assert lex.weight("sunny") == 2
        assert len(lex) == 2


class TestDefaultLexicon:
    def test_loaded_once(self):
        assert load_default_lexicon() is load_default_lexicon()
        assert load_lexicon() is load_default_lexicon()

    def test_known_weights(self):
        lex = load_default_lexicon()
        assert lex.weight("happy") > 0
        assert lex.weight("excited") > 0
        assert lex.weight("sad") < 0
        assert lex.weight("disappointed") < 0
        assert lex.weight("weather") == 0

    def test_weights_in_afinn_range(self):
        assert all(-5 <= w <= 5 for w in load_default_lexicon().values())

    @pytest.mark.parametrize(
        "word, weight",
        [("like", 2), ("want", 1), ("stop", -1), ("kill", -3), ("disagree", -2), ("awful", -3)],
    )
    def test_afinn_165_weights(self, word, weight):
        assert load_default_lexicon().weight(word) == weight

    def test_full_word_list(self):
        lex = load_default_lexicon()
        assert len(lex) > 3000
        assert not any(" " in word for word in lex)
