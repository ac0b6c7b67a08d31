"""Parsing Tests for the step input recognizers.

Covers the free-text, closed-choice and integer recognizers with the kind
of replies people actually type.
"""
import pytest

from tools.recognizers import recognize_choice, recognize_int, recognize_text

OPTIONS = ["Masculino", "Feminino"]


class TestTextParsing:

    @pytest.mark.parametrize("reply, expected", [
        ("Ana", "Ana"),
        ("  Ana Maria ", "Ana Maria"),
        ("", None),
        ("   ", None),
        (None, None),
    ])
    def test_text(self, reply, expected):
        assert recognize_text(reply) == expected


class TestChoiceParsing:

    @pytest.mark.parametrize("reply", ["Masculino", "masculino", " MASCULINO ", "1", "masc", "sou masculino"])
    def test_male(self, reply):
        found = recognize_choice(reply, OPTIONS)
        assert found is not None
        assert found.value == "Masculino"
        assert found.index == 0

    @pytest.mark.parametrize("reply", ["Feminino", "feminíno", "2", "femenino", "feminino!"])
    def test_female(self, reply):
        found = recognize_choice(reply, OPTIONS)
        assert found is not None
        assert found.value == "Feminino"
        assert found.index == 1

    def test_exact_match_scores_full(self):
        assert recognize_choice("Feminino", OPTIONS).score == 1.0

    @pytest.mark.parametrize("reply", ["menino", "sou menino", "mulher"])
    def test_similar_words_with_another_start_do_not_match(self, reply):
        assert recognize_choice(reply, OPTIONS) is None

    @pytest.mark.parametrize("reply", ["", "  ", None, "xyz", "banana", "0", "3", "42"])
    def test_no_match(self, reply):
        assert recognize_choice(reply, OPTIONS) is None

    def test_threshold_is_respected(self):
        assert recognize_choice("masc", OPTIONS, threshold=0.99) is None
        assert recognize_choice("masc", OPTIONS, threshold=0.5).value == "Masculino"

    def test_no_options(self):
        assert recognize_choice("Masculino", []) is None


class TestIntParsing:

    @pytest.mark.parametrize("reply, expected", [
        ("165", 165),
        ("165 cm", 165),
        ("  70kg ", 70),
        ("peso 80", 80),
        ("0", 0),
        ("-5", -5),
        ("+12", 12),
        ("72.4", 72),
        ("72,6", 73),
        ("170 ou 180", 170),
    ])
    def test_numbers(self, reply, expected):
        assert recognize_int(reply) == expected

    @pytest.mark.parametrize("reply", ["", "abc", "alto", None, "cento e setenta"])
    def test_no_number(self, reply):
        assert recognize_int(reply) is None

    def test_huge_number_is_not_a_crash(self):
        assert recognize_int("9" * 400) is None
