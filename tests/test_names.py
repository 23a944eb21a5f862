"""Tests for the name normalizer."""

from __future__ import annotations

import random

import pytest

from inkrecon.engine.names import normalize_name

# Letters, digits, punctuation seen in real card names, and awkward whitespace
_ALPHABET = "abcXYZ019 '!?:,.-_—–&()\t\n  éÉñÑ"


def _random_strings(seed: int, count: int = 200, max_len: int = 24) -> list[str]:
    rng = random.Random(seed)
    return [
        "".join(rng.choice(_ALPHABET) for _ in range(rng.randint(0, max_len)))
        for _ in range(count)
    ]


class TestNormalizeName:
    """Normalization steps, in order."""

    def test_none_is_empty(self) -> None:
        assert normalize_name(None) == ""

    def test_empty_is_empty(self) -> None:
        assert normalize_name("") == ""

    def test_lowercases(self) -> None:
        assert normalize_name("ELSA") == "elsa"

    def test_strips_punctuation(self) -> None:
        assert normalize_name("Prepare to Board!") == "prepare to board"

    def test_strips_apostrophes_and_colons(self) -> None:
        assert normalize_name("Archazia's Island: Part 1") == "archazias island part 1"

    def test_strips_em_dash_and_collapses_space(self) -> None:
        assert normalize_name("Mickey Mouse — Wayward Sorcerer") == "mickey mouse wayward sorcerer"

    def test_keeps_underscores_and_digits(self) -> None:
        assert normalize_name("Card_2 Go") == "card_2 go"

    def test_trims_and_collapses_whitespace(self) -> None:
        assert normalize_name("  Hades \t\n  Lord  ") == "hades lord"

    def test_pure_punctuation_is_empty(self) -> None:
        assert normalize_name("!?.,:;") == ""


class TestIdempotence:
    """normalize(normalize(s)) == normalize(s) for all s."""

    @pytest.mark.parametrize("value", ["", "!!!", " - ", "Elsa", "Stitch — Rock Star!", "ÉLAN  vital"])
    def test_known_values(self, value: str) -> None:
        once = normalize_name(value)
        assert normalize_name(once) == once

    @pytest.mark.parametrize("seed", range(5))
    def test_generated_values(self, seed: int) -> None:
        for value in _random_strings(seed):
            once = normalize_name(value)
            assert normalize_name(once) == once, value
