"""Tests for the identifier resolver."""

from __future__ import annotations

import pytest

from inkrecon.engine.errors import MalformedIdentifier
from inkrecon.engine.identifiers import is_in_scope, parse_identifier, set_name_for


class TestParseIdentifier:
    """Splitting identifiers into (set_code, number)."""

    def test_core_set_identifier(self) -> None:
        assert parse_identifier("001-100") == ("001", "100")

    def test_promo_identifier(self) -> None:
        assert parse_identifier("P1-012") == ("P1", "012")

    def test_splits_on_first_separator_only(self) -> None:
        assert parse_identifier("D23-012-a") == ("D23", "012-a")

    @pytest.mark.parametrize("identifier", ["001100", "", "-100", "001-"])
    def test_malformed_identifiers_raise(self, identifier: str) -> None:
        with pytest.raises(MalformedIdentifier):
            parse_identifier(identifier)

    def test_non_string_raises(self) -> None:
        with pytest.raises(MalformedIdentifier):
            parse_identifier(None)  # type: ignore[arg-type]

    def test_malformed_identifier_is_a_value_error(self) -> None:
        """Callers that catch ValueError also catch MalformedIdentifier."""
        with pytest.raises(ValueError, match="001100"):
            parse_identifier("001100")


class TestScope:
    """Scope is a pure membership test over caller-supplied codes."""

    def test_in_scope(self) -> None:
        assert is_in_scope("003", {"001", "002", "003"}) is True

    def test_out_of_scope(self) -> None:
        assert is_in_scope("P1", {"001", "002", "003"}) is False

    def test_none_scope_means_all(self) -> None:
        assert is_in_scope("P1", None) is True

    def test_empty_scope_excludes_everything(self) -> None:
        assert is_in_scope("001", set()) is False


class TestSetNames:
    """Display names for set codes."""

    def test_known_set(self) -> None:
        assert set_name_for("009") == "Fabled"

    def test_unknown_set_falls_back(self) -> None:
        assert set_name_for("X9") == "Set X9"

    def test_override_table(self) -> None:
        assert set_name_for("001", {"001": "Custom"}) == "Custom"
