"""Tests for page-name canonicalization."""

from __future__ import annotations

import pytest

from dumpprep.links.canonical import canonicalize


class TestCanonicalize:
    def test_space_becomes_underscore_and_first_letter_upper(self) -> None:
        assert canonicalize("new_york city") == "New_york_city"

    def test_surrounding_underscores_trimmed(self) -> None:
        assert canonicalize("__Foo__") == "Foo"

    def test_surrounding_spaces_trimmed(self) -> None:
        assert canonicalize("  Foo bar ") == "Foo_bar"

    def test_empty_string(self) -> None:
        assert canonicalize("") == ""

    def test_only_separators_collapse_to_empty(self) -> None:
        assert canonicalize(" _ _ ") == ""

    def test_entities_decoded(self) -> None:
        assert canonicalize("AT&amp;T") == "AT&T"
        assert canonicalize("caf&eacute;") == "Café"

    def test_only_first_letter_changes_case(self) -> None:
        assert canonicalize("iPhone") == "IPhone"
        assert canonicalize("FOO bar") == "FOO_bar"

    def test_non_ascii_lowercase_first_letter(self) -> None:
        assert canonicalize("émile zola") == "Émile_zola"

    def test_non_letter_first_character_untouched(self) -> None:
        assert canonicalize("1. fc köln") == "1._fc_köln"

    def test_decoded_space_is_normalised(self) -> None:
        """An entity that decodes to a space must not leave a leading underscore."""
        assert canonicalize("&#32;foo") == "Foo"

    def test_double_escaped_entity_fully_decoded(self) -> None:
        assert canonicalize("&amp;amp;") == "&"


@pytest.mark.parametrize(
    "text",
    [
        "",
        "Foo",
        "new_york city",
        "__Foo__",
        "&#32;foo",
        "&amp;amp;lt;",
        "_&#95;x_",
        "straße",
        "ßtraße",
        "&lt;b&gt; bold",
        "a|b",
        "   ",
        "ǆemal",
    ],
)
def test_canonicalize_is_idempotent(text: str) -> None:
    once = canonicalize(text)
    assert canonicalize(once) == once
