"""Canonical page names: the node keys shared by titles and links."""

from __future__ import annotations

import html


def _canonical_pass(text: str) -> str:
    # Space and underscore are equivalent separators in page names.
    text = text.replace(" ", "_").strip("_")
    text = html.unescape(text)
    if text and text[0].islower():
        text = text[0].upper() + text[1:]
    return text


def canonicalize(text: str) -> str:
    """Return the canonical form of a page title or link target.

    Spaces become underscores, surrounding underscores are trimmed, HTML
    entities are decoded and a lowercase first letter is uppercased.

    Entity decoding can expose characters the earlier steps would have
    touched (``&#32;foo`` decodes to `` foo``), so the steps are repeated
    until the result is stable.  This makes the function idempotent:
    ``canonicalize(canonicalize(s)) == canonicalize(s)``.

    Examples::

        >>> canonicalize("new_york city")
        'New_york_city'
        >>> canonicalize("__Foo__")
        'Foo'
    """
    result = _canonical_pass(text)
    while True:
        again = _canonical_pass(result)
        if again == result:
            return result
        result = again
