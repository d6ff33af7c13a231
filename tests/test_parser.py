"""Tests for the streaming dump reader.

Dumps are small in-memory documents in the MediaWiki export schema, fed to
the reader through ``io.BytesIO``.
"""

from __future__ import annotations

import io

import pytest

from dumpprep.dump import DumpParser, Page, ParserState, SiteInfo, iter_records
from dumpprep.errors import DumpFormatError

_HEADER = '<mediawiki xmlns="http://www.mediawiki.org/xml/export-0.10/" xml:lang="de">'

_SITEINFO = """\
  <siteinfo>
    <sitename>Wikipedia</sitename>
    <dbname>dewiki</dbname>
    <generator>MediaWiki 1.41.0-wmf.1</generator>
    <case>first-letter</case>
    <namespaces>
      <namespace key="-1" case="first-letter">Spezial</namespace>
      <namespace key="0" case="first-letter" />
      <namespace key="1" case="first-letter">Diskussion</namespace>
      <namespace key="6" case="first-letter">Datei</namespace>
    </namespaces>
  </siteinfo>
"""

_PAGE = """\
  <page>
    <title>Alan Smithee</title>
    <ns>0</ns>
    <id>1</id>
    <revision>
      <id>232931225</id>
      <parentid>232930000</parentid>
      <contributor>
        <username>Somebody</username>
        <id>555</id>
      </contributor>
      <text bytes="64" xml:space="preserve">'''Alan Smithee''' ist ein [[Pseudonym]].
Zweite	Zeile</text>
    </revision>
  </page>
"""


def _dump(*parts: str, close: bool = True) -> io.BytesIO:
    body = _HEADER + "\n" + "".join(parts) + ("</mediawiki>\n" if close else "")
    return io.BytesIO(body.encode("utf-8"))


def _page_xml(page_id: str = "2", ns: str = "0", title: str = "T", text: str = "x") -> str:
    return (
        f"<page><title>{title}</title><ns>{ns}</ns><id>{page_id}</id>"
        f"<revision><id>99</id><text>{text}</text></revision></page>\n"
    )


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------

class TestSiteInfo:
    def test_parsed_before_pages(self) -> None:
        records = list(iter_records(_dump(_SITEINFO, _PAGE)))
        assert isinstance(records[0], SiteInfo)
        assert isinstance(records[1], Page)

    def test_fields(self) -> None:
        site = next(iter_records(_dump(_SITEINFO)))
        assert site.dbname == "dewiki"
        assert site.generator == "MediaWiki 1.41.0-wmf.1"

    def test_namespace_table(self) -> None:
        site = next(iter_records(_dump(_SITEINFO)))
        assert site.namespaces == {-1: "Spezial", 0: "", 1: "Diskussion", 6: "Datei"}


class TestPages:
    def test_page_fields(self) -> None:
        (page,) = [r for r in iter_records(_dump(_SITEINFO, _PAGE)) if isinstance(r, Page)]
        assert page.title == "Alan Smithee"
        assert page.namespace == 0

    def test_revision_and_contributor_ids_ignored(self) -> None:
        (page,) = list(iter_records(_dump(_PAGE)))
        assert page.id == 1

    def test_text_flattened_to_one_line(self) -> None:
        (page,) = list(iter_records(_dump(_PAGE)))
        assert page.text == "'''Alan Smithee''' ist ein [[Pseudonym]]. Zweite Zeile"
        assert "\n" not in page.text and "\t" not in page.text

    def test_entities_in_xml_decoded_once(self) -> None:
        (page,) = list(iter_records(_dump(_page_xml(text="[[AT&amp;amp;T]] &lt;br&gt;"))))
        assert page.text == "[[AT&amp;T]] <br>"

    def test_empty_text_element(self) -> None:
        xml = (
            "<page><title>Empty</title><ns>0</ns><id>3</id>"
            '<revision><id>1</id><text bytes="0" /></revision></page>'
        )
        (page,) = list(iter_records(_dump(xml)))
        assert page.text == ""

    def test_multiple_pages_in_order(self) -> None:
        pages = list(iter_records(_dump(_page_xml("5"), _page_xml("3", ns="1"), _page_xml("9"))))
        assert [(p.id, p.namespace) for p in pages] == [(5, 0), (3, 1), (9, 0)]

    def test_pages_are_frozen(self) -> None:
        (page,) = list(iter_records(_dump(_PAGE)))
        with pytest.raises(AttributeError):
            page.text = "changed"  # type: ignore[misc]

    def test_schema_without_xml_namespace(self) -> None:
        stream = io.BytesIO(("<mediawiki>" + _page_xml("4") + "</mediawiki>").encode())
        (page,) = list(iter_records(stream))
        assert page.id == 4


class TestParserState:
    def test_returns_to_idle(self) -> None:
        parser = DumpParser(_dump(_SITEINFO, _PAGE))
        assert parser.state is ParserState.IDLE
        list(parser)
        assert parser.state is ParserState.IDLE

    def test_states_while_reading_a_page(self) -> None:
        parser = DumpParser(_dump(_PAGE))
        seen = []
        original = parser._on_end

        def spy(name, elem):
            seen.append((name, parser.state))
            return original(name, elem)

        parser._on_end = spy  # type: ignore[method-assign]
        list(parser)

        assert ("title", ParserState.IN_PAGE) in seen
        assert ("id", ParserState.IN_REVISION) in seen
        assert ("text", ParserState.IN_REVISION) in seen
        assert ("page", ParserState.IN_PAGE) in seen


# ---------------------------------------------------------------------------
# Malformed input
# ---------------------------------------------------------------------------

class TestMalformed:
    def test_truncated_document(self) -> None:
        with pytest.raises(DumpFormatError):
            list(iter_records(_dump(_SITEINFO, _PAGE, close=False)))

    def test_syntax_error(self) -> None:
        with pytest.raises(DumpFormatError, match="Malformed"):
            list(iter_records(_dump("<page><title>x</titel></page>")))

    def test_page_without_id(self) -> None:
        xml = "<page><title>No id</title><ns>0</ns><revision><id>7</id></revision></page>"
        with pytest.raises(DumpFormatError, match="missing"):
            list(iter_records(_dump(xml)))

    def test_non_integer_namespace(self) -> None:
        with pytest.raises(DumpFormatError, match="integer"):
            list(iter_records(_dump(_page_xml(ns="main"))))

    def test_namespace_without_key(self) -> None:
        xml = "<siteinfo><namespaces><namespace>Broken</namespace></namespaces></siteinfo>"
        with pytest.raises(DumpFormatError):
            list(iter_records(_dump(xml)))

    def test_nested_page(self) -> None:
        xml = "<page><title>a</title><page><title>b</title></page></page>"
        with pytest.raises(DumpFormatError, match="Nested"):
            list(iter_records(_dump(xml)))

    def test_records_before_error_are_yielded(self) -> None:
        records = iter_records(_dump(_page_xml("1"), "<page><title>oops</page>"))
        assert next(records).id == 1
        with pytest.raises(DumpFormatError):
            next(records)
