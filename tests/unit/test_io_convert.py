"""Unit tests for citation format conversion."""

import json
from pathlib import Path

import pytest

from refviewers.core.errors import FormatError
from refviewers.io.bibtex import parse_bibtex, parse_name as parse_bibtex_name
from refviewers.io.convert import (
    BIBTEX,
    CSL_JSON,
    RIS,
    aread_citation_file,
    convert,
    detect_format,
)
from refviewers.io.ris import parse_name as parse_ris_name, parse_ris


CSL_SAMPLE = [
    {
        "id": "doe2020",
        "type": "article-journal",
        "title": "Reviewer <i>selection</i>",
        "URL": "https://example.org/doe2020",
        "author": [{"given": "Jane", "family": "Doe"}, {"given": "Bob", "family": "Lee"}],
    },
    {"id": "anon", "title": "Anonymous note"},
]

BIBTEX_SAMPLE = """
@article{doe2020,
  author = {Doe, Jane and Bob Lee and {World Health Organization}},
  title = {Picking {Reviewers} Well},
  journal = {Journal of Peer Review},
  year = {2020},
  doi = {10.1000/abc}
}

@book{lee2019,
  author = {Lee, Bob},
  title = {Citations},
  publisher = {Example Press},
  year = {2019},
  url = {https://example.org/lee2019}
}
"""

RIS_SAMPLE = """TY  - JOUR
AU  - Doe, Jane
AU  - Lee, Bob
TI  - Reviewer selection
JO  - Journal of Peer Review
PY  - 2021///
DO  - 10.1000/xyz
ER  -

TY  - BOOK
A1  - Kim, Ann
T1  - Citations
UR  - https://example.org/kim
ER  -
"""


class TestDetectFormat:
    """Tests for format detection."""

    def test_sniff_json(self) -> None:
        """Test JSON content is detected from its first character."""
        assert detect_format(json.dumps(CSL_SAMPLE)) == CSL_JSON

    def test_sniff_bibtex(self) -> None:
        """Test BibTeX content is detected from an entry header."""
        assert detect_format(BIBTEX_SAMPLE) == BIBTEX

    def test_sniff_ris(self) -> None:
        """Test RIS content is detected from a TY tag."""
        assert detect_format(RIS_SAMPLE) == RIS

    def test_content_type_hint(self) -> None:
        """Test a known content type wins over sniffing."""
        assert detect_format("whatever", content_type="application/x-bibtex") == BIBTEX

    def test_extension_hint(self) -> None:
        """Test the file extension is used when the content type is generic."""
        assert detect_format("whatever", content_type="text/plain", filename="refs.RIS") == RIS

    def test_unknown(self) -> None:
        """Test plain prose is not recognized."""
        assert detect_format("just some notes") is None


class TestConvertCslJson:
    """Tests for CSL-JSON input."""

    def test_list(self) -> None:
        """Test a list of items passes through."""
        works = convert(json.dumps(CSL_SAMPLE))
        assert works == CSL_SAMPLE

    def test_single_item(self) -> None:
        """Test a single item object is wrapped in a list."""
        works = convert(json.dumps(CSL_SAMPLE[0]))
        assert works == [CSL_SAMPLE[0]]

    def test_bytes_with_bom(self) -> None:
        """Test UTF-8 bytes with a byte order mark decode."""
        raw = b"\xef\xbb\xbf" + json.dumps(CSL_SAMPLE).encode("utf-8")
        assert len(convert(raw)) == 2

    def test_non_mapping_items_dropped(self) -> None:
        """Test list members that are not objects are dropped."""
        assert convert('[1, "two", {"title": "Three"}]') == [{"title": "Three"}]

    def test_invalid_json(self) -> None:
        """Test malformed JSON is a format error."""
        with pytest.raises(FormatError):
            convert("[{not json", content_type="application/json")

    def test_scalar_json(self) -> None:
        """Test JSON that is not an object or list is rejected."""
        with pytest.raises(FormatError):
            convert("42", filename="refs.json")


class TestConvertBibtex:
    """Tests for BibTeX input."""

    def test_entries(self) -> None:
        """Test entries map to CSL works."""
        works = convert(BIBTEX_SAMPLE, filename="refs.bib")

        assert len(works) == 2
        doe = works[0]
        assert doe["id"] == "doe2020"
        assert doe["type"] == "article-journal"
        assert doe["title"] == "Picking Reviewers Well"
        assert doe["container-title"] == "Journal of Peer Review"
        assert doe["URL"] == "https://doi.org/10.1000/abc"
        assert doe["issued"] == {"date-parts": [[2020]]}
        assert works[1]["type"] == "book"
        assert works[1]["URL"] == "https://example.org/lee2019"

    def test_authors(self) -> None:
        """Test both name orders and braced corporate names."""
        doe = parse_bibtex(BIBTEX_SAMPLE)[0]
        assert doe["author"] == [
            {"given": "Jane", "family": "Doe"},
            {"given": "Bob", "family": "Lee"},
            {"family": "World Health Organization"},
        ]

    def test_von_particle(self) -> None:
        """Test a lowercase particle joins the family name."""
        assert parse_bibtex_name("van der Berg, Anna") == {"given": "Anna", "family": "van der Berg"}

    def test_entry_without_author(self) -> None:
        """Test entries without authors have no author key."""
        works = parse_bibtex("@misc{x, title = {Untitled}}")
        assert "author" not in works[0]


class TestConvertRis:
    """Tests for RIS input."""

    def test_records(self) -> None:
        """Test records map to CSL works."""
        works = convert(RIS_SAMPLE.encode("utf-8"), filename="refs.ris")

        assert len(works) == 2
        first = works[0]
        assert first["type"] == "article-journal"
        assert first["title"] == "Reviewer selection"
        assert first["author"] == [{"given": "Jane", "family": "Doe"}, {"given": "Bob", "family": "Lee"}]
        assert first["container-title"] == "Journal of Peer Review"
        assert first["URL"] == "https://doi.org/10.1000/xyz"
        assert first["issued"] == {"date-parts": [[2021]]}
        assert works[1]["author"] == [{"given": "Ann", "family": "Kim"}]
        assert works[1]["URL"] == "https://example.org/kim"

    def test_name_forms(self) -> None:
        """Test RIS author name variants."""
        assert parse_ris_name("Doe, Jane A.") == {"given": "Jane A.", "family": "Doe"}
        assert parse_ris_name("Doe, Jane, Jr.") == {"given": "Jane", "family": "Doe", "suffix": "Jr."}
        assert parse_ris_name("Jane Doe") == {"given": "Jane", "family": "Doe"}
        assert parse_ris_name("Consortium") == {"family": "Consortium"}

    def test_missing_final_er(self) -> None:
        """Test a trailing record without ER is kept."""
        works = parse_ris("TY  - JOUR\nTI  - Open ended\n")
        assert [w["title"] for w in works] == ["Open ended"]


class TestConvertErrors:
    """Tests for rejected input."""

    def test_unrecognized_text(self) -> None:
        """Test prose is rejected with the reported content type."""
        with pytest.raises(FormatError) as exc_info:
            convert(b"just some notes", content_type="text/plain")
        assert exc_info.value.content_type == "text/plain"
        assert str(exc_info.value) == "Invalid file type! You provided text/plain, which is not supported."

    def test_empty_input(self) -> None:
        """Test blank input is rejected."""
        with pytest.raises(FormatError):
            convert("   \n")

    def test_binary_input(self) -> None:
        """Test undecodable bytes are rejected."""
        with pytest.raises(FormatError) as exc_info:
            convert(b"\x89PNG\r\n\x1a\n\xff\xfe", filename="figure.png")
        assert exc_info.value.content_type == "image/png"

    def test_prose_with_citation_extension(self) -> None:
        """Test a .bib name does not turn arbitrary text into an empty result."""
        with pytest.raises(FormatError) as exc_info:
            convert(b"plain notes, not citations", filename="notes.bib")
        assert str(exc_info.value).startswith("Invalid file type!")

    def test_content_type_contradicts_content(self) -> None:
        """Test BibTeX text labelled as RIS is refused instead of yielding no works."""
        with pytest.raises(FormatError) as exc_info:
            convert(BIBTEX_SAMPLE, content_type="application/x-research-info-systems")
        assert exc_info.value.content_type == "application/x-research-info-systems"

    def test_empty_csl_list_is_valid(self) -> None:
        """Test an export with no items is an empty work list, not an error."""
        assert convert("[]", filename="refs.json") == []


class TestReadCitationFile:
    """Tests for the async file boundary."""

    @pytest.mark.asyncio
    async def test_reads_file(self, tmp_path: Path) -> None:
        """Test a file on disk converts off the event loop."""
        path = tmp_path / "refs.ris"
        path.write_text(RIS_SAMPLE, encoding="utf-8")

        works = await aread_citation_file(path)

        assert len(works) == 2

    @pytest.mark.asyncio
    async def test_rejects_file(self, tmp_path: Path) -> None:
        """Test conversion failures propagate."""
        path = tmp_path / "notes.txt"
        path.write_text("nothing to see", encoding="utf-8")
        with pytest.raises(FormatError):
            await aread_citation_file(path)
