"""Unit tests for chapter manifest extraction."""

import json

import httpx
import pytest
import respx

from ellu_dl.client import ElluClient
from ellu_dl.models import Chapter
from ellu_dl.scraper.manifest import (
    build_reader_url,
    decode_manifest_line,
    extract_chapters,
    find_manifest_line,
    parse_manifest,
)
from ellu_dl.utils.exceptions import DecodeError, FetchError, ManifestNotFoundError


READER_URL = "https://example.com/reader?book_id=42"


class TestBuildReaderURL:
    """Test reader URL construction."""

    def test_live_reader(self):
        """Test the default reader endpoint."""
        assert build_reader_url("https://example.com", 42) == READER_URL

    def test_preview_reader(self):
        """Test the preview reader endpoint."""
        url = build_reader_url("https://example.com", 42, preview=True)
        assert url == "https://example.com/reader-preview?book_id=42"

    def test_trailing_slash_on_root(self):
        """Test a root with a trailing slash does not double the slash."""
        assert build_reader_url("https://example.com/", 7) == "https://example.com/reader?book_id=7"


class TestFindManifestLine:
    """Test locating the reader bootstrap line."""

    def test_finds_marker_line(self, reader_line, sample_manifest):
        """Test the marker line is returned among other script lines."""
        line = reader_line(sample_manifest)
        script = f"var a = 1;\n{line}\nconsole.log('ready');"
        assert find_manifest_line(script) == line

    def test_indented_marker_line(self, reader_line, sample_manifest):
        """Test leading indentation before the marker is tolerated."""
        line = reader_line(sample_manifest)
        assert find_manifest_line(f"    {line}\r\n") == line

    def test_last_marker_line_wins(self, reader_line):
        """Test the last matching line is used when there are several."""
        first = reader_line([{"number": 0, "Title": "Old"}])
        second = reader_line([{"number": 5, "Title": "New"}])
        assert find_manifest_line(f"{first}\n{second}") == second

    def test_only_newlines_split_lines(self, reader_line):
        """Test a line separator inside a chapter title stays on the line."""
        title = "A\u2028B\x85C"
        line = reader_line(json.dumps([{"number": 0, "Title": title}], ensure_ascii=False))
        assert "\u2028" in line
        assert find_manifest_line(f"var a = 1;\n{line}\n") == line
        assert decode_manifest_line(line)[0].title == title

    @pytest.mark.parametrize(
        "script",
        [
            "",
            "var reader = null;",
            'var r = new Reader(1, 2, 3, [{"number": 0}], 4, 5, 6);',
            "new Reader2(1, 2, 3, [], 4, 5, 6);",
        ],
    )
    def test_missing_marker_raises(self, script):
        """Test scripts without a line starting with the marker."""
        with pytest.raises(ManifestNotFoundError, match="chapters info not found"):
            find_manifest_line(script)


class TestDecodeManifestLine:
    """Test decoding the chapter array out of the call expression."""

    def test_recovers_chapters(self, reader_line, sample_manifest):
        """Test ids and titles survive decoding in order."""
        chapters = decode_manifest_line(reader_line(sample_manifest))

        assert [c.id for c in chapters] == [0, 1]
        assert [c.title for c in chapters] == ["Intro", "Ch. 1"]
        assert all(c.content == "" for c in chapters)

    def test_round_trip_with_default_json_separators(self, reader_line):
        """Test JSON written with ', ' separators is rebuilt exactly."""
        manifest = [
            {"number": 3, "Title": "Kolmas peatükk"},
            {"number": 1, "Title": "Esimene"},
            {"number": 10, "Title": "Lõpp"},
        ]
        chapters = decode_manifest_line(reader_line(json.dumps(manifest)))

        assert [(c.id, c.title) for c in chapters] == [
            (m["number"], m["Title"]) for m in manifest
        ]

    def test_non_contiguous_ids_are_kept(self, reader_line):
        """Test chapter numbers are not replaced by array positions."""
        chapters = decode_manifest_line(
            reader_line([{"number": 7, "Title": "A"}, {"number": 2, "Title": "B"}])
        )
        assert [c.id for c in chapters] == [7, 2]

    def test_extra_fields_are_ignored(self, reader_line):
        """Test unknown manifest fields do not break decoding."""
        chapters = decode_manifest_line(
            reader_line([{"number": 0, "Title": "A", "bytes": 1234, "locked": False}])
        )
        assert chapters == [Chapter(id=0, title="A")]

    def test_number_wins_over_id_field(self, reader_line):
        """Test the chapter id comes from "number", never a database "id"."""
        chapters = decode_manifest_line(
            reader_line([{"id": 9001, "number": 0, "Title": "Intro"}])
        )
        assert chapters[0].id == 0

    def test_id_field_alone_is_not_a_number(self, reader_line):
        """Test an entry with only an "id" field is rejected."""
        with pytest.raises(DecodeError):
            decode_manifest_line(reader_line([{"id": 3, "Title": "Kolm"}]))

    def test_empty_manifest(self, reader_line):
        """Test an empty chapter array decodes to no chapters."""
        assert decode_manifest_line(reader_line([])) == []

    def test_trailing_comma_raises_decode_error(self, reader_line):
        """Test malformed JSON (trailing comma) raises DecodeError."""
        line = reader_line('[{"number":0,"Title":"Intro"},{"number":1,"Title":"Ch. 1"},]')
        with pytest.raises(DecodeError, match="unmarshalling chapters info"):
            decode_manifest_line(line)

    def test_too_few_arguments_raises_decode_error(self):
        """Test a call with too few arguments raises DecodeError."""
        with pytest.raises(DecodeError):
            decode_manifest_line("new Reader(1, 2, 3);")

    def test_non_array_raises_decode_error(self, reader_line):
        """Test a JSON object instead of an array raises DecodeError."""
        with pytest.raises(DecodeError, match="expected an array"):
            decode_manifest_line(reader_line('{"number": 0}'))

    def test_missing_number_raises_decode_error(self, reader_line):
        """Test a chapter without a number raises DecodeError."""
        with pytest.raises(DecodeError):
            decode_manifest_line(reader_line([{"Title": "No number"}]))


class TestParseManifest:
    """Test the combined pure parser."""

    def test_no_marker_never_decode_error(self):
        """Test a missing marker is reported as such even with JSON around."""
        script = '[{"number": 0,, "Title": broken'
        with pytest.raises(ManifestNotFoundError):
            parse_manifest(script)

    def test_parse_script(self, reader_line, sample_manifest):
        """Test parsing a full script block."""
        script = f"var x = 1;\n{reader_line(sample_manifest)}\n"
        assert len(parse_manifest(script)) == 2


class TestExtractChapters:
    """Test fetching and decoding the reader page."""

    @respx.mock
    def test_extract_from_reader_page(self, config, reader_page_html):
        """Test chapters are extracted from a fetched reader page."""
        respx.get(READER_URL).mock(return_value=httpx.Response(200, text=reader_page_html))

        with ElluClient("example.com", config) as client:
            chapters = extract_chapters(client, READER_URL)

        assert [(c.id, c.title) for c in chapters] == [(0, "Intro"), (1, "Ch. 1")]

    @respx.mock
    def test_page_without_manifest(self, config, reader_page):
        """Test a reader page without the bootstrap line."""
        respx.get(READER_URL).mock(
            return_value=httpx.Response(200, text=reader_page("var nothing = true;"))
        )

        with ElluClient("example.com", config) as client, pytest.raises(ManifestNotFoundError):
            extract_chapters(client, READER_URL)

    @respx.mock
    def test_reader_page_fetch_failure(self, config):
        """Test HTTP failures surface as FetchError."""
        respx.get(READER_URL).mock(return_value=httpx.Response(500))

        with ElluClient("example.com", config) as client, pytest.raises(FetchError):
            extract_chapters(client, READER_URL)
