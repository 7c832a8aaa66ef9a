"""Unit tests for command line input validation."""

import logging
from pathlib import Path

import pytest

from rss_podcast_download.options import (
    ValidationError,
    is_well_formed_uri,
    parse_count,
    validate_options,
)


class TestUriValidationUnit:
    """Unit tests for is_well_formed_uri."""

    @pytest.mark.parametrize(
        "uri",
        [
            "https://example.com/feed.xml",
            "http://example.com:8080/podcast/rss?format=xml#top",
            "http://[::1]/feed",
            "file:///tmp/feed.xml",
            "feed.xml",
            "feeds/show%20one.xml",
            "/var/feeds/feed.xml",
            "//example.com/feed",
        ],
    )
    def test_accepts_well_formed_uris(self, uri):
        assert is_well_formed_uri(uri)

    @pytest.mark.parametrize(
        "uri",
        [
            "::::",
            "",
            "   ",
            None,
            "http://",
            "https://exa mple.com/feed",
            "feed%zz.xml",
            "1abc:feed.xml",
            "http://example.com:port/feed",
            "http://[::1/feed",
            "feed.xml#frag[1]",
        ],
    )
    def test_rejects_malformed_uris(self, uri):
        assert not is_well_formed_uri(uri)


class TestCountParsingUnit:
    """Unit tests for parse_count."""

    def test_parses_plain_and_signed_integers(self):
        assert parse_count("3") == 3
        assert parse_count(" 42 ") == 42
        assert parse_count("+7") == 7
        assert parse_count("-1") == -1
        assert parse_count("0") == 0

    def test_rejects_non_integers(self):
        for value in ["abc", "", "1.5", "1e3", "1_000", "٣", None]:
            assert parse_count(value) is None, f"Accepted {value!r}"


class TestValidateOptionsUnit:
    """Unit tests for validate_options."""

    def test_valid_inputs_produce_options(self, tmp_path):
        options = validate_options("https://example.com/feed", str(tmp_path), "5")

        assert options.feed_uri == "https://example.com/feed"
        assert options.destination == Path(tmp_path)
        assert options.count == 5
        assert options.sort_by_date is False

    def test_sort_by_date_is_carried_through(self, tmp_path):
        options = validate_options(
            "feed.xml", str(tmp_path), "1", sort_by_date=True
        )
        assert options.sort_by_date is True

    def test_invalid_uri_is_reported_by_field(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            with pytest.raises(ValidationError) as excinfo:
                validate_options("::::", str(tmp_path), "5")

        assert excinfo.value.field == "rssPath"
        assert "rssPath is invalid" in caplog.text

    def test_missing_destination_is_reported(self, tmp_path, caplog):
        missing = tmp_path / "does-not-exist"

        with caplog.at_level(logging.WARNING):
            with pytest.raises(ValidationError) as excinfo:
                validate_options("feed.xml", str(missing), "5")

        assert excinfo.value.field == "destPath"
        assert "destPath does not exist" in caplog.text

    def test_destination_must_be_a_directory(self, tmp_path):
        a_file = tmp_path / "feed.xml"
        a_file.write_text("<rss/>")

        with pytest.raises(ValidationError) as excinfo:
            validate_options("feed.xml", str(a_file), "5")

        assert excinfo.value.field == "destPath"

    def test_non_integer_count_is_reported(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            with pytest.raises(ValidationError) as excinfo:
                validate_options("feed.xml", str(tmp_path), "abc")

        assert excinfo.value.field == "latestNumber"
        assert "latestNumber is not an integer" in caplog.text

    def test_negative_count_is_rejected(self, tmp_path):
        with pytest.raises(ValidationError) as excinfo:
            validate_options("feed.xml", str(tmp_path), "-2")

        assert excinfo.value.field == "latestNumber"

    def test_first_failing_field_wins(self, tmp_path):
        with pytest.raises(ValidationError) as excinfo:
            validate_options("::::", str(tmp_path / "missing"), "abc")

        assert excinfo.value.field == "rssPath"

    def test_validation_error_is_a_value_error(self):
        assert issubclass(ValidationError, ValueError)
