"""Property-based tests for command line input validation."""

import tempfile
from pathlib import Path

import pytest
from hypothesis import given
from hypothesis import strategies as st

from rss_podcast_download.options import (
    ValidationError,
    is_well_formed_uri,
    parse_count,
    validate_options,
)


class TestOptionsProperties:
    """Property-based tests for option validation."""

    @given(st.integers(min_value=-(10**12), max_value=10**12))
    def test_every_integer_string_parses_back(self, value):
        """
        Property: Count Parsing

        For any integer, its decimal representation is accepted as a count
        and parses back to the same value.
        """
        assert parse_count(str(value)) == value

    @given(st.text().filter(lambda x: not x.strip().lstrip("+-").isdigit()))
    def test_non_numeric_text_is_never_a_count(self, text):
        """
        Property: Count Rejection

        Any text that is not an optionally signed run of digits is rejected.
        """
        assert parse_count(text) is None

    @given(
        st.text(
            alphabet=st.characters(whitelist_categories=("Ll", "Nd")),
            min_size=1,
            max_size=20,
        ),
        st.text(
            alphabet=st.characters(whitelist_categories=("Ll", "Nd")),
            min_size=1,
            max_size=20,
        ),
    )
    def test_simple_http_urls_are_well_formed(self, host, name):
        """
        Property: Well-formed Feed URIs

        Plain http(s) URLs made of URI-safe characters are always accepted.
        """
        host = host.encode("ascii", "ignore").decode() or "example"
        name = name.encode("ascii", "ignore").decode() or "feed"

        assert is_well_formed_uri(f"https://{host}.com/{name}.xml")
        assert is_well_formed_uri(f"{name}.xml")

    @given(st.sampled_from([" ", "\t", "\n", "<", ">", '"', "{", "}", "|", "^"]))
    def test_uris_with_unescaped_special_characters_are_rejected(self, char):
        """
        Property: URI Character Set

        Characters outside the URI grammar must be percent-encoded.
        """
        assert not is_well_formed_uri(f"https://example.com/a{char}b.xml")

    @given(st.sampled_from(["::::", "abc", "/definitely/missing/dir"]))
    def test_each_invalid_field_fails_independently(self, bad_value):
        """
        Property: Independent Validation

        Each field is rejected on its own, with the other two inputs valid.
        """
        with tempfile.TemporaryDirectory() as tmp:
            inputs = {"rss_path": "feed.xml", "dest_path": tmp, "latest": "3"}
            field = {
                "::::": ("rss_path", "rssPath"),
                "abc": ("latest", "latestNumber"),
                "/definitely/missing/dir": ("dest_path", "destPath"),
            }[bad_value]
            inputs[field[0]] = bad_value

            with pytest.raises(ValidationError) as excinfo:
                validate_options(**inputs)

            assert excinfo.value.field == field[1]
            assert Path(tmp).is_dir()
