"""Tests for the line parser, URL decomposer and secret digest.

This module verifies:
- Delimiter choice: comma when present, otherwise semicolon, never both
- Field trimming, field-count and empty-field rejections
- Blank lines are skipped without an error
- Domain/subdomain split by last two labels, with verbatim fallback for junk
- SHA-256 digests are deterministic, lowercase hex and distinct per secret
"""

import hashlib

import pytest

from breachscan.digest import DIGEST_HEX_LENGTH, digest_secret
from breachscan.exceptions import LineFormatError
from breachscan.models import UrlParts
from breachscan.parsing import parse_line, split_fields
from breachscan.urls import split_url


class TestSplitFields:
    """Delimiter selection and trimming."""

    def test_comma_wins_when_present(self):
        """A line with a comma is split only on commas, even if it has semicolons."""
        assert split_fields("a;b,c;d,e") == ["a;b", "c;d", "e"]

    def test_semicolon_used_without_comma(self):
        """Semicolons delimit when the line has no comma."""
        assert split_fields("site.com;bob;pw") == ["site.com", "bob", "pw"]

    def test_fields_are_trimmed(self):
        """Whitespace around each field is removed."""
        assert split_fields("  site.com , alice ,\thunter2 ") == ["site.com", "alice", "hunter2"]


class TestParseLine:
    """Accept and reject rules of parse_line."""

    def test_parses_comma_line(self):
        """A well-formed comma line becomes a record with hashed secret."""
        record = parse_line("site.com,alice,hunter2", "dump.txt")

        assert record is not None
        assert record.username == "alice"
        assert record.domain == "site.com"
        assert record.subdomain is None
        assert record.password_hash == hashlib.sha256(b"hunter2").hexdigest()
        assert record.source_file == "dump.txt"

    def test_parses_semicolon_line_with_subdomain(self):
        """Semicolon lines parse the same way; extra labels become the subdomain."""
        record = parse_line("other.co.uk;bob;pw123", "dump.txt")

        assert record is not None
        assert record.username == "bob"
        assert record.domain == "co.uk"
        assert record.subdomain == "other"

    def test_username_is_not_normalized(self):
        """Usernames are stored exactly as they appear (after trimming)."""
        record = parse_line("site.com, Alice@Example.COM ,x", "dump.txt")
        assert record is not None
        assert record.username == "Alice@Example.COM"

    @pytest.mark.parametrize("line", ["", "   ", "\t"])
    def test_blank_line_returns_none(self, line):
        """Blank and whitespace-only lines are skipped, not rejected."""
        assert parse_line(line, "dump.txt") is None

    @pytest.mark.parametrize(
        "line, got",
        [
            ("bad,line", 2),
            ("a,b,c,d", 4),
            ("just-one-field", 1),
            ("a;b;c;d;e", 5),
        ],
    )
    def test_wrong_field_count_rejected(self, line, got):
        """Anything other than three fields is a format error naming the count."""
        with pytest.raises(LineFormatError) as excinfo:
            parse_line(line, "dump.txt")
        assert str(excinfo.value) == f"Invalid line format: expected 3 parts, got {got}"

    @pytest.mark.parametrize("line", [",alice,pw", "site.com,,pw", "site.com,alice,", "site.com; ;pw"])
    def test_empty_field_rejected(self, line):
        """Any empty field after trimming is a format error."""
        with pytest.raises(LineFormatError, match="Missing required fields"):
            parse_line(line, "dump.txt")

    def test_error_carries_line_number(self):
        """The line number is attached to the error for logging."""
        with pytest.raises(LineFormatError) as excinfo:
            parse_line("bad,line", "dump.txt", line_number=7)
        assert excinfo.value.line_number == 7
        assert str(excinfo.value).startswith("line 7: ")

    def test_format_error_is_a_value_error(self):
        """Callers that only know ValueError still catch format errors."""
        with pytest.raises(ValueError):
            parse_line("bad,line", "dump.txt")


class TestSplitUrl:
    """Domain and subdomain extraction."""

    def test_subdomain_split(self):
        """sub.example.com splits into domain example.com and subdomain sub."""
        assert split_url("sub.example.com") == UrlParts(domain="example.com", subdomain="sub")

    def test_two_label_host_has_no_subdomain(self):
        """A bare registrable domain has no subdomain."""
        assert split_url("example.com") == UrlParts(domain="example.com", subdomain=None)

    def test_single_label_host(self):
        """A single-label host is its own domain."""
        assert split_url("localhost") == UrlParts(domain="localhost")

    def test_junk_falls_back_verbatim(self):
        """Unparseable input is kept verbatim as the domain, without raising."""
        assert split_url("not a url!!") == UrlParts(domain="not a url!!", subdomain=None)

    def test_fallback_uses_unmodified_input(self):
        """The fallback domain does not carry the https:// prefix added for parsing."""
        parts = split_url("exa mple.com/login")
        assert parts.domain == "exa mple.com/login"
        assert parts.subdomain is None

    def test_full_url_with_path_and_port(self):
        """Scheme, port, path and query are ignored; only the hostname is split."""
        assert split_url("http://login.mail.example.org:8080/a?b=c") == UrlParts(
            domain="example.org", subdomain="login.mail"
        )

    def test_hostname_lowercased(self):
        """Hostnames are case-insensitive and come back lowercased."""
        assert split_url("https://WWW.Example.COM") == UrlParts(domain="example.com", subdomain="www")

    def test_credentials_in_url_are_ignored(self):
        """Userinfo before the host does not leak into the domain."""
        assert split_url("https://user:pw@shop.example.com/") == UrlParts(domain="example.com", subdomain="shop")

    def test_invalid_port_falls_back(self):
        """A non-numeric port makes the URL invalid, so the input is kept verbatim."""
        assert split_url("example.com:abc") == UrlParts(domain="example.com:abc")

    def test_empty_host_falls_back(self):
        """A scheme with no host falls back to the raw input."""
        assert split_url("https://") == UrlParts(domain="https://")

    def test_positional_split_without_public_suffix_awareness(self):
        """Multi-part public suffixes are not special-cased."""
        assert split_url("other.co.uk") == UrlParts(domain="co.uk", subdomain="other")

    def test_ipv6_literal_kept_whole(self):
        """Bracketed IPv6 hosts are a single label."""
        assert split_url("http://[::1]:8080/") == UrlParts(domain="[::1]")


class TestDigestSecret:
    """SHA-256 secret digests."""

    def test_deterministic(self):
        """The same secret always digests the same way."""
        assert digest_secret("hunter2") == digest_secret("hunter2")

    def test_distinct_secrets_differ(self):
        """Different secrets give different digests."""
        assert digest_secret("hunter2") != digest_secret("hunter3")

    def test_lowercase_hex_of_fixed_length(self):
        """Digests are 64 lowercase hex characters."""
        digest = digest_secret("pässwörd")
        assert len(digest) == DIGEST_HEX_LENGTH
        assert digest == digest.lower()
        int(digest, 16)

    def test_matches_sha256_of_utf8(self):
        """The digest is plain unsalted SHA-256 over UTF-8 bytes."""
        assert digest_secret("pässwörd") == hashlib.sha256("pässwörd".encode("utf-8")).hexdigest()
