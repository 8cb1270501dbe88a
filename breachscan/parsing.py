"""Line parser for credential dump files.

One record per line, three fields in fixed order::

    url,username,secret
    url;username;secret

The delimiter is a comma if the line contains one, otherwise a semicolon.
There is no quoting or escaping; a field that contains the delimiter
misparses and the line is rejected for its field count.
"""

from typing import Optional

from breachscan.digest import digest_secret
from breachscan.exceptions import LineFormatError
from breachscan.models import BreachRecord
from breachscan.urls import split_url

EXPECTED_FIELDS = 3


def split_fields(line: str) -> list[str]:
    """Split a line on its delimiter and trim each field."""
    delimiter = "," if "," in line else ";"
    return [part.strip() for part in line.split(delimiter)]


def parse_line(line: str, source_file: str, line_number: Optional[int] = None) -> Optional[BreachRecord]:
    """Parse one raw line into a BreachRecord.

    Args:
        line: The raw line, without its line terminator.
        source_file: Filename of the upload, stored on the record.
        line_number: 1-based position in the file, used only in error messages.

    Returns:
        The parsed record, or None for a blank line.

    Raises:
        LineFormatError: If the line does not have exactly three non-empty fields.
    """
    if not line.strip():
        return None

    fields = split_fields(line)
    if len(fields) != EXPECTED_FIELDS:
        raise LineFormatError(
            f"Invalid line format: expected {EXPECTED_FIELDS} parts, got {len(fields)}",
            line_number=line_number,
        )

    url, username, secret = fields
    if not url or not username or not secret:
        raise LineFormatError("Missing required fields", line_number=line_number)

    parts = split_url(url)
    return BreachRecord(
        username=username,
        domain=parts.domain,
        subdomain=parts.subdomain,
        password_hash=digest_secret(secret),
        source_file=source_file,
    )
