"""Secret digest.

Unsalted: identical secrets produce identical digests, so exposures can be
counted across files. The digest keeps plaintext out of the database and is
not a password-storage control.
"""

import hashlib

DIGEST_HEX_LENGTH = 64


def digest_secret(secret: str) -> str:
    """Return the lowercase SHA-256 hex digest of ``secret`` (UTF-8 encoded)."""
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()
