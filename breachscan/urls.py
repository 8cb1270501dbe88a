"""URL decomposition: split a hostname-like string into domain and subdomain.

Leak files carry everything from full URLs to bare hosts to junk, so this
never raises. Anything that does not parse as a URL is kept verbatim as the
domain. The split is purely positional (last two labels); there is no
public-suffix awareness, so ``other.co.uk`` yields domain ``co.uk``.
"""

import re
from typing import Optional
from urllib.parse import urlsplit

from breachscan.models import UrlParts

_SCHEME_PREFIXES = ("http://", "https://")

# Forbidden host code points per the WHATWG URL standard (plus C0 controls,
# DEL and '%'), which a browser-grade parser would reject.
_FORBIDDEN_HOST_RE = re.compile(r"[\x00-\x20#%/:<>?@\[\\\]^|\x7f]")


def _hostname(raw: str) -> Optional[str]:
    """Return the lowercased hostname of ``raw``, or None if it does not parse."""
    candidate = raw if raw.startswith(_SCHEME_PREFIXES) else f"https://{raw}"
    try:
        parts = urlsplit(candidate)
        # Accessing .port validates it; a non-numeric or out-of-range port raises.
        parts.port  # pylint: disable=pointless-statement
    except ValueError:
        return None

    hostname = parts.hostname
    if not hostname:
        return None
    if parts.netloc.rpartition("@")[2].startswith("["):
        return f"[{hostname}]"
    if _FORBIDDEN_HOST_RE.search(hostname):
        return None
    return hostname


def split_url(raw: str) -> UrlParts:
    """Split ``raw`` into domain and optional subdomain.

    Examples:
        >>> split_url("sub.example.com")
        UrlParts(domain='example.com', subdomain='sub')
        >>> split_url("https://example.com/login")
        UrlParts(domain='example.com', subdomain=None)
        >>> split_url("not a url!!")
        UrlParts(domain='not a url!!', subdomain=None)
    """
    hostname = _hostname(raw)
    if hostname is None:
        return UrlParts(domain=raw)

    labels = hostname.split(".")
    if len(labels) <= 2:
        return UrlParts(domain=hostname)

    subdomain = ".".join(labels[:-2])
    return UrlParts(domain=".".join(labels[-2:]), subdomain=subdomain or None)
