"""URL normalization and utilities for page audits."""

from urllib.parse import urljoin, urlparse, urlunparse

# Link schemes that never point at a page
NON_PAGE_SCHEMES = ("javascript:", "mailto:", "tel:", "data:")


def normalize_url(url: str) -> str:
    """
    Normalize a user-supplied URL before fetching.

    Adds ``https://`` when no scheme is given and prefixes ``www.`` when the
    host is a bare two-label domain (``example.com``). Hosts with a subdomain
    (``blog.example.com``) are left alone.

    Args:
        url: The URL as typed by the user

    Returns:
        Normalized URL string (unchanged if it cannot be parsed)
    """
    normalized = url.strip()
    if not normalized.startswith(("http://", "https://")):
        normalized = "https://" + normalized

    try:
        parsed = urlparse(normalized)
    except ValueError:
        return normalized

    host = parsed.hostname or ""
    if host.count(".") == 1 and not host.startswith("www."):
        netloc = parsed.netloc.lower().replace(host, "www." + host, 1)
        path = parsed.path or "/"
        normalized = urlunparse(
            (parsed.scheme, netloc, path, parsed.params, parsed.query, parsed.fragment)
        )

    return normalized


def strip_www(host: str) -> str:
    """Lowercase a host and drop a leading ``www.``."""
    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    return host


def extract_domain(url: str) -> str:
    """Extract the domain (without ``www.`` and port) from a URL."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return url
    host = parsed.hostname or ""
    return strip_www(host) if host else url


def is_internal_link(href: str, page_url: str) -> bool:
    """
    Check whether a link points at the same site as the page.

    Relative links are internal. Absolute links are internal when their host,
    with a leading ``www.`` stripped, equals the page's host. Hrefs that
    cannot be parsed are never internal.
    """
    try:
        parsed = urlparse(href)
        if not parsed.scheme and not parsed.netloc:
            return True
        resolved = urlparse(urljoin(page_url, href))
        page_host = strip_www(urlparse(page_url).hostname or "")
        link_host = strip_www(resolved.hostname or "")
    except ValueError:
        return False
    return bool(link_host) and link_host == page_host


def is_countable_link(href: str | None) -> bool:
    """Check if an href is a real navigable link (not a fragment, script or malformed URL)."""
    if not href:
        return False
    href = href.strip()
    if not href or href.startswith("#"):
        return False
    if href.lower().startswith(NON_PAGE_SCHEMES):
        return False
    try:
        urlparse(href)
    except ValueError:
        return False
    return True
