"""
Path and URL utilities for the PDF harvester.

Provides seed URL handling, link resolution, filename sanitization,
and directory management.
"""

import os
import posixpath
import re
from typing import Iterable, List, Optional
from urllib.parse import urljoin, urlparse, urlunparse

from .constants import DEFAULT_FILENAME_STEM, REDUNDANT_EXTENSION_TOKENS


NON_ALNUM_PATTERN = re.compile(r'[^a-z0-9]+')
UNDERSCORE_RUN_PATTERN = re.compile(r'_+')

# Schemes that never point at a downloadable document
SKIPPED_LINK_PREFIXES = ('javascript:', 'data:', 'mailto:', 'tel:', '#')


def dedupe_urls(urls: Iterable[str]) -> List[str]:
    """
    Remove duplicate URLs, keeping the first occurrence of each.

    Args:
        urls: URLs in their configured order

    Returns:
        List of unique URLs in first-occurrence order
    """
    seen = set()
    unique = []
    for url in urls:
        if url not in seen:
            seen.add(url)
            unique.append(url)
    return unique


def is_valid_url(url: str) -> bool:
    """
    Check that a URL is an absolute http(s) URL with a host.

    Args:
        url: URL string to check

    Returns:
        True if valid, False otherwise
    """
    if not url or not isinstance(url, str):
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def resolve_link(href: str, base_url: Optional[str] = None) -> str:
    """
    Resolve an extracted href into an absolute URL suitable for fetching.

    The query string is kept, the fragment is dropped.

    Args:
        href: Raw href value from the rendered page
        base_url: URL of the page the href was found on

    Returns:
        Absolute URL, or an empty string when the href cannot be fetched
    """
    if not href:
        return ""

    href = href.strip()
    if not href or href.lower().startswith(SKIPPED_LINK_PREFIXES):
        return ""

    # Handle protocol-relative URLs
    if href.startswith('//'):
        scheme = urlparse(base_url).scheme if base_url else 'https'
        href = f"{scheme or 'https'}:{href}"

    if base_url and not href.lower().startswith(('http://', 'https://')):
        href = urljoin(base_url, href)

    parsed = urlparse(href)
    if parsed.scheme.lower() not in ('http', 'https') or not parsed.netloc:
        return ""

    return urlunparse((
        parsed.scheme.lower(),
        parsed.netloc.lower(),
        parsed.path,
        parsed.params,
        parsed.query,
        ''  # Remove fragment
    ))


def get_file_extension(name: str) -> str:
    """
    Get the extension of a file name, including the leading dot.

    Args:
        name: File name (a single path segment)

    Returns:
        Text from the last dot onward, or an empty string
    """
    index = name.rfind('.')
    if index < 0:
        return ""
    return name[index:]


def _strip_extension_echoes(name: str) -> str:
    """Remove extension echo tokens until none are left."""
    previous = None
    while previous != name:
        previous = name
        for token in REDUNDANT_EXTENSION_TOKENS:
            name = name.replace(token, '')
    return name


def sanitize_filename(url: str) -> str:
    """
    Convert a document URL into a deterministic, filesystem-safe file name.

    The name is built from the last path segment of the lower-cased URL
    without its query string. Every run of characters outside [a-z0-9]
    becomes a single underscore, edge underscores are trimmed, extension
    echoes such as "_pdf" are removed and the original extension is
    appended again.

    Two different URLs can map to the same name; the downloader treats an
    existing file as already handled.

    Args:
        url: Document URL (absolute or relative)

    Returns:
        Safe file name, e.g. "radio_guide.pdf"
    """
    lowered = url.lower()
    lowered = lowered.split('?', 1)[0].split('#', 1)[0]

    name = posixpath.basename(lowered.rstrip('/'))

    extension = get_file_extension(name)
    if extension:
        extension = '.' + NON_ALNUM_PATTERN.sub('', extension[1:])
        if extension == '.':
            extension = ""

    safe = NON_ALNUM_PATTERN.sub('_', name)
    safe = UNDERSCORE_RUN_PATTERN.sub('_', safe).strip('_')

    safe = _strip_extension_echoes(safe).strip('_')

    if not safe:
        safe = DEFAULT_FILENAME_STEM

    # The stem never holds a dot, so the extension is always re-appended
    return safe + extension


def ensure_dir(path: str) -> None:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists
    """
    os.makedirs(path, exist_ok=True)
