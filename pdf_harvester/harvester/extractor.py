"""
Document link extractor for rendered HTML.

Uses BeautifulSoup for HTML parsing to find every anchor that points at a
document.
"""

from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, Tag

from ..utils.log import get_logger
from ..utils.constants import DEFAULT_DOCUMENT_MARKER


class LinkExtractor:
    """
    Extracts document links from HTML content.

    An anchor qualifies when its href contains the marker anywhere,
    compared case-insensitively, so "Guide.PDF" and "file.pdf?v=2"
    both match the default ".pdf" marker.
    """

    def __init__(self, marker: str = DEFAULT_DOCUMENT_MARKER):
        """
        Initialize the link extractor.

        Args:
            marker: Substring that identifies a document link
        """
        self.marker = marker.lower()
        self.last_error: Optional[str] = None
        self.logger = get_logger("extractor")

    def extract(self, html: str) -> List[str]:
        """
        Extract all document links from HTML content.

        Args:
            html: Rendered HTML to scan

        Returns:
            Matching href values in document order, duplicates included
        """
        links = list(self.iter_links(html))
        self.logger.info(f"Found {len(links)} document links")
        return links

    def iter_links(self, html: str) -> Iterator[str]:
        """
        Lazily yield matching href values in document order.

        Each call parses the markup again and returns a fresh iterator.
        A parse failure is kept in ``last_error`` until the next call.

        Args:
            html: Rendered HTML to scan

        Returns:
            Iterator over matching href values; empty if parsing fails
        """
        self.last_error = None
        soup = self._parse(html)
        if soup is None:
            return iter(())
        return self._walk(soup)

    def _parse(self, html: str) -> Optional[BeautifulSoup]:
        """Parse markup with lxml, falling back to html.parser."""
        if not isinstance(html, str):
            self.last_error = f"cannot parse markup of type {type(html).__name__}"
            self.logger.error(f"Cannot parse markup of type {type(html).__name__}")
            return None

        try:
            return BeautifulSoup(html, 'lxml')
        except Exception as e:
            self.logger.debug(f"lxml failed to parse markup: {e}")

        try:
            return BeautifulSoup(html, 'html.parser')
        except Exception as e:
            self.last_error = f"failed to parse markup: {e}"
            self.logger.error(f"Failed to parse markup: {e}")
            return None

    def _walk(self, root: Tag) -> Iterator[str]:
        """Depth-first walk with an explicit stack, children in document order."""
        stack = [root]
        while stack:
            node = stack.pop()

            if node.name == 'a' and node.has_attr('href'):
                link = self._match(node.get('href'))
                if link is not None:
                    yield link

            children = [child for child in node.children if isinstance(child, Tag)]
            stack.extend(reversed(children))

    def _match(self, href: Optional[str]) -> Optional[str]:
        """Return the stripped href if it contains the marker."""
        link = (href or "").strip()
        if self.marker in link.lower():
            return link
        return None
