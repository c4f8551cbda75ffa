"""
Main harvesting pipeline.

Orchestrates the run: page rendering, document link extraction and
document downloading, one seed page at a time.
"""

import os
import time
from typing import Iterable, List, Optional

from .renderer import PageRenderer
from .extractor import LinkExtractor
from .downloader import DocumentDownloader
from .models import DownloadStatus, FailureKind, HarvestResult
from ..utils.log import get_logger
from ..utils.paths import dedupe_urls, ensure_dir, is_valid_url, resolve_link
from ..utils.constants import (
    DEFAULT_DOCUMENT_MARKER,
    DEFAULT_DOWNLOAD_TIMEOUT,
    DEFAULT_SESSION_TIMEOUT,
    DEFAULT_SETTLE_SECONDS,
)


class HarvestPipeline:
    """
    Main harvesting class.

    Coordinates the renderer, extractor and downloader over a seed list.
    Page and link failures are logged and counted, never raised.
    """

    def __init__(
        self,
        urls: Iterable[str],
        output_dir: str,
        settle_seconds: float = DEFAULT_SETTLE_SECONDS,
        session_timeout: float = DEFAULT_SESSION_TIMEOUT,
        download_timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
        marker: str = DEFAULT_DOCUMENT_MARKER,
        headless: bool = True,
        renderer: Optional[PageRenderer] = None,
        extractor: Optional[LinkExtractor] = None,
        downloader: Optional[DocumentDownloader] = None
    ):
        """
        Initialize the harvesting pipeline.

        Args:
            urls: Seed page URLs; duplicates are dropped, first occurrence wins
            output_dir: Directory to save documents to
            settle_seconds: Wait after navigation before capturing markup
            session_timeout: Ceiling in seconds on one browser session
            download_timeout: Per-document request timeout in seconds
            marker: Substring identifying document links
            headless: Run browser in headless mode
            renderer: Renderer to use instead of a default PageRenderer
            extractor: Extractor to use instead of a default LinkExtractor
            downloader: Downloader to use instead of a default DocumentDownloader
        """
        self.urls: List[str] = dedupe_urls(urls)
        self.output_dir = os.path.abspath(output_dir)
        self.logger = get_logger("pipeline")

        self.renderer = renderer or PageRenderer(
            settle_seconds=settle_seconds,
            session_timeout=session_timeout,
            headless=headless
        )
        self.extractor = extractor or LinkExtractor(marker=marker)
        self.downloader = downloader or DocumentDownloader(
            output_dir=self.output_dir,
            timeout=download_timeout
        )

    async def harvest(self) -> HarvestResult:
        """
        Process every seed page to completion.

        Returns:
            HarvestResult with counts and errors
        """
        start_time = time.time()
        result = HarvestResult()

        self.logger.info(f"Harvesting {len(self.urls)} page(s) into {self.output_dir}")
        try:
            ensure_dir(self.output_dir)
        except OSError as e:
            self.logger.error(f"Cannot create output directory {self.output_dir}: {e}")
            self._add_error(result, self.output_dir, FailureKind.IO.value, str(e))
            result.duration_seconds = time.time() - start_time
            return result

        for url in self.urls:
            if not is_valid_url(url):
                self.logger.error(f"Skipping invalid URL: {url!r}")
                self._add_error(result, url, "seed", "invalid URL")
                continue
            await self._harvest_page(url, result)

        result.duration_seconds = time.time() - start_time
        return result

    async def _harvest_page(self, url: str, result: HarvestResult) -> None:
        page = await self.renderer.render_page(url)
        if not page.ok:
            result.pages_failed += 1
            self._add_error(result, url, FailureKind.RENDER.value, "page could not be rendered")
            return
        result.pages_rendered += 1

        links = self.extractor.extract(page.html)
        if self.extractor.last_error:
            self._add_error(result, url, FailureKind.PARSE.value, self.extractor.last_error)
            return
        result.links_found += len(links)
        if not links:
            self.logger.info(f"No document links found on {url}")
            return

        base_url = page.final_url or url
        targets = []
        for link in links:
            target = resolve_link(link, base_url)
            if not target:
                self.logger.error(f"Cannot fetch document link {link!r} from {url}")
                result.documents_failed += 1
                self._add_error(result, link, FailureKind.VALIDATION.value, "unfetchable link")
                continue
            targets.append(target)

        for record in await self.downloader.download_all(targets):
            if record.status is DownloadStatus.DOWNLOADED:
                result.documents_downloaded += 1
            elif record.status is DownloadStatus.SKIPPED:
                result.documents_skipped += 1
            else:
                result.documents_failed += 1
                stage = record.failure.value if record.failure else "download"
                self._add_error(result, record.url, stage, record.message)

    @staticmethod
    def _add_error(result: HarvestResult, url: str, stage: str, message: str) -> None:
        result.errors.append({"url": url, "stage": stage, "message": message})
