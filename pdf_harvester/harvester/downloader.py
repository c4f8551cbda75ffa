"""
Document downloader for fetching and saving PDF files.

Uses aiohttp for HTTP retrieval. Documents are fetched one at a time and
never overwrite a file that is already in the output directory.
"""

import asyncio
import contextlib
import os
from typing import Callable, Iterable, List, Optional

import aiohttp
from aiohttp import ClientTimeout, ClientError

from .models import DownloadRecord, DownloadStatus, FailureKind
from ..utils.log import get_logger
from ..utils.paths import sanitize_filename
from ..utils.constants import ACCEPTED_CONTENT_TYPES, DEFAULT_DOWNLOAD_TIMEOUT


class DocumentDownloader:
    """
    Downloads documents into a flat output directory.

    Each download walks the same steps: resolve the local path, skip if the
    file exists, GET, check status and content type, buffer the body, and
    commit it with a write-then-rename.
    """

    # Suffix of the temporary file a download is written to before commit
    PARTIAL_SUFFIX = ".part"

    def __init__(
        self,
        output_dir: str,
        timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
        namer: Callable[[str], str] = sanitize_filename,
        accepted_content_types: Iterable[str] = ACCEPTED_CONTENT_TYPES,
        user_agent: Optional[str] = None
    ):
        """
        Initialize the document downloader.

        Args:
            output_dir: Directory where documents are saved
            timeout: Request timeout in seconds
            namer: Maps a document URL to a local file name
            accepted_content_types: Content-Type fragments that mark a document
            user_agent: Optional user agent; client defaults are used otherwise
        """
        self.output_dir = output_dir
        self.timeout = ClientTimeout(total=timeout)
        self.namer = namer
        self.accepted_content_types = tuple(t.lower() for t in accepted_content_types)
        self.user_agent = user_agent
        self.logger = get_logger("downloader")

    def local_path(self, url: str) -> str:
        """Get the path a document URL is saved to."""
        return os.path.join(self.output_dir, self.namer(url).lower())

    async def download(self, url: str) -> DownloadRecord:
        """
        Download a single document.

        Args:
            url: Document URL

        Returns:
            DownloadRecord describing the outcome
        """
        async with self._create_session() as session:
            return await self._download_document(session, url)

    async def download_all(self, urls: Iterable[str]) -> List[DownloadRecord]:
        """
        Download documents sequentially, in the given order.

        Args:
            urls: Document URLs

        Returns:
            One DownloadRecord per URL
        """
        records = []
        async with self._create_session() as session:
            for url in urls:
                records.append(await self._download_document(session, url))

        written = sum(1 for record in records if record.written)
        self.logger.info(f"Downloaded {written} of {len(records)} documents")
        return records

    def _create_session(self) -> aiohttp.ClientSession:
        headers = {"User-Agent": self.user_agent} if self.user_agent else None
        return aiohttp.ClientSession(timeout=self.timeout, headers=headers)

    def _is_document_type(self, content_type: str) -> bool:
        content_type = content_type.lower()
        return any(accepted in content_type for accepted in self.accepted_content_types)

    async def _download_document(
        self,
        session: aiohttp.ClientSession,
        url: str
    ) -> DownloadRecord:
        """
        Run one download through every step.

        Args:
            session: aiohttp session
            url: Document URL

        Returns:
            DownloadRecord describing the outcome
        """
        local_path = self.local_path(url)

        if os.path.isfile(local_path):
            self.logger.info(f"File already exists, skipping: {local_path} ({url})")
            return DownloadRecord(url=url, path=local_path, status=DownloadStatus.SKIPPED)

        try:
            async with session.get(url, allow_redirects=True) as response:
                if response.status != 200:
                    return self._failure(
                        url, local_path, FailureKind.VALIDATION,
                        f"Download failed for {url}: HTTP {response.status}"
                    )

                content_type = response.headers.get("Content-Type", "")
                if not self._is_document_type(content_type):
                    return self._failure(
                        url, local_path, FailureKind.VALIDATION,
                        f"Invalid content type for {url}: {content_type!r} "
                        f"(expected one of {', '.join(self.accepted_content_types)})"
                    )

                content = await response.read()

        except asyncio.TimeoutError:
            return self._failure(
                url, local_path, FailureKind.TRANSPORT, f"Timeout downloading {url}"
            )
        except (ClientError, ValueError) as e:
            return self._failure(
                url, local_path, FailureKind.TRANSPORT, f"Failed to download {url}: {e}"
            )

        if not content:
            return self._failure(
                url, local_path, FailureKind.EMPTY_BODY,
                f"Downloaded 0 bytes for {url}; not creating file"
            )

        try:
            self._commit(local_path, content)
        except OSError as e:
            return self._failure(
                url, local_path, FailureKind.IO, f"Failed to save {url} to {local_path}: {e}"
            )

        self.logger.info(f"Successfully downloaded {len(content)} bytes: {url} -> {local_path}")
        return DownloadRecord(
            url=url,
            path=local_path,
            status=DownloadStatus.DOWNLOADED,
            bytes_written=len(content)
        )

    def _commit(self, local_path: str, content: bytes) -> None:
        """Write content next to the destination, then rename it into place."""
        partial_path = local_path + self.PARTIAL_SUFFIX
        try:
            with open(partial_path, 'wb') as f:
                f.write(content)
            os.replace(partial_path, local_path)
        except OSError:
            with contextlib.suppress(OSError):
                os.remove(partial_path)
            raise

    def _failure(
        self,
        url: str,
        local_path: str,
        kind: FailureKind,
        message: str
    ) -> DownloadRecord:
        self.logger.error(message)
        return DownloadRecord(
            url=url,
            path=local_path,
            status=DownloadStatus.FAILED,
            failure=kind,
            message=message
        )
