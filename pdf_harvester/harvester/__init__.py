"""
Harvester module for document collection.

Contains components for rendering, extracting, downloading, and the
pipeline that ties them together.
"""

from .pipeline import HarvestPipeline
from .renderer import PageRenderer
from .extractor import LinkExtractor
from .downloader import DocumentDownloader
from .models import (
    DownloadRecord,
    DownloadStatus,
    FailureKind,
    HarvestResult,
    RenderedPage,
)

__all__ = [
    "HarvestPipeline",
    "PageRenderer",
    "LinkExtractor",
    "DocumentDownloader",
    "DownloadRecord",
    "DownloadStatus",
    "FailureKind",
    "HarvestResult",
    "RenderedPage",
]
