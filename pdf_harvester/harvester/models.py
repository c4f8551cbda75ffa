"""Data models for the harvesting pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class FailureKind(str, Enum):
    """Where in the pipeline a page or link failed."""

    RENDER = "render"
    PARSE = "parse"
    VALIDATION = "validation"
    TRANSPORT = "transport"
    IO = "io"
    EMPTY_BODY = "empty_body"


class DownloadStatus(str, Enum):
    """Outcome of one document retrieval attempt."""

    DOWNLOADED = "downloaded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class RenderedPage:
    """Markup captured from a page after its scripts settled."""

    url: str
    html: str = ""
    final_url: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True when the render produced markup."""
        return bool(self.html)


@dataclass
class DownloadRecord:
    """Result of a single document download attempt."""

    url: str
    path: str
    status: DownloadStatus
    bytes_written: int = 0
    failure: Optional[FailureKind] = None
    message: str = ""

    @property
    def written(self) -> bool:
        """True only when a new file was written."""
        return self.status is DownloadStatus.DOWNLOADED


@dataclass
class HarvestResult:
    """Results of a harvesting run."""

    pages_rendered: int = 0
    pages_failed: int = 0
    links_found: int = 0
    documents_downloaded: int = 0
    documents_skipped: int = 0
    documents_failed: int = 0
    errors: List[Dict] = field(default_factory=list)
    duration_seconds: float = 0.0
