"""Tests for ``DocumentDownloader``.

Requests go to a real local aiohttp server (``aiohttp.test_utils.TestServer``)
built by the ``document_app`` fixture, so status codes, content types and
bodies are exactly what a client sees on the wire.
"""

from __future__ import annotations

import asyncio
import logging
import os

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from pdf_harvester.harvester.downloader import DocumentDownloader
from pdf_harvester.harvester.models import DownloadStatus, FailureKind

from conftest import FIRMWARE_BIN, GUIDE_PDF, MANUAL_PDF


def listing(directory) -> list:
    return sorted(os.listdir(directory))


@pytest.mark.asyncio
async def test_downloads_pdf_under_sanitized_name(tmp_path, document_app) -> None:
    app, _ = document_app
    async with TestServer(app) as server:
        url = str(server.make_url("/docs/Manual.PDF"))
        record = await DocumentDownloader(str(tmp_path)).download(url)

    assert record.status is DownloadStatus.DOWNLOADED
    assert record.written
    assert record.bytes_written == len(MANUAL_PDF)
    assert record.path == os.path.join(str(tmp_path), "manual.pdf")
    assert (tmp_path / "manual.pdf").read_bytes() == MANUAL_PDF
    assert listing(tmp_path) == ["manual.pdf"]


@pytest.mark.asyncio
async def test_query_string_is_not_part_of_the_name(tmp_path, document_app) -> None:
    app, _ = document_app
    async with TestServer(app) as server:
        url = str(server.make_url("/files/guide.pdf?rev=3"))
        record = await DocumentDownloader(str(tmp_path)).download(url)

    assert record.written
    assert (tmp_path / "guide.pdf").read_bytes() == GUIDE_PDF


@pytest.mark.asyncio
async def test_generic_binary_stream_is_accepted(tmp_path, document_app) -> None:
    app, _ = document_app
    async with TestServer(app) as server:
        record = await DocumentDownloader(str(tmp_path)).download(
            str(server.make_url("/files/notes.pdf"))
        )

    assert record.written
    assert (tmp_path / "notes.pdf").read_bytes() == FIRMWARE_BIN


@pytest.mark.asyncio
async def test_second_download_is_skipped(tmp_path, document_app, caplog) -> None:
    app, hits = document_app
    downloader = DocumentDownloader(str(tmp_path))
    async with TestServer(app) as server:
        url = str(server.make_url("/docs/Manual.PDF"))
        first = await downloader.download(url)
        with caplog.at_level(logging.INFO, logger="downloader"):
            second = await downloader.download(url)

    assert first.status is DownloadStatus.DOWNLOADED
    assert second.status is DownloadStatus.SKIPPED
    assert not second.written
    assert hits["/docs/Manual.PDF"] == 1
    assert listing(tmp_path) == ["manual.pdf"]
    assert "already exists" in caplog.text


@pytest.mark.asyncio
async def test_existing_file_is_never_overwritten(tmp_path, document_app) -> None:
    app, hits = document_app
    (tmp_path / "manual.pdf").write_bytes(b"kept from an earlier run")
    async with TestServer(app) as server:
        record = await DocumentDownloader(str(tmp_path)).download(
            str(server.make_url("/docs/Manual.PDF"))
        )

    assert record.status is DownloadStatus.SKIPPED
    assert hits["/docs/Manual.PDF"] == 0
    assert (tmp_path / "manual.pdf").read_bytes() == b"kept from an earlier run"


@pytest.mark.asyncio
async def test_html_response_is_rejected(tmp_path, document_app) -> None:
    app, _ = document_app
    async with TestServer(app) as server:
        record = await DocumentDownloader(str(tmp_path)).download(
            str(server.make_url("/stale/old.pdf"))
        )

    assert record.status is DownloadStatus.FAILED
    assert record.failure is FailureKind.VALIDATION
    assert "text/html" in record.message
    assert listing(tmp_path) == []


@pytest.mark.asyncio
async def test_empty_body_creates_no_file(tmp_path, document_app) -> None:
    app, _ = document_app
    async with TestServer(app) as server:
        record = await DocumentDownloader(str(tmp_path)).download(
            str(server.make_url("/empty/blank.pdf"))
        )

    assert record.status is DownloadStatus.FAILED
    assert record.failure is FailureKind.EMPTY_BODY
    assert listing(tmp_path) == []


@pytest.mark.asyncio
async def test_non_200_status_is_rejected(tmp_path, document_app) -> None:
    app, _ = document_app
    async with TestServer(app) as server:
        record = await DocumentDownloader(str(tmp_path)).download(
            str(server.make_url("/gone/removed.pdf"))
        )

    assert record.failure is FailureKind.VALIDATION
    assert "404" in record.message
    assert listing(tmp_path) == []


@pytest.mark.asyncio
async def test_connection_error_is_a_transport_failure(tmp_path) -> None:
    record = await DocumentDownloader(str(tmp_path)).download("http://127.0.0.1:1/manual.pdf")

    assert record.status is DownloadStatus.FAILED
    assert record.failure is FailureKind.TRANSPORT
    assert listing(tmp_path) == []


@pytest.mark.asyncio
async def test_request_timeout_is_a_transport_failure(tmp_path) -> None:
    async def slow(request):
        await asyncio.sleep(0.5)
        return web.Response(body=MANUAL_PDF, content_type="application/pdf")

    app = web.Application()
    app.router.add_get("/slow.pdf", slow)

    async with TestServer(app) as server:
        record = await DocumentDownloader(str(tmp_path), timeout=0.1).download(
            str(server.make_url("/slow.pdf"))
        )

    assert record.failure is FailureKind.TRANSPORT
    assert listing(tmp_path) == []


@pytest.mark.asyncio
async def test_write_failure_leaves_no_partial_file(tmp_path, document_app) -> None:
    app, _ = document_app
    downloader = DocumentDownloader(
        str(tmp_path), namer=lambda url: os.path.join("missing-dir", "manual.pdf")
    )
    async with TestServer(app) as server:
        record = await downloader.download(str(server.make_url("/docs/Manual.PDF")))

    assert record.status is DownloadStatus.FAILED
    assert record.failure is FailureKind.IO
    assert listing(tmp_path) == []


@pytest.mark.asyncio
async def test_injected_namer_is_used_and_lowercased(tmp_path, document_app) -> None:
    app, _ = document_app
    downloader = DocumentDownloader(str(tmp_path), namer=lambda url: "Radio-Manual.PDF")
    async with TestServer(app) as server:
        record = await downloader.download(str(server.make_url("/docs/Manual.PDF")))

    assert record.written
    assert listing(tmp_path) == ["radio-manual.pdf"]


@pytest.mark.asyncio
async def test_download_all_keeps_order_and_continues_after_failures(tmp_path, document_app) -> None:
    app, _ = document_app
    async with TestServer(app) as server:
        urls = [
            str(server.make_url("/stale/old.pdf")),
            str(server.make_url("/docs/Manual.PDF")),
            str(server.make_url("/empty/blank.pdf")),
            str(server.make_url("/files/guide.pdf")),
            str(server.make_url("/docs/Manual.PDF")),
        ]
        records = await DocumentDownloader(str(tmp_path)).download_all(urls)

    assert [r.url for r in records] == urls
    assert [r.status for r in records] == [
        DownloadStatus.FAILED,
        DownloadStatus.DOWNLOADED,
        DownloadStatus.FAILED,
        DownloadStatus.DOWNLOADED,
        DownloadStatus.SKIPPED,
    ]
    assert listing(tmp_path) == ["guide.pdf", "manual.pdf"]
