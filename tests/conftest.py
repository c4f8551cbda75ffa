"""Shared fixtures for the harvester test suite.

HTTP behaviour is exercised against a real local aiohttp server started in
each test with ``aiohttp.test_utils.TestServer``; the fixtures here only
build the application so tests stay synchronous to set up.
"""

from __future__ import annotations

from collections import Counter

import pytest
from aiohttp import web


MANUAL_PDF = b"%PDF-1.4\n% radio manual\n1 0 obj << >> endobj\n%%EOF\n"
GUIDE_PDF = b"%PDF-1.7\n% quick start guide\n2 0 obj << >> endobj\n%%EOF\n"
FIRMWARE_BIN = b"\x00\x01\x02firmware-notes\x03"


@pytest.fixture()
def document_app():
    """An aiohttp app serving documents plus a per-path hit counter."""
    hits: Counter = Counter()
    app = web.Application()

    def route(path, handler):
        async def counted(request: web.Request) -> web.StreamResponse:
            hits[path] += 1
            return await handler(request)
        app.router.add_get(path, counted)

    async def manual(request):
        return web.Response(body=MANUAL_PDF, content_type="application/pdf")

    async def guide(request):
        return web.Response(body=GUIDE_PDF, content_type="application/pdf")

    async def octet(request):
        return web.Response(body=FIRMWARE_BIN, content_type="binary/octet-stream")

    async def landing_page(request):
        return web.Response(
            text="<html><body>This document has moved</body></html>",
            content_type="text/html",
        )

    async def empty(request):
        return web.Response(body=b"", content_type="application/pdf")

    async def missing(request):
        return web.Response(status=404, body=MANUAL_PDF, content_type="application/pdf")

    route("/docs/Manual.PDF", manual)
    route("/files/guide.pdf", guide)
    route("/files/notes.pdf", octet)
    route("/stale/old.pdf", landing_page)
    route("/empty/blank.pdf", empty)
    route("/gone/removed.pdf", missing)

    return app, hits
