"""
Page renderer using Playwright for JavaScript rendering.

Loads a page in a short-lived browser, waits for challenge and redirect
scripts to settle, and captures the final serialized markup.
"""

import asyncio
from typing import List, Optional

from playwright.async_api import (
    async_playwright,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeout,
)

from .models import RenderedPage
from ..utils.log import get_logger
from ..utils.constants import (
    BROWSER_ARGS,
    DEFAULT_NAVIGATION_TIMEOUT,
    DEFAULT_SESSION_TIMEOUT,
    DEFAULT_SETTLE_SECONDS,
    DEFAULT_VIEWPORT,
)


# Serializes the document root, equivalent to the outerHTML of <html>
OUTER_HTML_SCRIPT = "() => document.documentElement.outerHTML"


class PageRenderer:
    """
    Renders web pages using a Playwright Chromium browser.

    Every call to render_page owns its own browser process, which is
    torn down before the call returns.
    """

    def __init__(
        self,
        settle_seconds: float = DEFAULT_SETTLE_SECONDS,
        session_timeout: float = DEFAULT_SESSION_TIMEOUT,
        navigation_timeout: int = DEFAULT_NAVIGATION_TIMEOUT,
        wait_until: str = "load",
        headless: bool = True,
        user_agent: Optional[str] = None,
        browser_args: Optional[List[str]] = None
    ):
        """
        Initialize the page renderer.

        Args:
            settle_seconds: Pause after navigation before capturing markup
            session_timeout: Ceiling in seconds on the whole browser session
            navigation_timeout: Page load timeout in milliseconds
            wait_until: Event to wait for ('load', 'domcontentloaded', 'networkidle')
            headless: Run browser in headless mode
            user_agent: Optional custom user agent
            browser_args: Chromium command line flags
        """
        self.settle_seconds = settle_seconds
        self.session_timeout = session_timeout
        self.navigation_timeout = navigation_timeout
        self.wait_until = wait_until
        self.headless = headless
        self.user_agent = user_agent
        self.browser_args = list(BROWSER_ARGS if browser_args is None else browser_args)
        self.logger = get_logger("renderer")

    async def render_page(self, url: str) -> RenderedPage:
        """
        Render a page and return its final HTML content.

        Args:
            url: URL to render

        Returns:
            RenderedPage with the markup, or with empty markup on error
        """
        self.logger.info(f"Rendering: {url}")

        try:
            page = await asyncio.wait_for(
                self._render(url),
                timeout=self.session_timeout
            )
        except asyncio.TimeoutError:
            self.logger.error(
                f"Browser session for {url} exceeded {self.session_timeout}s"
            )
            return RenderedPage(url=url)
        except PlaywrightTimeout:
            self.logger.error(f"Timeout rendering {url}")
            return RenderedPage(url=url)
        except PlaywrightError as e:
            self.logger.error(f"Browser error rendering {url}: {e}")
            return RenderedPage(url=url)
        except Exception as e:
            self.logger.error(f"Error rendering {url}: {e}")
            return RenderedPage(url=url)

        if not page.ok:
            self.logger.error(f"Empty markup captured from {url}")
            return RenderedPage(url=url)

        self.logger.info(f"Rendered {len(page.html)} characters from {page.final_url}")
        return page

    async def _render(self, url: str) -> RenderedPage:
        """
        Drive one browser session: navigate, settle, capture.

        Resources are released innermost-first on every exit path,
        including cancellation by the session timeout.
        """
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(
                headless=self.headless,
                args=self.browser_args
            )
            try:
                context = await browser.new_context(
                    viewport=DEFAULT_VIEWPORT,
                    user_agent=self.user_agent,
                )
                try:
                    page = await context.new_page()

                    self.logger.debug(f"Navigating to {url}")
                    await page.goto(
                        url,
                        wait_until=self.wait_until,
                        timeout=self.navigation_timeout
                    )

                    # Let challenge and redirect scripts finish
                    await asyncio.sleep(self.settle_seconds)

                    html = await page.evaluate(OUTER_HTML_SCRIPT)
                    return RenderedPage(url=url, html=html or "", final_url=page.url)
                finally:
                    await context.close()
            finally:
                await browser.close()

