"""
Shared constants for the PDF harvester.

Contains common configuration values used across multiple modules.
"""

# Pages harvested when no seed URLs are given on the command line
DEFAULT_SEED_URLS = [
    "https://radiomasterrc.com/pages/user-manuals",
]

# Directory where downloaded documents are stored
DEFAULT_OUTPUT_DIR = "PDFs"

# Substring that marks an href as a document link (case-insensitive)
DEFAULT_DOCUMENT_MARKER = ".pdf"

# Seconds to wait after navigation for challenge/redirect scripts to finish
DEFAULT_SETTLE_SECONDS = 3.0

# Hard ceiling on one browser session in seconds
DEFAULT_SESSION_TIMEOUT = 300

# Page navigation timeout in milliseconds (for Playwright)
DEFAULT_NAVIGATION_TIMEOUT = 60000

# Document download timeout in seconds (large files over slow links)
DEFAULT_DOWNLOAD_TIMEOUT = 900

# Minimal, non-interactive browser window
DEFAULT_VIEWPORT = {"width": 1, "height": 1}

# Chromium flags; sandboxing is disabled for container environments
BROWSER_ARGS = [
    '--disable-gpu',
    '--no-sandbox',
    '--disable-setuid-sandbox',
]

# Content types accepted as a genuine document body
ACCEPTED_CONTENT_TYPES = (
    "application/pdf",
    "binary/octet-stream",
    "application/octet-stream",
)

# Extension echoes left behind when ".pdf" is turned into "_pdf"
REDUNDANT_EXTENSION_TOKENS = ("_pdf", "_zip", "_txt")

# Name used when a URL has no usable final path segment
DEFAULT_FILENAME_STEM = "document"
