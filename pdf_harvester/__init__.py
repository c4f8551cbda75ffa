"""
PDF Harvester - render JavaScript-gated pages and download their PDFs.

This package renders pages in a headless browser, extracts document links
from the final markup, and downloads each document into a local folder
exactly once.
"""

__version__ = "1.0.0"
__author__ = "PDF Harvester Team"
