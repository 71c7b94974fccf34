"""
Social Cards
============

Render server-defined card templates (Open Graph preview images) to PNG
through a headless browser, behind a cache that never serves a failure.

This package provides:
- Jinja2 card templates with inlined images and fonts
- Playwright-driven capture with blank-frame detection
- A fetch-or-compute cache guard with a transparent placeholder fallback
- FastAPI response helpers and developer preview endpoints
"""

__version__ = "1.0.0"
__author__ = "Social Cards Team"
