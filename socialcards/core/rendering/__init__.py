"""
Rendering Module
===============

Card markup generation and PNG capture with browser automation.

Components:
- assets: Image and font inlining as data URIs
- transport: Data URI or temporary file navigation targets
- capture: Playwright capture session
- templates: Jinja2 template engine
- card_renderer: Card to markup orchestration
"""
