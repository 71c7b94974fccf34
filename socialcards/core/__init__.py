"""
Core Business Logic
==================

Card rendering, browser capture and the cache guard.

Components:
- rendering: Templates, asset inlining, markup transport and capture
- cache: Cache stores and the fetch-or-compute guard
- previews: Explicit registry of example cards
"""
