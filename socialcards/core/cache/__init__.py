"""
Cache Module
============

Cache stores and the failure-isolating cache guard.

Components:
- store: Redis and in-memory stores with fetch-or-compute
- guard: Render/capture pipeline wrapped in the cache contract
- placeholder: Fallback image served on any failure
"""
