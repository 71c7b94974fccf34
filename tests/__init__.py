"""
Test Suite
==========

Test suite matching the socialcards/ package structure.

Test Categories:
- unit: Unit tests for individual components
- integration: HTTP surface tests through the FastAPI test client
"""
