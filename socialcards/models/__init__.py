"""
Data Models
===========

Pydantic models for cards, capture results and cache options.
"""
