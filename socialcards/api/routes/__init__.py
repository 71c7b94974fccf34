"""
API Routes
==========

Health and preview endpoints.
"""
