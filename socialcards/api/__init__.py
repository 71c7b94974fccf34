"""
API Module
==========

FastAPI application, response helpers and routes.
"""
