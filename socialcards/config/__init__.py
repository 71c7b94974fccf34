"""
Configuration Management
=======================

Environment-based configuration using Pydantic Settings.

Components:
- settings: Main application settings and environment configuration
- logging: Structured logging configuration
- cache: Cache store connection management
"""
