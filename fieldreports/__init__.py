"""
Backend package for the field reports API.

This package provides a FastAPI application for posting and listing news
items and hazard reports, with record store and file store abstractions so
the service can run against a real database or fully in memory.
"""
