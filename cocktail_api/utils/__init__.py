"""
Utilities Package

Helper functions used across the application:
- ids.py: Generation and validation of opaque entity identifiers
"""
