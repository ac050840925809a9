"""
Core Utilities - Shared Plumbing

Logging, environment configuration, HTTP sessions and the error taxonomy
used by every layer.
"""
