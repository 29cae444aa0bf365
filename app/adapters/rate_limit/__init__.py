"""Rate limiting adapters.

This package holds the rolling-window limiter and the small key-value stores
it persists per-identity records to. The limiter only depends on the store
abstraction, so tests run against an in-memory map and production against a
directory of JSON files.
"""
