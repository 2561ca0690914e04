"""
Test support utilities for wallticker tests.

Helpers that don't fit as pytest fixtures but are shared across test files.
"""
