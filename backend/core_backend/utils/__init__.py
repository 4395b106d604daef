"""
Shared utilities for the planning backend.
"""
