"""
Tests for the discount caller.

Usage:
    pytest testing
"""
