"""Utilities module.

This module provides exceptions and encoding helpers shared across the package.
"""
