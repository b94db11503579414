"""CLI module.

This module provides the command-line interface for the secure envelope toolkit.
"""
