# src/rendercheck/core/__init__.py
"""Shared infrastructure: logging and configuration loading."""
