"""Teleka taxi booking service."""
