"""Shared helpers used across the atlas toolkit."""
