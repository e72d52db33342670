"""Adapters – concrete implementations of the kernel ports."""
