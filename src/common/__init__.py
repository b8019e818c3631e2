"""Shared helpers used across modules."""
