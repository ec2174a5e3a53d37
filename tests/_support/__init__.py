"""Shared test support helpers."""
