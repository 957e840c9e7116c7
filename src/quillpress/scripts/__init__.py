"""Operational entry points (migrations)."""
