"""Shared models, configuration and helpers."""
